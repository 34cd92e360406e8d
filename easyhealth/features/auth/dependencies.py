from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from easyhealth.core.access import Caller, Role
from easyhealth.core.security import decode_token
from easyhealth.features.auth.models import Profile
from easyhealth.features.auth.service import AuthService
from easyhealth.features.catalog.models import Hospital, Pharmacy
from easyhealth.features.staff.models import Doctor, Nurse
from easyhealth.shared.exceptions import CredentialsException, ForbiddenException


# HTTP Bearer security scheme; missing headers are reported by us, not by FastAPI
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Profile:
    """
    Dependency to get the current authenticated profile.

    Raises:
        CredentialsException: If the token is missing, invalid, expired,
            or belongs to a profile that no longer exists
    """
    if credentials is None:
        raise CredentialsException("Authentication required")

    profile_id = decode_token(credentials.credentials)
    if profile_id is None:
        raise CredentialsException("Invalid authentication credentials")

    profile = await AuthService.get_profile_by_id(profile_id)
    if profile is None:
        raise CredentialsException("User not found")

    return profile


async def get_caller(current_user: Profile = Depends(get_current_user)) -> Caller:
    """
    Dependency resolving the caller's role-profile ids.

    Only the lookup matching the caller's role is performed.
    """
    caller = Caller(
        id=str(current_user.id),
        role=current_user.role,
        full_name=current_user.full_name,
    )

    if current_user.role == Role.DOCTOR:
        doctor = await Doctor.find_one(Doctor.user_id == caller.id)
        caller.doctor_id = str(doctor.id) if doctor else None
    elif current_user.role == Role.NURSE:
        nurse = await Nurse.find_one(Nurse.user_id == caller.id)
        caller.nurse_id = str(nurse.id) if nurse else None
    elif current_user.role == Role.PHARMACIST:
        pharmacy = await Pharmacy.find_one(Pharmacy.pharmacist_id == caller.id)
        caller.pharmacy_id = str(pharmacy.id) if pharmacy else None
    elif current_user.role == Role.LAB_TECHNICIAN:
        hospitals = await Hospital.find(Hospital.lab_user_id == caller.id).to_list()
        caller.lab_hospital_ids = [str(h.id) for h in hospitals]

    return caller


def require_roles(*roles: Role):
    """Dependency factory for a role gate."""

    async def dependency(caller: Caller = Depends(get_caller)) -> Caller:
        if caller.role not in roles:
            raise ForbiddenException("Access denied")
        return caller

    return dependency
