# Profile Management Feature - Service

from typing import Dict, Iterable, List, Optional
from easyhealth.core.access import Caller, Role
from easyhealth.core.logging import logger
from easyhealth.features.auth.models import Profile
from easyhealth.features.auth.schemas import (
    InsuranceInfo,
    ProfileResponse,
    UpdateProfileRequest,
)
from easyhealth.features.catalog.models import Insurance
from easyhealth.shared.exceptions import ConflictException, ForbiddenException, NotFoundException
from easyhealth.shared.lookups import fetch, fetch_many, get_or_404
from easyhealth.shared.schemas import ProfileSummary


class ProfileService:
    """Service class for profile management operations."""

    @staticmethod
    async def to_response(profile: Profile, insurance: Optional[Insurance] = None) -> ProfileResponse:
        """Convert a Profile document to a response with its insurance expanded."""
        if insurance is None and profile.insurance_id:
            insurance = await fetch(Insurance, profile.insurance_id)

        return ProfileResponse(
            id=str(profile.id),
            email=profile.email,
            full_name=profile.full_name,
            role=profile.role,
            phone=profile.phone,
            national_id=profile.national_id,
            insurance_id=profile.insurance_id,
            insurance=InsuranceInfo(
                id=str(insurance.id),
                name=insurance.name,
                coverage_percentage=insurance.coverage_percentage,
                description=insurance.description,
            ) if insurance else None,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )

    @staticmethod
    def summary(profile: Optional[Profile]) -> Optional[ProfileSummary]:
        if profile is None:
            return None
        return ProfileSummary(
            id=str(profile.id),
            full_name=profile.full_name,
            email=profile.email,
            phone=profile.phone,
            national_id=profile.national_id,
            role=profile.role.value,
        )

    @staticmethod
    async def summaries(profile_ids: Iterable[Optional[str]]) -> Dict[str, ProfileSummary]:
        """Summaries for many profiles, keyed by profile id."""
        profiles = await fetch_many(Profile, profile_ids)
        return {key: ProfileService.summary(p) for key, p in profiles.items()}

    @staticmethod
    async def list_profiles() -> List[ProfileResponse]:
        profiles = await Profile.find_all().sort(-Profile.created_at).to_list()
        insurances = await fetch_many(Insurance, [p.insurance_id for p in profiles])
        return [
            await ProfileService.to_response(p, insurances.get(p.insurance_id or ""))
            for p in profiles
        ]

    @staticmethod
    async def get_profile(profile_id: str, caller: Caller) -> Profile:
        """Load a profile readable by the caller (self or admin)."""
        profile = await get_or_404(Profile, profile_id, "Profile")
        if not caller.is_admin and caller.id != str(profile.id):
            raise ForbiddenException("Access denied")
        return profile

    @staticmethod
    async def update_profile(profile_id: str, request: UpdateProfileRequest, caller: Caller) -> Profile:
        """
        Update a profile.

        Self or admin; only an admin may change the role.
        """
        profile = await ProfileService.get_profile(profile_id, caller)
        update_data = request.model_dump(exclude_unset=True)

        if "role" in update_data and not caller.is_admin:
            raise ForbiddenException("Only administrators can change roles")

        national_id = update_data.get("national_id")
        if national_id and national_id != profile.national_id:
            taken = await Profile.find_one(Profile.national_id == national_id)
            if taken and taken.id != profile.id:
                raise ConflictException("National ID already registered")

        insurance_id = update_data.get("insurance_id")
        if insurance_id and await fetch(Insurance, insurance_id) is None:
            raise NotFoundException("Insurance not found")

        for field, value in update_data.items():
            if value is None and field in ("full_name", "role"):
                continue
            setattr(profile, field, value)

        profile.touch()
        await profile.save()

        logger.info(f"Profile {profile.id} updated by {caller.id}")
        return profile

    @staticmethod
    async def delete_profile(profile_id: str, caller: Caller) -> None:
        profile = await get_or_404(Profile, profile_id, "Profile")
        await profile.delete()
        logger.info(f"Profile {profile_id} deleted by {caller.id}")

    @staticmethod
    async def require_patient(patient_id: str) -> Profile:
        """Load a profile that must exist and carry the patient role."""
        profile = await get_or_404(Profile, patient_id, "Patient")
        if profile.role != Role.PATIENT:
            raise NotFoundException("Patient not found")
        return profile
