# Role Profiles Feature - Service

from typing import Dict, Iterable, List, Optional
from easyhealth.core.access import Caller
from easyhealth.core.logging import logger
from easyhealth.features.auth.models import Profile
from easyhealth.features.catalog.models import Department, Hospital
from easyhealth.features.catalog.service import hospital_and_department_summaries
from easyhealth.features.profiles.service import ProfileService
from easyhealth.features.staff.models import Doctor, Nurse
from easyhealth.features.staff.schemas import (
    DoctorCreate,
    DoctorResponse,
    DoctorUpdate,
    NurseCreate,
    NurseResponse,
    NurseUpdate,
)
from easyhealth.shared.exceptions import ConflictException, ForbiddenException, NotFoundException
from easyhealth.shared.lookups import canonical_id, fetch_many, get_or_404
from easyhealth.shared.schemas import DoctorSummary


class StaffService:
    """Service class for doctor and nurse role profiles."""

    # ============== Doctors ==============

    @staticmethod
    async def create_doctor(request: DoctorCreate, caller: Caller) -> Doctor:
        """
        Attach a Doctor record to an existing profile.

        One Doctor per user; license numbers are unique.
        """
        user = await get_or_404(Profile, request.user_id, "User")
        hospital = await get_or_404(Hospital, request.hospital_id, "Hospital")
        department = await get_or_404(Department, request.department_id, "Department")

        if await Doctor.find_one(Doctor.user_id == str(user.id)):
            raise ConflictException("A doctor profile already exists for this user")
        if await Doctor.find_one(Doctor.license_number == request.license_number):
            raise ConflictException("License number already registered")

        doctor = Doctor(
            **request.model_dump(exclude={"user_id", "hospital_id", "department_id"}),
            user_id=str(user.id),
            hospital_id=str(hospital.id),
            department_id=str(department.id),
        )
        await doctor.insert()
        logger.info(f"Created doctor {doctor.id} for user {doctor.user_id} by {caller.id}")
        return doctor

    @staticmethod
    async def update_doctor(doctor_id: str, request: DoctorUpdate, caller: Caller) -> Doctor:
        """Update a doctor record. Own record or admin."""
        doctor = await get_or_404(Doctor, doctor_id, "Doctor")
        if not caller.is_admin and doctor.user_id != caller.id:
            raise ForbiddenException("Access denied")

        update_data = request.model_dump(exclude_unset=True)

        license_number = update_data.get("license_number")
        if license_number and license_number != doctor.license_number:
            if await Doctor.find_one(Doctor.license_number == license_number):
                raise ConflictException("License number already registered")
        if update_data.get("hospital_id"):
            await get_or_404(Hospital, update_data["hospital_id"], "Hospital")
        if update_data.get("department_id"):
            await get_or_404(Department, update_data["department_id"], "Department")

        for field, value in update_data.items():
            if value is None and field in ("hospital_id", "department_id", "license_number", "consultation_fee"):
                continue
            setattr(doctor, field, value)

        doctor.touch()
        await doctor.save()
        logger.info(f"Updated doctor {doctor.id} by {caller.id}")
        return doctor

    @staticmethod
    async def list_doctors() -> List[Doctor]:
        return await Doctor.find_all().sort(-Doctor.created_at).to_list()

    @staticmethod
    async def get_doctor_by_user(user_id: str) -> Doctor:
        doctor = await Doctor.find_one(Doctor.user_id == canonical_id(user_id))
        if not doctor:
            raise NotFoundException("Doctor not found")
        return doctor

    @staticmethod
    async def delete_doctor(doctor_id: str, caller: Caller) -> None:
        doctor = await get_or_404(Doctor, doctor_id, "Doctor")
        await doctor.delete()
        logger.info(f"Deleted doctor {doctor_id} by {caller.id}")

    @staticmethod
    async def doctors_to_response(doctors: List[Doctor]) -> List[DoctorResponse]:
        users = await ProfileService.summaries(d.user_id for d in doctors)
        hospitals, departments = await hospital_and_department_summaries(
            [d.hospital_id for d in doctors],
            [d.department_id for d in doctors],
        )
        return [
            DoctorResponse.from_document(
                d,
                user=users.get(d.user_id),
                hospital=hospitals.get(d.hospital_id),
                department=departments.get(d.department_id),
            )
            for d in doctors
        ]

    @staticmethod
    async def doctor_summaries(doctor_ids: Iterable[Optional[str]]) -> Dict[str, DoctorSummary]:
        """Doctor summaries carrying the doctor's display name, keyed by doctor id."""
        doctors = await fetch_many(Doctor, doctor_ids)
        profiles = await fetch_many(Profile, [d.user_id for d in doctors.values()])
        summaries = {}
        for key, doctor in doctors.items():
            profile = profiles.get(doctor.user_id)
            summaries[key] = DoctorSummary(
                id=key,
                user_id=doctor.user_id,
                full_name=profile.full_name if profile else None,
                specialization=doctor.specialization,
                hospital_id=doctor.hospital_id,
                department_id=doctor.department_id,
                license_number=doctor.license_number,
                consultation_fee=doctor.consultation_fee,
            )
        return summaries

    # ============== Nurses ==============

    @staticmethod
    async def create_nurse(request: NurseCreate, caller: Caller) -> Nurse:
        user = await get_or_404(Profile, request.user_id, "User")

        if await Nurse.find_one(Nurse.user_id == str(user.id)):
            raise ConflictException("A nurse profile already exists for this user")
        if await Nurse.find_one(Nurse.license_number == request.license_number):
            raise ConflictException("License number already registered")

        nurse = Nurse(**request.model_dump(exclude={"user_id"}), user_id=str(user.id))
        await nurse.insert()
        logger.info(f"Created nurse {nurse.id} for user {nurse.user_id} by {caller.id}")
        return nurse

    @staticmethod
    async def update_nurse(nurse_id: str, request: NurseUpdate, caller: Caller) -> Nurse:
        """Update a nurse record. Own record or admin."""
        nurse = await get_or_404(Nurse, nurse_id, "Nurse")
        if not caller.is_admin and nurse.user_id != caller.id:
            raise ForbiddenException("Access denied")

        if request.license_number and request.license_number != nurse.license_number:
            if await Nurse.find_one(Nurse.license_number == request.license_number):
                raise ConflictException("License number already registered")
            nurse.license_number = request.license_number

        nurse.touch()
        await nurse.save()
        logger.info(f"Updated nurse {nurse.id} by {caller.id}")
        return nurse

    @staticmethod
    async def get_nurse_by_user(user_id: str) -> Nurse:
        nurse = await Nurse.find_one(Nurse.user_id == canonical_id(user_id))
        if not nurse:
            raise NotFoundException("Nurse not found")
        return nurse

    @staticmethod
    async def delete_nurse(nurse_id: str, caller: Caller) -> None:
        nurse = await get_or_404(Nurse, nurse_id, "Nurse")
        await nurse.delete()
        logger.info(f"Deleted nurse {nurse_id} by {caller.id}")

    @staticmethod
    async def nurses_to_response(nurses: List[Nurse]) -> List[NurseResponse]:
        users = await ProfileService.summaries(n.user_id for n in nurses)
        return [NurseResponse.from_document(n, user=users.get(n.user_id)) for n in nurses]
