# Reference Catalogs Feature - Service

import re
from typing import Dict, List, Optional, Type, TypeVar
from beanie import Document
from pydantic import BaseModel
from easyhealth.core.logging import logger
from easyhealth.features.auth.models import Profile
from easyhealth.features.catalog.models import (
    Department,
    Hospital,
    HospitalDepartment,
    Medication,
    Pharmacy,
)
from easyhealth.features.catalog.schemas import (
    DepartmentSummary,
    HospitalDepartmentCreate,
    HospitalDepartmentResponse,
    HospitalSummary,
    PharmacyResponse,
    PharmacySummary,
)
from easyhealth.features.profiles.service import ProfileService
from easyhealth.shared.exceptions import ConflictException, NotFoundException
from easyhealth.shared.lookups import canonical_id, fetch, fetch_many, get_or_404


DocumentT = TypeVar("DocumentT", bound=Document)


class CatalogService:
    """CRUD shared by the reference catalogs. Deletes never cascade."""

    @staticmethod
    async def list_entries(model: Type[DocumentT], *filters, sort: str = "name") -> List[DocumentT]:
        return await model.find(*filters).sort(sort).to_list()

    @staticmethod
    async def ensure_unique(
        model: Type[DocumentT],
        field: str,
        value,
        label: str,
        exclude: Optional[DocumentT] = None,
    ) -> None:
        """Raise ConflictException if another entry already holds the value."""
        existing = await model.find_one({field: value})
        if existing and (exclude is None or existing.id != exclude.id):
            logger.warning(f"{label} conflict on {field}={value!r}")
            raise ConflictException(f"{label} with this {field.replace('_', ' ')} already exists")

    @staticmethod
    async def create_entry(
        model: Type[DocumentT],
        label: str,
        data: BaseModel,
        actor_id: str,
        unique_field: Optional[str] = None,
    ) -> DocumentT:
        values = data.model_dump()
        if unique_field:
            await CatalogService.ensure_unique(model, unique_field, values[unique_field], label)

        entry = model(**values)
        await entry.insert()
        logger.info(f"Created {label.lower()} {entry.id} by {actor_id}")
        return entry

    @staticmethod
    async def update_entry(
        model: Type[DocumentT],
        entry_id: str,
        label: str,
        data: BaseModel,
        actor_id: str,
        unique_field: Optional[str] = None,
    ) -> DocumentT:
        entry = await get_or_404(model, entry_id, label)
        update_data = data.model_dump(exclude_unset=True)

        if unique_field and update_data.get(unique_field) is not None:
            await CatalogService.ensure_unique(
                model, unique_field, update_data[unique_field], label, exclude=entry
            )

        for field, value in update_data.items():
            setattr(entry, field, value)

        entry.touch()
        await entry.save()
        logger.info(f"Updated {label.lower()} {entry.id} by {actor_id}")
        return entry

    @staticmethod
    async def delete_entry(model: Type[DocumentT], entry_id: str, label: str, actor_id: str) -> None:
        entry = await get_or_404(model, entry_id, label)
        await entry.delete()
        logger.info(f"Deleted {label.lower()} {entry_id} by {actor_id}")

    @staticmethod
    async def ensure_profile(profile_id: Optional[str], label: str) -> None:
        if profile_id and await fetch(Profile, profile_id) is None:
            raise NotFoundException(f"{label} not found")

    # ============== Medications ==============

    @staticmethod
    async def search_medications(search: Optional[str] = None) -> List[Medication]:
        """List medications, optionally filtered by a case-insensitive name substring."""
        filters = []
        if search:
            filters.append({"name": {"$regex": re.escape(search), "$options": "i"}})
        return await CatalogService.list_entries(Medication, *filters)

    # ============== Hospital departments ==============

    @staticmethod
    async def create_hospital_department(request: HospitalDepartmentCreate, actor_id: str) -> HospitalDepartment:
        hospital = await get_or_404(Hospital, request.hospital_id, "Hospital")
        department = await get_or_404(Department, request.department_id, "Department")
        hospital_id, department_id = str(hospital.id), str(department.id)

        existing = await HospitalDepartment.find_one(
            HospitalDepartment.hospital_id == hospital_id,
            HospitalDepartment.department_id == department_id,
        )
        if existing:
            raise ConflictException("This department is already linked to the hospital")

        entry = HospitalDepartment(
            **request.model_dump(exclude={"hospital_id", "department_id"}),
            hospital_id=hospital_id,
            department_id=department_id,
        )
        await entry.insert()
        logger.info(f"Linked department {entry.department_id} to hospital {entry.hospital_id} by {actor_id}")
        return entry

    @staticmethod
    async def list_hospital_departments(
        hospital_id: Optional[str] = None,
        department_id: Optional[str] = None,
    ) -> List[HospitalDepartment]:
        filters = []
        if hospital_id:
            filters.append(HospitalDepartment.hospital_id == canonical_id(hospital_id))
        if department_id:
            filters.append(HospitalDepartment.department_id == canonical_id(department_id))
        return await CatalogService.list_entries(HospitalDepartment, *filters, sort="-created_at")

    @staticmethod
    async def hospital_departments_to_response(entries: List[HospitalDepartment]) -> List[HospitalDepartmentResponse]:
        hospitals = await fetch_many(Hospital, [e.hospital_id for e in entries])
        departments = await fetch_many(Department, [e.department_id for e in entries])
        return [
            HospitalDepartmentResponse.from_document(
                e,
                hospital=hospital_summary(hospitals.get(e.hospital_id)),
                department=department_summary(departments.get(e.department_id)),
            )
            for e in entries
        ]

    # ============== Pharmacies ==============

    @staticmethod
    async def pharmacies_to_response(pharmacies: List[Pharmacy]) -> List[PharmacyResponse]:
        pharmacists = await ProfileService.summaries(p.pharmacist_id for p in pharmacies)
        return [
            PharmacyResponse.from_document(p, pharmacist=pharmacists.get(p.pharmacist_id or ""))
            for p in pharmacies
        ]


def hospital_summary(hospital: Optional[Hospital]) -> Optional[HospitalSummary]:
    if hospital is None:
        return None
    return HospitalSummary(id=str(hospital.id), name=hospital.name, location=hospital.location)


def department_summary(department: Optional[Department]) -> Optional[DepartmentSummary]:
    if department is None:
        return None
    return DepartmentSummary(id=str(department.id), name=department.name)


def pharmacy_summary(pharmacy: Optional[Pharmacy]) -> Optional[PharmacySummary]:
    if pharmacy is None:
        return None
    return PharmacySummary(
        id=str(pharmacy.id),
        name=pharmacy.name,
        location=pharmacy.location,
        phone=pharmacy.phone,
    )


async def hospital_and_department_summaries(hospital_ids, department_ids) -> tuple:
    """Batch-load hospital and department summaries keyed by id."""
    hospitals: Dict[str, Hospital] = await fetch_many(Hospital, hospital_ids)
    departments: Dict[str, Department] = await fetch_many(Department, department_ids)
    return (
        {key: hospital_summary(h) for key, h in hospitals.items()},
        {key: department_summary(d) for key, d in departments.items()},
    )
