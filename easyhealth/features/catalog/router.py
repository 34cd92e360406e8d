# Reference Catalogs Feature - Router

from fastapi import APIRouter, Depends, status
from typing import List, Optional
from easyhealth.core.access import Caller, Role
from easyhealth.features.auth.dependencies import get_caller, require_roles
from easyhealth.features.catalog.models import (
    Department,
    Hospital,
    HospitalDepartment,
    Insurance,
    Medication,
    Pharmacy,
)
from easyhealth.features.catalog.schemas import (
    DepartmentCreate,
    DepartmentResponse,
    DepartmentUpdate,
    HospitalCreate,
    HospitalDepartmentCreate,
    HospitalDepartmentResponse,
    HospitalDepartmentUpdate,
    HospitalResponse,
    HospitalUpdate,
    InsuranceCreate,
    InsuranceResponse,
    InsuranceUpdate,
    MedicationCreate,
    MedicationResponse,
    MedicationUpdate,
    PharmacyCreate,
    PharmacyResponse,
    PharmacyUpdate,
)
from easyhealth.features.catalog.service import CatalogService
from easyhealth.shared.exceptions import NotFoundException
from easyhealth.shared.lookups import canonical_id, get_or_404
from easyhealth.shared.schemas import MessageResponse


admin_only = require_roles(Role.ADMIN)


# ============== Insurances ==============

insurances_router = APIRouter(prefix="/insurances", tags=["Insurances"])


@insurances_router.get("", response_model=List[InsuranceResponse])
async def list_insurances(caller: Caller = Depends(get_caller)):
    """List insurance plans sorted by name."""
    insurances = await CatalogService.list_entries(Insurance)
    return [InsuranceResponse.from_document(i) for i in insurances]


@insurances_router.get("/{insurance_id}", response_model=InsuranceResponse)
async def get_insurance(insurance_id: str, caller: Caller = Depends(get_caller)):
    insurance = await get_or_404(Insurance, insurance_id, "Insurance")
    return InsuranceResponse.from_document(insurance)


@insurances_router.post("", response_model=InsuranceResponse, status_code=status.HTTP_201_CREATED)
async def create_insurance(request: InsuranceCreate, caller: Caller = Depends(admin_only)):
    """
    Create an insurance plan. Requires admin.

    - **coverage_percentage**: Share of every payment covered, 0 to 100
    """
    insurance = await CatalogService.create_entry(Insurance, "Insurance", request, caller.id)
    return InsuranceResponse.from_document(insurance)


@insurances_router.put("/{insurance_id}", response_model=InsuranceResponse)
async def update_insurance(insurance_id: str, request: InsuranceUpdate, caller: Caller = Depends(admin_only)):
    insurance = await CatalogService.update_entry(Insurance, insurance_id, "Insurance", request, caller.id)
    return InsuranceResponse.from_document(insurance)


@insurances_router.delete("/{insurance_id}", response_model=MessageResponse)
async def delete_insurance(insurance_id: str, caller: Caller = Depends(admin_only)):
    await CatalogService.delete_entry(Insurance, insurance_id, "Insurance", caller.id)
    return MessageResponse(message="Insurance deleted")


# ============== Hospitals ==============

hospitals_router = APIRouter(prefix="/hospitals", tags=["Hospitals"])


@hospitals_router.get("", response_model=List[HospitalResponse])
async def list_hospitals(caller: Caller = Depends(get_caller)):
    """List hospitals sorted by name."""
    hospitals = await CatalogService.list_entries(Hospital)
    return [HospitalResponse.from_document(h) for h in hospitals]


@hospitals_router.get("/{hospital_id}", response_model=HospitalResponse)
async def get_hospital(hospital_id: str, caller: Caller = Depends(get_caller)):
    hospital = await get_or_404(Hospital, hospital_id, "Hospital")
    return HospitalResponse.from_document(hospital)


@hospitals_router.post("", response_model=HospitalResponse, status_code=status.HTTP_201_CREATED)
async def create_hospital(request: HospitalCreate, caller: Caller = Depends(admin_only)):
    """
    Create a hospital. Requires admin.

    - **lab_user_id**: Optional profile of the hospital's lab technician
    """
    await CatalogService.ensure_profile(request.lab_user_id, "Lab user")
    hospital = await CatalogService.create_entry(Hospital, "Hospital", request, caller.id)
    return HospitalResponse.from_document(hospital)


@hospitals_router.put("/{hospital_id}", response_model=HospitalResponse)
async def update_hospital(hospital_id: str, request: HospitalUpdate, caller: Caller = Depends(admin_only)):
    await CatalogService.ensure_profile(request.lab_user_id, "Lab user")
    hospital = await CatalogService.update_entry(Hospital, hospital_id, "Hospital", request, caller.id)
    return HospitalResponse.from_document(hospital)


@hospitals_router.delete("/{hospital_id}", response_model=MessageResponse)
async def delete_hospital(hospital_id: str, caller: Caller = Depends(admin_only)):
    await CatalogService.delete_entry(Hospital, hospital_id, "Hospital", caller.id)
    return MessageResponse(message="Hospital deleted")


# ============== Departments ==============

departments_router = APIRouter(prefix="/departments", tags=["Departments"])


@departments_router.get("", response_model=List[DepartmentResponse])
async def list_departments(caller: Caller = Depends(get_caller)):
    departments = await CatalogService.list_entries(Department)
    return [DepartmentResponse.from_document(d) for d in departments]


@departments_router.get("/{department_id}", response_model=DepartmentResponse)
async def get_department(department_id: str, caller: Caller = Depends(get_caller)):
    department = await get_or_404(Department, department_id, "Department")
    return DepartmentResponse.from_document(department)


@departments_router.post("", response_model=DepartmentResponse, status_code=status.HTTP_201_CREATED)
async def create_department(request: DepartmentCreate, caller: Caller = Depends(admin_only)):
    department = await CatalogService.create_entry(Department, "Department", request, caller.id)
    return DepartmentResponse.from_document(department)


@departments_router.put("/{department_id}", response_model=DepartmentResponse)
async def update_department(department_id: str, request: DepartmentUpdate, caller: Caller = Depends(admin_only)):
    department = await CatalogService.update_entry(Department, department_id, "Department", request, caller.id)
    return DepartmentResponse.from_document(department)


@departments_router.delete("/{department_id}", response_model=MessageResponse)
async def delete_department(department_id: str, caller: Caller = Depends(admin_only)):
    await CatalogService.delete_entry(Department, department_id, "Department", caller.id)
    return MessageResponse(message="Department deleted")


# ============== Hospital departments ==============

hospital_departments_router = APIRouter(prefix="/hospital-departments", tags=["Hospital Departments"])


@hospital_departments_router.get("", response_model=List[HospitalDepartmentResponse])
async def list_hospital_departments(
    hospital_id: Optional[str] = None,
    department_id: Optional[str] = None,
    caller: Caller = Depends(get_caller),
):
    """
    List department fees, newest first.

    - **hospital_id**: Optional filter
    - **department_id**: Optional filter
    """
    entries = await CatalogService.list_hospital_departments(hospital_id, department_id)
    return await CatalogService.hospital_departments_to_response(entries)


@hospital_departments_router.get("/hospital/{hospital_id}", response_model=List[HospitalDepartmentResponse])
async def list_departments_of_hospital(hospital_id: str, caller: Caller = Depends(get_caller)):
    """List the departments offered by one hospital."""
    entries = await CatalogService.list_hospital_departments(hospital_id=hospital_id)
    return await CatalogService.hospital_departments_to_response(entries)


@hospital_departments_router.get("/{entry_id}", response_model=HospitalDepartmentResponse)
async def get_hospital_department(entry_id: str, caller: Caller = Depends(get_caller)):
    entry = await get_or_404(HospitalDepartment, entry_id, "Hospital department")
    return (await CatalogService.hospital_departments_to_response([entry]))[0]


@hospital_departments_router.post("", response_model=HospitalDepartmentResponse, status_code=status.HTTP_201_CREATED)
async def create_hospital_department(request: HospitalDepartmentCreate, caller: Caller = Depends(admin_only)):
    """
    Link a department to a hospital with its consultation fee. Requires admin.

    A (hospital, department) pair can only be linked once.
    """
    entry = await CatalogService.create_hospital_department(request, caller.id)
    return (await CatalogService.hospital_departments_to_response([entry]))[0]


@hospital_departments_router.put("/{entry_id}", response_model=HospitalDepartmentResponse)
async def update_hospital_department(
    entry_id: str,
    request: HospitalDepartmentUpdate,
    caller: Caller = Depends(admin_only),
):
    entry = await CatalogService.update_entry(
        HospitalDepartment, entry_id, "Hospital department", request, caller.id
    )
    return (await CatalogService.hospital_departments_to_response([entry]))[0]


@hospital_departments_router.delete("/{entry_id}", response_model=MessageResponse)
async def delete_hospital_department(entry_id: str, caller: Caller = Depends(admin_only)):
    await CatalogService.delete_entry(HospitalDepartment, entry_id, "Hospital department", caller.id)
    return MessageResponse(message="Hospital department deleted")


# ============== Medications ==============

medications_router = APIRouter(prefix="/medications", tags=["Medications"])


@medications_router.get("", response_model=List[MedicationResponse])
async def list_medications(search: Optional[str] = None, caller: Caller = Depends(get_caller)):
    """
    List medications sorted by name.

    - **search**: Case-insensitive substring of the name
    """
    medications = await CatalogService.search_medications(search)
    return [MedicationResponse.from_document(m) for m in medications]


@medications_router.get("/{medication_id}", response_model=MedicationResponse)
async def get_medication(medication_id: str, caller: Caller = Depends(get_caller)):
    medication = await get_or_404(Medication, medication_id, "Medication")
    return MedicationResponse.from_document(medication)


@medications_router.post("", response_model=MedicationResponse, status_code=status.HTTP_201_CREATED)
async def create_medication(
    request: MedicationCreate,
    caller: Caller = Depends(require_roles(Role.ADMIN, Role.PHARMACIST, Role.DOCTOR)),
):
    """Add a medication. Admin, pharmacist or doctor. Names are unique."""
    medication = await CatalogService.create_entry(
        Medication, "Medication", request, caller.id, unique_field="name"
    )
    return MedicationResponse.from_document(medication)


@medications_router.put("/{medication_id}", response_model=MedicationResponse)
async def update_medication(
    medication_id: str,
    request: MedicationUpdate,
    caller: Caller = Depends(require_roles(Role.ADMIN, Role.PHARMACIST)),
):
    medication = await CatalogService.update_entry(
        Medication, medication_id, "Medication", request, caller.id, unique_field="name"
    )
    return MedicationResponse.from_document(medication)


@medications_router.delete("/{medication_id}", response_model=MessageResponse)
async def delete_medication(
    medication_id: str,
    caller: Caller = Depends(require_roles(Role.ADMIN, Role.PHARMACIST)),
):
    await CatalogService.delete_entry(Medication, medication_id, "Medication", caller.id)
    return MessageResponse(message="Medication deleted")


# ============== Pharmacies ==============

pharmacies_router = APIRouter(prefix="/pharmacies", tags=["Pharmacies"])


@pharmacies_router.get("", response_model=List[PharmacyResponse])
async def list_pharmacies(caller: Caller = Depends(get_caller)):
    """List pharmacies sorted by name, with their pharmacist expanded."""
    pharmacies = await CatalogService.list_entries(Pharmacy)
    return await CatalogService.pharmacies_to_response(pharmacies)


@pharmacies_router.get("/pharmacist/{pharmacist_id}", response_model=PharmacyResponse)
async def get_pharmacy_by_pharmacist(pharmacist_id: str, caller: Caller = Depends(get_caller)):
    """Get the pharmacy run by a pharmacist profile."""
    pharmacy = await Pharmacy.find_one(Pharmacy.pharmacist_id == canonical_id(pharmacist_id))
    if not pharmacy:
        raise NotFoundException("Pharmacy not found for this pharmacist")
    return (await CatalogService.pharmacies_to_response([pharmacy]))[0]


@pharmacies_router.get("/{pharmacy_id}", response_model=PharmacyResponse)
async def get_pharmacy(pharmacy_id: str, caller: Caller = Depends(get_caller)):
    pharmacy = await get_or_404(Pharmacy, pharmacy_id, "Pharmacy")
    return (await CatalogService.pharmacies_to_response([pharmacy]))[0]


@pharmacies_router.post("", response_model=PharmacyResponse, status_code=status.HTTP_201_CREATED)
async def create_pharmacy(request: PharmacyCreate, caller: Caller = Depends(admin_only)):
    """
    Create a pharmacy. Requires admin.

    - **pharmacist_id**: Optional profile running the pharmacy
    """
    await CatalogService.ensure_profile(request.pharmacist_id, "Pharmacist")
    pharmacy = await CatalogService.create_entry(Pharmacy, "Pharmacy", request, caller.id)
    return (await CatalogService.pharmacies_to_response([pharmacy]))[0]


@pharmacies_router.put("/{pharmacy_id}", response_model=PharmacyResponse)
async def update_pharmacy(pharmacy_id: str, request: PharmacyUpdate, caller: Caller = Depends(admin_only)):
    await CatalogService.ensure_profile(request.pharmacist_id, "Pharmacist")
    pharmacy = await CatalogService.update_entry(Pharmacy, pharmacy_id, "Pharmacy", request, caller.id)
    return (await CatalogService.pharmacies_to_response([pharmacy]))[0]


@pharmacies_router.delete("/{pharmacy_id}", response_model=MessageResponse)
async def delete_pharmacy(pharmacy_id: str, caller: Caller = Depends(admin_only)):
    await CatalogService.delete_entry(Pharmacy, pharmacy_id, "Pharmacy", caller.id)
    return MessageResponse(message="Pharmacy deleted")
