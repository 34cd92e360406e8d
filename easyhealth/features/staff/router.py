# Role Profiles Feature - Router

from fastapi import APIRouter, Depends, status
from typing import List
from easyhealth.core.access import Caller, Role
from easyhealth.features.auth.dependencies import get_caller, require_roles
from easyhealth.features.staff.models import Doctor, Nurse
from easyhealth.features.staff.schemas import (
    DoctorCreate,
    DoctorResponse,
    DoctorUpdate,
    NurseCreate,
    NurseResponse,
    NurseUpdate,
)
from easyhealth.features.staff.service import StaffService
from easyhealth.shared.lookups import get_or_404
from easyhealth.shared.schemas import MessageResponse


admin_only = require_roles(Role.ADMIN)


# ============== Doctors ==============

doctors_router = APIRouter(prefix="/doctors", tags=["Doctors"])


@doctors_router.get("", response_model=List[DoctorResponse])
async def list_doctors(caller: Caller = Depends(get_caller)):
    """List doctors, newest first, with user, hospital and department expanded."""
    doctors = await StaffService.list_doctors()
    return await StaffService.doctors_to_response(doctors)


@doctors_router.get("/user/{user_id}", response_model=DoctorResponse)
async def get_doctor_by_user(user_id: str, caller: Caller = Depends(get_caller)):
    """Get the doctor record of a profile."""
    doctor = await StaffService.get_doctor_by_user(user_id)
    return (await StaffService.doctors_to_response([doctor]))[0]


@doctors_router.get("/{doctor_id}", response_model=DoctorResponse)
async def get_doctor(doctor_id: str, caller: Caller = Depends(get_caller)):
    doctor = await get_or_404(Doctor, doctor_id, "Doctor")
    return (await StaffService.doctors_to_response([doctor]))[0]


@doctors_router.post("", response_model=DoctorResponse, status_code=status.HTTP_201_CREATED)
async def create_doctor(request: DoctorCreate, caller: Caller = Depends(admin_only)):
    """
    Create a doctor record for an existing profile. Requires admin.

    - **user_id**: Profile the record belongs to (one doctor per user)
    - **license_number**: Unique license number
    - **hospital_id** / **department_id**: Affiliation
    """
    doctor = await StaffService.create_doctor(request, caller)
    return (await StaffService.doctors_to_response([doctor]))[0]


@doctors_router.put("/{doctor_id}", response_model=DoctorResponse)
async def update_doctor(doctor_id: str, request: DoctorUpdate, caller: Caller = Depends(get_caller)):
    """Update a doctor record. The doctor themself or admin."""
    doctor = await StaffService.update_doctor(doctor_id, request, caller)
    return (await StaffService.doctors_to_response([doctor]))[0]


@doctors_router.delete("/{doctor_id}", response_model=MessageResponse)
async def delete_doctor(doctor_id: str, caller: Caller = Depends(admin_only)):
    await StaffService.delete_doctor(doctor_id, caller)
    return MessageResponse(message="Doctor deleted")


# ============== Nurses ==============

nurses_router = APIRouter(prefix="/nurses", tags=["Nurses"])


@nurses_router.get("", response_model=List[NurseResponse])
async def list_nurses(caller: Caller = Depends(get_caller)):
    nurses = await Nurse.find_all().sort(-Nurse.created_at).to_list()
    return await StaffService.nurses_to_response(nurses)


@nurses_router.get("/user/{user_id}", response_model=NurseResponse)
async def get_nurse_by_user(user_id: str, caller: Caller = Depends(get_caller)):
    nurse = await StaffService.get_nurse_by_user(user_id)
    return (await StaffService.nurses_to_response([nurse]))[0]


@nurses_router.get("/{nurse_id}", response_model=NurseResponse)
async def get_nurse(nurse_id: str, caller: Caller = Depends(get_caller)):
    nurse = await get_or_404(Nurse, nurse_id, "Nurse")
    return (await StaffService.nurses_to_response([nurse]))[0]


@nurses_router.post("", response_model=NurseResponse, status_code=status.HTTP_201_CREATED)
async def create_nurse(request: NurseCreate, caller: Caller = Depends(admin_only)):
    """Create a nurse record for an existing profile. Requires admin."""
    nurse = await StaffService.create_nurse(request, caller)
    return (await StaffService.nurses_to_response([nurse]))[0]


@nurses_router.put("/{nurse_id}", response_model=NurseResponse)
async def update_nurse(nurse_id: str, request: NurseUpdate, caller: Caller = Depends(get_caller)):
    nurse = await StaffService.update_nurse(nurse_id, request, caller)
    return (await StaffService.nurses_to_response([nurse]))[0]


@nurses_router.delete("/{nurse_id}", response_model=MessageResponse)
async def delete_nurse(nurse_id: str, caller: Caller = Depends(admin_only)):
    await StaffService.delete_nurse(nurse_id, caller)
    return MessageResponse(message="Nurse deleted")
