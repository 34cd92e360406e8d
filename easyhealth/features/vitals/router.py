# Vitals Feature - Router

from fastapi import APIRouter, Depends, status
from typing import List
from easyhealth.core.access import Caller, Role
from easyhealth.features.auth.dependencies import get_caller, require_roles
from easyhealth.features.vitals.schemas import VitalCreate, VitalResponse
from easyhealth.features.vitals.service import VitalService


router = APIRouter(prefix="/vitals", tags=["Vitals"])


@router.get("", response_model=List[VitalResponse])
async def list_vitals(caller: Caller = Depends(get_caller)):
    """
    List vitals, newest first.

    Patients see their own, nurses those they recorded, doctors and admins all.
    """
    vitals = await VitalService.list_vitals(caller)
    return await VitalService.to_responses(vitals)


@router.get("/patient/{patient_id}", response_model=List[VitalResponse])
async def list_patient_vitals(patient_id: str, caller: Caller = Depends(get_caller)):
    """Vitals history of one patient."""
    vitals = await VitalService.list_patient_vitals(patient_id, caller)
    return await VitalService.to_responses(vitals)


@router.get("/{vital_id}", response_model=VitalResponse)
async def get_vital(vital_id: str, caller: Caller = Depends(get_caller)):
    vital = await VitalService.get_vital(vital_id, caller)
    return (await VitalService.to_responses([vital]))[0]


@router.post("", response_model=VitalResponse, status_code=status.HTTP_201_CREATED)
async def create_vital(request: VitalCreate, caller: Caller = Depends(require_roles(Role.NURSE))):
    """
    Record vital signs. Nurses only.

    - **patient_id**: Patient profile
    - **blood_pressure**: e.g. 120/80
    - **heart_rate**, **temperature**, **weight**, **height**: Measurements
    """
    vital = await VitalService.create_vital(request, caller)
    return (await VitalService.to_responses([vital]))[0]
