# Consultations Feature - Router

from fastapi import APIRouter, Depends, status
from typing import List
from easyhealth.core.access import Caller
from easyhealth.features.auth.dependencies import get_caller
from easyhealth.features.consultations.schemas import (
    ConsultationCreate,
    ConsultationResponse,
    ConsultationUpdate,
)
from easyhealth.features.consultations.service import ConsultationService


router = APIRouter(prefix="/consultations", tags=["Consultations"])


@router.get("", response_model=List[ConsultationResponse])
async def list_consultations(caller: Caller = Depends(get_caller)):
    """List the consultations visible to the caller, newest first."""
    consultations = await ConsultationService.list_consultations(caller)
    return await ConsultationService.to_responses(consultations)


@router.get("/appointment/{appointment_id}", response_model=ConsultationResponse)
async def get_consultation_by_appointment(appointment_id: str, caller: Caller = Depends(get_caller)):
    """Get the consultation recorded for an appointment."""
    consultation = await ConsultationService.get_by_appointment(appointment_id, caller)
    return await ConsultationService.to_response(consultation)


@router.get("/{consultation_id}", response_model=ConsultationResponse)
async def get_consultation(consultation_id: str, caller: Caller = Depends(get_caller)):
    consultation = await ConsultationService.get_consultation(consultation_id, caller)
    return await ConsultationService.to_response(consultation)


@router.post("", response_model=ConsultationResponse, status_code=status.HTTP_201_CREATED)
async def create_consultation(request: ConsultationCreate, caller: Caller = Depends(get_caller)):
    """
    Record a consultation. Only the appointment's doctor.

    - **appointment_id**: Appointment being consulted (one consultation each)
    - **diagnosis**, **notes**: Clinical findings
    - **requires_lab_test**, **requires_prescription**: Follow-up flags

    The appointment is marked completed.
    """
    consultation = await ConsultationService.create_consultation(request, caller)
    return await ConsultationService.to_response(consultation)


@router.put("/{consultation_id}", response_model=ConsultationResponse)
async def update_consultation(
    consultation_id: str,
    request: ConsultationUpdate,
    caller: Caller = Depends(get_caller),
):
    """Update a consultation. Owning doctor or admin."""
    consultation = await ConsultationService.update_consultation(consultation_id, request, caller)
    return await ConsultationService.to_response(consultation)
