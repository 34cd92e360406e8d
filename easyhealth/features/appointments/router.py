# Appointments Feature - Router

from datetime import date
from fastapi import APIRouter, Depends, status
from typing import List
from easyhealth.core.access import Caller
from easyhealth.features.appointments.schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentUpdate,
)
from easyhealth.features.appointments.service import AppointmentService
from easyhealth.features.auth.dependencies import get_caller


router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.get("", response_model=List[AppointmentResponse])
async def list_appointments(caller: Caller = Depends(get_caller)):
    """
    List the appointments visible to the caller, sorted by date then time.

    Patients see their own, doctors those assigned to them, nurses and
    admins all of them.
    """
    appointments = await AppointmentService.list_appointments(caller)
    return await AppointmentService.to_responses(appointments)


@router.get("/available/{doctor_id}/{day}", response_model=List[str])
async def get_available_slots(doctor_id: str, day: date, caller: Caller = Depends(get_caller)):
    """
    List the free 10 minute slots of a doctor on a day.

    - **doctor_id**: Doctor ID
    - **day**: Date as YYYY-MM-DD
    """
    return await AppointmentService.available_slots(doctor_id, day)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(appointment_id: str, caller: Caller = Depends(get_caller)):
    appointment = await AppointmentService.get_appointment(appointment_id, caller)
    return await AppointmentService.to_response(appointment)


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_appointment(request: AppointmentCreate, caller: Caller = Depends(get_caller)):
    """
    Book an appointment. Patients only; the patient is always the caller.

    - **doctor_id**: Doctor to book
    - **appointment_date**: YYYY-MM-DD
    - **appointment_time**: HH:MM:SS on a 10 minute boundary, 08:00:00 to 17:50:00
    - **reason**: Optional reason for the visit

    The doctor is notified of the request.
    """
    appointment = await AppointmentService.create_appointment(request, caller)
    return await AppointmentService.to_response(appointment)


@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: str,
    request: AppointmentUpdate,
    caller: Caller = Depends(get_caller),
):
    """
    Review, complete, cancel or edit an appointment.

    - **status**: approved / rejected (doctor, nurse, admin; from pending),
      completed (from approved), cancelled (patient or admin; from pending or approved)
    - **rejection_reason**: Required when rejecting
    - **reason**, **appointment_date**, **appointment_time**: Patient edits while pending
    """
    appointment = await AppointmentService.update_appointment(appointment_id, request, caller)
    return await AppointmentService.to_response(appointment)
