# Prescriptions Feature - Router

from fastapi import APIRouter, Depends, status
from typing import List
from easyhealth.core.access import Caller
from easyhealth.features.auth.dependencies import get_caller
from easyhealth.features.prescriptions.schemas import (
    PrescriptionBatchCreate,
    PrescriptionBatchResponse,
    PrescriptionResponse,
    PrescriptionUpdate,
)
from easyhealth.features.prescriptions.service import PrescriptionService


router = APIRouter(prefix="/prescriptions", tags=["Prescriptions"])


@router.get("", response_model=List[PrescriptionResponse])
async def list_prescriptions(caller: Caller = Depends(get_caller)):
    """
    List the prescriptions visible to the caller, newest first.

    Pharmacists see the prescriptions sent to their pharmacy.
    """
    prescriptions = await PrescriptionService.list_prescriptions(caller)
    return await PrescriptionService.to_responses(prescriptions)


@router.get("/{prescription_id}", response_model=PrescriptionResponse)
async def get_prescription(prescription_id: str, caller: Caller = Depends(get_caller)):
    prescription = await PrescriptionService.get_prescription(prescription_id, caller)
    return (await PrescriptionService.to_responses([prescription]))[0]


@router.post("", response_model=PrescriptionBatchResponse, status_code=status.HTTP_201_CREATED)
async def create_prescriptions(request: PrescriptionBatchCreate, caller: Caller = Depends(get_caller)):
    """
    Prescribe medications for a consultation. Doctors only.

    One prescription is created per item.

    - **consultation_id**: Consultation of the caller
    - **items**: medication_id, quantity (> 0), dosage, optional instructions and unit_price
    - **notes**, **signature_data**: Shared by every created prescription
    """
    prescriptions = await PrescriptionService.create_batch(request, caller)
    count = len(prescriptions)

    return PrescriptionBatchResponse(
        prescriptions=await PrescriptionService.to_responses(prescriptions),
        count=count,
        message=f"Created {count} prescription(s) - one per medication",
    )


@router.put("/{prescription_id}", response_model=PrescriptionResponse)
async def update_prescription(
    prescription_id: str,
    request: PrescriptionUpdate,
    caller: Caller = Depends(get_caller),
):
    """
    Update a prescription.

    - Doctor: medication_id, quantity, dosage, instructions, unit_price, notes, status, signature_data
    - Patient: pharmacy_id (creates the pharmacy request)
    - Admin: any field
    """
    prescription = await PrescriptionService.update_prescription(prescription_id, request, caller)
    return (await PrescriptionService.to_responses([prescription]))[0]
