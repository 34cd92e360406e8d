# Payments Feature - Router

from fastapi import APIRouter, Depends, status
from typing import List
from easyhealth.core.access import Caller
from easyhealth.features.auth.dependencies import get_caller
from easyhealth.features.payments.models import PaymentType
from easyhealth.features.payments.schemas import PaymentCreate, PaymentResponse
from easyhealth.features.payments.service import PaymentService


router = APIRouter(prefix="/payments", tags=["Payments"])


@router.get("", response_model=List[PaymentResponse])
async def list_payments(caller: Caller = Depends(get_caller)):
    """
    List payments, newest first.

    Patients see their own, doctors consultation payments, admins all.
    """
    payments = await PaymentService.list_payments(caller)
    return await PaymentService.to_responses(payments)


@router.get("/reference/{payment_type}/{reference_id}", response_model=PaymentResponse)
async def get_payment_by_reference(
    payment_type: PaymentType,
    reference_id: str,
    caller: Caller = Depends(get_caller),
):
    """Get the payment of a consultation, lab test or medication. Owner or admin."""
    payment = await PaymentService.get_by_reference(payment_type, reference_id, caller)
    return (await PaymentService.to_responses([payment]))[0]


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(payment_id: str, caller: Caller = Depends(get_caller)):
    payment = await PaymentService.get_payment(payment_id, caller)
    return (await PaymentService.to_responses([payment]))[0]


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def create_payment(request: PaymentCreate, caller: Caller = Depends(get_caller)):
    """
    Record a payment. Patients only.

    - **payment_type**: consultation, lab_test or medication
    - **reference_id**: Paid item
    - **amount**: Total amount; the patient's insurance covers its percentage

    The payment is stored as completed; no money is moved.
    """
    payment = await PaymentService.create_payment(request, caller)
    return (await PaymentService.to_responses([payment]))[0]
