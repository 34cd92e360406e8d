# Pharmacy Requests Feature - Router

from fastapi import APIRouter, Depends, status
from typing import List
from easyhealth.core.access import Caller
from easyhealth.features.auth.dependencies import get_caller
from easyhealth.features.pharmacy_requests.schemas import (
    PharmacyRequestCreate,
    PharmacyRequestResponse,
    PharmacyRequestUpdate,
)
from easyhealth.features.pharmacy_requests.service import PharmacyRequestService


router = APIRouter(prefix="/pharmacy-requests", tags=["Pharmacy Requests"])


@router.get("", response_model=List[PharmacyRequestResponse])
async def list_pharmacy_requests(caller: Caller = Depends(get_caller)):
    """
    List pharmacy requests, newest first.

    Patients see their own; pharmacists those of their pharmacy.
    """
    requests = await PharmacyRequestService.list_requests(caller)
    return await PharmacyRequestService.to_responses(requests)


@router.get("/{request_id}", response_model=PharmacyRequestResponse)
async def get_pharmacy_request(request_id: str, caller: Caller = Depends(get_caller)):
    pharmacy_request = await PharmacyRequestService.get_request(request_id, caller)
    return (await PharmacyRequestService.to_responses([pharmacy_request]))[0]


@router.post("", response_model=PharmacyRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_pharmacy_request(request: PharmacyRequestCreate, caller: Caller = Depends(get_caller)):
    """
    Send a prescription to a pharmacy. Patients only.

    - **prescription_id**: One of the caller's prescriptions
    - **pharmacy_id**: Target pharmacy
    """
    pharmacy_request = await PharmacyRequestService.create_request(request, caller)
    return (await PharmacyRequestService.to_responses([pharmacy_request]))[0]


@router.put("/{request_id}", response_model=PharmacyRequestResponse)
async def update_pharmacy_request(
    request_id: str,
    request: PharmacyRequestUpdate,
    caller: Caller = Depends(get_caller),
):
    """
    Approve, reject or complete a request. The pharmacy's pharmacist or admin.

    - **status**: approved / rejected (from pending), completed (from approved)
    - **rejection_reason**: Required when rejecting
    """
    pharmacy_request = await PharmacyRequestService.update_request(request_id, request, caller)
    return (await PharmacyRequestService.to_responses([pharmacy_request]))[0]
