# Lab Tests Feature - Router

from fastapi import APIRouter, Depends, status
from typing import List, Optional
from easyhealth.core.access import Caller, Role
from easyhealth.features.auth.dependencies import get_caller, require_roles
from easyhealth.features.catalog.service import CatalogService
from easyhealth.features.lab_tests.models import LabTestTemplate
from easyhealth.features.lab_tests.schemas import (
    LabTestRequestCreate,
    LabTestRequestResponse,
    LabTestRequestUpdate,
    LabTestResultCreate,
    LabTestResultResponse,
    LabTestTemplateCreate,
    LabTestTemplateResponse,
    LabTestTemplateUpdate,
)
from easyhealth.features.lab_tests.service import LabTestService
from easyhealth.shared.lookups import get_or_404
from easyhealth.shared.schemas import MessageResponse


router = APIRouter(prefix="/lab-tests", tags=["Lab Tests"])

admin_only = require_roles(Role.ADMIN)


# ============== Templates ==============

@router.get("/templates", response_model=List[LabTestTemplateResponse])
async def list_templates(caller: Caller = Depends(get_caller)):
    """List orderable lab tests sorted by name."""
    templates = await CatalogService.list_entries(LabTestTemplate)
    return [LabTestTemplateResponse.from_document(t) for t in templates]


@router.get("/templates/{template_id}", response_model=LabTestTemplateResponse)
async def get_template(template_id: str, caller: Caller = Depends(get_caller)):
    template = await get_or_404(LabTestTemplate, template_id, "Template")
    return LabTestTemplateResponse.from_document(template)


@router.post("/templates", response_model=LabTestTemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(request: LabTestTemplateCreate, caller: Caller = Depends(admin_only)):
    """Add a lab test to the catalog. Requires admin. Names are unique."""
    template = await CatalogService.create_entry(
        LabTestTemplate, "Template", request, caller.id, unique_field="name"
    )
    return LabTestTemplateResponse.from_document(template)


@router.put("/templates/{template_id}", response_model=LabTestTemplateResponse)
async def update_template(template_id: str, request: LabTestTemplateUpdate, caller: Caller = Depends(admin_only)):
    template = await CatalogService.update_entry(
        LabTestTemplate, template_id, "Template", request, caller.id, unique_field="name"
    )
    return LabTestTemplateResponse.from_document(template)


@router.delete("/templates/{template_id}", response_model=MessageResponse)
async def delete_template(template_id: str, caller: Caller = Depends(admin_only)):
    await CatalogService.delete_entry(LabTestTemplate, template_id, "Template", caller.id)
    return MessageResponse(message="Template deleted")


# ============== Requests ==============

@router.get("/requests", response_model=List[LabTestRequestResponse])
async def list_requests(hospital_id: Optional[str] = None, caller: Caller = Depends(get_caller)):
    """
    List the lab test requests visible to the caller, newest first.

    Lab technicians only see requests of hospitals they are registered at.

    - **hospital_id**: Optional hospital filter
    """
    requests = await LabTestService.list_requests(caller, hospital_id)
    return await LabTestService.requests_to_response(requests)


@router.get("/requests/{request_id}", response_model=LabTestRequestResponse)
async def get_request(request_id: str, caller: Caller = Depends(get_caller)):
    lab_request = await LabTestService.get_request(request_id, caller)
    return (await LabTestService.requests_to_response([lab_request]))[0]


@router.post("/requests", response_model=LabTestRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_request(request: LabTestRequestCreate, caller: Caller = Depends(get_caller)):
    """
    Order a lab test. The consultation's doctor or admin.

    - **consultation_id**: Consultation the test belongs to
    - **lab_test_template_id**: Test to run
    - **hospital_id**: Optional; derived from the consultation's appointment when omitted
    - **status**: awaiting_payment (default) or pending
    - **total_price**: Optional; defaults to the template price
    """
    lab_request = await LabTestService.create_request(request, caller)
    return (await LabTestService.requests_to_response([lab_request]))[0]


@router.put("/requests/{request_id}", response_model=LabTestRequestResponse)
async def update_request(request_id: str, request: LabTestRequestUpdate, caller: Caller = Depends(get_caller)):
    """Advance a lab test request. Status only moves forward."""
    lab_request = await LabTestService.update_request(request_id, request, caller)
    return (await LabTestService.requests_to_response([lab_request]))[0]


# ============== Results ==============

@router.get("/results", response_model=List[LabTestResultResponse])
async def list_results(caller: Caller = Depends(get_caller)):
    """List results of the requests visible to the caller."""
    results = await LabTestService.list_results(caller)
    return await LabTestService.results_to_response(results)


@router.get("/results/{result_id}", response_model=LabTestResultResponse)
async def get_result(result_id: str, caller: Caller = Depends(get_caller)):
    result = await LabTestService.get_result(result_id, caller)
    return (await LabTestService.results_to_response([result]))[0]


@router.post("/results", response_model=LabTestResultResponse, status_code=status.HTTP_201_CREATED)
async def create_result(request: LabTestResultCreate, caller: Caller = Depends(get_caller)):
    """
    Record a lab test result. Lab technicians only.

    - **lab_test_request_id**: Request being answered (one result each)
    - **result_status**: positive, negative or inconclusive
    - **result_data**: Result text

    The request is marked completed.
    """
    result = await LabTestService.create_result(request, caller)
    return (await LabTestService.results_to_response([result]))[0]
