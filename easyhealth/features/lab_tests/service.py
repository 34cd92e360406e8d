# Lab Tests Feature - Service

from typing import List, Optional
from beanie.operators import In
from pymongo.errors import DuplicateKeyError
from easyhealth.core.access import (
    Caller,
    Role,
    ensure_in_scope,
    in_scope,
    lab_request_scope,
    narrow,
)
from easyhealth.core.events import LabResultRecorded, event_bus
from easyhealth.core.logging import logger
from easyhealth.database import Database
from easyhealth.features.appointments.models import Appointment
from easyhealth.features.catalog.models import Hospital
from easyhealth.features.catalog.service import hospital_summary
from easyhealth.features.consultations.models import Consultation
from easyhealth.features.lab_tests.models import (
    LAB_REQUEST_FLOW,
    LabRequestStatus,
    LabTestRequest,
    LabTestResult,
    LabTestTemplate,
)
from easyhealth.features.lab_tests.schemas import (
    LabTestRequestCreate,
    LabTestRequestResponse,
    LabTestRequestUpdate,
    LabTestResultCreate,
    LabTestResultResponse,
    LabTestTemplateResponse,
)
from easyhealth.features.profiles.service import ProfileService
from easyhealth.features.staff.service import StaffService
from easyhealth.shared.exceptions import (
    ConflictException,
    ForbiddenException,
    InvalidStateException,
)
from easyhealth.shared.lookups import canonical_id, fetch, fetch_many, get_or_404


ALREADY_RECORDED = "A result already exists for this lab test request"


class LabTestService:
    """Service class for lab test requests and results."""

    # ============== Requests ==============

    @staticmethod
    async def derive_hospital_id(consultation: Consultation, appointment_id: Optional[str]) -> Optional[str]:
        """Hospital of the consultation's appointment, else of the supplied appointment."""
        appointment = await fetch(Appointment, consultation.appointment_id)
        if appointment is None and appointment_id:
            appointment = await fetch(Appointment, appointment_id)
        return appointment.hospital_id if appointment else None

    @staticmethod
    async def create_request(request: LabTestRequestCreate, caller: Caller) -> LabTestRequest:
        """
        Order a lab test for a consultation.

        The doctor owning the consultation or an admin. total_price defaults
        to the template price.
        """
        if caller.role not in (Role.DOCTOR, Role.ADMIN):
            raise ForbiddenException("Only doctors can request lab tests")

        consultation = await get_or_404(Consultation, request.consultation_id, "Consultation")
        if not caller.is_admin and caller.doctor_id != consultation.doctor_id:
            raise ForbiddenException("Access denied")

        template = await get_or_404(LabTestTemplate, request.lab_test_template_id, "Lab test template")

        hospital_id = request.hospital_id
        if hospital_id:
            await get_or_404(Hospital, hospital_id, "Hospital")
        else:
            hospital_id = await LabTestService.derive_hospital_id(consultation, request.appointment_id)

        lab_request = LabTestRequest(
            consultation_id=str(consultation.id),
            patient_id=consultation.patient_id,
            doctor_id=consultation.doctor_id,
            lab_test_template_id=str(template.id),
            hospital_id=hospital_id,
            status=request.status,
            total_price=request.total_price if request.total_price is not None else template.price,
        )
        await lab_request.insert()
        logger.info(f"Lab test request {lab_request.id} created by {caller.id} (hospital={hospital_id})")
        return lab_request

    @staticmethod
    async def list_requests(caller: Caller, hospital_id: Optional[str] = None) -> List[LabTestRequest]:
        """Requests visible to the caller, newest first, optionally for one hospital."""
        scope = narrow(lab_request_scope(caller), "hospital_id", canonical_id(hospital_id))
        if scope is None:
            return []
        return await LabTestRequest.find(scope).sort(-LabTestRequest.created_at).to_list()

    @staticmethod
    async def get_request(request_id: str, caller: Caller) -> LabTestRequest:
        lab_request = await get_or_404(LabTestRequest, request_id, "Lab test request")
        ensure_in_scope(lab_request_scope(caller), lab_request)
        return lab_request

    @staticmethod
    async def update_request(request_id: str, request: LabTestRequestUpdate, caller: Caller) -> LabTestRequest:
        """
        Advance a request.

        Status only moves forward. The requesting doctor, a lab technician
        of the request's hospital or an admin may advance it; the owning
        patient may only move it from awaiting_payment to pending.
        """
        lab_request = await get_or_404(LabTestRequest, request_id, "Lab test request")

        is_requesting_doctor = caller.role == Role.DOCTOR and caller.doctor_id == lab_request.doctor_id
        is_hospital_lab = (
            caller.role == Role.LAB_TECHNICIAN
            and lab_request.hospital_id is not None
            and lab_request.hospital_id in caller.lab_hospital_ids
        )
        is_owner = caller.role == Role.PATIENT and caller.id == lab_request.patient_id

        if not (caller.is_admin or is_requesting_doctor or is_hospital_lab or is_owner):
            raise ForbiddenException("Access denied")

        if request.status is not None and request.status != lab_request.status:
            current = LAB_REQUEST_FLOW.index(lab_request.status)
            target = LAB_REQUEST_FLOW.index(request.status)
            if target < current:
                raise InvalidStateException(
                    f"Cannot move lab test request back from {lab_request.status.value} to {request.status.value}"
                )
            if is_owner and not (
                lab_request.status == LabRequestStatus.AWAITING_PAYMENT
                and request.status == LabRequestStatus.PENDING
            ):
                raise ForbiddenException("Patients can only confirm payment of a lab test request")
            lab_request.status = request.status

        if request.total_price is not None:
            if not (caller.is_admin or is_requesting_doctor):
                raise ForbiddenException("Only the requesting doctor can change the price")
            lab_request.total_price = request.total_price

        lab_request.touch()
        await lab_request.save()
        logger.info(f"Lab test request {lab_request.id} updated by {caller.id} (status={lab_request.status.value})")
        return lab_request

    @staticmethod
    async def requests_to_response(requests: List[LabTestRequest]) -> List[LabTestRequestResponse]:
        patients = await ProfileService.summaries(r.patient_id for r in requests)
        doctors = await StaffService.doctor_summaries(r.doctor_id for r in requests)
        templates = await fetch_many(LabTestTemplate, [r.lab_test_template_id for r in requests])
        hospitals = await fetch_many(Hospital, [r.hospital_id for r in requests])
        responses = []
        for r in requests:
            template = templates.get(r.lab_test_template_id)
            responses.append(
                LabTestRequestResponse.from_document(
                    r,
                    patient=patients.get(r.patient_id),
                    doctor=doctors.get(r.doctor_id),
                    lab_test_template=LabTestTemplateResponse.from_document(template) if template else None,
                    hospital=hospital_summary(hospitals.get(r.hospital_id or "")),
                )
            )
        return responses

    # ============== Results ==============

    @staticmethod
    async def create_result(request: LabTestResultCreate, caller: Caller) -> LabTestResult:
        """
        Record the result of a visible request.

        The request is completed in the same unit of work.
        """
        if caller.role != Role.LAB_TECHNICIAN:
            raise ForbiddenException("Only lab technicians can record results")

        lab_request = await get_or_404(LabTestRequest, request.lab_test_request_id, "Lab test request")
        ensure_in_scope(lab_request_scope(caller), lab_request)

        if await LabTestResult.find_one(LabTestResult.lab_test_request_id == str(lab_request.id)):
            raise ConflictException(ALREADY_RECORDED)

        values = request.model_dump(exclude_none=True)
        values["lab_test_request_id"] = str(lab_request.id)
        values["technician_id"] = caller.id

        async with Database.transaction() as session:
            result = LabTestResult(**values)
            try:
                await result.insert(session=session)
            except DuplicateKeyError:
                raise ConflictException(ALREADY_RECORDED)

            logger.info(f"Lab test result {result.id} recorded for request {lab_request.id} by {caller.id}")

            await event_bus.publish(
                LabResultRecorded(
                    result_id=str(result.id),
                    lab_test_request_id=str(lab_request.id),
                ),
                session=session,
            )

        return result

    @staticmethod
    async def list_results(caller: Caller) -> List[LabTestResult]:
        """Results of the requests visible to the caller, newest completion first."""
        scope = lab_request_scope(caller)
        if scope is None:
            return []

        query = LabTestResult.find()
        if scope:
            requests = await LabTestRequest.find(scope).to_list()
            if not requests:
                return []
            query = LabTestResult.find(In(LabTestResult.lab_test_request_id, [str(r.id) for r in requests]))

        return await query.sort(-LabTestResult.completed_at).to_list()

    @staticmethod
    async def get_result(result_id: str, caller: Caller) -> LabTestResult:
        result = await get_or_404(LabTestResult, result_id, "Lab test result")
        lab_request = await fetch(LabTestRequest, result.lab_test_request_id)
        if lab_request is None or not in_scope(lab_request_scope(caller), lab_request):
            raise ForbiddenException("Access denied")
        return result

    @staticmethod
    async def results_to_response(results: List[LabTestResult]) -> List[LabTestResultResponse]:
        technicians = await ProfileService.summaries(r.technician_id for r in results)
        requests = await fetch_many(LabTestRequest, [r.lab_test_request_id for r in results])
        expanded = {
            str(r.id): r
            for r in await LabTestService.requests_to_response(list(requests.values()))
        }
        return [
            LabTestResultResponse.from_document(
                r,
                technician=technicians.get(r.technician_id),
                lab_test_request=expanded.get(r.lab_test_request_id),
            )
            for r in results
        ]
