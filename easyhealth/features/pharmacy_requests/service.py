# Pharmacy Requests Feature - Service

from typing import List, Optional
from pymongo.errors import DuplicateKeyError
from easyhealth.core.access import Caller, Role, ensure_in_scope, pharmacy_request_scope
from easyhealth.core.logging import logger
from easyhealth.features.catalog.models import Pharmacy
from easyhealth.features.catalog.service import pharmacy_summary
from easyhealth.features.pharmacy_requests.models import PharmacyRequest, PharmacyRequestStatus
from easyhealth.features.pharmacy_requests.schemas import (
    PharmacyRequestCreate,
    PharmacyRequestResponse,
    PharmacyRequestUpdate,
)
from easyhealth.features.prescriptions.models import Prescription
from easyhealth.features.prescriptions.service import PrescriptionService
from easyhealth.shared.exceptions import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    InvalidStateException,
)
from easyhealth.shared.lookups import fetch_many, get_or_404


ALREADY_REQUESTED = "This prescription has already been sent to the pharmacy"

TRANSITIONS = {
    (PharmacyRequestStatus.PENDING, PharmacyRequestStatus.APPROVED),
    (PharmacyRequestStatus.PENDING, PharmacyRequestStatus.REJECTED),
    (PharmacyRequestStatus.APPROVED, PharmacyRequestStatus.COMPLETED),
}


class PharmacyRequestService:
    """Service class for pharmacy requests."""

    @staticmethod
    async def ensure_request(
        prescription_id: str,
        pharmacy_id: str,
        patient_id: str,
        session=None,
    ) -> PharmacyRequest:
        """Return the request of the pair, creating it on first use."""
        existing = await PharmacyRequest.find_one(
            PharmacyRequest.prescription_id == prescription_id,
            PharmacyRequest.pharmacy_id == pharmacy_id,
            session=session,
        )
        if existing:
            return existing

        request = PharmacyRequest(
            prescription_id=prescription_id,
            pharmacy_id=pharmacy_id,
            patient_id=patient_id,
        )
        await request.insert(session=session)
        logger.info(f"Pharmacy request {request.id} opened for prescription {prescription_id}")
        return request

    @staticmethod
    async def create_request(request: PharmacyRequestCreate, caller: Caller) -> PharmacyRequest:
        """Send one of the caller's prescriptions to a pharmacy. Patients only."""
        if caller.role != Role.PATIENT:
            raise ForbiddenException("Only patients can create pharmacy requests")

        prescription = await get_or_404(Prescription, request.prescription_id, "Prescription")
        if prescription.patient_id != caller.id:
            raise ForbiddenException("Access denied")
        if not prescription.medication_id:
            raise InvalidStateException("Cannot send a prescription without a medication to a pharmacy")
        pharmacy = await get_or_404(Pharmacy, request.pharmacy_id, "Pharmacy")
        prescription_id, pharmacy_id = str(prescription.id), str(pharmacy.id)

        existing = await PharmacyRequest.find_one(
            PharmacyRequest.prescription_id == prescription_id,
            PharmacyRequest.pharmacy_id == pharmacy_id,
        )
        if existing:
            raise ConflictException(ALREADY_REQUESTED)

        pharmacy_request = PharmacyRequest(
            prescription_id=prescription_id,
            pharmacy_id=pharmacy_id,
            patient_id=caller.id,
        )
        try:
            await pharmacy_request.insert()
        except DuplicateKeyError:
            raise ConflictException(ALREADY_REQUESTED)

        logger.info(f"Pharmacy request {pharmacy_request.id} created by patient {caller.id}")
        return pharmacy_request

    @staticmethod
    async def list_requests(caller: Caller) -> List[PharmacyRequest]:
        scope = pharmacy_request_scope(caller)
        if scope is None:
            return []
        return await PharmacyRequest.find(scope).sort(-PharmacyRequest.created_at).to_list()

    @staticmethod
    async def get_request(request_id: str, caller: Caller) -> PharmacyRequest:
        pharmacy_request = await get_or_404(PharmacyRequest, request_id, "Pharmacy request")
        ensure_in_scope(pharmacy_request_scope(caller), pharmacy_request)
        return pharmacy_request

    @staticmethod
    async def update_request(request_id: str, request: PharmacyRequestUpdate, caller: Caller) -> PharmacyRequest:
        """
        Review or complete a request.

        The pharmacist of the request's pharmacy or an admin. Rejecting
        requires a reason.
        """
        pharmacy_request = await get_or_404(PharmacyRequest, request_id, "Pharmacy request")

        is_pharmacy = caller.role == Role.PHARMACIST and caller.pharmacy_id == pharmacy_request.pharmacy_id
        if not (caller.is_admin or is_pharmacy):
            raise ForbiddenException("Access denied")

        if (pharmacy_request.status, request.status) not in TRANSITIONS:
            raise InvalidStateException(
                f"Cannot change pharmacy request from {pharmacy_request.status.value} to {request.status.value}"
            )

        if request.status == PharmacyRequestStatus.REJECTED:
            if not (request.rejection_reason or "").strip():
                raise BadRequestException("rejection_reason is required when rejecting a pharmacy request")
            pharmacy_request.rejection_reason = request.rejection_reason.strip()

        pharmacy_request.status = request.status
        pharmacy_request.touch()
        await pharmacy_request.save()
        logger.info(f"Pharmacy request {pharmacy_request.id} {request.status.value} by {caller.id}")
        return pharmacy_request

    @staticmethod
    async def to_responses(requests: List[PharmacyRequest]) -> List[PharmacyRequestResponse]:
        """Expand the prescription (with medication, doctor and patient) and the pharmacy."""
        prescriptions = await fetch_many(Prescription, [r.prescription_id for r in requests])
        expanded = {
            p.id: p for p in await PrescriptionService.to_responses(list(prescriptions.values()))
        }
        pharmacies = await fetch_many(Pharmacy, [r.pharmacy_id for r in requests])

        responses = []
        for r in requests:
            prescription = expanded.get(r.prescription_id)
            invalid_reason: Optional[str] = None
            if prescription is None:
                invalid_reason = "Prescription not found"
            elif prescription.medication is None:
                invalid_reason = "Prescription has no medication"
            responses.append(
                PharmacyRequestResponse.from_document(
                    r,
                    prescription=prescription,
                    pharmacy=pharmacy_summary(pharmacies.get(r.pharmacy_id)),
                    is_invalid=invalid_reason is not None,
                    invalid_reason=invalid_reason,
                )
            )
        return responses
