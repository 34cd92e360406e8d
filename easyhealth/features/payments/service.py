# Payments Feature - Service

from typing import List, Optional, Tuple
from easyhealth.core.access import Caller, Role, payment_scope
from easyhealth.core.logging import logger
from easyhealth.features.auth.models import Profile
from easyhealth.features.catalog.models import Insurance
from easyhealth.features.payments.models import Payment, PaymentStatus, PaymentType
from easyhealth.features.payments.schemas import PaymentCreate, PaymentResponse
from easyhealth.features.profiles.service import ProfileService
from easyhealth.shared.exceptions import ForbiddenException, NotFoundException
from easyhealth.shared.lookups import canonical_id, fetch, get_or_404


def split_amount(amount: float, coverage_percentage: Optional[float]) -> Tuple[float, float]:
    """Return (insurance_coverage, patient_pays) for an amount."""
    coverage = amount * coverage_percentage / 100 if coverage_percentage else 0
    return coverage, amount - coverage


class PaymentService:
    """
    Service class for payments.

    Payments are recorded, not settled: no gateway is involved and a new
    payment is completed immediately. The amount is whatever the patient
    sends; it is not checked against the referenced item's price.
    """

    @staticmethod
    async def create_payment(request: PaymentCreate, caller: Caller) -> Payment:
        if caller.role != Role.PATIENT:
            raise ForbiddenException("Only patients can create payments")

        patient = await get_or_404(Profile, caller.id, "Patient")
        insurance = await fetch(Insurance, patient.insurance_id) if patient.insurance_id else None

        coverage, patient_pays = split_amount(
            request.amount, insurance.coverage_percentage if insurance else None
        )

        payment = Payment(
            patient_id=caller.id,
            payment_type=request.payment_type,
            reference_id=request.reference_id,
            amount=request.amount,
            insurance_coverage=coverage,
            patient_pays=patient_pays,
            status=PaymentStatus.COMPLETED,
            payment_method=request.payment_method,
            transaction_id=request.transaction_id,
        )
        await payment.insert()

        logger.info(
            f"Payment {payment.id} recorded for {payment.payment_type.value} {payment.reference_id} "
            f"by patient {caller.id} (coverage={coverage})"
        )
        return payment

    @staticmethod
    async def list_payments(caller: Caller) -> List[Payment]:
        scope = payment_scope(caller)
        if scope is None:
            return []
        return await Payment.find(scope).sort(-Payment.created_at).to_list()

    @staticmethod
    def ensure_owner(payment: Payment, caller: Caller) -> None:
        if not caller.is_admin and payment.patient_id != caller.id:
            raise ForbiddenException("Access denied")

    @staticmethod
    async def get_payment(payment_id: str, caller: Caller) -> Payment:
        payment = await get_or_404(Payment, payment_id, "Payment")
        PaymentService.ensure_owner(payment, caller)
        return payment

    @staticmethod
    async def get_by_reference(payment_type: PaymentType, reference_id: str, caller: Caller) -> Payment:
        payment = await Payment.find_one(
            Payment.payment_type == payment_type,
            Payment.reference_id == canonical_id(reference_id),
        )
        if not payment:
            raise NotFoundException("Payment not found")
        PaymentService.ensure_owner(payment, caller)
        return payment

    @staticmethod
    async def to_responses(payments: List[Payment]) -> List[PaymentResponse]:
        patients = await ProfileService.summaries(p.patient_id for p in payments)
        return [PaymentResponse.from_document(p, patient=patients.get(p.patient_id)) for p in payments]
