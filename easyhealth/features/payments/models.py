# Payments Feature - Models

from enum import Enum
from typing import Optional
from beanie import Document
from pydantic import Field
from easyhealth.shared.models import TimestampMixin


class PaymentType(str, Enum):
    CONSULTATION = "consultation"
    LAB_TEST = "lab_test"
    MEDICATION = "medication"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class Payment(Document, TimestampMixin):
    """
    Record of a payment made outside the system.

    patient_pays is always amount - insurance_coverage.
    """

    patient_id: str
    payment_type: PaymentType
    # Consultation, lab test request or prescription, depending on payment_type
    reference_id: str
    amount: float = Field(ge=0)
    insurance_coverage: float = 0
    patient_pays: float = 0
    status: PaymentStatus = PaymentStatus.PENDING
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None

    class Settings:
        name = "payments"
        use_state_management = True
        indexes = ["patient_id", "payment_type", "reference_id"]
