from pydantic import BaseModel, Field
from typing import Optional
from easyhealth.features.payments.models import PaymentStatus, PaymentType
from easyhealth.shared.schemas import DocumentId, DocumentResponse, ProfileSummary


class PaymentCreate(BaseModel):
    """Record a payment. The amount is taken as given."""

    payment_type: PaymentType
    reference_id: DocumentId = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    payment_method: Optional[str] = Field(None, max_length=50)
    transaction_id: Optional[str] = Field(None, max_length=100)


class PaymentResponse(DocumentResponse):
    patient_id: str
    payment_type: PaymentType
    reference_id: str
    amount: float
    insurance_coverage: float
    patient_pays: float
    status: PaymentStatus
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    patient: Optional[ProfileSummary] = None
