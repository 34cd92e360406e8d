from pydantic import BaseModel, Field
from typing import Optional
from easyhealth.features.catalog.schemas import PharmacySummary
from easyhealth.features.pharmacy_requests.models import PharmacyRequestStatus
from easyhealth.features.prescriptions.schemas import PrescriptionResponse
from easyhealth.shared.schemas import DocumentId, DocumentResponse


class PharmacyRequestCreate(BaseModel):
    prescription_id: DocumentId
    pharmacy_id: DocumentId


class PharmacyRequestUpdate(BaseModel):
    status: PharmacyRequestStatus
    rejection_reason: Optional[str] = Field(None, max_length=1000)


class PharmacyRequestResponse(DocumentResponse):
    prescription_id: str
    patient_id: str
    pharmacy_id: str
    status: PharmacyRequestStatus
    rejection_reason: Optional[str] = None
    prescription: Optional[PrescriptionResponse] = None
    pharmacy: Optional[PharmacySummary] = None
    # Set when the prescription cannot be dispensed
    is_invalid: bool = False
    invalid_reason: Optional[str] = None
