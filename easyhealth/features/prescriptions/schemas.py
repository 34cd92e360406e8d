from pydantic import BaseModel, Field
from typing import List, Optional
from easyhealth.features.catalog.schemas import MedicationResponse, PharmacySummary
from easyhealth.features.prescriptions.models import PrescriptionStatus
from easyhealth.shared.schemas import DocumentId, DocumentResponse, DoctorSummary, ProfileSummary


# Request Schemas
class PrescriptionItem(BaseModel):
    """One medication of a prescribing action. Checked item by item by the service."""

    medication_id: Optional[DocumentId] = None
    quantity: Optional[int] = None
    dosage: Optional[str] = None
    instructions: Optional[str] = None
    unit_price: Optional[float] = Field(None, ge=0)


class PrescriptionBatchCreate(BaseModel):
    """Prescribe one or more medications for a consultation."""

    consultation_id: DocumentId
    items: List[PrescriptionItem] = Field(default_factory=list)
    notes: Optional[str] = None
    signature_data: Optional[str] = None
    status: PrescriptionStatus = PrescriptionStatus.PENDING


class PrescriptionUpdate(BaseModel):
    medication_id: Optional[DocumentId] = None
    quantity: Optional[int] = Field(None, gt=0)
    dosage: Optional[str] = None
    instructions: Optional[str] = None
    unit_price: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    status: Optional[PrescriptionStatus] = None
    signature_data: Optional[str] = None
    pharmacy_id: Optional[DocumentId] = None


# Response Schemas
class PrescriptionResponse(DocumentResponse):
    consultation_id: str
    patient_id: str
    doctor_id: str
    pharmacy_id: Optional[str] = None
    status: PrescriptionStatus
    medication_id: Optional[str] = None
    quantity: int
    dosage: str
    instructions: Optional[str] = None
    unit_price: float
    total_price: float
    notes: Optional[str] = None
    signature_data: Optional[str] = None
    patient: Optional[ProfileSummary] = None
    doctor: Optional[DoctorSummary] = None
    medication: Optional[MedicationResponse] = None
    pharmacy: Optional[PharmacySummary] = None


class PrescriptionBatchResponse(BaseModel):
    prescriptions: List[PrescriptionResponse]
    count: int
    message: str
