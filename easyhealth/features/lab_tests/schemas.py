from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from easyhealth.features.catalog.schemas import HospitalSummary
from easyhealth.features.lab_tests.models import LabRequestStatus, ResultStatus
from easyhealth.shared.schemas import DocumentId, DocumentResponse, DoctorSummary, ProfileSummary


# ============== Templates ==============

class LabTestTemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: float = Field(0, ge=0)
    category: Optional[str] = None


class LabTestTemplateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = None


class LabTestTemplateResponse(DocumentResponse):
    name: str
    description: Optional[str] = None
    price: float
    category: Optional[str] = None


# ============== Requests ==============

class LabTestRequestCreate(BaseModel):
    """
    Order a lab test.

    Patient and doctor come from the consultation. When hospital_id is
    omitted it is derived from the consultation's appointment, falling back
    to appointment_id.
    """

    consultation_id: DocumentId
    lab_test_template_id: DocumentId
    hospital_id: Optional[DocumentId] = None
    appointment_id: Optional[DocumentId] = None
    status: LabRequestStatus = LabRequestStatus.AWAITING_PAYMENT
    total_price: Optional[float] = Field(None, ge=0)

    @field_validator("status")
    @classmethod
    def validate_initial_status(cls, v: LabRequestStatus) -> LabRequestStatus:
        if v not in (LabRequestStatus.AWAITING_PAYMENT, LabRequestStatus.PENDING):
            raise ValueError("a new request must be awaiting_payment or pending")
        return v


class LabTestRequestUpdate(BaseModel):
    status: Optional[LabRequestStatus] = None
    total_price: Optional[float] = Field(None, ge=0)


class LabTestRequestResponse(DocumentResponse):
    consultation_id: str
    patient_id: str
    doctor_id: str
    lab_test_template_id: str
    hospital_id: Optional[str] = None
    status: LabRequestStatus
    total_price: float
    patient: Optional[ProfileSummary] = None
    doctor: Optional[DoctorSummary] = None
    lab_test_template: Optional[LabTestTemplateResponse] = None
    hospital: Optional[HospitalSummary] = None


# ============== Results ==============

class LabTestResultCreate(BaseModel):
    lab_test_request_id: DocumentId
    result_status: ResultStatus
    result_data: str = Field(..., min_length=1)
    notes: Optional[str] = None
    completed_at: Optional[datetime] = None


class LabTestResultResponse(DocumentResponse):
    lab_test_request_id: str
    technician_id: str
    result_status: ResultStatus
    result_data: str
    notes: Optional[str] = None
    completed_at: datetime
    technician: Optional[ProfileSummary] = None
    lab_test_request: Optional[LabTestRequestResponse] = None
