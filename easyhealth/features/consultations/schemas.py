from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from easyhealth.features.appointments.models import AppointmentStatus
from easyhealth.shared.schemas import DocumentId, DocumentResponse, DoctorSummary, ProfileSummary


class ConsultationCreate(BaseModel):
    """Patient and doctor are taken from the appointment, never from the body."""

    appointment_id: DocumentId
    diagnosis: Optional[str] = Field(None, max_length=5000)
    notes: Optional[str] = Field(None, max_length=5000)
    requires_lab_test: bool = False
    requires_prescription: bool = False
    consultation_date: Optional[datetime] = None


class ConsultationUpdate(BaseModel):
    diagnosis: Optional[str] = Field(None, max_length=5000)
    notes: Optional[str] = Field(None, max_length=5000)
    requires_lab_test: Optional[bool] = None
    requires_prescription: Optional[bool] = None
    consultation_date: Optional[datetime] = None


class AppointmentSummary(BaseModel):
    id: str
    appointment_date: date
    appointment_time: str
    status: AppointmentStatus
    reason: Optional[str] = None
    hospital_id: str
    department_id: str


class ConsultationResponse(DocumentResponse):
    appointment_id: str
    patient_id: str
    doctor_id: str
    diagnosis: Optional[str] = None
    notes: Optional[str] = None
    requires_lab_test: bool
    requires_prescription: bool
    consultation_date: datetime
    patient: Optional[ProfileSummary] = None
    doctor: Optional[DoctorSummary] = None
    appointment: Optional[AppointmentSummary] = None
