from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import date, datetime
from easyhealth.features.appointments.models import AppointmentStatus
from easyhealth.features.catalog.schemas import DepartmentSummary, HospitalSummary
from easyhealth.shared.schemas import DocumentId, DoctorSummary, ProfileSummary


SLOT_START_HOUR = 8
SLOT_END_HOUR = 18
SLOT_MINUTES = 10


def all_slots() -> List[str]:
    """Every bookable slot of a day: 08:00:00 through 17:50:00."""
    return [
        f"{hour:02d}:{minute:02d}:00"
        for hour in range(SLOT_START_HOUR, SLOT_END_HOUR)
        for minute in range(0, 60, SLOT_MINUTES)
    ]


def normalize_slot(value: str) -> str:
    """Accept HH:MM or HH:MM:SS and return the HH:MM:SS slot marker."""
    value = value.strip()
    if len(value) == 5:
        value = f"{value}:00"
    if value not in all_slots():
        raise ValueError(
            "appointment_time must be a 10 minute slot between 08:00:00 and 17:50:00"
        )
    return value


# Request Schemas
class AppointmentCreate(BaseModel):
    """Booking request. The patient is always the caller."""

    doctor_id: DocumentId
    appointment_date: date
    appointment_time: str
    reason: Optional[str] = Field(None, max_length=1000)
    hospital_id: Optional[DocumentId] = None
    department_id: Optional[DocumentId] = None

    @field_validator("appointment_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return normalize_slot(v)


class AppointmentUpdate(BaseModel):
    """Status transition and/or patient edits."""

    status: Optional[AppointmentStatus] = None
    rejection_reason: Optional[str] = Field(None, max_length=1000)
    reason: Optional[str] = Field(None, max_length=1000)
    appointment_date: Optional[date] = None
    appointment_time: Optional[str] = None

    @field_validator("appointment_time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return normalize_slot(v)


# Response Schemas
class AppointmentResponse(BaseModel):
    id: str
    patient_id: str
    doctor_id: str
    hospital_id: str
    department_id: str
    appointment_date: date
    appointment_time: str
    status: AppointmentStatus
    reason: Optional[str] = None
    rejection_reason: Optional[str] = None
    patient: Optional[ProfileSummary] = None
    doctor: Optional[DoctorSummary] = None
    hospital: Optional[HospitalSummary] = None
    department: Optional[DepartmentSummary] = None
    created_at: datetime
    updated_at: datetime
