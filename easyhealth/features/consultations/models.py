# Consultations Feature - Models

from datetime import datetime
from typing import Optional
from beanie import Document, Indexed
from pydantic import Field
from easyhealth.shared.models import TimestampMixin, utcnow


class Consultation(Document, TimestampMixin):
    """Clinical record of an appointment; exactly one per appointment."""

    appointment_id: Indexed(str, unique=True)
    # Copied from the appointment
    patient_id: str
    doctor_id: str
    diagnosis: Optional[str] = None
    notes: Optional[str] = None
    requires_lab_test: bool = False
    requires_prescription: bool = False
    consultation_date: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "consultations"
        use_state_management = True
        indexes = ["patient_id", "doctor_id"]
