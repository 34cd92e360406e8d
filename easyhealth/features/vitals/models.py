# Vitals Feature - Models

from typing import Optional
from beanie import Document
from pydantic import Field
from easyhealth.shared.models import TimestampMixin


class Vital(Document, TimestampMixin):
    """Vital signs captured by a nurse."""

    patient_id: str
    # Profile id of the recording nurse
    nurse_id: str
    blood_pressure: Optional[str] = None
    heart_rate: Optional[float] = Field(default=None, ge=0)
    temperature: Optional[float] = None
    weight: Optional[float] = Field(default=None, ge=0)
    height: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None

    class Settings:
        name = "vitals"
        use_state_management = True
        indexes = ["patient_id", "nurse_id"]
