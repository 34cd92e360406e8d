# Role Profiles Feature - Models

from typing import Optional
from beanie import Document, Indexed
from pydantic import Field
from easyhealth.shared.models import TimestampMixin


class Doctor(Document, TimestampMixin):
    """Doctor role profile; extends one Profile with practice details."""

    user_id: Indexed(str, unique=True)
    hospital_id: str
    department_id: str
    specialization: Optional[str] = None
    license_number: Indexed(str, unique=True)
    consultation_fee: float = Field(default=0, ge=0)
    # Base64 signature image
    signature_data: Optional[str] = None

    class Settings:
        name = "doctors"
        use_state_management = True
        indexes = ["hospital_id", "department_id"]

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "665f1c2e9b1e8a0012345678",
                "hospital_id": "665f1c2e9b1e8a0012345679",
                "department_id": "665f1c2e9b1e8a001234567a",
                "specialization": "Cardiology",
                "license_number": "RMDC-2024-0042",
                "consultation_fee": 15000,
            }
        }


class Nurse(Document, TimestampMixin):
    """Nurse role profile."""

    user_id: Indexed(str, unique=True)
    license_number: Indexed(str, unique=True)

    class Settings:
        name = "nurses"
        use_state_management = True
