# Prescriptions Feature - Models

from enum import Enum
from typing import Optional
from beanie import Document
from pydantic import Field
from easyhealth.shared.models import TimestampMixin


class PrescriptionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"
    PAID = "paid"


class Prescription(Document, TimestampMixin):
    """
    One medication line prescribed during a consultation.

    A prescribing action with several medications produces one document
    per medication. total_price is always unit_price * quantity.
    """

    consultation_id: str
    # Copied from the consultation
    patient_id: str
    doctor_id: str
    pharmacy_id: Optional[str] = None
    status: PrescriptionStatus = PrescriptionStatus.PENDING
    medication_id: Optional[str] = None
    quantity: int = Field(default=1, gt=0)
    dosage: str = ""
    instructions: Optional[str] = None
    unit_price: float = Field(default=0, ge=0)
    total_price: float = Field(default=0, ge=0)
    notes: Optional[str] = None
    signature_data: Optional[str] = None

    class Settings:
        name = "prescriptions"
        use_state_management = True
        indexes = ["consultation_id", "patient_id", "doctor_id", "pharmacy_id"]

    class Config:
        json_schema_extra = {
            "example": {
                "consultation_id": "665f1c2e9b1e8a0012345678",
                "medication_id": "665f1c2e9b1e8a0012345679",
                "quantity": 2,
                "dosage": "1 tablet twice a day",
                "unit_price": 500,
                "total_price": 1000,
            }
        }

    def recompute_total(self) -> None:
        self.total_price = self.unit_price * self.quantity
