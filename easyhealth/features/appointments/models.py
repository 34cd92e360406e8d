# Appointments Feature - Models

from datetime import datetime
from enum import Enum
from typing import Optional
import pymongo
from beanie import Document
from pymongo import IndexModel
from easyhealth.shared.models import TimestampMixin


class AppointmentStatus(str, Enum):
    """Appointment lifecycle states."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# States in which an appointment occupies its doctor's slot
SLOT_HOLDING_STATUSES = (AppointmentStatus.PENDING, AppointmentStatus.APPROVED)


class Appointment(Document, TimestampMixin):
    """Appointment document model."""

    patient_id: str
    doctor_id: str
    hospital_id: str
    department_id: str
    # Midnight of the appointment day
    appointment_date: datetime
    # HH:MM:SS on a 10 minute boundary
    appointment_time: str
    status: AppointmentStatus = AppointmentStatus.PENDING
    reason: Optional[str] = None
    rejection_reason: Optional[str] = None
    # Mirrors status in SLOT_HOLDING_STATUSES; keys the partial unique index
    slot_held: bool = True

    class Settings:
        name = "appointments"
        use_state_management = True
        indexes = [
            "patient_id",
            IndexModel(
                [
                    ("doctor_id", pymongo.ASCENDING),
                    ("appointment_date", pymongo.ASCENDING),
                    ("appointment_time", pymongo.ASCENDING),
                ],
                unique=True,
                partialFilterExpression={"slot_held": True},
                name="doctor_slot_unique",
            ),
        ]

    class Config:
        json_schema_extra = {
            "example": {
                "patient_id": "665f1c2e9b1e8a0012345678",
                "doctor_id": "665f1c2e9b1e8a0012345679",
                "hospital_id": "665f1c2e9b1e8a001234567a",
                "department_id": "665f1c2e9b1e8a001234567b",
                "appointment_date": "2024-06-01T00:00:00",
                "appointment_time": "09:00:00",
                "status": "pending",
                "reason": "Recurring chest pain",
            }
        }

    def hold_slot(self) -> None:
        self.slot_held = self.status in SLOT_HOLDING_STATUSES
