# Pharmacy Requests Feature - Models

from enum import Enum
from typing import Optional
import pymongo
from beanie import Document
from pymongo import IndexModel
from easyhealth.shared.models import TimestampMixin


class PharmacyRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class PharmacyRequest(Document, TimestampMixin):
    """A prescription sent to a pharmacy; one per (prescription, pharmacy) pair."""

    prescription_id: str
    patient_id: str
    pharmacy_id: str
    status: PharmacyRequestStatus = PharmacyRequestStatus.PENDING
    rejection_reason: Optional[str] = None

    class Settings:
        name = "pharmacy_requests"
        use_state_management = True
        indexes = [
            "patient_id",
            IndexModel(
                [("prescription_id", pymongo.ASCENDING), ("pharmacy_id", pymongo.ASCENDING)],
                unique=True,
                name="prescription_pharmacy_unique",
            ),
        ]
