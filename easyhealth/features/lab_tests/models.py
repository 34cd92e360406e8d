# Lab Tests Feature - Models

from datetime import datetime
from enum import Enum
from typing import Optional
from beanie import Document, Indexed
from pydantic import Field
from easyhealth.shared.models import TimestampMixin, utcnow


class LabRequestStatus(str, Enum):
    """Lab request states, in workflow order."""
    AWAITING_PAYMENT = "awaiting_payment"
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


LAB_REQUEST_FLOW = list(LabRequestStatus)


class ResultStatus(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    INCONCLUSIVE = "inconclusive"


class LabTestTemplate(Document, TimestampMixin):
    """Catalog entry for an orderable lab test."""

    name: Indexed(str, unique=True)
    description: Optional[str] = None
    price: float = Field(default=0, ge=0)
    category: Optional[str] = None

    class Settings:
        name = "lab_test_templates"
        use_state_management = True

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Complete Blood Count",
                "category": "Hematology",
                "price": 5000,
            }
        }


class LabTestRequest(Document, TimestampMixin):
    """A lab test ordered during a consultation."""

    consultation_id: str
    # Copied from the consultation
    patient_id: str
    doctor_id: str
    lab_test_template_id: str
    hospital_id: Optional[str] = None
    status: LabRequestStatus = LabRequestStatus.AWAITING_PAYMENT
    total_price: float = Field(default=0, ge=0)

    class Settings:
        name = "lab_test_requests"
        use_state_management = True
        indexes = ["consultation_id", "patient_id", "doctor_id", "hospital_id"]


class LabTestResult(Document, TimestampMixin):
    """Outcome of a lab request; at most one per request."""

    lab_test_request_id: Indexed(str, unique=True)
    technician_id: str
    result_status: ResultStatus
    result_data: str
    notes: Optional[str] = None
    completed_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "lab_test_results"
        use_state_management = True
