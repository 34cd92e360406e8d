from pydantic import AfterValidator, BaseModel
from typing import Annotated, Any, Dict, Optional
from datetime import datetime
from easyhealth.shared.lookups import canonical_id


# Reference to another document, stored in canonical (lower-case) form
DocumentId = Annotated[str, AfterValidator(canonical_id)]


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str


class CountResponse(BaseModel):
    """Count response model."""

    count: int


class DocumentResponse(BaseModel):
    """Base for responses built from a stored document."""

    id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, document, **extra: Any):
        """Build the response from a document plus any expanded references."""
        data: Dict[str, Any] = document.model_dump()
        data["id"] = str(document.id)
        data.update(extra)
        return cls(**data)


class ProfileSummary(BaseModel):
    """Expanded profile reference."""

    id: str
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    national_id: Optional[str] = None
    role: Optional[str] = None


class DoctorSummary(BaseModel):
    """Expanded doctor reference, carrying the doctor's display name."""

    id: str
    user_id: str
    full_name: Optional[str] = None
    specialization: Optional[str] = None
    hospital_id: str
    department_id: str
    license_number: str
    consultation_fee: float = 0
