from pydantic import BaseModel, Field
from typing import Optional
from easyhealth.shared.schemas import DocumentId, DocumentResponse


class NotificationCreate(BaseModel):
    """Create a notification. Defaults to the caller's own inbox."""

    user_id: Optional[DocumentId] = None
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=2000)
    type: str = Field("general", max_length=50)
    reference_id: Optional[DocumentId] = None


class NotificationResponse(DocumentResponse):
    user_id: str
    title: str
    message: str
    type: str
    reference_id: Optional[str] = None
    is_read: bool
