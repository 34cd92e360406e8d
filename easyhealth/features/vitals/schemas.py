from pydantic import BaseModel, Field
from typing import Optional
from easyhealth.shared.schemas import DocumentId, DocumentResponse, ProfileSummary


class VitalCreate(BaseModel):
    patient_id: DocumentId
    blood_pressure: Optional[str] = Field(None, max_length=20)
    heart_rate: Optional[float] = Field(None, ge=0, le=400)
    temperature: Optional[float] = Field(None, ge=20, le=50)
    weight: Optional[float] = Field(None, ge=0, le=700)
    height: Optional[float] = Field(None, ge=0, le=300)
    notes: Optional[str] = Field(None, max_length=2000)


class VitalResponse(DocumentResponse):
    patient_id: str
    nurse_id: str
    blood_pressure: Optional[str] = None
    heart_rate: Optional[float] = None
    temperature: Optional[float] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    notes: Optional[str] = None
    patient: Optional[ProfileSummary] = None
    nurse: Optional[ProfileSummary] = None
