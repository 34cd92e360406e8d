from pydantic import BaseModel, Field
from typing import Optional
from easyhealth.features.catalog.schemas import DepartmentSummary, HospitalSummary
from easyhealth.shared.schemas import DocumentId, DocumentResponse, ProfileSummary


# ============== Doctors ==============

class DoctorCreate(BaseModel):
    user_id: DocumentId
    hospital_id: DocumentId
    department_id: DocumentId
    specialization: Optional[str] = None
    license_number: str = Field(..., min_length=1, max_length=100)
    consultation_fee: float = Field(0, ge=0)
    signature_data: Optional[str] = None


class DoctorUpdate(BaseModel):
    hospital_id: Optional[DocumentId] = None
    department_id: Optional[DocumentId] = None
    specialization: Optional[str] = None
    license_number: Optional[str] = Field(None, min_length=1, max_length=100)
    consultation_fee: Optional[float] = Field(None, ge=0)
    signature_data: Optional[str] = None


class DoctorResponse(DocumentResponse):
    user_id: str
    hospital_id: str
    department_id: str
    specialization: Optional[str] = None
    license_number: str
    consultation_fee: float
    signature_data: Optional[str] = None
    user: Optional[ProfileSummary] = None
    hospital: Optional[HospitalSummary] = None
    department: Optional[DepartmentSummary] = None


# ============== Nurses ==============

class NurseCreate(BaseModel):
    user_id: DocumentId
    license_number: str = Field(..., min_length=1, max_length=100)


class NurseUpdate(BaseModel):
    license_number: Optional[str] = Field(None, min_length=1, max_length=100)


class NurseResponse(DocumentResponse):
    user_id: str
    license_number: str
    user: Optional[ProfileSummary] = None
