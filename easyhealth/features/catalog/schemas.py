from pydantic import BaseModel, Field
from typing import Optional
from easyhealth.shared.schemas import DocumentId, DocumentResponse, ProfileSummary


# ============== Insurance ==============

class InsuranceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    coverage_percentage: float = Field(0, ge=0, le=100)
    description: Optional[str] = None


class InsuranceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    coverage_percentage: Optional[float] = Field(None, ge=0, le=100)
    description: Optional[str] = None


class InsuranceResponse(DocumentResponse):
    name: str
    coverage_percentage: float
    description: Optional[str] = None


# ============== Hospital ==============

class HospitalCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    location: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    consultation_fee: float = Field(0, ge=0)
    lab_user_id: Optional[DocumentId] = None


class HospitalUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    location: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    consultation_fee: Optional[float] = Field(None, ge=0)
    lab_user_id: Optional[DocumentId] = None


class HospitalResponse(DocumentResponse):
    name: str
    location: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    consultation_fee: float = 0
    lab_user_id: Optional[str] = None


class HospitalSummary(BaseModel):
    id: str
    name: str
    location: Optional[str] = None


# ============== Department ==============

class DepartmentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None


class DepartmentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None


class DepartmentResponse(DocumentResponse):
    name: str
    description: Optional[str] = None


class DepartmentSummary(BaseModel):
    id: str
    name: str


# ============== Hospital departments ==============

class HospitalDepartmentCreate(BaseModel):
    hospital_id: DocumentId
    department_id: DocumentId
    consultation_fee: float = Field(0, ge=0)


class HospitalDepartmentUpdate(BaseModel):
    consultation_fee: Optional[float] = Field(None, ge=0)


class HospitalDepartmentResponse(DocumentResponse):
    hospital_id: str
    department_id: str
    consultation_fee: float
    hospital: Optional[HospitalSummary] = None
    department: Optional[DepartmentSummary] = None


# ============== Medication ==============

class MedicationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = None
    unit_price: float = Field(0, ge=0)
    stock_quantity: int = Field(0, ge=0)
    requires_prescription: bool = True


class MedicationUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = None
    unit_price: Optional[float] = Field(None, ge=0)
    stock_quantity: Optional[int] = Field(None, ge=0)
    requires_prescription: Optional[bool] = None


class MedicationResponse(DocumentResponse):
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    unit_price: float
    stock_quantity: int
    requires_prescription: bool


# ============== Pharmacy ==============

class PharmacyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    location: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    pharmacist_id: Optional[DocumentId] = None


class PharmacyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    location: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    pharmacist_id: Optional[DocumentId] = None


class PharmacyResponse(DocumentResponse):
    name: str
    location: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    pharmacist_id: Optional[str] = None
    pharmacist: Optional[ProfileSummary] = None


class PharmacySummary(BaseModel):
    id: str
    name: str
    location: Optional[str] = None
    phone: Optional[str] = None
