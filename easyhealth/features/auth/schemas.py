from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
from easyhealth.core.access import Role
from easyhealth.shared.schemas import DocumentId


def normalize_email(value: str) -> str:
    return value.strip().lower()


# Request Schemas
class RegisterRequest(BaseModel):
    """Registration request schema."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)
    full_name: str = Field(..., min_length=1, max_length=200)
    role: Role
    phone: Optional[str] = Field(None, max_length=30)
    national_id: Optional[str] = Field(None, max_length=50)
    insurance_id: Optional[DocumentId] = None

    @field_validator('email', mode='before')
    @classmethod
    def clean_email(cls, v):
        if isinstance(v, str):
            return normalize_email(v)
        return v

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Full name is required')
        return v.strip()


class LoginRequest(BaseModel):
    """Login request schema."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UpdateProfileRequest(BaseModel):
    """Profile update schema. Email and password are not changed here."""

    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = Field(None, max_length=30)
    national_id: Optional[str] = Field(None, max_length=50)
    insurance_id: Optional[DocumentId] = None
    role: Optional[Role] = None


# Response Schemas
class InsuranceInfo(BaseModel):
    """Expanded insurance reference."""

    id: str
    name: str
    coverage_percentage: float
    description: Optional[str] = None


class ProfileResponse(BaseModel):
    """Profile response schema, never carrying the password hash."""

    id: str
    email: str
    full_name: str
    role: Role
    phone: Optional[str] = None
    national_id: Optional[str] = None
    insurance_id: Optional[str] = None
    insurance: Optional[InsuranceInfo] = None
    created_at: datetime
    updated_at: datetime


class AuthResponse(BaseModel):
    """Register/login response schema."""

    user: ProfileResponse
    token: str
    token_type: str = "bearer"
