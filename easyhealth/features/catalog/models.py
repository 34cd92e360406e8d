# Reference Catalogs Feature - Models

from typing import Optional
import pymongo
from beanie import Document, Indexed
from pydantic import Field
from pymongo import IndexModel
from easyhealth.shared.models import TimestampMixin


class Insurance(Document, TimestampMixin):
    """Insurance plan; coverage applies to every payment of its holders."""

    name: str
    coverage_percentage: float = Field(default=0, ge=0, le=100)
    description: Optional[str] = None

    class Settings:
        name = "insurances"
        use_state_management = True

    class Config:
        json_schema_extra = {
            "example": {
                "name": "RSSB",
                "coverage_percentage": 85,
                "description": "Public health insurance",
            }
        }


class Hospital(Document, TimestampMixin):
    """Hospital document model."""

    name: str
    location: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    consultation_fee: float = Field(default=0, ge=0)
    # Profile of the hospital's lab technician
    lab_user_id: Optional[str] = None

    class Settings:
        name = "hospitals"
        use_state_management = True
        indexes = ["lab_user_id"]

    class Config:
        json_schema_extra = {
            "example": {
                "name": "King Faisal Hospital",
                "location": "Kigali",
                "phone": "+250788123456",
                "email": "info@kfh.rw",
                "consultation_fee": 10000,
            }
        }


class Department(Document, TimestampMixin):
    """Clinical department (Cardiology, Pediatrics, ...)."""

    name: str
    description: Optional[str] = None

    class Settings:
        name = "departments"
        use_state_management = True


class HospitalDepartment(Document, TimestampMixin):
    """Fee of one department at one hospital."""

    hospital_id: str
    department_id: str
    consultation_fee: float = Field(default=0, ge=0)

    class Settings:
        name = "hospital_departments"
        use_state_management = True
        indexes = [
            IndexModel(
                [("hospital_id", pymongo.ASCENDING), ("department_id", pymongo.ASCENDING)],
                unique=True,
                name="hospital_department_unique",
            ),
        ]


class Medication(Document, TimestampMixin):
    """Medication catalog entry."""

    name: Indexed(str, unique=True)
    description: Optional[str] = None
    category: Optional[str] = None
    unit_price: float = Field(default=0, ge=0)
    stock_quantity: int = Field(default=0, ge=0)
    requires_prescription: bool = True

    class Settings:
        name = "medications"
        use_state_management = True

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Amoxicillin 500mg",
                "category": "Antibiotic",
                "unit_price": 500,
                "stock_quantity": 200,
                "requires_prescription": True,
            }
        }


class Pharmacy(Document, TimestampMixin):
    """Pharmacy document model."""

    name: str
    location: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    pharmacist_id: Optional[str] = None

    class Settings:
        name = "pharmacies"
        use_state_management = True
        indexes = ["pharmacist_id"]
