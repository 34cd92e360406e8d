from beanie import Document, Indexed
from typing import Optional
from easyhealth.core.access import Role
from easyhealth.shared.models import TimestampMixin


class Profile(Document, TimestampMixin):
    """User account document; every caller is a profile with one role."""

    # Stored lower-cased and trimmed
    email: Indexed(str, unique=True)
    password_hash: str
    full_name: str
    role: Role
    phone: Optional[str] = None
    # Unique when set, checked by ProfileService
    national_id: Optional[str] = None
    insurance_id: Optional[str] = None

    class Settings:
        name = "profiles"
        use_state_management = True
        indexes = ["national_id", "role"]

    class Config:
        json_schema_extra = {
            "example": {
                "email": "jane@example.com",
                "full_name": "Jane Doe",
                "role": "patient",
                "phone": "+250788000000",
                "national_id": "1199880012345678",
            }
        }
