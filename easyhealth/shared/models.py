from datetime import datetime, timezone

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    """Naive UTC now; MongoDB hands datetimes back without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampMixin(BaseModel):
    """created_at / updated_at for every stored record."""

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def touch(self) -> None:
        self.updated_at = utcnow()
