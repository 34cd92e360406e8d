# Notifications Feature - Models

from typing import Optional
import pymongo
from beanie import Document
from pymongo import IndexModel
from easyhealth.shared.models import TimestampMixin


class Notification(Document, TimestampMixin):
    """Inbox row; nothing is pushed or emailed."""

    user_id: str
    title: str
    message: str
    type: str = "general"
    # Entity that triggered the notification
    reference_id: Optional[str] = None
    is_read: bool = False

    class Settings:
        name = "notifications"
        use_state_management = True
        indexes = [
            IndexModel(
                [("user_id", pymongo.ASCENDING), ("is_read", pymongo.ASCENDING)],
                name="user_unread",
            ),
        ]
