# Notifications Feature - Service

from typing import List, Optional
from easyhealth.core.access import Caller
from easyhealth.core.logging import logger
from easyhealth.features.auth.models import Profile
from easyhealth.features.notifications.models import Notification
from easyhealth.features.notifications.schemas import NotificationCreate
from easyhealth.shared.exceptions import ForbiddenException
from easyhealth.shared.lookups import get_or_404
from easyhealth.shared.models import utcnow


INBOX_LIMIT = 50


class NotificationService:
    """Service class for the notification inbox."""

    @staticmethod
    async def notify(
        user_id: str,
        title: str,
        message: str,
        type: str = "general",
        reference_id: Optional[str] = None,
        session=None,
    ) -> Notification:
        """Write one inbox row."""
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            reference_id=reference_id,
        )
        await notification.insert(session=session)
        logger.info(f"Notification {notification.id} ({type}) for profile {user_id}")
        return notification

    @staticmethod
    async def create_notification(request: NotificationCreate, caller: Caller) -> Notification:
        """Create a notification for the caller; admins may address any profile."""
        user_id = request.user_id or caller.id
        if user_id != caller.id:
            if not caller.is_admin:
                raise ForbiddenException("You can only create notifications for yourself")
            await get_or_404(Profile, user_id, "User")

        return await NotificationService.notify(
            user_id=user_id,
            title=request.title,
            message=request.message,
            type=request.type,
            reference_id=request.reference_id,
        )

    @staticmethod
    async def list_notifications(caller: Caller) -> List[Notification]:
        """The caller's newest notifications."""
        return await Notification.find(Notification.user_id == caller.id) \
            .sort(-Notification.created_at) \
            .limit(INBOX_LIMIT) \
            .to_list()

    @staticmethod
    async def unread_count(caller: Caller) -> int:
        return await Notification.find(
            Notification.user_id == caller.id,
            Notification.is_read == False,
        ).count()

    @staticmethod
    async def mark_read(notification_id: str, caller: Caller) -> Notification:
        notification = await get_or_404(Notification, notification_id, "Notification")
        if notification.user_id != caller.id:
            raise ForbiddenException("Access denied")

        notification.is_read = True
        notification.touch()
        await notification.save()
        return notification

    @staticmethod
    async def mark_all_read(caller: Caller) -> None:
        await Notification.find(
            Notification.user_id == caller.id,
            Notification.is_read == False,
        ).update({"$set": {"is_read": True, "updated_at": utcnow()}})
        logger.info(f"Marked all notifications read for {caller.id}")
