# Notifications Feature - Router

from fastapi import APIRouter, Depends, status
from typing import List
from easyhealth.core.access import Caller
from easyhealth.features.auth.dependencies import get_caller
from easyhealth.features.notifications.schemas import NotificationCreate, NotificationResponse
from easyhealth.features.notifications.service import NotificationService
from easyhealth.shared.schemas import CountResponse, MessageResponse


router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(caller: Caller = Depends(get_caller)):
    """Get the caller's 50 newest notifications."""
    notifications = await NotificationService.list_notifications(caller)
    return [NotificationResponse.from_document(n) for n in notifications]


@router.get("/unread/count", response_model=CountResponse)
async def get_unread_count(caller: Caller = Depends(get_caller)):
    """Number of unread notifications of the caller."""
    return CountResponse(count=await NotificationService.unread_count(caller))


@router.put("/read/all", response_model=MessageResponse)
async def mark_all_as_read(caller: Caller = Depends(get_caller)):
    """Mark every notification of the caller as read."""
    await NotificationService.mark_all_read(caller)
    return MessageResponse(message="All notifications marked as read")


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_as_read(notification_id: str, caller: Caller = Depends(get_caller)):
    """Mark one of the caller's notifications as read."""
    notification = await NotificationService.mark_read(notification_id, caller)
    return NotificationResponse.from_document(notification)


@router.post("", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
async def create_notification(request: NotificationCreate, caller: Caller = Depends(get_caller)):
    """
    Create a notification.

    - **user_id**: Recipient; defaults to the caller. Only admins may address others.
    - **title** / **message**: Content
    - **type**: Free-form category (appointment, lab_test, ...)
    """
    notification = await NotificationService.create_notification(request, caller)
    return NotificationResponse.from_document(notification)
