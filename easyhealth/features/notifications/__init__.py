# Notifications Feature

from easyhealth.features.notifications.models import Notification

__all__ = ["Notification"]
