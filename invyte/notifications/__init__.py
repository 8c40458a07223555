from invyte.config.settings import settings
from invyte.notifications.authkey_service import AuthKeySMSService
from invyte.notifications.base import NotificationResult, NotificationSenderBase
from invyte.notifications.logging_sender import LoggingNotificationSender
from invyte.notifications.outbox import (
    EventInviteNotification,
    NotificationOutbox,
    RSVPNotification,
)


def get_notification_sender() -> NotificationSenderBase:
    if settings.authkey_api_key:
        return AuthKeySMSService(config=settings)
    return LoggingNotificationSender()


def get_notification_outbox() -> NotificationOutbox:
    """Dependency: one outbox per request, drained after the response is sent."""
    return NotificationOutbox(sender=get_notification_sender())


__all__ = [
    "EventInviteNotification",
    "NotificationOutbox",
    "NotificationResult",
    "NotificationSenderBase",
    "RSVPNotification",
    "get_notification_outbox",
    "get_notification_sender",
]
