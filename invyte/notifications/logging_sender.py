import logging

from invyte.notifications.base import NotificationResult, NotificationSenderBase

logger = logging.getLogger(__name__)


class LoggingNotificationSender(NotificationSenderBase):
    """Development sender used when no SMS provider is configured."""

    async def send_event_invite(
        self,
        phone_number: str,
        inviter_name: str,
        event_name: str,
        link: str,
    ) -> NotificationResult:
        logger.info(
            "Invite to %s: %s has invited you to %s (%s)",
            phone_number,
            inviter_name,
            event_name,
            link,
        )
        return NotificationResult(success=True, message="Invitation logged")

    async def send_rsvp_notification(
        self,
        phone_number: str,
        guest_name: str,
        rsvp_status: str,
        event_name: str,
    ) -> NotificationResult:
        logger.info(
            "RSVP notification to %s: %s answered %r for %s",
            phone_number,
            guest_name,
            rsvp_status,
            event_name,
        )
        return NotificationResult(success=True, message="RSVP notification logged")
