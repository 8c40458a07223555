"""Per-request outbox for SMS notifications.

Write models queue messages while they mutate the roster or an RSVP; the
router drains the outbox in a background task once the response is sent.
Delivery problems are logged and never reach the caller: the persisted state
change is authoritative whether or not the SMS goes out.
"""

import logging
from dataclasses import dataclass

from invyte.notifications.base import NotificationResult, NotificationSenderBase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventInviteNotification:
    phone_number: str
    inviter_name: str
    event_name: str
    link: str

    async def deliver(self, sender: NotificationSenderBase) -> NotificationResult:
        return await sender.send_event_invite(
            phone_number=self.phone_number,
            inviter_name=self.inviter_name,
            event_name=self.event_name,
            link=self.link,
        )


@dataclass(frozen=True)
class RSVPNotification:
    phone_number: str
    guest_name: str
    rsvp_status: str
    event_name: str

    async def deliver(self, sender: NotificationSenderBase) -> NotificationResult:
        return await sender.send_rsvp_notification(
            phone_number=self.phone_number,
            guest_name=self.guest_name,
            rsvp_status=self.rsvp_status,
            event_name=self.event_name,
        )


Notification = EventInviteNotification | RSVPNotification


class NotificationOutbox:
    def __init__(self, sender: NotificationSenderBase):
        self._sender = sender
        self._pending: list[Notification] = []

    @property
    def pending(self) -> list[Notification]:
        return list(self._pending)

    def add(self, notification: Notification) -> None:
        self._pending.append(notification)

    async def drain(self) -> list[NotificationResult]:
        pending, self._pending = self._pending, []
        results = []
        for notification in pending:
            try:
                result = await notification.deliver(self._sender)
            except Exception:
                logger.exception("Failed to deliver %s", notification)
                result = NotificationResult(success=False, message="delivery raised")
            else:
                if not result.success:
                    logger.warning("Notification not delivered: %s (%s)", notification, result.message)
            results.append(result)
        return results
