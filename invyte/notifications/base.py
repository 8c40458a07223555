from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class NotificationResult:
    success: bool
    log_id: str | None = None
    message: str = ""


class NotificationSenderBase(ABC):
    @abstractmethod
    async def send_event_invite(
        self,
        phone_number: str,
        inviter_name: str,
        event_name: str,
        link: str,
    ) -> NotificationResult:
        pass

    @abstractmethod
    async def send_rsvp_notification(
        self,
        phone_number: str,
        guest_name: str,
        rsvp_status: str,
        event_name: str,
    ) -> NotificationResult:
        pass
