"""Write model for the host's guest list.

Hosts always submit the whole list; the stored roster is diffed against it.
Guests are never deleted: a guest dropped from the list is marked removed so
their RSVP history survives, and comes back as invited when re-submitted.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from invyte.config.database import async_session_manager
from invyte.config.settings import settings
from invyte.errors import NotFoundError, PermissionDeniedError, ValidationError
from invyte.events.repository.orm_models import Event
from invyte.guests.dtos import GuestDTO, InviteStatus, RSVPStatus, SubmittedGuestDTO
from invyte.guests.repository.orm_models import Guest
from invyte.guests.repository.read_models import fetch_roster
from invyte.models.base import utcnow
from invyte.models.user import User
from invyte.notifications import EventInviteNotification, NotificationOutbox

logger = logging.getLogger(__name__)

DEFAULT_INVITER_NAME = "Your host"


def validate_guestlist(guests: list[SubmittedGuestDTO]) -> dict[str, str]:
    """Check every entry and return ``{phone_number: name}``.

    A phone number listed twice keeps the name of its last entry.

    Raises:
        ValidationError: if any entry has a blank name or phone number.
    """
    validated: dict[str, str] = {}
    for index, guest in enumerate(guests):
        name = (guest.name or "").strip()
        phone_number = (guest.phone_number or "").strip()
        if not name or not phone_number:
            raise ValidationError(
                f"Guest #{index + 1}: both name and phone_number are required"
            )
        validated[phone_number] = name
    return validated


def invite_link(event: Event) -> str:
    return f"{settings.frontend_url}/invite/{event.invite_link}"


def event_invitation(event: Event, host: User | None, phone_number: str) -> EventInviteNotification:
    return EventInviteNotification(
        phone_number=phone_number,
        inviter_name=(host.name if host and host.name else DEFAULT_INVITER_NAME),
        event_name=event.title,
        link=invite_link(event),
    )


class GuestlistWriteModel(ABC):
    @abstractmethod
    def set_session_overwrite(self, session: AsyncSession | None) -> None:
        raise NotImplementedError

    @abstractmethod
    async def reconcile(
        self,
        event_id: UUID,
        guests: list[SubmittedGuestDTO],
        host_id: UUID | None = None,
    ) -> list[GuestDTO]:
        """Make the event's roster match the submitted guest list.

        Args:
            event_id: The event whose roster is replaced
            guests: The complete list; an empty list removes every guest
            host_id: When given, the caller must host the event

        Returns:
            The full roster, removed guests included, in creation order
        """
        raise NotImplementedError

    @abstractmethod
    async def add_guests(self, event_id: UUID, guests: list[SubmittedGuestDTO]) -> list[GuestDTO]:
        """Add every submitted guest as a new invitee of a freshly created event."""
        raise NotImplementedError


class SqlGuestlistWriteModel(GuestlistWriteModel):
    """Write operations for event rosters. Returns DTOs, never ORM models."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        outbox: NotificationOutbox | None = None,
    ):
        self._session_overwrite = session_overwrite
        self._outbox = outbox

    def set_session_overwrite(self, session: AsyncSession | None) -> None:
        self._session_overwrite = session

    async def _get_event(self, session, event_id: UUID, host_id: UUID | None) -> Event:
        event = await session.get(Event, event_id)
        if event is None:
            raise NotFoundError("Event not found")
        if host_id is not None and event.host_id != host_id:
            raise PermissionDeniedError("Only the host can change the guest list")
        return event

    def _queue_invitations(self, event: Event, host: User | None, phone_numbers: list[str]) -> None:
        if self._outbox is None:
            return
        for phone_number in phone_numbers:
            self._outbox.add(event_invitation(event, host, phone_number))

    def _new_guest(self, event_id: UUID, phone_number: str, name: str) -> Guest:
        return Guest(
            event_id=event_id,
            phone_number=phone_number,
            guest_name=name,
            invite_status=InviteStatus.INVITED,
            rsvp_status=RSVPStatus.PENDING,
            invited_at=utcnow(),
        )

    async def reconcile(
        self,
        event_id: UUID,
        guests: list[SubmittedGuestDTO],
        host_id: UUID | None = None,
    ) -> list[GuestDTO]:
        submitted = validate_guestlist(guests)

        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            event = await self._get_event(session, event_id, host_id)
            roster = await fetch_roster(session, event_id)
            current = {guest.phone_number: guest for guest in roster}

            to_invite = []

            for phone_number, guest in current.items():
                if phone_number not in submitted:
                    # rsvp_status is kept, only membership changes
                    if guest.invite_status != InviteStatus.REMOVED:
                        guest.invite_status = InviteStatus.REMOVED
                    continue

                guest.guest_name = submitted[phone_number]
                if guest.invite_status == InviteStatus.REMOVED:
                    guest.invite_status = InviteStatus.INVITED
                    guest.invited_at = utcnow()
                    to_invite.append(phone_number)

            for phone_number, name in submitted.items():
                if phone_number in current:
                    continue
                session.add(self._new_guest(event_id, phone_number, name))
                # the roster is ordered by created_at, so guests are inserted one at a time
                await session.flush()
                to_invite.append(phone_number)

            await session.flush()

            logger.info(
                "Reconciled guest list of event %s: %d submitted, %d known, %d to invite",
                event_id,
                len(submitted),
                len(current),
                len(to_invite),
            )

            host = await session.get(User, event.host_id)
            self._queue_invitations(event, host, to_invite)

            return [GuestDTO.from_guest(guest) for guest in await fetch_roster(session, event_id)]

    async def add_guests(self, event_id: UUID, guests: list[SubmittedGuestDTO]) -> list[GuestDTO]:
        submitted = validate_guestlist(guests)

        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            event = await self._get_event(session, event_id, host_id=None)

            created = []
            for phone_number, name in submitted.items():
                guest = self._new_guest(event_id, phone_number, name)
                session.add(guest)
                await session.flush()
                created.append(guest)

            host = await session.get(User, event.host_id)
            self._queue_invitations(event, host, list(submitted))

            return [GuestDTO.from_guest(guest) for guest in created]
