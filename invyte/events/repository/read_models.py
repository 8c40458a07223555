import abc
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from invyte.config.database import async_session_manager
from invyte.events.dtos import EventDetailDTO, UserEventsDTO
from invyte.events.repository.orm_models import Event
from invyte.guests.dtos import GuestDTO, InviteStatus
from invyte.guests.repository.orm_models import Guest
from invyte.guests.repository.read_models import fetch_roster
from invyte.models.user import User
from invyte.wishlist.dtos import WishlistItemDTO
from invyte.wishlist.repository.read_models import fetch_event_items


async def hydrate_event(session, event: Event) -> EventDetailDTO:
    """Combine an event with its host's name, its roster and its wishlist."""
    host = await session.get(User, event.host_id)
    roster = await fetch_roster(session, event.uuid)
    items = await fetch_event_items(session, event.uuid)
    return EventDetailDTO.from_event(
        event,
        host_name=host.name if host else None,
        guestlist=[GuestDTO.from_guest(guest) for guest in roster],
        wishlist_items=[WishlistItemDTO.from_item(item) for item in items],
    )


class EventReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_event(self, event_id: UUID) -> EventDetailDTO | None:
        raise NotImplementedError

    @abc.abstractmethod
    async def list_events_for_user(self, user_id: UUID, phone_number: str) -> UserEventsDTO:
        """
        Get the events a user hosts, newest first, and the events whose roster
        lists their phone number without having removed them.
        """
        raise NotImplementedError


class SqlEventReadModel(EventReadModel):
    """SQL implementation of event read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None):
        self._session_overwrite = session_overwrite

    async def get_event(self, event_id: UUID) -> EventDetailDTO | None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            event = await session.get(Event, event_id)
            if not event:
                return None
            return await hydrate_event(session, event)

    async def list_events_for_user(self, user_id: UUID, phone_number: str) -> UserEventsDTO:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            hosting_result = await session.execute(
                select(Event).where(Event.host_id == user_id).order_by(Event.created_at.desc())
            )
            hosting = [await hydrate_event(session, event) for event in hosting_result.scalars().all()]

            invited_result = await session.execute(
                select(Event)
                .join(Guest, Guest.event_id == Event.uuid)
                .where(Guest.phone_number == phone_number)
                .where(Guest.invite_status != InviteStatus.REMOVED)
                .order_by(Event.created_at.desc())
            )
            invited = [await hydrate_event(session, event) for event in invited_result.scalars().all()]

            return UserEventsDTO(hosting=hosting, invited=invited)
