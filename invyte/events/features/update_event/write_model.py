"""Write model for updating an event.

Plain fields are replaced as given. A guest list in the update goes through
the roster reconciliation, and a wishlist replaces the event's unclaimed items.
"""

from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from invyte.config.database import async_session_manager
from invyte.errors import NotFoundError, PermissionDeniedError, ValidationError
from invyte.events.dtos import CLEARABLE_EVENT_FIELDS, EventDetailDTO, EventUpdateDTO
from invyte.events.repository.orm_models import Event
from invyte.events.repository.read_models import hydrate_event
from invyte.guests.features.update_guestlist.write_model import (
    GuestlistWriteModel,
    SqlGuestlistWriteModel,
    validate_guestlist,
)
from invyte.wishlist.repository.write_models import SqlWishlistWriteModel, WishlistWriteModel


class EventUpdateWriteModel(ABC):
    @abstractmethod
    async def update_event(
        self, event_id: UUID, host_id: UUID, update: EventUpdateDTO
    ) -> EventDetailDTO:
        raise NotImplementedError


class SqlEventUpdateWriteModel(EventUpdateWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        guestlist_write_model: GuestlistWriteModel | None = None,
        wishlist_write_model: WishlistWriteModel | None = None,
    ):
        self._session_overwrite = session_overwrite
        self._guestlist_write_model = guestlist_write_model or SqlGuestlistWriteModel()
        self._wishlist_write_model = wishlist_write_model or SqlWishlistWriteModel()

    async def update_event(
        self, event_id: UUID, host_id: UUID, update: EventUpdateDTO
    ) -> EventDetailDTO:
        if update.title is not None and not update.title.strip():
            raise ValidationError("Event title cannot be blank")
        unknown = set(update.cleared_fields) - CLEARABLE_EVENT_FIELDS
        if unknown:
            raise ValidationError(f"These fields cannot be cleared: {', '.join(sorted(unknown))}")
        if update.guestlist is not None:
            validate_guestlist(update.guestlist)

        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            self._guestlist_write_model.set_session_overwrite(session)
            self._wishlist_write_model.set_session_overwrite(session)

            event = await session.get(Event, event_id)
            if event is None:
                raise NotFoundError("Event not found")
            if event.host_id != host_id:
                raise PermissionDeniedError("Only the host can update this event")

            if update.title is not None:
                event.title = update.title.strip()
            for field_name in ("description", "event_date", "venue", "theme", "status"):
                value = getattr(update, field_name)
                if value is not None:
                    setattr(event, field_name, value)
            for field_name in update.cleared_fields:
                setattr(event, field_name, None)
            await session.flush()

            # An empty list is applied too: it clears the roster or the wishlist
            if update.guestlist is not None:
                await self._guestlist_write_model.reconcile(event_id, update.guestlist, host_id=host_id)
            if update.wishlist_items is not None:
                await self._wishlist_write_model.replace_event_wishlist(
                    event_id, host_id, update.wishlist_items
                )

            return await hydrate_event(session, event)
