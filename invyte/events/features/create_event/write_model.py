"""Write model for creating an event with its first guest list and wishlist."""

import logging
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from invyte.config.database import async_session_manager
from invyte.errors import ValidationError
from invyte.events.dtos import EventCreateDTO, EventDetailDTO, EventStatus
from invyte.events.repository.orm_models import Event
from invyte.events.repository.read_models import hydrate_event
from invyte.guests.features.update_guestlist.write_model import (
    GuestlistWriteModel,
    SqlGuestlistWriteModel,
    validate_guestlist,
)
from invyte.wishlist.repository.write_models import SqlWishlistWriteModel, WishlistWriteModel

logger = logging.getLogger(__name__)


class EventCreateWriteModel(ABC):
    @abstractmethod
    async def create_event(self, host_id: UUID, event: EventCreateDTO) -> EventDetailDTO:
        """Create an event hosted by ``host_id``.

        Every guest on the initial list is invited; nothing is stored when any
        guest entry is invalid.

        Raises:
            ValidationError: if the title is blank or a guest entry is incomplete.
        """
        raise NotImplementedError


class SqlEventCreateWriteModel(EventCreateWriteModel):
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

    async def create_event(self, host_id: UUID, event: EventCreateDTO) -> EventDetailDTO:
        title = (event.title or "").strip()
        if not title:
            raise ValidationError("Event title is required")
        validate_guestlist(event.guestlist)

        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            self._guestlist_write_model.set_session_overwrite(session)
            self._wishlist_write_model.set_session_overwrite(session)

            new_event = Event(
                host_id=host_id,
                title=title,
                description=event.description,
                event_date=event.event_date,
                venue=event.venue,
                theme=event.theme,
                status=EventStatus.LIVE,
                invite_link=str(uuid4()),
            )
            session.add(new_event)
            await session.flush()

            if event.guestlist:
                await self._guestlist_write_model.add_guests(new_event.uuid, event.guestlist)
            if event.wishlist_items:
                await self._wishlist_write_model.add_items_to_event(
                    new_event.uuid, host_id, event.wishlist_items
                )

            logger.info(
                "Event %s created by %s with %d guests and %d wishlist items",
                new_event.uuid,
                host_id,
                len(event.guestlist),
                len(event.wishlist_items),
            )
            return await hydrate_event(session, new_event)
