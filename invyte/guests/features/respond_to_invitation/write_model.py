"""Write model for a guest's response to an invitation.

A guest holds at most one claim through their RSVP: choosing any gift option
other than "gift" releases it, and choosing "gift" with different items
releases the old one before the new items are claimed. Requested items are
claimed one by one; an item that cannot be claimed is reported in the result
and does not undo the claims made before it.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from invyte.config.database import async_session_manager
from invyte.errors import NotFoundError, ValidationError
from invyte.events.repository.orm_models import Event
from invyte.guests.dtos import (
    ClaimFailed,
    ClaimOutcome,
    ClaimSucceeded,
    GiftOption,
    GuestDTO,
    InviteStatus,
    RSVPResultDTO,
    RSVPStatus,
)
from invyte.guests.repository.orm_models import Guest
from invyte.guests.repository.read_models import fetch_guest
from invyte.models.base import utcnow
from invyte.models.user import User
from invyte.notifications import NotificationOutbox, RSVPNotification
from invyte.wishlist.repository.write_models import SqlWishlistWriteModel, WishlistWriteModel

logger = logging.getLogger(__name__)

RESPONSE_STATUSES = (RSVPStatus.YES, RSVPStatus.NO, RSVPStatus.MAYBE)


def canonical_rsvp_status(value: str) -> RSVPStatus:
    """Map a case-insensitive answer to yes, no or maybe."""
    normalized = (value or "").strip().lower()
    for status in RESPONSE_STATUSES:
        if status.value == normalized:
            return status
    raise ValidationError("rsvp_status must be one of: yes, no, maybe")


def canonical_gift_option(value: str | None) -> GiftOption | None:
    """Map a case-insensitive gift option to its stored spelling; ``None`` stays ``None``."""
    if value is None:
        return None
    normalized = value.strip().lower()
    for option in GiftOption:
        if option.value.lower() == normalized:
            return option
    raise ValidationError(
        "gift_option must be one of: " + ", ".join(option.value for option in GiftOption)
    )


class RSVPWriteModel(ABC):
    @abstractmethod
    async def respond(
        self,
        event_id: UUID,
        user_id: UUID,
        phone_number: str,
        rsvp_status: str,
        gift_option: str | None = None,
        wishlist_item_ids: list[UUID] | None = None,
    ) -> RSVPResultDTO:
        """
        Record a guest's answer and apply their gift choice.
        Returns the updated guest and one claim outcome per requested item.
        """
        raise NotImplementedError


class SqlRSVPWriteModel(RSVPWriteModel):
    """Write operations for RSVP. Returns DTOs, never ORM models."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        wishlist_write_model: WishlistWriteModel | None = None,
        outbox: NotificationOutbox | None = None,
    ):
        self._session_overwrite = session_overwrite
        self._wishlist_write_model = wishlist_write_model or SqlWishlistWriteModel()
        self._outbox = outbox

    async def _release(self, guest: Guest) -> None:
        """Release the item the guest's pointer refers to and clear the pointer."""
        try:
            await self._wishlist_write_model.release(guest.wishlist_id)
        except NotFoundError:
            logger.warning(
                "Guest %s pointed at wishlist item %s which no longer exists",
                guest.uuid,
                guest.wishlist_id,
            )
        guest.wishlist_id = None

    async def _claim_all(
        self, event_id: UUID, user_id: UUID, item_ids: list[UUID]
    ) -> list[ClaimOutcome]:
        outcomes: list[ClaimOutcome] = []
        for item_id in item_ids:
            try:
                record = await self._wishlist_write_model.claim(user_id, event_id, item_id)
            except NotFoundError as e:
                outcomes.append(ClaimFailed(item_id=item_id, reason=str(e)))
            else:
                outcomes.append(ClaimSucceeded(item_id=item_id, record=record))
        return outcomes

    async def _apply_gift_option(
        self,
        guest: Guest,
        user_id: UUID,
        gift_option: GiftOption,
        item_ids: list[UUID],
    ) -> list[ClaimOutcome]:
        if gift_option != GiftOption.GIFT:
            if guest.wishlist_id is not None:
                await self._release(guest)
            guest.gift_option = gift_option
            return []

        if guest.wishlist_id is not None and guest.wishlist_id not in item_ids:
            await self._release(guest)

        outcomes = await self._claim_all(guest.event_id, user_id, item_ids)
        claimed = [outcome.item_id for outcome in outcomes if outcome.success]
        guest.wishlist_id = claimed[0] if claimed else None
        guest.gift_option = gift_option

        if claimed and len(claimed) < len(outcomes):
            logger.info(
                "Guest %s claimed %d of %d requested items", guest.uuid, len(claimed), len(outcomes)
            )
        return outcomes

    async def _queue_host_notification(self, session, guest: Guest, status: RSVPStatus) -> None:
        if self._outbox is None:
            return
        event = await session.get(Event, guest.event_id)
        host = await session.get(User, event.host_id) if event else None
        if host is None or not host.phone_number:
            return
        self._outbox.add(
            RSVPNotification(
                phone_number=host.phone_number,
                guest_name=guest.guest_name,
                rsvp_status=status.value,
                event_name=event.title,
            )
        )

    async def respond(
        self,
        event_id: UUID,
        user_id: UUID,
        phone_number: str,
        rsvp_status: str,
        gift_option: str | None = None,
        wishlist_item_ids: list[UUID] | None = None,
    ) -> RSVPResultDTO:
        status = canonical_rsvp_status(rsvp_status)
        option = canonical_gift_option(gift_option)
        item_ids = list(wishlist_item_ids or [])
        if option == GiftOption.GIFT and not item_ids:
            raise ValidationError("Choosing a gift requires at least one wishlist item")

        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            self._wishlist_write_model.set_session_overwrite(session)

            guest = await fetch_guest(session, event_id, phone_number)
            if guest is None:
                raise NotFoundError("You are not on the guest list of this event")

            outcomes = []
            if option is not None:
                outcomes = await self._apply_gift_option(guest, user_id, option, item_ids)

            guest.rsvp_status = status
            if status == RSVPStatus.YES:
                guest.invite_status = InviteStatus.JOINED
            guest.responded_at = utcnow()
            await session.flush()

            await self._queue_host_notification(session, guest, status)

            guest_dto = GuestDTO.from_guest(guest)
            return RSVPResultDTO(
                guest=guest_dto,
                gift_option=guest_dto.gift_option,
                claims=outcomes,
            )
