"""Wishlist write models - the only code that mutates claim state.

Claims follow a last-writer-wins policy: ``claim`` overwrites whatever
claimant an item already has. Callers that need to know which of several
claims worked call ``claim`` once per item and handle ``NotFoundError`` per
item.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from invyte.config.database import async_session_manager
from invyte.errors import NotFoundError, PermissionDeniedError, ValidationError
from invyte.events.repository.orm_models import Event
from invyte.models.base import utcnow
from invyte.wishlist.dtos import (
    ClaimRecordDTO,
    ClaimStatus,
    WishlistItemDTO,
    WishlistItemInputDTO,
    normalize_item_name,
)
from invyte.wishlist.repository.orm_models import WishlistItem
from invyte.wishlist.repository.read_models import fetch_event_items

logger = logging.getLogger(__name__)


class WishlistWriteModel(ABC):
    @abstractmethod
    def set_session_overwrite(self, session: AsyncSession | None) -> None:
        """Run the following operations on the given session instead of opening one."""
        raise NotImplementedError

    @abstractmethod
    async def claim(self, user_id: UUID, event_id: UUID, item_id: UUID) -> ClaimRecordDTO:
        """Claim an event's wishlist item for a user, overwriting any previous claimant.

        Raises:
            NotFoundError: if the item does not belong to the event.
        """
        raise NotImplementedError

    @abstractmethod
    async def release(self, item_id: UUID) -> WishlistItemDTO:
        """Clear an item's claimant. Releasing an unclaimed item is a no-op that succeeds.

        Raises:
            NotFoundError: if no item has this id.
        """
        raise NotImplementedError

    @abstractmethod
    async def add_items_to_event(
        self, event_id: UUID, host_id: UUID, items: list[WishlistItemInputDTO]
    ) -> list[WishlistItemDTO]:
        raise NotImplementedError

    @abstractmethod
    async def replace_event_wishlist(
        self, event_id: UUID, host_id: UUID, items: list[WishlistItemInputDTO]
    ) -> list[WishlistItemDTO]:
        raise NotImplementedError

    @abstractmethod
    async def add_personal_items(
        self, user_id: UUID, items: list[WishlistItemInputDTO]
    ) -> list[WishlistItemDTO]:
        raise NotImplementedError

    @abstractmethod
    async def update_personal_item(
        self,
        user_id: UUID,
        item_id: UUID,
        name: str | None = None,
        url: str | None = None,
        image_url: str | None = None,
    ) -> WishlistItemDTO:
        raise NotImplementedError

    @abstractmethod
    async def delete_personal_item(self, user_id: UUID, item_id: UUID) -> None:
        raise NotImplementedError

    @abstractmethod
    async def share_personal_items_to_event(
        self, user_id: UUID, event_id: UUID, item_ids: list[UUID]
    ) -> list[WishlistItemDTO]:
        raise NotImplementedError


class SqlWishlistWriteModel(WishlistWriteModel):
    """Write operations for wishlist items. Returns DTOs, never ORM models."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None):
        self._session_overwrite = session_overwrite

    def set_session_overwrite(self, session: AsyncSession | None) -> None:
        """Run on a caller's session, so claims commit or roll back with it."""
        self._session_overwrite = session

    async def _get_item(self, session, item_id: UUID) -> WishlistItem | None:
        result = await session.execute(select(WishlistItem).where(WishlistItem.uuid == item_id))
        return result.scalar_one_or_none()

    async def _get_event_item(self, session, event_id: UUID, item_id: UUID) -> WishlistItem | None:
        result = await session.execute(
            select(WishlistItem)
            .where(WishlistItem.uuid == item_id)
            .where(WishlistItem.event_id == event_id)
        )
        return result.scalar_one_or_none()

    async def _get_personal_item(self, session, user_id: UUID, item_id: UUID) -> WishlistItem | None:
        result = await session.execute(
            select(WishlistItem)
            .where(WishlistItem.uuid == item_id)
            .where(WishlistItem.host_id == user_id)
            .where(WishlistItem.event_id.is_(None))
        )
        return result.scalar_one_or_none()

    def _new_item(
        self, host_id: UUID, event_id: UUID | None, name: str, url: str | None, image_url: str | None
    ) -> WishlistItem:
        return WishlistItem(
            host_id=host_id,
            event_id=event_id,
            gift_name=name,
            gift_url=url or None,
            gift_image_url=image_url or None,
            is_claimed=False,
            claimed_by=None,
            claim_status=ClaimStatus.PENDING,
        )

    async def claim(self, user_id: UUID, event_id: UUID, item_id: UUID) -> ClaimRecordDTO:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            item = await self._get_event_item(session, event_id, item_id)
            if item is None:
                raise NotFoundError(f"Wishlist item {item_id} not found for this event")

            if item.claimed_by is not None and item.claimed_by != user_id:
                logger.info(
                    "Wishlist item %s already claimed by %s, now claimed by %s",
                    item_id,
                    item.claimed_by,
                    user_id,
                )

            item.claimed_by = user_id
            item.is_claimed = True
            item.claim_status = ClaimStatus.PENDING
            item.claimed_at = utcnow()
            await session.flush()

            return ClaimRecordDTO(
                item=WishlistItemDTO.from_item(item),
                claim_status=ClaimStatus(item.claim_status),
                claimed_at=item.claimed_at,
            )

    async def release(self, item_id: UUID) -> WishlistItemDTO:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            item = await self._get_item(session, item_id)
            if item is None:
                raise NotFoundError(f"Wishlist item {item_id} not found")

            item.claimed_by = None
            item.is_claimed = False
            item.claim_status = ClaimStatus.PENDING
            item.released_at = utcnow()
            await session.flush()

            return WishlistItemDTO.from_item(item)

    async def _require_hosted_event(self, session, event_id: UUID, user_id: UUID) -> Event:
        event = await session.get(Event, event_id)
        if event is None:
            raise NotFoundError("Event not found")
        if event.host_id != user_id:
            raise PermissionDeniedError("Only the host can add items to this event's wishlist")
        return event

    async def _create_items(
        self, host_id: UUID, event_id: UUID | None, items: list[WishlistItemInputDTO]
    ) -> list[WishlistItemDTO]:
        """Store new items. Items with a blank name are skipped."""
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            if event_id is not None:
                await self._require_hosted_event(session, event_id, host_id)
            created = []
            for entry in items:
                name = (entry.name or "").strip()
                if not name:
                    continue
                item = self._new_item(host_id, event_id, name, entry.url, entry.image_url)
                session.add(item)
                await session.flush()
                created.append(item)
            return [WishlistItemDTO.from_item(item) for item in created]

    async def add_items_to_event(
        self, event_id: UUID, host_id: UUID, items: list[WishlistItemInputDTO]
    ) -> list[WishlistItemDTO]:
        return await self._create_items(host_id, event_id, items)

    async def replace_event_wishlist(
        self, event_id: UUID, host_id: UUID, items: list[WishlistItemInputDTO]
    ) -> list[WishlistItemDTO]:
        """Make the event's wishlist match ``items``, matching names case-insensitively.

        Items missing from the submission are deleted unless they are claimed:
        a claimed item stays until its claimant releases it.
        """
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(
                select(WishlistItem).where(WishlistItem.event_id == event_id)
            )
            current_items = result.scalars().all()
            current_names = {normalize_item_name(item.gift_name) for item in current_items}
            submitted_names = {normalize_item_name(entry.name) for entry in items}
            submitted_names.discard("")

            for item in current_items:
                if normalize_item_name(item.gift_name) in submitted_names:
                    continue
                if item.is_claimed:
                    logger.info("Keeping claimed wishlist item %s dropped by the host", item.uuid)
                    continue
                await session.delete(item)

            for entry in items:
                name = (entry.name or "").strip()
                key = normalize_item_name(name)
                if not key or key in current_names:
                    continue
                session.add(self._new_item(host_id, event_id, name, entry.url, entry.image_url))
                await session.flush()
                current_names.add(key)

            await session.flush()
            return [WishlistItemDTO.from_item(item) for item in await fetch_event_items(session, event_id)]

    async def add_personal_items(
        self, user_id: UUID, items: list[WishlistItemInputDTO]
    ) -> list[WishlistItemDTO]:
        """Add items to the user's personal wishlist, without any duplicate check."""
        return await self._create_items(user_id, None, items)

    async def update_personal_item(
        self,
        user_id: UUID,
        item_id: UUID,
        name: str | None = None,
        url: str | None = None,
        image_url: str | None = None,
    ) -> WishlistItemDTO:
        """Update a personal item. ``None`` leaves a field as is; an empty url clears it."""
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            item = await self._get_personal_item(session, user_id, item_id)
            if item is None:
                raise NotFoundError("Wishlist item not found")

            if name is not None:
                if not name.strip():
                    raise ValidationError("Item name cannot be blank")
                item.gift_name = name.strip()
            if url is not None:
                item.gift_url = url or None
            if image_url is not None:
                item.gift_image_url = image_url or None
            await session.flush()

            return WishlistItemDTO.from_item(item)

    async def delete_personal_item(self, user_id: UUID, item_id: UUID) -> None:
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            item = await self._get_personal_item(session, user_id, item_id)
            if item is None:
                raise NotFoundError("Wishlist item not found")
            await session.delete(item)
            await session.flush()

    async def share_personal_items_to_event(
        self, user_id: UUID, event_id: UUID, item_ids: list[UUID]
    ) -> list[WishlistItemDTO]:
        """Copy personal items into an event's wishlist.

        Each personal item becomes a new event-scoped item; the original stays on
        the personal wishlist. If the event already has an item with the same
        name (case-insensitive) that item is returned instead of a duplicate.
        Ids that are not on the user's personal wishlist are skipped.
        """
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            event = await self._require_hosted_event(session, event_id, user_id)

            # Matched with normalize_item_name, like replace_event_wishlist; SQL lower() is ASCII-only on SQLite
            event_items = {}
            for item in await fetch_event_items(session, event_id):
                event_items.setdefault(normalize_item_name(item.gift_name), item)

            shared = []
            for item_id in item_ids:
                personal_item = await self._get_personal_item(session, user_id, item_id)
                if personal_item is None:
                    logger.debug("Skipping %s: not on the personal wishlist of %s", item_id, user_id)
                    continue

                existing = event_items.get(normalize_item_name(personal_item.gift_name))
                if existing is not None:
                    shared.append(existing)
                    continue

                copy = self._new_item(
                    event.host_id,
                    event_id,
                    personal_item.gift_name,
                    personal_item.gift_url,
                    personal_item.gift_image_url,
                )
                session.add(copy)
                await session.flush()
                event_items[normalize_item_name(copy.gift_name)] = copy
                shared.append(copy)

            return [WishlistItemDTO.from_item(item) for item in shared]
