import abc
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from invyte.config.database import async_session_manager
from invyte.wishlist.dtos import PersonalWishlistItemDTO, WishlistItemDTO
from invyte.wishlist.repository.orm_models import WishlistItem


async def fetch_event_items(session, event_id: UUID) -> list[WishlistItem]:
    """All wishlist items of an event, in creation order."""
    result = await session.execute(
        select(WishlistItem)
        .where(WishlistItem.event_id == event_id)
        .order_by(WishlistItem.created_at.asc())
    )
    return list(result.scalars().all())


class WishlistReadModel(abc.ABC):
    @abc.abstractmethod
    async def list_for_event(self, event_id: UUID) -> list[WishlistItemDTO]:
        """Items of an event's wishlist in creation order, each with its claimed flag."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_personal_wishlist(self, user_id: UUID) -> list[PersonalWishlistItemDTO]:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_claims_for_user(self, event_id: UUID, user_id: UUID) -> list[WishlistItemDTO]:
        """Items of the event currently claimed by the user, newest claim first."""
        raise NotImplementedError


class SqlWishlistReadModel(WishlistReadModel):
    """SQL implementation of wishlist read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None):
        self._session_overwrite = session_overwrite

    async def list_for_event(self, event_id: UUID) -> list[WishlistItemDTO]:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            items = await fetch_event_items(session, event_id)
            return [WishlistItemDTO.from_item(item) for item in items]

    async def get_personal_wishlist(self, user_id: UUID) -> list[PersonalWishlistItemDTO]:
        """
        Get the user's personal wishlist, unclaimed items first, newest first within each group.
        A personal item counts as claimed once a same-named copy in one of the
        user's events has been claimed.
        """
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(
                select(WishlistItem)
                .where(WishlistItem.host_id == user_id)
                .where(WishlistItem.event_id.is_(None))
                .order_by(WishlistItem.created_at.desc())
            )
            personal_items = result.scalars().all()

            claimed_result = await session.execute(
                select(WishlistItem)
                .where(WishlistItem.host_id == user_id)
                .where(WishlistItem.event_id.is_not(None))
                .where(WishlistItem.is_claimed.is_(True))
                .order_by(WishlistItem.claimed_at.desc())
            )
            claimed_by_name: dict[str, list[UUID]] = {}
            for shared in claimed_result.scalars().all():
                claimed_by_name.setdefault(shared.gift_name.lower(), []).append(shared.event_id)

            wishlist = []
            for item in personal_items:
                event_ids = claimed_by_name.get(item.gift_name.lower(), [])
                wishlist.append(
                    PersonalWishlistItemDTO(
                        item=WishlistItemDTO.from_item(item),
                        claimed_count=len(event_ids),
                        claimed_in_events=event_ids,
                    )
                )

            # sorted() is stable, so the newest-first order holds within each group
            return sorted(wishlist, key=lambda entry: entry.is_claimed)

    async def get_claims_for_user(self, event_id: UUID, user_id: UUID) -> list[WishlistItemDTO]:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(
                select(WishlistItem)
                .where(WishlistItem.event_id == event_id)
                .where(WishlistItem.claimed_by == user_id)
                .where(WishlistItem.is_claimed.is_(True))
                .order_by(WishlistItem.claimed_at.desc())
            )
            return [WishlistItemDTO.from_item(item) for item in result.scalars().all()]
