import abc
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from invyte.config.database import async_session_manager
from invyte.guests.dtos import GiftOption, GuestDTO, InviteStatus, RSVPStatus, RSVPStatusDTO
from invyte.guests.repository.orm_models import Guest
from invyte.wishlist.repository.read_models import SqlWishlistReadModel


async def fetch_roster(session, event_id: UUID) -> list[Guest]:
    """Every guest of an event, removed ones included, in creation order."""
    result = await session.execute(
        select(Guest).where(Guest.event_id == event_id).order_by(Guest.created_at.asc())
    )
    return list(result.scalars().all())


async def fetch_guest(session, event_id: UUID, phone_number: str) -> Guest | None:
    result = await session.execute(
        select(Guest).where(Guest.event_id == event_id).where(Guest.phone_number == phone_number)
    )
    return result.scalar_one_or_none()


class GuestReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_roster(self, event_id: UUID) -> list[GuestDTO]:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_rsvp_status(
        self, event_id: UUID, user_id: UUID, phone_number: str
    ) -> RSVPStatusDTO | None:
        """
        Get the RSVP state of the guest with this phone number.
        Returns None when the phone number is not on the event's roster.
        """
        raise NotImplementedError


class SqlGuestReadModel(GuestReadModel):
    """SQL implementation of guest read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None):
        self._session_overwrite = session_overwrite

    async def get_roster(self, event_id: UUID) -> list[GuestDTO]:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            return [GuestDTO.from_guest(guest) for guest in await fetch_roster(session, event_id)]

    async def get_rsvp_status(
        self, event_id: UUID, user_id: UUID, phone_number: str
    ) -> RSVPStatusDTO | None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            guest = await fetch_guest(session, event_id, phone_number)
            if not guest:
                return None

            gift_option = GiftOption(guest.gift_option) if guest.gift_option else None

            # Claimed items are only listed for guests bringing a wishlist gift
            gift_claims = []
            if gift_option == GiftOption.GIFT:
                wishlist_read_model = SqlWishlistReadModel(session_overwrite=session)
                gift_claims = await wishlist_read_model.get_claims_for_user(event_id, user_id)

            return RSVPStatusDTO(
                event_id=event_id,
                rsvp_status=RSVPStatus(guest.rsvp_status),
                invite_status=InviteStatus(guest.invite_status),
                responded_at=guest.responded_at,
                gift_option=gift_option,
                wishlist_id=guest.wishlist_id,
                gift_claims=gift_claims,
            )
