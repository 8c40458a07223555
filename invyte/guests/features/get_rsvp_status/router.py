from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from invyte.auth.dependencies import CurrentIdentity, get_current_identity
from invyte.guests.dtos import GiftOption, InviteStatus, RSVPStatus
from invyte.guests.repository.read_models import GuestReadModel, SqlGuestReadModel
from invyte.guests.urls import RSVP_STATUS_URL
from invyte.wishlist.schemas import WishlistItemResponse

router = APIRouter()


class RSVPStatusResponse(BaseModel):
    event_id: UUID
    rsvp_status: RSVPStatus
    invite_status: InviteStatus
    responded_at: datetime | None = None
    gift_option: GiftOption | None = None
    wishlist_id: UUID | None = None
    gift_claims: list[WishlistItemResponse] = []


def get_guest_read_model() -> GuestReadModel:
    """Dependency to get guest read model instance."""
    return SqlGuestReadModel()


@router.get(RSVP_STATUS_URL, response_model=RSVPStatusResponse)
async def get_rsvp_status(
    event_id: UUID,
    identity: CurrentIdentity = Depends(get_current_identity),
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> RSVPStatusResponse:
    """
    Get the caller's RSVP for an event.
    Items the caller claimed are listed when their gift option is "gift".
    """
    status = await read_model.get_rsvp_status(
        event_id=event_id,
        user_id=identity.user_id,
        phone_number=identity.phone_number,
    )
    if not status:
        raise HTTPException(status_code=404, detail="You are not on the guest list of this event")

    return RSVPStatusResponse(
        event_id=status.event_id,
        rsvp_status=status.rsvp_status,
        invite_status=status.invite_status,
        responded_at=status.responded_at,
        gift_option=status.gift_option,
        wishlist_id=status.wishlist_id,
        gift_claims=[WishlistItemResponse.from_dto(item) for item in status.gift_claims],
    )
