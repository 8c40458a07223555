from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends
from pydantic import BaseModel

from invyte.auth.dependencies import CurrentIdentity, get_current_identity
from invyte.errors import InvyteError, to_http_exception
from invyte.guests.dtos import GiftOption
from invyte.guests.features.respond_to_invitation.write_model import (
    RSVPWriteModel,
    SqlRSVPWriteModel,
)
from invyte.guests.schemas import GuestResponse
from invyte.guests.urls import RESPOND_URL
from invyte.notifications import NotificationOutbox, get_notification_outbox
from invyte.wishlist.repository.write_models import SqlWishlistWriteModel
from invyte.wishlist.schemas import WishlistItemResponse

router = APIRouter()


class RSVPSubmit(BaseModel):
    rsvp_status: str
    gift_option: str | None = None
    # A single id or a list of ids
    wishlist_item_id: UUID | list[UUID] | None = None

    def item_ids(self) -> list[UUID]:
        if self.wishlist_item_id is None:
            return []
        if isinstance(self.wishlist_item_id, list):
            return self.wishlist_item_id
        return [self.wishlist_item_id]


class ClaimResultResponse(BaseModel):
    item_id: UUID
    success: bool
    item: WishlistItemResponse | None = None
    error: str | None = None


class RSVPResponse(BaseModel):
    message: str
    guest: GuestResponse
    gift_option: GiftOption | None = None
    claims: list[ClaimResultResponse] = []
    partial: bool = False


def get_rsvp_write_model(
    outbox: NotificationOutbox = Depends(get_notification_outbox),
) -> RSVPWriteModel:
    """Dependency to get RSVP write model instance."""
    return SqlRSVPWriteModel(
        wishlist_write_model=SqlWishlistWriteModel(),
        outbox=outbox,
    )


@router.post(RESPOND_URL, response_model=RSVPResponse)
async def respond_to_invitation(
    event_id: UUID,
    rsvp_data: RSVPSubmit,
    background_tasks: BackgroundTasks,
    identity: CurrentIdentity = Depends(get_current_identity),
    outbox: NotificationOutbox = Depends(get_notification_outbox),
    write_model: RSVPWriteModel = Depends(get_rsvp_write_model),
) -> RSVPResponse:
    """
    Accept, decline or answer maybe to an invitation.
    With gift_option "gift" the requested wishlist items are claimed one by
    one; items that could not be claimed are reported per item and do not
    fail the request.
    """
    try:
        result = await write_model.respond(
            event_id=event_id,
            user_id=identity.user_id,
            phone_number=identity.phone_number,
            rsvp_status=rsvp_data.rsvp_status,
            gift_option=rsvp_data.gift_option,
            wishlist_item_ids=rsvp_data.item_ids(),
        )
    except InvyteError as e:
        raise to_http_exception(e)

    background_tasks.add_task(outbox.drain)

    claims = []
    for outcome in result.claims:
        if outcome.success:
            claims.append(
                ClaimResultResponse(
                    item_id=outcome.item_id,
                    success=True,
                    item=WishlistItemResponse.from_dto(outcome.record.item),
                )
            )
        else:
            claims.append(
                ClaimResultResponse(item_id=outcome.item_id, success=False, error=outcome.reason)
            )

    return RSVPResponse(
        message=result.message,
        guest=GuestResponse.from_dto(result.guest),
        gift_option=result.gift_option,
        claims=claims,
        partial=result.partial,
    )
