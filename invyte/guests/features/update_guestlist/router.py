from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends
from pydantic import BaseModel

from invyte.auth.dependencies import CurrentIdentity, get_current_identity
from invyte.errors import InvyteError, to_http_exception
from invyte.guests.features.update_guestlist.write_model import (
    GuestlistWriteModel,
    SqlGuestlistWriteModel,
)
from invyte.guests.schemas import GuestResponse, GuestSubmit
from invyte.guests.urls import UPDATE_GUESTLIST_URL
from invyte.notifications import NotificationOutbox, get_notification_outbox

router = APIRouter()


class GuestlistSubmit(BaseModel):
    guestlist: list[GuestSubmit]


class GuestlistResponse(BaseModel):
    message: str
    guestlist: list[GuestResponse]


def get_guestlist_write_model(
    outbox: NotificationOutbox = Depends(get_notification_outbox),
) -> GuestlistWriteModel:
    """Dependency to get guest list write model instance."""
    return SqlGuestlistWriteModel(outbox=outbox)


@router.put(UPDATE_GUESTLIST_URL, response_model=GuestlistResponse)
async def update_guestlist(
    event_id: UUID,
    request: GuestlistSubmit,
    background_tasks: BackgroundTasks,
    identity: CurrentIdentity = Depends(get_current_identity),
    outbox: NotificationOutbox = Depends(get_notification_outbox),
    write_model: GuestlistWriteModel = Depends(get_guestlist_write_model),
) -> GuestlistResponse:
    """
    Replace the guest list of an event.
    Guests missing from the list are marked removed, never deleted, and keep
    their RSVP. New and returning guests are invited by SMS.
    """
    try:
        roster = await write_model.reconcile(
            event_id=event_id,
            guests=[guest.to_dto() for guest in request.guestlist],
            host_id=identity.user_id,
        )
    except InvyteError as e:
        raise to_http_exception(e)

    background_tasks.add_task(outbox.drain)

    return GuestlistResponse(
        message="Guest list updated",
        guestlist=[GuestResponse.from_dto(guest) for guest in roster],
    )
