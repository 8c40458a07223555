from datetime import datetime

from fastapi import APIRouter, BackgroundTasks, Depends, status
from pydantic import BaseModel

from invyte.auth.dependencies import CurrentIdentity, get_current_identity
from invyte.errors import InvyteError, to_http_exception
from invyte.events.dtos import EventCreateDTO
from invyte.events.features.create_event.write_model import (
    EventCreateWriteModel,
    SqlEventCreateWriteModel,
)
from invyte.events.schemas import EventResponse
from invyte.events.urls import EVENTS_URL
from invyte.guests.features.update_guestlist.write_model import SqlGuestlistWriteModel
from invyte.guests.schemas import GuestSubmit
from invyte.notifications import NotificationOutbox, get_notification_outbox
from invyte.wishlist.schemas import WishlistItemSubmit

router = APIRouter()


class EventSubmit(BaseModel):
    title: str
    description: str | None = None
    event_date: datetime | None = None
    venue: str | None = None
    theme: str | None = None
    guestlist: list[GuestSubmit] = []
    wishlist_items: list[WishlistItemSubmit] = []


def get_event_create_write_model(
    outbox: NotificationOutbox = Depends(get_notification_outbox),
) -> EventCreateWriteModel:
    """Dependency to get event create write model instance."""
    return SqlEventCreateWriteModel(guestlist_write_model=SqlGuestlistWriteModel(outbox=outbox))


@router.post(EVENTS_URL, response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    request: EventSubmit,
    background_tasks: BackgroundTasks,
    identity: CurrentIdentity = Depends(get_current_identity),
    outbox: NotificationOutbox = Depends(get_notification_outbox),
    write_model: EventCreateWriteModel = Depends(get_event_create_write_model),
) -> EventResponse:
    """
    Create an event hosted by the caller.
    Guests on the initial guest list are invited by SMS.
    """
    try:
        event = await write_model.create_event(
            host_id=identity.user_id,
            event=EventCreateDTO(
                title=request.title,
                description=request.description,
                event_date=request.event_date,
                venue=request.venue,
                theme=request.theme,
                guestlist=[guest.to_dto() for guest in request.guestlist],
                wishlist_items=[item.to_dto() for item in request.wishlist_items],
            ),
        )
    except InvyteError as e:
        raise to_http_exception(e)

    background_tasks.add_task(outbox.drain)
    return EventResponse.from_dto(event)
