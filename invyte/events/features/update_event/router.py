from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends
from pydantic import BaseModel

from invyte.auth.dependencies import CurrentIdentity, get_current_identity
from invyte.errors import InvyteError, to_http_exception
from invyte.events.dtos import CLEARABLE_EVENT_FIELDS, EventStatus, EventUpdateDTO
from invyte.events.features.update_event.write_model import (
    EventUpdateWriteModel,
    SqlEventUpdateWriteModel,
)
from invyte.events.schemas import EventResponse
from invyte.events.urls import EVENT_URL
from invyte.guests.features.update_guestlist.write_model import SqlGuestlistWriteModel
from invyte.guests.schemas import GuestSubmit
from invyte.notifications import NotificationOutbox, get_notification_outbox
from invyte.wishlist.schemas import WishlistItemSubmit

router = APIRouter()


class EventUpdateSubmit(BaseModel):
    """Fields left out stay unchanged. An explicit null empties description,
    event_date, venue or theme. An empty guestlist removes every guest.
    """

    title: str | None = None
    description: str | None = None
    event_date: datetime | None = None
    venue: str | None = None
    theme: str | None = None
    status: EventStatus | None = None
    guestlist: list[GuestSubmit] | None = None
    wishlist_items: list[WishlistItemSubmit] | None = None


def get_event_update_write_model(
    outbox: NotificationOutbox = Depends(get_notification_outbox),
) -> EventUpdateWriteModel:
    """Dependency to get event update write model instance."""
    return SqlEventUpdateWriteModel(guestlist_write_model=SqlGuestlistWriteModel(outbox=outbox))


@router.put(EVENT_URL, response_model=EventResponse)
async def update_event(
    event_id: UUID,
    request: EventUpdateSubmit,
    background_tasks: BackgroundTasks,
    identity: CurrentIdentity = Depends(get_current_identity),
    outbox: NotificationOutbox = Depends(get_notification_outbox),
    write_model: EventUpdateWriteModel = Depends(get_event_update_write_model),
) -> EventResponse:
    """
    Update an event. Only the host may do this.
    """
    guestlist = None
    if request.guestlist is not None:
        guestlist = [guest.to_dto() for guest in request.guestlist]

    wishlist_items = None
    if request.wishlist_items is not None:
        wishlist_items = [item.to_dto() for item in request.wishlist_items]

    cleared_fields = frozenset(
        name
        for name in CLEARABLE_EVENT_FIELDS
        if name in request.model_fields_set and getattr(request, name) is None
    )

    try:
        event = await write_model.update_event(
            event_id=event_id,
            host_id=identity.user_id,
            update=EventUpdateDTO(
                title=request.title,
                description=request.description,
                event_date=request.event_date,
                venue=request.venue,
                theme=request.theme,
                status=request.status,
                guestlist=guestlist,
                wishlist_items=wishlist_items,
                cleared_fields=cleared_fields,
            ),
        )
    except InvyteError as e:
        raise to_http_exception(e)

    background_tasks.add_task(outbox.drain)
    return EventResponse.from_dto(event)
