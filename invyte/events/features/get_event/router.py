from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from invyte.auth.dependencies import CurrentIdentity, get_current_identity
from invyte.events.repository.read_models import EventReadModel, SqlEventReadModel
from invyte.events.schemas import EventResponse
from invyte.events.urls import EVENT_URL, EVENTS_URL

router = APIRouter()


class UserEventsResponse(BaseModel):
    hosting: list[EventResponse]
    invited: list[EventResponse]


def get_event_read_model() -> EventReadModel:
    """Dependency to get event read model instance."""
    return SqlEventReadModel()


@router.get(EVENTS_URL, response_model=UserEventsResponse)
async def list_events(
    identity: CurrentIdentity = Depends(get_current_identity),
    read_model: EventReadModel = Depends(get_event_read_model),
) -> UserEventsResponse:
    """
    List the events the caller hosts and the events they are invited to.
    """
    events = await read_model.list_events_for_user(identity.user_id, identity.phone_number)
    return UserEventsResponse(
        hosting=[EventResponse.from_dto(event) for event in events.hosting],
        invited=[EventResponse.from_dto(event) for event in events.invited],
    )


@router.get(EVENT_URL, response_model=EventResponse)
async def get_event(
    event_id: UUID,
    identity: CurrentIdentity = Depends(get_current_identity),
    read_model: EventReadModel = Depends(get_event_read_model),
) -> EventResponse:
    """
    Get an event with its guest list and wishlist.
    """
    event = await read_model.get_event(event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return EventResponse.from_dto(event)
