from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from invyte.events.dtos import EventDetailDTO, EventStatus
from invyte.guests.schemas import GuestResponse
from invyte.wishlist.schemas import WishlistItemResponse


class EventResponse(BaseModel):
    id: UUID
    host_id: UUID
    host_name: str | None = None
    title: str
    description: str | None = None
    event_date: datetime | None = None
    venue: str | None = None
    theme: str | None = None
    status: EventStatus
    invite_link: str
    created_at: datetime | None = None
    guestlist: list[GuestResponse] = []
    wishlist_items: list[WishlistItemResponse] = []

    @classmethod
    def from_dto(cls, event: EventDetailDTO) -> "EventResponse":
        return cls(
            id=event.id,
            host_id=event.host_id,
            host_name=event.host_name,
            title=event.title,
            description=event.description,
            event_date=event.event_date,
            venue=event.venue,
            theme=event.theme,
            status=event.status,
            invite_link=event.invite_link,
            created_at=event.created_at,
            guestlist=[GuestResponse.from_dto(guest) for guest in event.guestlist],
            wishlist_items=[WishlistItemResponse.from_dto(item) for item in event.wishlist_items],
        )
