from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from invyte.events.repository.orm_models import Event
    from invyte.guests.dtos import GuestDTO, SubmittedGuestDTO
    from invyte.wishlist.dtos import WishlistItemDTO, WishlistItemInputDTO


class EventStatus(str, Enum):
    DRAFT = "draft"
    LIVE = "live"


# Optional event fields a host may set back to empty
CLEARABLE_EVENT_FIELDS = frozenset({"description", "event_date", "venue", "theme"})


@dataclass(frozen=True)
class EventCreateDTO:
    """DTO for creating an event, optionally with its first guest list and wishlist."""

    title: str
    description: str | None = None
    event_date: datetime | None = None
    venue: str | None = None
    theme: str | None = None
    guestlist: list["SubmittedGuestDTO"] = field(default_factory=list)
    wishlist_items: list["WishlistItemInputDTO"] = field(default_factory=list)


@dataclass(frozen=True)
class EventUpdateDTO:
    """DTO for updating an event.

    ``None`` means "leave unchanged". To empty one of the optional fields, name it
    in ``cleared_fields``. For ``guestlist`` and ``wishlist_items`` an empty list
    is not the same as ``None``: it clears the roster (soft-removing every guest)
    or the unclaimed wishlist items.
    """

    title: str | None = None
    description: str | None = None
    event_date: datetime | None = None
    venue: str | None = None
    theme: str | None = None
    status: EventStatus | None = None
    guestlist: list["SubmittedGuestDTO"] | None = None
    wishlist_items: list["WishlistItemInputDTO"] | None = None
    cleared_fields: frozenset[str] = frozenset()


@dataclass(frozen=True)
class EventDetailDTO:
    """Aggregate view of an event: the event row, host name, roster and wishlist."""

    id: UUID
    host_id: UUID
    title: str
    status: EventStatus
    invite_link: str
    host_name: str | None = None
    description: str | None = None
    event_date: datetime | None = None
    venue: str | None = None
    theme: str | None = None
    created_at: datetime | None = None
    guestlist: list["GuestDTO"] = field(default_factory=list)
    wishlist_items: list["WishlistItemDTO"] = field(default_factory=list)

    @classmethod
    def from_event(
        cls,
        event: "Event",
        host_name: str | None,
        guestlist: list["GuestDTO"],
        wishlist_items: list["WishlistItemDTO"],
    ) -> "EventDetailDTO":
        """Create EventDetailDTO from Event ORM model and its related rows."""
        return cls(
            id=event.uuid,
            host_id=event.host_id,
            title=event.title,
            status=EventStatus(event.status),
            invite_link=event.invite_link,
            host_name=host_name,
            description=event.description,
            event_date=event.event_date,
            venue=event.venue,
            theme=event.theme,
            created_at=event.created_at,
            guestlist=guestlist,
            wishlist_items=wishlist_items,
        )


@dataclass(frozen=True)
class UserEventsDTO:
    """Events a user hosts and events they are invited to."""

    hosting: list[EventDetailDTO] = field(default_factory=list)
    invited: list[EventDetailDTO] = field(default_factory=list)
