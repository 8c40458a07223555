from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from invyte.wishlist.repository.orm_models import WishlistItem


class ClaimStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"


@dataclass(frozen=True)
class WishlistItemInputDTO:
    """A gift submitted by a host, before it is stored."""

    name: str
    url: str | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class WishlistItemDTO:
    """DTO for a stored wishlist item and its claim state."""

    id: UUID
    host_id: UUID
    name: str
    event_id: UUID | None = None
    url: str | None = None
    image_url: str | None = None
    is_claimed: bool = False
    claim_status: ClaimStatus = ClaimStatus.PENDING
    claimed_by: UUID | None = None
    claimed_at: datetime | None = None
    confirmed_at: datetime | None = None
    released_at: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def from_item(cls, item: "WishlistItem") -> "WishlistItemDTO":
        """Create WishlistItemDTO from WishlistItem ORM model."""
        return cls(
            id=item.uuid,
            host_id=item.host_id,
            name=item.gift_name,
            event_id=item.event_id,
            url=item.gift_url,
            image_url=item.gift_image_url,
            is_claimed=bool(item.is_claimed),
            claim_status=ClaimStatus(item.claim_status),
            claimed_by=item.claimed_by,
            claimed_at=item.claimed_at,
            confirmed_at=item.confirmed_at,
            released_at=item.released_at,
            created_at=item.created_at,
        )


@dataclass(frozen=True)
class ClaimRecordDTO:
    """DTO returned by a successful claim."""

    item: WishlistItemDTO
    claim_status: ClaimStatus
    claimed_at: datetime | None = None


@dataclass(frozen=True)
class PersonalWishlistItemDTO:
    """A personal wishlist item, marked claimed when a copy shared into an event is claimed."""

    item: WishlistItemDTO
    claimed_count: int = 0
    claimed_in_events: list[UUID] = field(default_factory=list)

    @property
    def is_claimed(self) -> bool:
        return self.item.is_claimed or self.claimed_count > 0


def normalize_item_name(name: str | None) -> str:
    """Key used to match items by name: trimmed and case-folded."""
    return (name or "").strip().lower()
