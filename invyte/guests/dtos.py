from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from invyte.wishlist.dtos import ClaimRecordDTO, WishlistItemDTO

if TYPE_CHECKING:
    from invyte.guests.repository.orm_models import Guest


class InviteStatus(str, Enum):
    INVITED = "invited"
    JOINED = "joined"
    REMOVED = "removed"


class RSVPStatus(str, Enum):
    PENDING = "pending"
    YES = "yes"
    NO = "no"
    MAYBE = "maybe"


class GiftOption(str, Enum):
    BYOG = "BYOG"
    NO_GIFT = "no gift"
    GIFT_CARD = "gift card"
    GIFT = "gift"


@dataclass(frozen=True)
class SubmittedGuestDTO:
    """One entry of a host-submitted guest list."""

    name: str
    phone_number: str


@dataclass(frozen=True)
class GuestDTO:
    """DTO for a guest on an event roster."""

    id: UUID
    event_id: UUID
    phone_number: str
    name: str
    invite_status: InviteStatus
    rsvp_status: RSVPStatus
    gift_option: GiftOption | None = None
    wishlist_id: UUID | None = None
    invited_at: datetime | None = None
    responded_at: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def from_guest(cls, guest: "Guest") -> "GuestDTO":
        """Create GuestDTO from Guest ORM model."""
        return cls(
            id=guest.uuid,
            event_id=guest.event_id,
            phone_number=guest.phone_number,
            name=guest.guest_name,
            invite_status=InviteStatus(guest.invite_status),
            rsvp_status=RSVPStatus(guest.rsvp_status),
            gift_option=GiftOption(guest.gift_option) if guest.gift_option else None,
            wishlist_id=guest.wishlist_id,
            invited_at=guest.invited_at,
            responded_at=guest.responded_at,
            created_at=guest.created_at,
        )


@dataclass(frozen=True)
class ClaimSucceeded:
    """A wishlist item claimed during an RSVP."""

    item_id: UUID
    record: ClaimRecordDTO

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class ClaimFailed:
    """A wishlist item that could not be claimed during an RSVP."""

    item_id: UUID
    reason: str

    @property
    def success(self) -> bool:
        return False


ClaimOutcome = ClaimSucceeded | ClaimFailed


@dataclass(frozen=True)
class RSVPResultDTO:
    """Result of an RSVP: the updated guest and one outcome per requested item, in order."""

    guest: GuestDTO
    gift_option: GiftOption | None = None
    claims: list[ClaimOutcome] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        """True when some, but not all, requested items were claimed."""
        succeeded = [claim for claim in self.claims if claim.success]
        return bool(succeeded) and len(succeeded) < len(self.claims)

    @property
    def message(self) -> str:
        if self.guest.rsvp_status == RSVPStatus.YES:
            return "Invitation accepted"
        if self.guest.rsvp_status == RSVPStatus.NO:
            return "Invitation declined"
        return "Invitation marked as maybe"


@dataclass(frozen=True)
class RSVPStatusDTO:
    """DTO for the RSVP state of the calling guest, with the gifts they hold."""

    event_id: UUID
    rsvp_status: RSVPStatus
    invite_status: InviteStatus
    responded_at: datetime | None = None
    gift_option: GiftOption | None = None
    wishlist_id: UUID | None = None
    gift_claims: list[WishlistItemDTO] = field(default_factory=list)
