from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field

from invyte.guests.dtos import GiftOption, GuestDTO, InviteStatus, RSVPStatus, SubmittedGuestDTO


class GuestSubmit(BaseModel):
    """One entry of a guest list. ``guest_id`` is accepted as another name for the phone number."""

    name: str
    phone_number: str = Field(validation_alias=AliasChoices("phone_number", "guest_id"))

    def to_dto(self) -> SubmittedGuestDTO:
        return SubmittedGuestDTO(name=self.name, phone_number=self.phone_number)


class GuestResponse(BaseModel):
    id: UUID
    event_id: UUID
    name: str
    phone_number: str
    invite_status: InviteStatus
    rsvp_status: RSVPStatus
    gift_option: GiftOption | None = None
    wishlist_id: UUID | None = None
    invited_at: datetime | None = None
    responded_at: datetime | None = None

    @classmethod
    def from_dto(cls, guest: GuestDTO) -> "GuestResponse":
        return cls(
            id=guest.id,
            event_id=guest.event_id,
            name=guest.name,
            phone_number=guest.phone_number,
            invite_status=guest.invite_status,
            rsvp_status=guest.rsvp_status,
            gift_option=guest.gift_option,
            wishlist_id=guest.wishlist_id,
            invited_at=guest.invited_at,
            responded_at=guest.responded_at,
        )
