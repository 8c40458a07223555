from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from invyte.wishlist.dtos import ClaimStatus, PersonalWishlistItemDTO, WishlistItemDTO, WishlistItemInputDTO


class WishlistItemSubmit(BaseModel):
    """A gift as submitted by a host."""

    name: str = Field(min_length=1)
    url: str | None = None
    image_url: str | None = None

    def to_dto(self) -> WishlistItemInputDTO:
        return WishlistItemInputDTO(name=self.name, url=self.url, image_url=self.image_url)


class WishlistItemResponse(BaseModel):
    id: UUID
    name: str
    event_id: UUID | None = None
    url: str | None = None
    image_url: str | None = None
    is_claimed: bool
    claim_status: ClaimStatus
    claimed_by: UUID | None = None
    claimed_at: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def from_dto(cls, item: WishlistItemDTO) -> "WishlistItemResponse":
        return cls(
            id=item.id,
            name=item.name,
            event_id=item.event_id,
            url=item.url,
            image_url=item.image_url,
            is_claimed=item.is_claimed,
            claim_status=item.claim_status,
            claimed_by=item.claimed_by,
            claimed_at=item.claimed_at,
            created_at=item.created_at,
        )


class PersonalWishlistItemResponse(WishlistItemResponse):
    claimed_count: int = 0
    claimed_in_events: list[UUID] = []

    @classmethod
    def from_personal_dto(cls, entry: PersonalWishlistItemDTO) -> "PersonalWishlistItemResponse":
        base = WishlistItemResponse.from_dto(entry.item).model_dump()
        base["is_claimed"] = entry.is_claimed
        return cls(
            **base,
            claimed_count=entry.claimed_count,
            claimed_in_events=entry.claimed_in_events,
        )
