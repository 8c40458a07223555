from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from invyte.auth.dependencies import CurrentIdentity, get_current_identity
from invyte.errors import NotFoundError, ValidationError
from invyte.guests.dtos import (
    ClaimFailed,
    ClaimSucceeded,
    GiftOption,
    GuestDTO,
    InviteStatus,
    RSVPResultDTO,
    RSVPStatus,
)
from invyte.guests.features.respond_to_invitation.router import get_rsvp_write_model
from invyte.guests.features.respond_to_invitation.write_model import (
    RSVPWriteModel,
    canonical_gift_option,
    canonical_rsvp_status,
)
from invyte.guests.urls import RESPOND_URL
from invyte.wishlist.dtos import ClaimRecordDTO, ClaimStatus, WishlistItemDTO

IDENTITY = CurrentIdentity(user_id=uuid4(), phone_number="9990001111", name="Ravi")


class InMemoryRSVPWriteModel(RSVPWriteModel):
    """In-memory write model for testing. Claims succeed for the known item ids only."""

    def __init__(self, event_id: UUID, claimable: list[UUID] | None = None):
        self._event_id = event_id
        self._claimable = set(claimable or [])
        self.calls: list[dict] = []

    async def respond(
        self,
        event_id: UUID,
        user_id: UUID,
        phone_number: str,
        rsvp_status: str,
        gift_option: str | None = None,
        wishlist_item_ids: list[UUID] | None = None,
    ) -> RSVPResultDTO:
        self.calls.append(
            {
                "event_id": event_id,
                "user_id": user_id,
                "phone_number": phone_number,
                "rsvp_status": rsvp_status,
                "gift_option": gift_option,
                "wishlist_item_ids": wishlist_item_ids,
            }
        )
        if event_id != self._event_id:
            raise NotFoundError("You are not on the guest list of this event")

        status = canonical_rsvp_status(rsvp_status)
        option = canonical_gift_option(gift_option)
        if option == GiftOption.GIFT and not wishlist_item_ids:
            raise ValidationError("Choosing a gift requires at least one wishlist item")

        now = datetime.now(UTC)
        claims = []
        for item_id in wishlist_item_ids or []:
            if item_id in self._claimable:
                item = WishlistItemDTO(
                    id=item_id,
                    host_id=uuid4(),
                    name="Pressure cooker",
                    event_id=event_id,
                    is_claimed=True,
                    claimed_by=user_id,
                    claimed_at=now,
                )
                claims.append(
                    ClaimSucceeded(
                        item_id=item_id,
                        record=ClaimRecordDTO(item=item, claim_status=ClaimStatus.PENDING, claimed_at=now),
                    )
                )
            else:
                claims.append(ClaimFailed(item_id=item_id, reason="Wishlist item not found for this event"))

        pointer = next((claim.item_id for claim in claims if claim.success), None)
        guest = GuestDTO(
            id=uuid4(),
            event_id=event_id,
            phone_number=phone_number,
            name="Ravi",
            invite_status=InviteStatus.JOINED if status == RSVPStatus.YES else InviteStatus.INVITED,
            rsvp_status=status,
            gift_option=option,
            wishlist_id=pointer,
            responded_at=now,
        )
        return RSVPResultDTO(guest=guest, gift_option=option, claims=claims)


@pytest.mark.asyncio
async def test_respond_with_single_item_id(client_factory):
    event_id, item_id = uuid4(), uuid4()
    write_model = InMemoryRSVPWriteModel(event_id, claimable=[item_id])
    overrides = {
        get_rsvp_write_model: lambda: write_model,
        get_current_identity: lambda: IDENTITY,
    }

    async with client_factory(overrides) as client:
        response = await client.post(
            RESPOND_URL.format(event_id=event_id),
            json={"rsvp_status": "Yes", "gift_option": "gift", "wishlist_item_id": str(item_id)},
        )

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Invitation accepted"
    assert data["guest"]["rsvp_status"] == "yes"
    assert data["guest"]["invite_status"] == "joined"
    assert data["guest"]["wishlist_id"] == str(item_id)
    assert data["gift_option"] == "gift"
    assert data["partial"] is False
    assert data["claims"][0]["success"] is True
    assert data["claims"][0]["item"]["is_claimed"] is True

    assert write_model.calls[0]["wishlist_item_ids"] == [item_id]
    assert write_model.calls[0]["user_id"] == IDENTITY.user_id
    assert write_model.calls[0]["phone_number"] == IDENTITY.phone_number


@pytest.mark.asyncio
async def test_respond_reports_partial_claims(client_factory):
    event_id, claimable, foreign = uuid4(), uuid4(), uuid4()
    write_model = InMemoryRSVPWriteModel(event_id, claimable=[claimable])
    overrides = {
        get_rsvp_write_model: lambda: write_model,
        get_current_identity: lambda: IDENTITY,
    }

    async with client_factory(overrides) as client:
        response = await client.post(
            RESPOND_URL.format(event_id=event_id),
            json={
                "rsvp_status": "yes",
                "gift_option": "gift",
                "wishlist_item_id": [str(claimable), str(foreign)],
            },
        )

    assert response.status_code == 200
    data = response.json()
    assert data["partial"] is True
    assert [claim["success"] for claim in data["claims"]] == [True, False]
    assert data["claims"][1]["item_id"] == str(foreign)
    assert data["claims"][1]["error"] == "Wishlist item not found for this event"
    assert data["claims"][1]["item"] is None


@pytest.mark.asyncio
async def test_respond_without_gift(client_factory):
    event_id = uuid4()
    write_model = InMemoryRSVPWriteModel(event_id)
    overrides = {
        get_rsvp_write_model: lambda: write_model,
        get_current_identity: lambda: IDENTITY,
    }

    async with client_factory(overrides) as client:
        response = await client.post(RESPOND_URL.format(event_id=event_id), json={"rsvp_status": "maybe"})

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Invitation marked as maybe"
    assert data["gift_option"] is None
    assert data["claims"] == []
    assert write_model.calls[0]["wishlist_item_ids"] == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"rsvp_status": "attending"},
        {"rsvp_status": "yes", "gift_option": "flowers"},
        {"rsvp_status": "yes", "gift_option": "gift"},
    ],
)
async def test_respond_rejects_invalid_input(client_factory, payload):
    event_id = uuid4()
    overrides = {
        get_rsvp_write_model: lambda: InMemoryRSVPWriteModel(event_id),
        get_current_identity: lambda: IDENTITY,
    }

    async with client_factory(overrides) as client:
        response = await client.post(RESPOND_URL.format(event_id=event_id), json=payload)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_respond_to_unknown_event(client_factory):
    overrides = {
        get_rsvp_write_model: lambda: InMemoryRSVPWriteModel(uuid4()),
        get_current_identity: lambda: IDENTITY,
    }

    async with client_factory(overrides) as client:
        response = await client.post(RESPOND_URL.format(event_id=uuid4()), json={"rsvp_status": "yes"})

    assert response.status_code == 404
    assert response.json()["detail"] == "You are not on the guest list of this event"
