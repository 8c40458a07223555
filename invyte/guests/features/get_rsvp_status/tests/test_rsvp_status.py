from uuid import UUID, uuid4

import pytest

from invyte.auth.dependencies import get_current_identity
from invyte.conftest import identity_of
from invyte.guests.dtos import GiftOption, InviteStatus, RSVPStatus, RSVPStatusDTO, SubmittedGuestDTO
from invyte.guests.features.get_rsvp_status.router import get_guest_read_model
from invyte.guests.features.respond_to_invitation.write_model import SqlRSVPWriteModel
from invyte.guests.features.update_guestlist.write_model import SqlGuestlistWriteModel
from invyte.guests.repository.read_models import GuestReadModel, SqlGuestReadModel
from invyte.guests.urls import RSVP_STATUS_URL
from invyte.wishlist.dtos import WishlistItemInputDTO
from invyte.wishlist.repository.write_models import SqlWishlistWriteModel


class InMemoryGuestReadModel(GuestReadModel):
    """In-memory read model for testing."""

    def __init__(self, statuses: dict[tuple[UUID, str], RSVPStatusDTO] | None = None):
        self._statuses = statuses or {}

    async def get_roster(self, event_id: UUID):
        return []

    async def get_rsvp_status(self, event_id: UUID, user_id: UUID, phone_number: str):
        return self._statuses.get((event_id, phone_number))


@pytest.mark.asyncio
async def test_get_rsvp_status_endpoint(client_factory, guest_user):
    event_id = uuid4()
    read_model = InMemoryGuestReadModel(
        {
            (event_id, guest_user.phone_number): RSVPStatusDTO(
                event_id=event_id,
                rsvp_status=RSVPStatus.MAYBE,
                invite_status=InviteStatus.INVITED,
                gift_option=GiftOption.GIFT_CARD,
            )
        }
    )
    overrides = {
        get_guest_read_model: lambda: read_model,
        get_current_identity: lambda: identity_of(guest_user),
    }

    async with client_factory(overrides) as client:
        response = await client.get(RSVP_STATUS_URL.format(event_id=event_id))
        missing = await client.get(RSVP_STATUS_URL.format(event_id=uuid4()))

    assert response.status_code == 200
    data = response.json()
    assert data["rsvp_status"] == "maybe"
    assert data["gift_option"] == "gift card"
    assert data["gift_claims"] == []

    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_rsvp_status_lists_claims_for_gift(host, guest_user, event):
    await SqlGuestlistWriteModel().reconcile(
        event.uuid, [SubmittedGuestDTO(name="Ravi", phone_number=guest_user.phone_number)]
    )
    w1, w2 = await SqlWishlistWriteModel().add_items_to_event(
        event.uuid,
        host.uuid,
        [WishlistItemInputDTO(name="Pressure cooker"), WishlistItemInputDTO(name="Bedsheet set")],
    )
    await SqlRSVPWriteModel().respond(
        event.uuid,
        guest_user.uuid,
        guest_user.phone_number,
        "yes",
        gift_option="gift",
        wishlist_item_ids=[w1.id, w2.id],
    )

    status = await SqlGuestReadModel().get_rsvp_status(event.uuid, guest_user.uuid, guest_user.phone_number)

    assert status.rsvp_status == RSVPStatus.YES
    assert status.invite_status == InviteStatus.JOINED
    assert status.wishlist_id == w1.id
    assert {item.id for item in status.gift_claims} == {w1.id, w2.id}


@pytest.mark.asyncio
async def test_rsvp_status_hides_claims_for_other_options(guest_user, event):
    await SqlGuestlistWriteModel().reconcile(
        event.uuid, [SubmittedGuestDTO(name="Ravi", phone_number=guest_user.phone_number)]
    )
    await SqlRSVPWriteModel().respond(
        event.uuid, guest_user.uuid, guest_user.phone_number, "no", gift_option="BYOG"
    )

    status = await SqlGuestReadModel().get_rsvp_status(event.uuid, guest_user.uuid, guest_user.phone_number)

    assert status.gift_option == GiftOption.BYOG
    assert status.gift_claims == []
    assert await SqlGuestReadModel().get_rsvp_status(event.uuid, guest_user.uuid, "9990000000") is None
