from uuid import uuid4

import pytest

from invyte.auth.dependencies import get_current_identity
from invyte.conftest import create_event, create_user, identity_of
from invyte.events.dtos import EventStatus
from invyte.events.repository.read_models import SqlEventReadModel
from invyte.events.urls import EVENT_URL, EVENTS_URL
from invyte.guests.dtos import InviteStatus, SubmittedGuestDTO
from invyte.guests.features.update_guestlist.write_model import SqlGuestlistWriteModel
from invyte.wishlist.dtos import WishlistItemInputDTO
from invyte.wishlist.repository.write_models import SqlWishlistWriteModel


@pytest.mark.asyncio
async def test_get_event_combines_roster_and_wishlist(host, event):
    await SqlGuestlistWriteModel().reconcile(
        event.uuid,
        [
            SubmittedGuestDTO(name="Ravi", phone_number="9990001111"),
            SubmittedGuestDTO(name="Meera", phone_number="9990002222"),
        ],
    )
    await SqlGuestlistWriteModel().reconcile(
        event.uuid, [SubmittedGuestDTO(name="Meera", phone_number="9990002222")]
    )
    await SqlWishlistWriteModel().add_items_to_event(
        event.uuid, host.uuid, [WishlistItemInputDTO(name="Dinner set")]
    )

    detail = await SqlEventReadModel().get_event(event.uuid)

    assert detail.id == event.uuid
    assert detail.title == event.title
    assert detail.status == EventStatus.LIVE
    assert detail.host_name == "Asha"
    # Removed guests stay on the roster, in creation order
    assert [(guest.name, guest.invite_status) for guest in detail.guestlist] == [
        ("Ravi", InviteStatus.REMOVED),
        ("Meera", InviteStatus.INVITED),
    ]
    assert [item.name for item in detail.wishlist_items] == ["Dinner set"]


@pytest.mark.asyncio
async def test_get_event_with_nameless_host():
    nameless_host = await create_user("9876522222")
    event = await create_event(nameless_host, title="Book club")

    detail = await SqlEventReadModel().get_event(event.uuid)

    assert detail.host_name is None
    assert detail.guestlist == []
    assert detail.wishlist_items == []


@pytest.mark.asyncio
async def test_get_unknown_event():
    assert await SqlEventReadModel().get_event(uuid4()) is None


@pytest.mark.asyncio
async def test_list_events_for_user(host, guest_user, event):
    newer = await create_event(host, title="Anniversary lunch")
    hosted_by_guest = await create_event(guest_user, title="Ravi's birthday")
    dropped = await create_event(host, title="Team offsite")
    await SqlGuestlistWriteModel().reconcile(
        event.uuid, [SubmittedGuestDTO(name="Ravi", phone_number=guest_user.phone_number)]
    )
    await SqlGuestlistWriteModel().reconcile(
        dropped.uuid, [SubmittedGuestDTO(name="Ravi", phone_number=guest_user.phone_number)]
    )
    await SqlGuestlistWriteModel().reconcile(dropped.uuid, [])

    events = await SqlEventReadModel().list_events_for_user(guest_user.uuid, guest_user.phone_number)

    assert [e.id for e in events.hosting] == [hosted_by_guest.uuid]
    assert [e.id for e in events.invited] == [event.uuid]

    host_events = await SqlEventReadModel().list_events_for_user(host.uuid, host.phone_number)
    assert [e.id for e in host_events.hosting] == [dropped.uuid, newer.uuid, event.uuid]
    assert host_events.invited == []


@pytest.mark.asyncio
async def test_event_endpoints(client_factory, host, guest_user, event):
    await SqlGuestlistWriteModel().reconcile(
        event.uuid, [SubmittedGuestDTO(name="Ravi", phone_number=guest_user.phone_number)]
    )
    overrides = {get_current_identity: lambda: identity_of(guest_user)}

    async with client_factory(overrides) as client:
        detail = await client.get(EVENT_URL.format(event_id=event.uuid))
        listing = await client.get(EVENTS_URL)
        missing = await client.get(EVENT_URL.format(event_id=uuid4()))

    assert detail.status_code == 200
    data = detail.json()
    assert data["host_name"] == "Asha"
    assert data["guestlist"][0]["phone_number"] == guest_user.phone_number

    assert listing.status_code == 200
    assert [e["id"] for e in listing.json()["invited"]] == [str(event.uuid)]
    assert listing.json()["hosting"] == []

    assert missing.status_code == 404
