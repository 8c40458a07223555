from uuid import uuid4

import pytest

from invyte.auth.dependencies import get_current_identity
from invyte.conftest import identity_of
from invyte.wishlist.dtos import WishlistItemInputDTO
from invyte.wishlist.repository.write_models import SqlWishlistWriteModel
from invyte.wishlist.urls import EVENT_WISHLIST_URL, SHARE_TO_EVENT_URL


@pytest.mark.asyncio
async def test_get_event_wishlist(client_factory, host, guest_user, event):
    write_model = SqlWishlistWriteModel()
    kettle, _ = await write_model.add_items_to_event(
        event.uuid,
        host.uuid,
        [WishlistItemInputDTO(name="Kettle"), WishlistItemInputDTO(name="Toaster")],
    )
    await write_model.claim(guest_user.uuid, event.uuid, kettle.id)

    async with client_factory({get_current_identity: lambda: identity_of(guest_user)}) as client:
        response = await client.get(EVENT_WISHLIST_URL.format(event_id=event.uuid))

    assert response.status_code == 200
    data = response.json()
    assert data["event_id"] == str(event.uuid)
    assert [(item["name"], item["is_claimed"]) for item in data["items"]] == [
        ("Kettle", True),
        ("Toaster", False),
    ]
    assert data["items"][0]["claimed_by"] == str(guest_user.uuid)


@pytest.mark.asyncio
async def test_share_personal_items(client_factory, host, event):
    write_model = SqlWishlistWriteModel()
    await write_model.add_items_to_event(event.uuid, host.uuid, [WishlistItemInputDTO(name="Kettle")])
    speaker, kettle = await write_model.add_personal_items(
        host.uuid,
        [WishlistItemInputDTO(name="Bluetooth speaker"), WishlistItemInputDTO(name="KETTLE")],
    )

    async with client_factory({get_current_identity: lambda: identity_of(host)}) as client:
        response = await client.post(
            SHARE_TO_EVENT_URL.format(event_id=event.uuid),
            json={"item_ids": [str(speaker.id), str(kettle.id), str(uuid4())]},
        )
        listing = await client.get(EVENT_WISHLIST_URL.format(event_id=event.uuid))

    assert response.status_code == 200
    shared = response.json()["items"]
    assert [item["name"] for item in shared] == ["Bluetooth speaker", "Kettle"]
    assert all(item["event_id"] == str(event.uuid) for item in shared)

    assert [item["name"] for item in listing.json()["items"]] == ["Kettle", "Bluetooth speaker"]


@pytest.mark.asyncio
async def test_share_requires_host(client_factory, guest_user, event):
    [item] = await SqlWishlistWriteModel().add_personal_items(
        guest_user.uuid, [WishlistItemInputDTO(name="Yoga mat")]
    )

    async with client_factory({get_current_identity: lambda: identity_of(guest_user)}) as client:
        forbidden = await client.post(
            SHARE_TO_EVENT_URL.format(event_id=event.uuid), json={"item_ids": [str(item.id)]}
        )
        missing = await client.post(
            SHARE_TO_EVENT_URL.format(event_id=uuid4()), json={"item_ids": [str(item.id)]}
        )

    assert forbidden.status_code == 403
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_add_event_wishlist_items(client_factory, host, event):
    await SqlWishlistWriteModel().add_items_to_event(
        event.uuid, host.uuid, [WishlistItemInputDTO(name="Kettle")]
    )

    async with client_factory({get_current_identity: lambda: identity_of(host)}) as client:
        response = await client.post(
            EVENT_WISHLIST_URL.format(event_id=event.uuid),
            json={"items": [{"name": "Rice cooker", "url": "https://example.com/rice-cooker"}]},
        )
        listing = await client.get(EVENT_WISHLIST_URL.format(event_id=event.uuid))

    assert response.status_code == 201
    [added] = response.json()["items"]
    assert added["name"] == "Rice cooker"
    assert added["url"] == "https://example.com/rice-cooker"
    assert added["event_id"] == str(event.uuid)

    assert [item["name"] for item in listing.json()["items"]] == ["Kettle", "Rice cooker"]


@pytest.mark.asyncio
async def test_add_event_wishlist_items_requires_host(client_factory, guest_user, event):
    body = {"items": [{"name": "Yoga mat"}]}

    async with client_factory({get_current_identity: lambda: identity_of(guest_user)}) as client:
        forbidden = await client.post(EVENT_WISHLIST_URL.format(event_id=event.uuid), json=body)
        missing = await client.post(EVENT_WISHLIST_URL.format(event_id=uuid4()), json=body)
        listing = await client.get(EVENT_WISHLIST_URL.format(event_id=event.uuid))

    assert forbidden.status_code == 403
    assert missing.status_code == 404
    assert listing.json()["items"] == []
