"""Tests for SqlGuestlistWriteModel."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy import select

from invyte.config.database import async_session_manager
from invyte.conftest import create_event, create_user
from invyte.errors import NotFoundError, PermissionDeniedError, ValidationError
from invyte.guests.dtos import InviteStatus, RSVPStatus, SubmittedGuestDTO
from invyte.guests.features.update_guestlist.write_model import SqlGuestlistWriteModel
from invyte.guests.repository.orm_models import Guest
from invyte.notifications import EventInviteNotification, NotificationOutbox
from invyte.notifications.base import NotificationSenderBase


def make_outbox() -> NotificationOutbox:
    return NotificationOutbox(sender=AsyncMock(spec=NotificationSenderBase))


async def get_guest(event_id, phone_number) -> Guest:
    async with async_session_manager() as session:
        result = await session.execute(
            select(Guest).where(Guest.event_id == event_id).where(Guest.phone_number == phone_number)
        )
        return result.scalar_one()


async def set_rsvp(event_id, phone_number, status: RSVPStatus) -> None:
    async with async_session_manager() as session:
        result = await session.execute(
            select(Guest).where(Guest.event_id == event_id).where(Guest.phone_number == phone_number)
        )
        result.scalar_one().rsvp_status = status


@pytest.mark.asyncio
async def test_reconcile_creates_new_guests(event):
    outbox = make_outbox()
    write_model = SqlGuestlistWriteModel(outbox=outbox)

    roster = await write_model.reconcile(
        event.uuid,
        [
            SubmittedGuestDTO(name="Ravi", phone_number="9990001111"),
            SubmittedGuestDTO(name="Meera", phone_number="9990002222"),
        ],
    )

    assert [(guest.name, guest.phone_number) for guest in roster] == [
        ("Ravi", "9990001111"),
        ("Meera", "9990002222"),
    ]
    assert all(guest.invite_status == InviteStatus.INVITED for guest in roster)
    assert all(guest.rsvp_status == RSVPStatus.PENDING for guest in roster)
    assert all(guest.invited_at is not None for guest in roster)
    assert [n.phone_number for n in outbox.pending] == ["9990001111", "9990002222"]


@pytest.mark.asyncio
async def test_removed_guest_keeps_rsvp(event):
    write_model = SqlGuestlistWriteModel()
    await write_model.reconcile(
        event.uuid,
        [
            SubmittedGuestDTO(name="Ravi", phone_number="9990001111"),
            SubmittedGuestDTO(name="Meera", phone_number="9990002222"),
        ],
    )
    await set_rsvp(event.uuid, "9990002222", RSVPStatus.NO)

    roster = await write_model.reconcile(
        event.uuid, [SubmittedGuestDTO(name="Ravi", phone_number="9990001111")]
    )

    assert len(roster) == 2
    meera = await get_guest(event.uuid, "9990002222")
    assert meera.invite_status == InviteStatus.REMOVED
    assert meera.rsvp_status == RSVPStatus.NO


@pytest.mark.asyncio
async def test_resubmitted_guest_is_reactivated_with_history(event):
    outbox = make_outbox()
    write_model = SqlGuestlistWriteModel(outbox=outbox)
    ravi = SubmittedGuestDTO(name="Ravi", phone_number="9990001111")
    meera = SubmittedGuestDTO(name="Meera", phone_number="9990002222")
    await write_model.reconcile(event.uuid, [ravi, meera])
    await set_rsvp(event.uuid, "9990002222", RSVPStatus.NO)
    await write_model.reconcile(event.uuid, [ravi])
    removed_at_invite = (await get_guest(event.uuid, "9990002222")).invited_at
    outbox = make_outbox()
    write_model = SqlGuestlistWriteModel(outbox=outbox)

    await write_model.reconcile(event.uuid, [ravi, meera])

    guest = await get_guest(event.uuid, "9990002222")
    assert guest.invite_status == InviteStatus.INVITED
    assert guest.rsvp_status == RSVPStatus.NO
    assert guest.invited_at != removed_at_invite
    # Only the returning guest is invited again
    assert [n.phone_number for n in outbox.pending] == ["9990002222"]


@pytest.mark.asyncio
async def test_remove_and_readd_scenario(event):
    write_model = SqlGuestlistWriteModel()
    guest = SubmittedGuestDTO(name="Ravi", phone_number="9990001111")
    await write_model.reconcile(event.uuid, [guest])

    await write_model.reconcile(event.uuid, [])
    removed = await get_guest(event.uuid, "9990001111")
    assert removed.invite_status == InviteStatus.REMOVED
    assert removed.rsvp_status == RSVPStatus.PENDING

    await write_model.reconcile(event.uuid, [guest])
    returned = await get_guest(event.uuid, "9990001111")
    assert returned.invite_status == InviteStatus.INVITED
    assert returned.rsvp_status == RSVPStatus.PENDING


@pytest.mark.asyncio
async def test_name_is_updated_for_known_guest(event):
    write_model = SqlGuestlistWriteModel()
    await write_model.reconcile(event.uuid, [SubmittedGuestDTO(name="Ravi", phone_number="9990001111")])

    roster = await write_model.reconcile(
        event.uuid, [SubmittedGuestDTO(name="Ravi Kumar", phone_number="9990001111")]
    )

    assert [guest.name for guest in roster] == ["Ravi Kumar"]


@pytest.mark.asyncio
async def test_invalid_entry_changes_nothing(event):
    write_model = SqlGuestlistWriteModel()
    await write_model.reconcile(event.uuid, [SubmittedGuestDTO(name="Ravi", phone_number="9990001111")])

    with pytest.raises(ValidationError):
        await write_model.reconcile(
            event.uuid,
            [
                SubmittedGuestDTO(name="Meera", phone_number="9990002222"),
                SubmittedGuestDTO(name="", phone_number="9990003333"),
            ],
        )

    roster = await write_model.reconcile(
        event.uuid, [SubmittedGuestDTO(name="Ravi", phone_number="9990001111")]
    )
    assert [guest.phone_number for guest in roster] == ["9990001111"]
    assert roster[0].invite_status == InviteStatus.INVITED


@pytest.mark.asyncio
async def test_duplicate_phone_numbers_collapse_to_last_entry(event):
    write_model = SqlGuestlistWriteModel()

    roster = await write_model.reconcile(
        event.uuid,
        [
            SubmittedGuestDTO(name="Ravi", phone_number="9990001111"),
            SubmittedGuestDTO(name="Ravi K", phone_number=" 9990001111 "),
        ],
    )

    assert [(guest.name, guest.phone_number) for guest in roster] == [("Ravi K", "9990001111")]


@pytest.mark.asyncio
async def test_invitation_uses_host_name_and_invite_link(host, event):
    outbox = make_outbox()
    write_model = SqlGuestlistWriteModel(outbox=outbox)

    await write_model.reconcile(event.uuid, [SubmittedGuestDTO(name="Ravi", phone_number="9990001111")])

    [notification] = outbox.pending
    assert isinstance(notification, EventInviteNotification)
    assert notification.inviter_name == "Asha"
    assert notification.event_name == event.title
    assert notification.link.endswith(f"/invite/{event.invite_link}")


@pytest.mark.asyncio
async def test_invitation_falls_back_when_host_has_no_name():
    nameless_host = await create_user("9876511111")
    nameless_event = await create_event(nameless_host, title="Game night")
    outbox = make_outbox()

    await SqlGuestlistWriteModel(outbox=outbox).reconcile(
        nameless_event.uuid, [SubmittedGuestDTO(name="Ravi", phone_number="9990001111")]
    )

    assert outbox.pending[0].inviter_name == "Your host"


@pytest.mark.asyncio
async def test_reconcile_checks_event_and_host(guest_user, event):
    write_model = SqlGuestlistWriteModel()
    guests = [SubmittedGuestDTO(name="Ravi", phone_number="9990001111")]

    with pytest.raises(NotFoundError):
        await write_model.reconcile(uuid4(), guests)

    with pytest.raises(PermissionDeniedError):
        await write_model.reconcile(event.uuid, guests, host_id=guest_user.uuid)


@pytest.mark.asyncio
async def test_add_guests_invites_everyone(event):
    outbox = make_outbox()
    write_model = SqlGuestlistWriteModel(outbox=outbox)

    guests = await write_model.add_guests(
        event.uuid,
        [
            SubmittedGuestDTO(name="Ravi", phone_number="9990001111"),
            SubmittedGuestDTO(name="Meera", phone_number="9990002222"),
        ],
    )

    assert [guest.invite_status for guest in guests] == [InviteStatus.INVITED, InviteStatus.INVITED]
    assert len(outbox.pending) == 2
