"""CLI commands for managing Invyte events, guest lists and users."""

import asyncio
import csv
from pathlib import Path
from uuid import UUID

import typer
import uvicorn
from sqlalchemy import select

from invyte.auth.jwt import create_access_token
from invyte.config.database import async_session_manager, upgrade_database
from invyte.config.logging import setup_logging
from invyte.config.settings import settings
from invyte.errors import InvyteError
from invyte.events.dtos import EventCreateDTO
from invyte.events.features.create_event.write_model import SqlEventCreateWriteModel
from invyte.events.repository.read_models import SqlEventReadModel
from invyte.guests.dtos import SubmittedGuestDTO
from invyte.guests.features.update_guestlist.write_model import SqlGuestlistWriteModel
from invyte.models.user import User
from invyte.notifications import NotificationOutbox, get_notification_sender

app = typer.Typer(help="CLI commands for Invyte event management")


async def _get_user(phone_number: str) -> User | None:
    async with async_session_manager() as session:
        result = await session.execute(select(User).where(User.phone_number == phone_number))
        return result.scalar_one_or_none()


async def _require_user(phone_number: str) -> User:
    user = await _get_user(phone_number)
    if user is None:
        raise ValueError(f"No user with phone number {phone_number}")
    return user


def _read_guestlist(path: Path) -> list[SubmittedGuestDTO]:
    """Read ``name,phone_number`` rows; a header row is optional."""
    guests = []
    with path.open(newline="") as f:
        for row in csv.reader(f):
            if not row or row[0].strip().lower() == "name":
                continue
            name, phone_number = (row + ["", ""])[:2]
            guests.append(SubmittedGuestDTO(name=name, phone_number=phone_number))
    return guests


@app.command()
def serve(reload: bool = typer.Option(False, "--reload", help="Restart on code changes")):
    """Run the API server."""
    uvicorn.run("invyte.main:app", host=settings.app_host, port=settings.app_port, reload=reload)


@app.command()
def migrate():
    """Upgrade the database to the latest revision."""
    asyncio.run(upgrade_database())
    typer.secho("Database is up to date", fg=typer.colors.GREEN)


@app.command()
def create_user(
    phone_number: str = typer.Argument(..., help="Phone number of the user"),
    name: str = typer.Option(None, "--name", "-n", help="Display name"),
):
    """Create a verified user and print an access token for them."""

    async def _create_user():
        if await _get_user(phone_number) is not None:
            raise ValueError(f"User {phone_number} already exists")
        async with async_session_manager() as session:
            user = User(phone_number=phone_number, name=name, is_verified=True, is_active=True)
            session.add(user)
            await session.flush()
            return user

    try:
        user = asyncio.run(_create_user())
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.YELLOW)
        raise typer.Exit(1)

    typer.secho("User created!", fg=typer.colors.GREEN)
    typer.secho(f"  ID: {user.uuid}", fg=typer.colors.CYAN)
    typer.secho(f"  Token: {create_access_token({'sub': str(user.uuid)})}", fg=typer.colors.CYAN)


@app.command()
def issue_token(phone_number: str = typer.Argument(..., help="Phone number of the user")):
    """Print a fresh access token for an existing user."""
    try:
        user = asyncio.run(_require_user(phone_number))
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)
    typer.echo(create_access_token({"sub": str(user.uuid)}))


@app.command()
def create_event(
    host_phone: str = typer.Argument(..., help="Phone number of the host"),
    title: str = typer.Argument(..., help="Event title"),
    venue: str = typer.Option(None, "--venue", "-v", help="Where the event takes place"),
    guestlist: Path = typer.Option(
        None,
        "--guestlist",
        "-g",
        exists=True,
        dir_okay=False,
        help="CSV file with name,phone_number rows",
    ),
):
    """Create a live event and invite the guests from a CSV file."""
    guests = _read_guestlist(guestlist) if guestlist else []

    async def _create_event():
        host = await _require_user(host_phone)
        outbox = NotificationOutbox(sender=get_notification_sender())
        write_model = SqlEventCreateWriteModel(
            guestlist_write_model=SqlGuestlistWriteModel(outbox=outbox)
        )
        event = await write_model.create_event(
            host.uuid, EventCreateDTO(title=title, venue=venue, guestlist=guests)
        )
        return event, await outbox.drain()

    try:
        event, results = asyncio.run(_create_event())
    except (InvyteError, ValueError) as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Event created!", fg=typer.colors.GREEN)
    typer.secho(f"  ID: {event.id}", fg=typer.colors.CYAN)
    typer.secho(f"  Invite link: {event.invite_link}", fg=typer.colors.CYAN)
    typer.secho(
        f"  Invitations sent: {sum(r.success for r in results)}/{len(results)}",
        fg=typer.colors.BLUE,
    )


@app.command()
def sync_guestlist(
    event_id: str = typer.Argument(..., help="Event UUID"),
    guestlist: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="CSV file with name,phone_number rows"
    ),
):
    """Make the event's guest list match a CSV file.

    Guests missing from the file are marked removed; new and re-added guests are invited.
    """

    async def _sync():
        outbox = NotificationOutbox(sender=get_notification_sender())
        roster = await SqlGuestlistWriteModel(outbox=outbox).reconcile(
            UUID(event_id), _read_guestlist(guestlist)
        )
        return roster, await outbox.drain()

    try:
        roster, results = asyncio.run(_sync())
    except InvyteError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Guest list updated!", fg=typer.colors.GREEN)
    for guest in roster:
        typer.secho(f"  - {guest.name} ({guest.phone_number}): {guest.invite_status.value}", fg=typer.colors.BLUE)
    typer.secho(f"Invitations sent: {sum(r.success for r in results)}/{len(results)}", fg=typer.colors.CYAN)


@app.command()
def show_event(event_id: str = typer.Argument(..., help="Event UUID")):
    """Show an event with its guest list and wishlist."""
    event = asyncio.run(SqlEventReadModel().get_event(UUID(event_id)))
    if event is None:
        typer.secho(f"Event not found: {event_id}", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho(event.title, fg=typer.colors.GREEN)
    typer.secho(f"  Host: {event.host_name or event.host_id}", fg=typer.colors.BLUE)
    typer.secho(f"  Status: {event.status.value}", fg=typer.colors.BLUE)
    if event.venue:
        typer.secho(f"  Venue: {event.venue}", fg=typer.colors.BLUE)

    typer.echo()
    typer.secho("Guests:", fg=typer.colors.GREEN)
    for guest in event.guestlist:
        gift = f", {guest.gift_option.value}" if guest.gift_option else ""
        typer.secho(
            f"  - {guest.name} ({guest.phone_number}): "
            f"{guest.invite_status.value}/{guest.rsvp_status.value}{gift}",
            fg=typer.colors.BLUE,
        )

    typer.echo()
    typer.secho("Wishlist:", fg=typer.colors.GREEN)
    for item in event.wishlist_items:
        claimed = " (claimed)" if item.is_claimed else ""
        typer.secho(f"  - {item.name}{claimed}", fg=typer.colors.BLUE)


if __name__ == "__main__":
    setup_logging()
    app()
