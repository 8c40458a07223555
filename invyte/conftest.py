import contextlib
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from invyte.auth.dependencies import CurrentIdentity
from invyte.config.database import async_session_manager, engine
from invyte.events.dtos import EventStatus
from invyte.events.repository.orm_models import Event
from invyte.main import app
from invyte.models.registry import metadata
from invyte.models.user import User


@pytest_asyncio.fixture(autouse=True)
async def test_db():
    """Create the tables once and empty them after every test."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield

    async with engine.begin() as conn:
        for table in reversed(metadata.sorted_tables):
            await conn.execute(table.delete())


@pytest.fixture
def client_factory():
    """Build a client with some FastAPI dependencies overridden."""

    @contextlib.asynccontextmanager
    async def factory(overrides: dict | None = None):
        app.dependency_overrides.update(overrides or {})
        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
        finally:
            app.dependency_overrides.clear()

    return factory


@pytest_asyncio.fixture
async def client(client_factory):
    async with client_factory() as ac:
        yield ac


async def create_user(phone_number: str, name: str | None = None) -> User:
    async with async_session_manager() as session:
        user = User(phone_number=phone_number, name=name, is_verified=True, is_active=True)
        session.add(user)
        await session.flush()
    return user


async def create_event(host: User, title: str = "Asha's Housewarming") -> Event:
    async with async_session_manager() as session:
        event = Event(
            host_id=host.uuid,
            title=title,
            venue="12 MG Road, Bengaluru",
            status=EventStatus.LIVE,
            invite_link=str(uuid4()),
        )
        session.add(event)
        await session.flush()
    return event


def identity_of(user: User) -> CurrentIdentity:
    return CurrentIdentity(user_id=user.uuid, phone_number=user.phone_number, name=user.name)


@pytest_asyncio.fixture
async def host() -> User:
    return await create_user("9876500000", "Asha")


@pytest_asyncio.fixture
async def guest_user() -> User:
    return await create_user("9990001111", "Ravi")


@pytest_asyncio.fixture
async def event(host) -> Event:
    return await create_event(host)
