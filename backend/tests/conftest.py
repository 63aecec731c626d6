"""Shared test configuration and fixtures.

Core tests run against the in-memory store. Store, API and MCP tests run the
real ORM against an in-memory SQLite database (aiosqlite):
- Each test gets a fresh engine with all tables created.
- The session is wrapped in an outer transaction that rolls back afterwards.

SQLite ignores ``SELECT ... FOR UPDATE`` and has no exclusion constraints, so
the per-resource serialisation itself is exercised through the in-memory
store's lock; the SQL tests cover everything else the store does.
"""

import uuid
from collections.abc import AsyncGenerator
from datetime import datetime

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

import staydesk.models  # noqa: F401  (registers tables on Base.metadata)
from staydesk.api.deps import get_clock
from staydesk.database import Base, get_db
from staydesk.main import app
from staydesk.models.resource import Resource
from staydesk.scheduling.enums import ResourceKind
from staydesk.scheduling.memory import InMemoryReservationStore, InMemoryResourceRegistry
from staydesk.scheduling.records import ResourceInfo
from staydesk.scheduling.service import ReservationService
from staydesk.scheduling.templates import WeeklyTemplate

# Friday 1 March 2024, 09:00. Every scenario in the suite is dated after this.
FIXED_NOW = datetime(2024, 3, 1, 9, 0)

AGENT_TEMPLATE = {
    "slot_minutes": 60,
    "windows": {
        "monday": [["09:00", "12:00"]],
        "wednesday": [["09:00", "11:00"], ["14:00", "16:00"]],
    },
}


def fixed_clock() -> datetime:
    return FIXED_NOW


# ---------------------------------------------------------------------------
# In-memory core fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def stay() -> ResourceInfo:
    return ResourceInfo(id=uuid.uuid4(), kind=ResourceKind.PROPERTY_STAY, owner_id=uuid.uuid4(), name="Villa Canggu")


@pytest.fixture
def instant_stay() -> ResourceInfo:
    return ResourceInfo(
        id=uuid.uuid4(),
        kind=ResourceKind.PROPERTY_STAY,
        owner_id=uuid.uuid4(),
        name="Villa Ubud",
        instant_book=True,
    )


@pytest.fixture
def agent() -> ResourceInfo:
    return ResourceInfo(
        id=uuid.uuid4(),
        kind=ResourceKind.AGENT_SLOT,
        owner_id=uuid.uuid4(),
        name="Agent calendar",
        instant_book=True,
        template=WeeklyTemplate.from_dict(AGENT_TEMPLATE),
    )


@pytest.fixture
def store() -> InMemoryReservationStore:
    return InMemoryReservationStore()


@pytest.fixture
def registry(stay, instant_stay, agent) -> InMemoryResourceRegistry:
    return InMemoryResourceRegistry([stay, instant_stay, agent])


@pytest.fixture
def service(store, registry) -> ReservationService:
    return ReservationService(store, registry, clock=fixed_clock)


# ---------------------------------------------------------------------------
# Per-test SQLite database with transactional rollback
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine():
    """A fresh in-memory database per test, shared by all of the test's connections."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session wrapped in a transaction that always rolls back."""
    async with test_engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(bind=connection, expire_on_commit=False)

        try:
            yield session
        finally:
            await session.close()
            await transaction.rollback()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to the test DB session and the fixed clock."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: fixed_clock

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Convenience fixtures: resource rows
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def stay_row(db_session: AsyncSession) -> Resource:
    """A request-to-book property stay."""
    resource = Resource(owner_id=uuid.uuid4(), name="Test Villa", kind="property_stay", instant_book=False)
    db_session.add(resource)
    await db_session.flush()
    return resource


@pytest_asyncio.fixture
async def instant_row(db_session: AsyncSession) -> Resource:
    """An instant-book property stay."""
    resource = Resource(owner_id=uuid.uuid4(), name="Instant Villa", kind="property_stay", instant_book=True)
    db_session.add(resource)
    await db_session.flush()
    return resource


@pytest_asyncio.fixture
async def agent_row(db_session: AsyncSession) -> Resource:
    """An agent's viewing calendar with the shared weekly template."""
    resource = Resource(
        owner_id=uuid.uuid4(),
        name="Agent Calendar",
        kind="agent_slot",
        instant_book=True,
        slot_minutes=60,
        availability_template=AGENT_TEMPLATE,
    )
    db_session.add(resource)
    await db_session.flush()
    return resource
