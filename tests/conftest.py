"""Shared test fixtures for the Growth Catalyst API test suite.

Tests run against an in-memory SQLite database created fresh for each test.
"""

import uuid
from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from growth_catalyst.auth.dependencies import get_current_user
from growth_catalyst.auth.viewer import Viewer
from growth_catalyst.core.database import Base, get_db
from growth_catalyst.main import app
from growth_catalyst.models.core import User
from growth_catalyst.models.enums import EventStage, EventStatus, StartupStage, UserRole
from growth_catalyst.models.events import Event
from growth_catalyst.models.investors import Investor
from growth_catalyst.models.startups import Startup
from growth_catalyst.schemas.auth import CurrentUser

# ── Test Data ────────────────────────────────────────────────────────────────

ADMIN_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
FOUNDER_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")
INVESTOR_ID = uuid.UUID("00000000-0000-0000-0000-000000000003")
OTHER_INVESTOR_ID = uuid.UUID("00000000-0000-0000-0000-000000000004")
OTHER_FOUNDER_ID = uuid.UUID("00000000-0000-0000-0000-000000000005")

ADMIN = CurrentUser(user_id=ADMIN_ID, role=UserRole.ADMIN, email="admin@example.com")
FOUNDER = CurrentUser(user_id=FOUNDER_ID, role=UserRole.FOUNDER, email="founder@example.com")
INVESTOR = CurrentUser(user_id=INVESTOR_ID, role=UserRole.INVESTOR, email="vc@example.com")
OTHER_INVESTOR = CurrentUser(
    user_id=OTHER_INVESTOR_ID, role=UserRole.INVESTOR, email="angel@example.com"
)
OTHER_FOUNDER = CurrentUser(
    user_id=OTHER_FOUNDER_ID, role=UserRole.FOUNDER, email="maker@example.com"
)

_USERS = [ADMIN, FOUNDER, INVESTOR, OTHER_INVESTOR, OTHER_FOUNDER]


def viewer(user: CurrentUser) -> Viewer:
    return Viewer.from_user(user)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # pysqlite does not emit BEGIN itself, which breaks SAVEPOINT handling
    @event.listens_for(eng.sync_engine, "connect")
    def _do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(eng.sync_engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """A session whose work is rolled back after each test."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
async def seed_users(db: AsyncSession) -> None:
    """One user per test identity, for FK targets and token lookups."""
    for user in _USERS:
        name = user.email.split("@")[0]
        db.add(
            User(
                id=user.user_id,
                email=user.email,
                first_name=name.title(),
                last_name="Tester",
                role=user.role,
                is_active=True,
            )
        )
    await db.flush()


# ── HTTP client ──────────────────────────────────────────────────────────────


def _override_auth(user: CurrentUser):
    async def _override():
        return user
    return _override


@pytest.fixture
async def client(db: AsyncSession, seed_users) -> AsyncGenerator[AsyncClient]:
    """Client sharing the test session. Authenticated as the admin until ``login``."""
    app.dependency_overrides[get_current_user] = _override_auth(ADMIN)
    app.dependency_overrides[get_db] = lambda: db
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def login(client: AsyncClient) -> Callable[[CurrentUser], None]:
    """Switch the identity the client's requests run as."""
    def _login(user: CurrentUser) -> None:
        app.dependency_overrides[get_current_user] = _override_auth(user)
    return _login


# ── Factories ────────────────────────────────────────────────────────────────


async def make_startup(db: AsyncSession, owner_id: uuid.UUID, **overrides: Any) -> Startup:
    values: dict[str, Any] = {
        "company_name": "Solar Grid Labs",
        "tagline": "Batteries for every rooftop",
        "description": "Solar Grid Labs builds modular home batteries that pair with rooftop panels.",
        "industry": "CleanTech",
        "stage": StartupStage.MVP,
        "founded_year": 2021,
        "team_size": 8,
        "location": "Berlin, Germany",
        "funding_raised": Decimal("250000"),
        "funding_goal": Decimal("2000000"),
        "financial_info": {"revenue": 120000},
        "traction_metrics": {"customers": 40},
        "investability_score": 50.0,
        "is_public": True,
    }
    values.update(overrides)
    startup = Startup(user_id=owner_id, **values)
    db.add(startup)
    await db.flush()
    return startup


async def make_investor(db: AsyncSession, owner_id: uuid.UUID, **overrides: Any) -> Investor:
    values: dict[str, Any] = {
        "company_name": "Northwind Ventures",
        "investment_focus": ["seed", "series_a"],
        "investment_range": {"min": 100000, "max": 1000000},
        "industries": ["CleanTech", "FinTech"],
        "description": "Northwind backs early climate and finance teams across Europe and the US.",
        "location": "London, UK",
        "portfolio_size": 12,
        "average_investment": Decimal("400000"),
        "total_invested": Decimal("4800000"),
        "notable_investments": ["Voltcore"],
        "investment_criteria": {},
        "is_active": True,
    }
    values.update(overrides)
    investor = Investor(user_id=owner_id, **values)
    db.add(investor)
    await db.flush()
    return investor


async def make_event(db: AsyncSession, **overrides: Any) -> Event:
    start = datetime(2027, 3, 1, 9, 0, tzinfo=timezone.utc)
    values: dict[str, Any] = {
        "name": "Spring Scouting Day",
        "description": "Founders pitch to a room of early-stage investors.",
        "stage": EventStage.SCOUTING,
        "status": EventStatus.PUBLISHED,
        "start_date": start,
        "end_date": start + timedelta(hours=8),
        "venue": "Factory Berlin",
        "address": "Rheinsberger Str. 76, Berlin",
        "max_capacity": 100,
        "is_public": True,
        "is_invite_only": False,
        "agenda": [],
        "speakers": [],
        "created_by": ADMIN_ID,
    }
    values.update(overrides)
    evt = Event(**values)
    db.add(evt)
    await db.flush()
    return evt
