"""Concurrent RSVPs against PostgreSQL, where the event row lock is real.

Set TEST_DATABASE_URL to a postgresql+asyncpg URL of a scratch database to run.
"""

import asyncio
import os
import uuid

import pytest
from sqlalchemy import select

from growth_catalyst.auth.viewer import Viewer
from growth_catalyst.core.database import Base, build_engine, build_session_factory
from growth_catalyst.core.errors import CapacityExceededError
from growth_catalyst.models.core import User
from growth_catalyst.models.enums import RSVPStatus, UserRole
from growth_catalyst.models.events import EventAttendee
from growth_catalyst.modules.events import service
from tests.conftest import make_event

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "")

pytestmark = [
    pytest.mark.anyio,
    pytest.mark.skipif(
        not TEST_DATABASE_URL.startswith("postgresql"),
        reason="needs TEST_DATABASE_URL pointing at PostgreSQL",
    ),
]


async def test_parallel_confirms_never_exceed_capacity():
    engine = build_engine(TEST_DATABASE_URL)
    session_factory = build_session_factory(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    capacity = 3
    users = [
        User(
            id=uuid.uuid4(),
            email=f"guest{i}@example.com",
            first_name="Guest",
            last_name=str(i),
            role=UserRole.INVESTOR,
        )
        for i in range(10)
    ]
    async with session_factory() as db:
        db.add_all(users)
        evt = await make_event(db, max_capacity=capacity, created_by=None)
        await db.commit()
    event_id = evt.id

    async def _confirm(user: User) -> bool:
        async with session_factory() as db:
            try:
                await service.rsvp(
                    db, Viewer(user_id=user.id, role=user.role), event_id, RSVPStatus.CONFIRMED
                )
                await db.commit()
                return True
            except CapacityExceededError:
                await db.rollback()
                return False

    try:
        results = await asyncio.gather(*(_confirm(u) for u in users))

        async with session_factory() as db:
            rows = await db.execute(
                select(EventAttendee).where(
                    EventAttendee.event_id == event_id,
                    EventAttendee.rsvp_status == RSVPStatus.CONFIRMED,
                )
            )
            confirmed = rows.scalars().all()

        assert sum(results) == capacity
        assert len(confirmed) == capacity
    finally:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()
