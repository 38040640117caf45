from collections.abc import AsyncGenerator
from decimal import Decimal
from typing import Any

import structlog
from sqlalchemy import JSON, Numeric
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from growth_catalyst.core.config import settings
from growth_catalyst.core.errors import ConflictError

logger = structlog.get_logger()

# JSONB on PostgreSQL, plain JSON elsewhere (local SQLite store).
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _engine_options(url: str) -> dict[str, Any]:
    if not url.startswith("postgresql"):
        return {}
    return {
        "pool_size": 20,
        "max_overflow": 10,
        "pool_pre_ping": True,               # Drop stale connections before use
        "pool_recycle": 1800,
        "pool_timeout": 30,
        "connect_args": {
            "server_settings": {
                "statement_timeout": "30000",
                "idle_in_transaction_session_timeout": "60000",
                "lock_timeout": "10000",     # RSVP capacity locks wait at most 10s
            },
            "command_timeout": 30,
        },
    }


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine with pool settings appropriate for the backend."""
    return create_async_engine(url, echo=echo, **_engine_options(url))


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.DATABASE_URL, echo=settings.APP_DEBUG)
async_session_factory = build_session_factory(engine)


class Base(DeclarativeBase):
    type_annotation_map = {
        Decimal: Numeric(19, 4),
    }


async def add_unique(db: AsyncSession, *instances: Any, conflict_message: str) -> None:
    """Insert ``instances`` inside one SAVEPOINT; a UNIQUE violation becomes ConflictError.

    The outer request transaction stays usable after the conflict.
    """
    try:
        async with db.begin_nested():
            db.add_all(instances)
    except IntegrityError as exc:
        logger.info("unique_insert_conflict", table=instances[0].__tablename__)
        raise ConflictError(conflict_message) from exc


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session: commit on success, roll back on any error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
