"""Access Grants — who may see a private startup in full.

A grant is a (startup, investor user) pair moving pending -> approved | denied.
Visibility is recomputed from the store on every call; nothing is cached.
"""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from growth_catalyst.auth.viewer import Capability, Viewer
from growth_catalyst.core.database import add_unique
from growth_catalyst.core.errors import (
    ConflictError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
)
from growth_catalyst.core.pagination import paginate
from growth_catalyst.models.base import utcnow
from growth_catalyst.models.enums import AccessRequestStatus
from growth_catalyst.models.startups import Startup, StartupAccessRequest

logger = structlog.get_logger()

_REVIEW_DECISIONS = {AccessRequestStatus.APPROVED, AccessRequestStatus.DENIED}


# ── Helpers ─────────────────────────────────────────────────────────────────


async def _get_startup_or_raise(db: AsyncSession, startup_id: uuid.UUID) -> Startup:
    startup = await db.get(Startup, startup_id)
    if startup is None:
        raise NotFoundError("Startup not found")
    return startup


async def get_grant(
    db: AsyncSession, startup_id: uuid.UUID, investor_id: uuid.UUID
) -> StartupAccessRequest | None:
    stmt = select(StartupAccessRequest).where(
        StartupAccessRequest.startup_id == startup_id,
        StartupAccessRequest.investor_id == investor_id,
    )
    return (await db.execute(stmt)).scalar_one_or_none()


def approved_startup_ids(investor_id: uuid.UUID):
    """Subquery of startup ids the investor user holds an approved grant for."""
    return select(StartupAccessRequest.startup_id).where(
        StartupAccessRequest.investor_id == investor_id,
        StartupAccessRequest.status == AccessRequestStatus.APPROVED,
    )


# ── Operations ──────────────────────────────────────────────────────────────


async def request_access(
    db: AsyncSession, startup_id: uuid.UUID, investor_id: uuid.UUID
) -> StartupAccessRequest:
    """Open a pending grant for a private startup."""
    startup = await _get_startup_or_raise(db, startup_id)
    if startup.is_public:
        raise InvalidStateError("This startup is public, no access request needed")

    if await get_grant(db, startup_id, investor_id) is not None:
        raise ConflictError("Access request already exists")

    grant = StartupAccessRequest(
        startup_id=startup_id,
        investor_id=investor_id,
        status=AccessRequestStatus.PENDING,
        requested_at=utcnow(),
    )
    await add_unique(db, grant, conflict_message="Access request already exists")

    logger.info(
        "access_requested",
        startup_id=str(startup_id),
        investor_id=str(investor_id),
        grant_id=str(grant.id),
    )
    return grant


async def review_access(
    db: AsyncSession,
    startup_id: uuid.UUID,
    grant_id: uuid.UUID,
    decision: str,
    reviewer_id: uuid.UUID,
    notes: str | None = None,
) -> StartupAccessRequest:
    """Approve or deny a grant. A second review overwrites the first."""
    try:
        status = AccessRequestStatus(decision)
    except ValueError:
        status = None
    if status not in _REVIEW_DECISIONS:
        raise InvalidArgumentError("Invalid status. Must be approved or denied")

    stmt = select(StartupAccessRequest).where(
        StartupAccessRequest.id == grant_id,
        StartupAccessRequest.startup_id == startup_id,
    )
    grant = (await db.execute(stmt)).scalar_one_or_none()
    if grant is None:
        raise NotFoundError("Access request not found")

    grant.status = status
    grant.notes = notes
    grant.reviewed_by = reviewer_id
    grant.reviewed_at = utcnow()
    await db.flush()

    logger.info(
        "access_reviewed",
        startup_id=str(startup_id),
        grant_id=str(grant_id),
        status=status.value,
        reviewer_id=str(reviewer_id),
    )
    return grant


async def can_view(db: AsyncSession, viewer: Viewer, startup: Startup) -> bool:
    """Public, admin, owner, or an approved grant for this viewer."""
    if startup.is_public:
        return True
    if viewer.capability_over(startup.user_id) in (Capability.ADMIN, Capability.OWNER):
        return True
    grant = await get_grant(db, startup.id, viewer.user_id)
    return grant is not None and grant.status is AccessRequestStatus.APPROVED


async def list_access_requests(
    db: AsyncSession,
    startup_id: uuid.UUID,
    status: AccessRequestStatus | None = None,
    page: int = 1,
    limit: int = 50,
) -> tuple[list[StartupAccessRequest], int]:
    """Grants for one startup, newest request first."""
    await _get_startup_or_raise(db, startup_id)

    stmt = select(StartupAccessRequest).where(StartupAccessRequest.startup_id == startup_id)
    if status is not None:
        stmt = stmt.where(StartupAccessRequest.status == status)
    stmt = stmt.order_by(StartupAccessRequest.requested_at.desc())

    return await paginate(db, stmt, page, limit)
