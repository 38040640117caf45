"""Startups — profile CRUD and role-scoped listing."""

from __future__ import annotations

import uuid
from decimal import Decimal

import structlog
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from growth_catalyst.auth.viewer import Capability, Viewer
from growth_catalyst.core.errors import (
    AccessDeniedError,
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
)
from growth_catalyst.core.pagination import paginate
from growth_catalyst.models.enums import AccessRequestStatus, StartupStage
from growth_catalyst.models.startups import Startup, StartupAccessRequest, StartupTeamMember
from growth_catalyst.modules.access_grants import service as grants
from growth_catalyst.modules.startups.schemas import (
    StartupCreate,
    StartupDetailResponse,
    StartupResponse,
    StartupUpdate,
    TeamMemberBody,
    TeamMemberResponse,
)

logger = structlog.get_logger()

SORT_FIELDS = {
    "created_at": Startup.created_at,
    "company_name": Startup.company_name,
    "funding_raised": Startup.funding_raised,
    "investability_score": Startup.investability_score,
}

# Columns a partial update may clear
_NULLABLE_FIELDS = {"tagline", "website"}


async def _get_startup_or_raise(db: AsyncSession, startup_id: uuid.UUID) -> Startup:
    startup = await db.get(Startup, startup_id)
    if startup is None:
        raise NotFoundError("Startup not found")
    return startup


async def create_startup(db: AsyncSession, viewer: Viewer, body: StartupCreate) -> Startup:
    """New profiles start private. Founders own at most one startup."""
    if not viewer.is_admin:
        existing = await db.execute(select(Startup.id).where(Startup.user_id == viewer.user_id))
        if existing.first() is not None:
            raise ConflictError("You already have a startup profile")

    startup = Startup(user_id=viewer.user_id, is_public=False, **body.model_dump())
    db.add(startup)
    await db.flush()

    logger.info("startup_created", startup_id=str(startup.id), user_id=str(viewer.user_id))
    return startup


async def get_startup(
    db: AsyncSession, viewer: Viewer, startup_id: uuid.UUID
) -> StartupDetailResponse:
    startup = await _get_startup_or_raise(db, startup_id)
    if not await grants.can_view(db, viewer, startup):
        raise AccessDeniedError("Access denied")

    grant = await grants.get_grant(db, startup.id, viewer.user_id)
    detail = StartupDetailResponse.model_validate(startup)
    detail.team_members = [
        TeamMemberResponse.model_validate(m) for m in await list_team_members(db, startup.id)
    ]
    if grant is not None:
        detail.access_status = grant.status
        detail.has_access = grant.status is AccessRequestStatus.APPROVED
    return detail


async def list_startups(
    db: AsyncSession,
    viewer: Viewer,
    *,
    industry: str | None = None,
    stage: StartupStage | None = None,
    search: str | None = None,
    is_public: bool | None = None,
    min_funding: Decimal | None = None,
    max_funding: Decimal | None = None,
    location: str | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    page: int = 1,
    limit: int = 10,
) -> tuple[list[StartupResponse], int]:
    """Founders see their own, investors see public plus granted, admins see all."""
    stmt = select(Startup)

    capability = viewer.capability_over(None)
    if capability is Capability.FOUNDER:
        stmt = stmt.where(Startup.user_id == viewer.user_id)
    elif capability is Capability.INVESTOR:
        stmt = stmt.where(
            or_(
                Startup.is_public.is_(True),
                Startup.id.in_(grants.approved_startup_ids(viewer.user_id)),
            )
        )

    if industry:
        stmt = stmt.where(Startup.industry.icontains(industry, autoescape=True))
    if stage is not None:
        stmt = stmt.where(Startup.stage == stage)
    if search:
        stmt = stmt.where(
            or_(
                Startup.company_name.icontains(search, autoescape=True),
                Startup.description.icontains(search, autoescape=True),
                Startup.tagline.icontains(search, autoescape=True),
            )
        )
    if is_public is not None:
        stmt = stmt.where(Startup.is_public.is_(is_public))
    if min_funding is not None:
        stmt = stmt.where(Startup.funding_raised >= min_funding)
    if max_funding is not None:
        stmt = stmt.where(Startup.funding_raised <= max_funding)
    if location:
        stmt = stmt.where(Startup.location.icontains(location, autoescape=True))

    # Unknown sort fields fall back to created_at
    column = SORT_FIELDS.get(sort_by, Startup.created_at)
    ordering = column.asc() if sort_order.lower() == "asc" else column.desc()
    stmt = stmt.order_by(ordering, Startup.id)

    startups, total = await paginate(db, stmt, page, limit)

    granted: set[uuid.UUID] = set()
    if startups:
        result = await db.execute(
            grants.approved_startup_ids(viewer.user_id).where(
                StartupAccessRequest.startup_id.in_([s.id for s in startups])
            )
        )
        granted = set(result.scalars().all())

    items = [
        StartupResponse.model_validate(s).model_copy(update={"has_access": s.id in granted})
        for s in startups
    ]
    return items, total


async def update_startup(
    db: AsyncSession, viewer: Viewer, startup_id: uuid.UUID, body: StartupUpdate
) -> Startup:
    """Partial merge: only fields present in the request are written."""
    startup = await _get_startup_or_raise(db, startup_id)
    viewer.require_manage(startup.user_id, "Access denied")

    changes = {
        field: value
        for field, value in body.model_dump(exclude_unset=True).items()
        if value is not None or field in _NULLABLE_FIELDS
    }
    if not changes:
        raise InvalidArgumentError("No fields to update")

    for field, value in changes.items():
        setattr(startup, field, value)
    await db.flush()

    logger.info("startup_updated", startup_id=str(startup_id), fields=sorted(changes))
    return startup


async def delete_startup(db: AsyncSession, viewer: Viewer, startup_id: uuid.UUID) -> None:
    startup = await _get_startup_or_raise(db, startup_id)
    viewer.require_manage(startup.user_id, "Access denied")

    await db.delete(startup)
    await db.flush()
    logger.info("startup_deleted", startup_id=str(startup_id), user_id=str(viewer.user_id))


# ── Team members ────────────────────────────────────────────────────────────


async def list_team_members(db: AsyncSession, startup_id: uuid.UUID) -> list[StartupTeamMember]:
    result = await db.execute(
        select(StartupTeamMember)
        .where(StartupTeamMember.startup_id == startup_id)
        .order_by(StartupTeamMember.created_at, StartupTeamMember.id)
    )
    return list(result.scalars().all())


async def _get_member_or_raise(
    db: AsyncSession, startup_id: uuid.UUID, member_id: uuid.UUID
) -> StartupTeamMember:
    member = await db.get(StartupTeamMember, member_id)
    if member is None or member.startup_id != startup_id:
        raise NotFoundError("Team member not found")
    return member


async def add_team_member(
    db: AsyncSession, viewer: Viewer, startup_id: uuid.UUID, body: TeamMemberBody
) -> StartupTeamMember:
    startup = await _get_startup_or_raise(db, startup_id)
    viewer.require_manage(startup.user_id, "Access denied")

    member = StartupTeamMember(startup_id=startup_id, **body.model_dump())
    db.add(member)
    await db.flush()

    logger.info("team_member_added", startup_id=str(startup_id), member_id=str(member.id))
    return member


async def update_team_member(
    db: AsyncSession,
    viewer: Viewer,
    startup_id: uuid.UUID,
    member_id: uuid.UUID,
    body: TeamMemberBody,
) -> StartupTeamMember:
    """Every field is rewritten; optional fields left out are cleared."""
    startup = await _get_startup_or_raise(db, startup_id)
    viewer.require_manage(startup.user_id, "Access denied")
    member = await _get_member_or_raise(db, startup_id, member_id)

    for field, value in body.model_dump().items():
        setattr(member, field, value)
    await db.flush()

    logger.info("team_member_updated", startup_id=str(startup_id), member_id=str(member_id))
    return member


async def remove_team_member(
    db: AsyncSession, viewer: Viewer, startup_id: uuid.UUID, member_id: uuid.UUID
) -> None:
    startup = await _get_startup_or_raise(db, startup_id)
    viewer.require_manage(startup.user_id, "Access denied")
    member = await _get_member_or_raise(db, startup_id, member_id)

    await db.delete(member)
    await db.flush()
    logger.info("team_member_removed", startup_id=str(startup_id), member_id=str(member_id))
