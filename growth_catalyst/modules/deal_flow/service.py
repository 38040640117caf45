"""Deal Flow — business logic.

Stages run interested -> in_review -> due_diligence -> negotiating ->
approved | rejected, but any status may be set directly. Only the owning
investor or an admin may touch a pipeline.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator
from datetime import datetime, timedelta

import structlog
from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from growth_catalyst.auth.viewer import Viewer
from growth_catalyst.core.database import add_unique
from growth_catalyst.core.errors import ConflictError, NotFoundError
from growth_catalyst.core.pagination import paginate
from growth_catalyst.models.base import utcnow
from growth_catalyst.models.enums import DealPriority, DealStatus, StartupStage
from growth_catalyst.models.investors import DealFlow, Investor
from growth_catalyst.models.startups import Startup
from growth_catalyst.modules.deal_flow.schemas import (
    DealFlowAnalyticsResponse,
    DealFlowCreate,
    DealFlowUpdate,
    IndustryStat,
    MonthlyStat,
    StageStat,
    StatusStat,
)

logger = structlog.get_logger()

_DUPLICATE_DEAL = "Startup already in deal flow"


# ── Helpers ─────────────────────────────────────────────────────────────────


async def _get_investor_or_raise(db: AsyncSession, investor_id: uuid.UUID) -> Investor:
    investor = await db.get(Investor, investor_id)
    if investor is None:
        raise NotFoundError("Investor not found")
    return investor


async def _get_owned_investor(
    db: AsyncSession, viewer: Viewer, investor_id: uuid.UUID
) -> Investor:
    investor = await _get_investor_or_raise(db, investor_id)
    viewer.require_manage(investor.user_id, "Access denied")
    return investor


async def _get_deal_or_raise(
    db: AsyncSession, investor_id: uuid.UUID, deal_id: uuid.UUID
) -> DealFlow:
    stmt = select(DealFlow).where(DealFlow.id == deal_id, DealFlow.investor_id == investor_id)
    deal = (await db.execute(stmt)).scalar_one_or_none()
    if deal is None:
        raise NotFoundError("Deal not found")
    return deal


# ── Pipeline ────────────────────────────────────────────────────────────────


async def add_to_flow(
    db: AsyncSession, viewer: Viewer, investor_id: uuid.UUID, body: DealFlowCreate
) -> DealFlow:
    await _get_owned_investor(db, viewer, investor_id)
    if await db.get(Startup, body.startup_id) is None:
        raise NotFoundError("Startup not found")

    existing = await db.execute(
        select(DealFlow.id).where(
            DealFlow.investor_id == investor_id,
            DealFlow.startup_id == body.startup_id,
        )
    )
    if existing.first() is not None:
        raise ConflictError(_DUPLICATE_DEAL)

    deal = DealFlow(
        investor_id=investor_id,
        startup_id=body.startup_id,
        status=body.status,
        priority=body.priority or DealPriority.MEDIUM,
        notes=body.notes,
        expected_close_date=body.expected_close_date,
        investment_amount=body.investment_amount,
    )
    await add_unique(db, deal, conflict_message=_DUPLICATE_DEAL)

    logger.info(
        "deal_flow_entry_added",
        investor_id=str(investor_id),
        startup_id=str(body.startup_id),
        deal_id=str(deal.id),
        status=deal.status.value,
    )
    return deal


async def update_flow(
    db: AsyncSession,
    viewer: Viewer,
    investor_id: uuid.UUID,
    deal_id: uuid.UUID,
    body: DealFlowUpdate,
) -> DealFlow:
    """Replace every mutable field of the deal with the request values."""
    await _get_owned_investor(db, viewer, investor_id)
    deal = await _get_deal_or_raise(db, investor_id, deal_id)

    previous = deal.status
    deal.status = body.status
    deal.notes = body.notes
    deal.priority = body.priority
    deal.expected_close_date = body.expected_close_date
    deal.investment_amount = body.investment_amount
    await db.flush()

    logger.info(
        "deal_flow_entry_updated",
        investor_id=str(investor_id),
        deal_id=str(deal_id),
        from_status=previous.value,
        to_status=deal.status.value,
    )
    return deal


async def remove_from_flow(
    db: AsyncSession, viewer: Viewer, investor_id: uuid.UUID, deal_id: uuid.UUID
) -> None:
    await _get_owned_investor(db, viewer, investor_id)
    deal = await _get_deal_or_raise(db, investor_id, deal_id)

    await db.delete(deal)
    await db.flush()
    logger.info("deal_flow_entry_removed", investor_id=str(investor_id), deal_id=str(deal_id))


async def list_flow(
    db: AsyncSession,
    viewer: Viewer,
    investor_id: uuid.UUID,
    status: DealStatus | None = None,
    priority: DealPriority | None = None,
    page: int = 1,
    limit: int = 20,
) -> tuple[list[DealFlow], int]:
    await _get_owned_investor(db, viewer, investor_id)

    stmt = select(DealFlow).where(DealFlow.investor_id == investor_id)
    if status is not None:
        stmt = stmt.where(DealFlow.status == status)
    if priority is not None:
        stmt = stmt.where(DealFlow.priority == priority)
    stmt = stmt.order_by(DealFlow.created_at.desc(), DealFlow.id)

    return await paginate(db, stmt, page, limit)


async def deals_for_investor(db: AsyncSession, investor_id: uuid.UUID) -> list[DealFlow]:
    """Whole pipeline, newest first. Callers enforce ownership."""
    result = await db.execute(
        select(DealFlow)
        .where(DealFlow.investor_id == investor_id)
        .order_by(DealFlow.created_at.desc())
    )
    return list(result.scalars().all())


# ── Recommendations ─────────────────────────────────────────────────────────


class Recommendations:
    """Public startups matching an investor's criteria, best score first.

    Every ``async for`` runs the query again, so the sequence can be iterated
    more than once and always reflects the current store. It is bounded by
    ``limit``.
    """

    def __init__(self, db: AsyncSession, investor_id: uuid.UUID, limit: int) -> None:
        self._db = db
        self.investor_id = investor_id
        self.limit = limit

    def statement(self, investor: Investor) -> Select:
        criteria = investor.investment_criteria or {}
        stmt = select(Startup).where(Startup.is_public.is_(True))

        stages = criteria.get("requiredStage") or []
        if stages:
            stmt = stmt.where(Startup.stage.in_([StartupStage(s) for s in stages]))

        regions = criteria.get("geographicFocus") or []
        if regions:
            stmt = stmt.where(
                or_(*(Startup.location.icontains(r, autoescape=True) for r in regions))
            )

        if investor.industries:
            stmt = stmt.where(Startup.industry.in_(investor.industries))

        revenue = Startup.financial_info["revenue"].as_float()
        if criteria.get("minRevenue") is not None:
            stmt = stmt.where(revenue >= criteria["minRevenue"])
        if criteria.get("maxRevenue") is not None:
            stmt = stmt.where(revenue <= criteria["maxRevenue"])

        in_flow = select(DealFlow.startup_id).where(DealFlow.investor_id == investor.id)
        stmt = stmt.where(Startup.id.not_in(in_flow))

        return stmt.order_by(
            Startup.investability_score.desc(), Startup.created_at.desc()
        ).limit(self.limit)

    async def __aiter__(self) -> AsyncIterator[Startup]:
        investor = await _get_investor_or_raise(self._db, self.investor_id)
        result = await self._db.scalars(self.statement(investor))
        for startup in result:
            yield startup


async def recommend(db: AsyncSession, investor_id: uuid.UUID, limit: int = 10) -> Recommendations:
    await _get_investor_or_raise(db, investor_id)
    return Recommendations(db, investor_id, limit)


# ── Analytics ───────────────────────────────────────────────────────────────


async def _calculate_monthly_trend(
    db: AsyncSession, investor_id: uuid.UUID, since: datetime
) -> list[MonthlyStat]:
    """Deals added per calendar month since ``since``, oldest month first."""
    result = await db.execute(
        select(DealFlow.created_at)
        .where(DealFlow.investor_id == investor_id, DealFlow.created_at >= since)
        .order_by(DealFlow.created_at)
    )

    monthly: dict[str, int] = {}
    for created_at in result.scalars():
        key = created_at.strftime("%Y-%m")
        monthly[key] = monthly.get(key, 0) + 1

    return [
        MonthlyStat(month=month, deals_added=count) for month, count in sorted(monthly.items())
    ]


async def analytics(
    db: AsyncSession, viewer: Viewer, investor_id: uuid.UUID
) -> DealFlowAnalyticsResponse:
    await _get_owned_investor(db, viewer, investor_id)

    status_rows = await db.execute(
        select(DealFlow.status, func.count(DealFlow.id), func.avg(DealFlow.investment_amount))
        .where(DealFlow.investor_id == investor_id)
        .group_by(DealFlow.status)
    )
    by_status = [
        StatusStat(
            status=status,
            count=count,
            avg_investment=round(float(avg), 2) if avg is not None else None,
        )
        for status, count, avg in status_rows.all()
    ]

    deal_count = func.count(DealFlow.id).label("count")
    industry_rows = await db.execute(
        select(Startup.industry, deal_count)
        .select_from(DealFlow)
        .join(Startup, Startup.id == DealFlow.startup_id)
        .where(DealFlow.investor_id == investor_id)
        .group_by(Startup.industry)
        .order_by(deal_count.desc(), Startup.industry)
    )
    by_industry = [IndustryStat(industry=i, count=c) for i, c in industry_rows.all()]

    stage_rows = await db.execute(
        select(Startup.stage, deal_count)
        .select_from(DealFlow)
        .join(Startup, Startup.id == DealFlow.startup_id)
        .where(DealFlow.investor_id == investor_id)
        .group_by(Startup.stage)
        .order_by(deal_count.desc(), Startup.stage)
    )
    by_stage = [StageStat(stage=s, count=c) for s, c in stage_rows.all()]

    since = utcnow() - timedelta(days=365)
    monthly = await _calculate_monthly_trend(db, investor_id, since)

    return DealFlowAnalyticsResponse(
        investor_id=investor_id,
        by_status=by_status,
        by_industry=by_industry,
        by_stage=by_stage,
        monthly=monthly,
        generated_at=utcnow(),
    )
