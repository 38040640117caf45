"""Investors — profile CRUD and listing."""

from __future__ import annotations

import uuid
from typing import Any

import structlog
from pydantic import BaseModel
from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from growth_catalyst.auth.viewer import Viewer
from growth_catalyst.core.errors import ConflictError, InvalidArgumentError, NotFoundError
from growth_catalyst.core.pagination import paginate
from growth_catalyst.models.enums import DealStatus
from growth_catalyst.models.investors import DealFlow, Investor
from growth_catalyst.modules.deal_flow import service as deal_flow
from growth_catalyst.modules.deal_flow.schemas import DealFlowResponse
from growth_catalyst.modules.investors.schemas import (
    InvestorCreate,
    InvestorDetailResponse,
    InvestorResponse,
    InvestorUpdate,
)

logger = structlog.get_logger()

SORT_FIELDS = {
    "created_at": Investor.created_at,
    "company_name": Investor.company_name,
    "portfolio_size": Investor.portfolio_size,
    "total_invested": Investor.total_invested,
}

_JSON_FIELDS = {
    "investment_focus",
    "investment_range",
    "industries",
    "notable_investments",
    "investment_criteria",
}
_NULLABLE_FIELDS = {"website", "linkedin"}
_CLOSED_STATUSES = (DealStatus.APPROVED, DealStatus.REJECTED)


def _column_values(body: BaseModel, *, exclude_unset: bool = False) -> dict[str, Any]:
    """Scalar fields as Python values, JSON columns as plain JSON data."""
    values = body.model_dump(exclude_unset=exclude_unset, exclude=_JSON_FIELDS)
    values.update(
        body.model_dump(
            mode="json",
            by_alias=True,
            exclude_unset=exclude_unset,
            exclude_none=True,
            include=_JSON_FIELDS,
        )
    )
    return values


async def _get_investor_or_raise(db: AsyncSession, investor_id: uuid.UUID) -> Investor:
    investor = await db.get(Investor, investor_id)
    if investor is None:
        raise NotFoundError("Investor not found")
    return investor


async def _active_deal_counts(
    db: AsyncSession, investor_ids: list[uuid.UUID]
) -> dict[uuid.UUID, int]:
    if not investor_ids:
        return {}
    result = await db.execute(
        select(DealFlow.investor_id, func.count(DealFlow.id))
        .where(
            DealFlow.investor_id.in_(investor_ids),
            DealFlow.status.not_in(_CLOSED_STATUSES),
        )
        .group_by(DealFlow.investor_id)
    )
    return dict(result.all())


async def create_investor(db: AsyncSession, viewer: Viewer, body: InvestorCreate) -> Investor:
    """One profile per investor user; admins may create more."""
    if not viewer.is_admin:
        existing = await db.execute(select(Investor.id).where(Investor.user_id == viewer.user_id))
        if existing.first() is not None:
            raise ConflictError("You already have an investor profile")

    investor = Investor(user_id=viewer.user_id, is_active=True, **_column_values(body))
    db.add(investor)
    await db.flush()

    logger.info("investor_created", investor_id=str(investor.id), user_id=str(viewer.user_id))
    return investor


async def get_investor(
    db: AsyncSession, viewer: Viewer, investor_id: uuid.UUID
) -> InvestorDetailResponse:
    investor = await _get_investor_or_raise(db, investor_id)
    counts = await _active_deal_counts(db, [investor.id])

    detail = InvestorDetailResponse.model_validate(investor)
    detail.active_deals = counts.get(investor.id, 0)
    if viewer.can_manage(investor.user_id):
        deals = await deal_flow.deals_for_investor(db, investor.id)
        detail.deal_flow = [DealFlowResponse.model_validate(d) for d in deals]
    return detail


async def list_investors(
    db: AsyncSession,
    *,
    industry: str | None = None,
    investment_focus: str | None = None,
    location: str | None = None,
    search: str | None = None,
    is_active: bool | None = None,
    min_investment: float | None = None,
    max_investment: float | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    page: int = 1,
    limit: int = 10,
) -> tuple[list[InvestorResponse], int]:
    stmt = select(Investor)

    # List columns are matched against their JSON text
    if industry:
        stmt = stmt.where(cast(Investor.industries, String).icontains(industry, autoescape=True))
    if investment_focus:
        stmt = stmt.where(
            cast(Investor.investment_focus, String).icontains(investment_focus, autoescape=True)
        )
    if location:
        stmt = stmt.where(Investor.location.icontains(location, autoescape=True))
    if search:
        stmt = stmt.where(
            or_(
                Investor.company_name.icontains(search, autoescape=True),
                Investor.description.icontains(search, autoescape=True),
            )
        )
    if is_active is not None:
        stmt = stmt.where(Investor.is_active.is_(is_active))
    if min_investment is not None:
        stmt = stmt.where(Investor.investment_range["min"].as_float() >= min_investment)
    if max_investment is not None:
        stmt = stmt.where(Investor.investment_range["max"].as_float() <= max_investment)

    column = SORT_FIELDS.get(sort_by, Investor.created_at)
    ordering = column.asc() if sort_order.lower() == "asc" else column.desc()
    stmt = stmt.order_by(ordering, Investor.id)

    investors, total = await paginate(db, stmt, page, limit)
    counts = await _active_deal_counts(db, [i.id for i in investors])

    items = [
        InvestorResponse.model_validate(i).model_copy(update={"active_deals": counts.get(i.id, 0)})
        for i in investors
    ]
    return items, total


async def update_investor(
    db: AsyncSession, viewer: Viewer, investor_id: uuid.UUID, body: InvestorUpdate
) -> Investor:
    """Partial merge: only fields present in the request are written."""
    investor = await _get_investor_or_raise(db, investor_id)
    viewer.require_manage(investor.user_id, "Access denied")

    changes = {
        field: value
        for field, value in _column_values(body, exclude_unset=True).items()
        if value is not None or field in _NULLABLE_FIELDS
    }
    if not changes:
        raise InvalidArgumentError("No fields to update")

    for field, value in changes.items():
        setattr(investor, field, value)
    await db.flush()

    logger.info("investor_updated", investor_id=str(investor_id), fields=sorted(changes))
    return investor
