"""Investors API router."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from growth_catalyst.auth.dependencies import get_viewer, require_role
from growth_catalyst.auth.viewer import Viewer
from growth_catalyst.core.config import settings
from growth_catalyst.core.database import get_db
from growth_catalyst.core.pagination import page_info
from growth_catalyst.models.enums import UserRole
from growth_catalyst.modules.investors import service
from growth_catalyst.modules.investors.schemas import (
    InvestorCreate,
    InvestorDetailResponse,
    InvestorListResponse,
    InvestorResponse,
    InvestorUpdate,
)

router = APIRouter(prefix="/investors", tags=["investors"])


@router.get("", response_model=InvestorListResponse)
async def list_investors(
    industry: str | None = Query(None, max_length=100),
    investment_focus: str | None = Query(None, max_length=50),
    location: str | None = Query(None, max_length=255),
    search: str | None = Query(None, max_length=200),
    is_active: bool | None = None,
    min_investment: float | None = Query(None, ge=0),
    max_investment: float | None = Query(None, ge=0),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc", max_length=4),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> InvestorListResponse:
    items, total = await service.list_investors(
        db,
        industry=industry,
        investment_focus=investment_focus,
        location=location,
        search=search,
        is_active=is_active,
        min_investment=min_investment,
        max_investment=max_investment,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return InvestorListResponse(items=items, **page_info(page, limit, total).model_dump())


@router.get("/{investor_id}", response_model=InvestorDetailResponse)
async def get_investor(
    investor_id: uuid.UUID,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> InvestorDetailResponse:
    return await service.get_investor(db, viewer, investor_id)


@router.post(
    "",
    response_model=InvestorResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_role([UserRole.INVESTOR, UserRole.ADMIN]))],
)
async def create_investor(
    body: InvestorCreate,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> InvestorResponse:
    investor = await service.create_investor(db, viewer, body)
    return InvestorResponse.model_validate(investor)


@router.put("/{investor_id}", response_model=InvestorResponse)
async def update_investor(
    investor_id: uuid.UUID,
    body: InvestorUpdate,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> InvestorResponse:
    investor = await service.update_investor(db, viewer, investor_id, body)
    return InvestorResponse.model_validate(investor)
