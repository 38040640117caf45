"""Deal Flow API router (mounted under /investors)."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from growth_catalyst.auth.dependencies import get_viewer, require_role
from growth_catalyst.auth.viewer import Viewer
from growth_catalyst.core.config import settings
from growth_catalyst.core.database import get_db
from growth_catalyst.core.pagination import page_info
from growth_catalyst.models.enums import DealPriority, DealStatus, UserRole
from growth_catalyst.modules.deal_flow import service
from growth_catalyst.modules.deal_flow.schemas import (
    DealFlowAnalyticsResponse,
    DealFlowCreate,
    DealFlowListResponse,
    DealFlowResponse,
    DealFlowUpdate,
)
from growth_catalyst.modules.startups.schemas import StartupResponse

router = APIRouter(
    prefix="/investors",
    tags=["deal-flow"],
    dependencies=[Depends(require_role([UserRole.INVESTOR, UserRole.ADMIN]))],
)


@router.get("/{investor_id}/deal-flow", response_model=DealFlowListResponse)
async def list_flow(
    investor_id: uuid.UUID,
    status_filter: DealStatus | None = Query(None, alias="status"),
    priority: DealPriority | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=settings.MAX_PAGE_LIMIT),
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> DealFlowListResponse:
    deals, total = await service.list_flow(
        db, viewer, investor_id, status=status_filter, priority=priority, page=page, limit=limit
    )
    return DealFlowListResponse(
        items=[DealFlowResponse.model_validate(d) for d in deals],
        **page_info(page, limit, total).model_dump(),
    )


@router.post(
    "/{investor_id}/deal-flow",
    response_model=DealFlowResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_to_flow(
    investor_id: uuid.UUID,
    body: DealFlowCreate,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> DealFlowResponse:
    deal = await service.add_to_flow(db, viewer, investor_id, body)
    return DealFlowResponse.model_validate(deal)


@router.put("/{investor_id}/deal-flow/{deal_id}", response_model=DealFlowResponse)
async def update_flow(
    investor_id: uuid.UUID,
    deal_id: uuid.UUID,
    body: DealFlowUpdate,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> DealFlowResponse:
    deal = await service.update_flow(db, viewer, investor_id, deal_id, body)
    return DealFlowResponse.model_validate(deal)


@router.delete("/{investor_id}/deal-flow/{deal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_flow(
    investor_id: uuid.UUID,
    deal_id: uuid.UUID,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> None:
    await service.remove_from_flow(db, viewer, investor_id, deal_id)


@router.get("/{investor_id}/recommendations", response_model=list[StartupResponse])
async def get_recommendations(
    investor_id: uuid.UUID,
    limit: int = Query(10, ge=1, le=settings.MAX_PAGE_LIMIT),
    db: AsyncSession = Depends(get_db),
) -> list[StartupResponse]:
    """Public startups matching the investor's criteria, not yet in their pipeline."""
    recommendations = await service.recommend(db, investor_id, limit=limit)
    return [StartupResponse.model_validate(s) async for s in recommendations]


@router.get("/{investor_id}/analytics", response_model=DealFlowAnalyticsResponse)
async def get_analytics(
    investor_id: uuid.UUID,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> DealFlowAnalyticsResponse:
    return await service.analytics(db, viewer, investor_id)
