"""Startups API router."""

from __future__ import annotations

import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from growth_catalyst.auth.dependencies import get_viewer, require_role
from growth_catalyst.auth.viewer import Viewer
from growth_catalyst.core.config import settings
from growth_catalyst.core.database import get_db
from growth_catalyst.core.pagination import page_info
from growth_catalyst.models.enums import StartupStage, UserRole
from growth_catalyst.modules.startups import service
from growth_catalyst.modules.startups.schemas import (
    StartupCreate,
    StartupDetailResponse,
    StartupListResponse,
    StartupResponse,
    StartupUpdate,
    TeamMemberBody,
    TeamMemberResponse,
)

router = APIRouter(prefix="/startups", tags=["startups"])


@router.get("", response_model=StartupListResponse)
async def list_startups(
    industry: str | None = Query(None, max_length=100),
    stage: StartupStage | None = None,
    search: str | None = Query(None, max_length=200),
    is_public: bool | None = None,
    min_funding: Decimal | None = Query(None, ge=0),
    max_funding: Decimal | None = Query(None, ge=0),
    location: str | None = Query(None, max_length=255),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc", max_length=4),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> StartupListResponse:
    items, total = await service.list_startups(
        db,
        viewer,
        industry=industry,
        stage=stage,
        search=search,
        is_public=is_public,
        min_funding=min_funding,
        max_funding=max_funding,
        location=location,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return StartupListResponse(items=items, **page_info(page, limit, total).model_dump())


@router.get("/{startup_id}", response_model=StartupDetailResponse)
async def get_startup(
    startup_id: uuid.UUID,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> StartupDetailResponse:
    return await service.get_startup(db, viewer, startup_id)


@router.post(
    "",
    response_model=StartupResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_role([UserRole.FOUNDER, UserRole.ADMIN]))],
)
async def create_startup(
    body: StartupCreate,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> StartupResponse:
    startup = await service.create_startup(db, viewer, body)
    return StartupResponse.model_validate(startup)


@router.put("/{startup_id}", response_model=StartupResponse)
async def update_startup(
    startup_id: uuid.UUID,
    body: StartupUpdate,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> StartupResponse:
    startup = await service.update_startup(db, viewer, startup_id, body)
    return StartupResponse.model_validate(startup)


@router.delete("/{startup_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_startup(
    startup_id: uuid.UUID,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> None:
    await service.delete_startup(db, viewer, startup_id)


# ── Team members ──────────────────────────────────────────────────────────────


@router.post(
    "/{startup_id}/team-members",
    response_model=TeamMemberResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_team_member(
    startup_id: uuid.UUID,
    body: TeamMemberBody,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> TeamMemberResponse:
    member = await service.add_team_member(db, viewer, startup_id, body)
    return TeamMemberResponse.model_validate(member)


@router.put("/{startup_id}/team-members/{member_id}", response_model=TeamMemberResponse)
async def update_team_member(
    startup_id: uuid.UUID,
    member_id: uuid.UUID,
    body: TeamMemberBody,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> TeamMemberResponse:
    member = await service.update_team_member(db, viewer, startup_id, member_id, body)
    return TeamMemberResponse.model_validate(member)


@router.delete(
    "/{startup_id}/team-members/{member_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def remove_team_member(
    startup_id: uuid.UUID,
    member_id: uuid.UUID,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> None:
    await service.remove_team_member(db, viewer, startup_id, member_id)
