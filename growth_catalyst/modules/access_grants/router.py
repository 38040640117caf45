"""Access Grants API router (mounted under /startups)."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from growth_catalyst.auth.dependencies import require_role
from growth_catalyst.core.config import settings
from growth_catalyst.core.database import get_db
from growth_catalyst.core.pagination import page_info
from growth_catalyst.models.enums import AccessRequestStatus, UserRole
from growth_catalyst.modules.access_grants import service
from growth_catalyst.modules.access_grants.schemas import (
    AccessRequestListResponse,
    AccessRequestResponse,
    AccessReview,
)
from growth_catalyst.schemas.auth import CurrentUser

router = APIRouter(prefix="/startups", tags=["access-grants"])


@router.post(
    "/{startup_id}/request-access",
    response_model=AccessRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def request_access(
    startup_id: uuid.UUID,
    current_user: CurrentUser = Depends(require_role([UserRole.INVESTOR, UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db),
) -> AccessRequestResponse:
    grant = await service.request_access(db, startup_id, current_user.user_id)
    return AccessRequestResponse.model_validate(grant)


@router.get("/{startup_id}/access-requests", response_model=AccessRequestListResponse)
async def list_access_requests(
    startup_id: uuid.UUID,
    status_filter: AccessRequestStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=settings.MAX_PAGE_LIMIT),
    current_user: CurrentUser = Depends(require_role([UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db),
) -> AccessRequestListResponse:
    items, total = await service.list_access_requests(
        db, startup_id, status=status_filter, page=page, limit=limit
    )
    return AccessRequestListResponse(
        items=[AccessRequestResponse.model_validate(g) for g in items],
        **page_info(page, limit, total).model_dump(),
    )


@router.patch(
    "/{startup_id}/access-requests/{request_id}",
    response_model=AccessRequestResponse,
)
async def review_access(
    startup_id: uuid.UUID,
    request_id: uuid.UUID,
    body: AccessReview,
    current_user: CurrentUser = Depends(require_role([UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db),
) -> AccessRequestResponse:
    grant = await service.review_access(
        db,
        startup_id,
        request_id,
        decision=body.status,
        reviewer_id=current_user.user_id,
        notes=body.notes,
    )
    return AccessRequestResponse.model_validate(grant)
