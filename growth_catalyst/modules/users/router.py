"""Users API router."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from growth_catalyst.auth.dependencies import get_viewer, require_role
from growth_catalyst.auth.viewer import Viewer
from growth_catalyst.core.config import settings
from growth_catalyst.core.database import get_db
from growth_catalyst.core.pagination import page_info
from growth_catalyst.models.enums import UserRole
from growth_catalyst.modules.users import service
from growth_catalyst.modules.users.schemas import UserListResponse, UserResponse, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])

_admin_only = [Depends(require_role([UserRole.ADMIN]))]


@router.get("", response_model=UserListResponse, dependencies=_admin_only)
async def list_users(
    role: UserRole | None = None,
    search: str | None = Query(None, max_length=200),
    is_active: bool | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    db: AsyncSession = Depends(get_db),
) -> UserListResponse:
    users, total = await service.list_users(
        db, role=role, search=search, is_active=is_active, page=page, limit=limit
    )
    return UserListResponse(
        items=[UserResponse.model_validate(u) for u in users],
        **page_info(page, limit, total).model_dump(),
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: uuid.UUID,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    return UserResponse.model_validate(await service.get_user(db, viewer, user_id))


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: uuid.UUID,
    body: UserUpdate,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    user = await service.update_user(db, viewer, user_id, body)
    return UserResponse.model_validate(user)


@router.patch("/{user_id}/deactivate", response_model=UserResponse, dependencies=_admin_only)
async def deactivate_user(
    user_id: uuid.UUID,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    user = await service.set_user_active(db, viewer, user_id, False)
    return UserResponse.model_validate(user)


@router.patch("/{user_id}/activate", response_model=UserResponse, dependencies=_admin_only)
async def activate_user(
    user_id: uuid.UUID,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    user = await service.set_user_active(db, viewer, user_id, True)
    return UserResponse.model_validate(user)
