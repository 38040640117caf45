"""Users — account listing, self-service profile edits and admin activation."""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from growth_catalyst.auth.viewer import Viewer
from growth_catalyst.core.errors import InvalidArgumentError, NotFoundError
from growth_catalyst.core.pagination import paginate
from growth_catalyst.models.core import User
from growth_catalyst.models.enums import UserRole
from growth_catalyst.modules.users.schemas import UserUpdate

logger = structlog.get_logger()

# Columns a partial update may clear
_NULLABLE_FIELDS = {"phone"}


async def _get_user_or_raise(db: AsyncSession, user_id: uuid.UUID) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def list_users(
    db: AsyncSession,
    *,
    role: UserRole | None = None,
    search: str | None = None,
    is_active: bool | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[User], int]:
    stmt = select(User)
    if role is not None:
        stmt = stmt.where(User.role == role)
    if search:
        stmt = stmt.where(
            or_(
                User.first_name.icontains(search, autoescape=True),
                User.last_name.icontains(search, autoescape=True),
                User.email.icontains(search, autoescape=True),
            )
        )
    if is_active is not None:
        stmt = stmt.where(User.is_active.is_(is_active))
    stmt = stmt.order_by(User.created_at.desc(), User.id)

    return await paginate(db, stmt, page, limit)


async def get_user(db: AsyncSession, viewer: Viewer, user_id: uuid.UUID) -> User:
    """Users read their own account; admins read any."""
    viewer.require_manage(user_id, "Access denied")
    return await _get_user_or_raise(db, user_id)


async def update_user(
    db: AsyncSession, viewer: Viewer, user_id: uuid.UUID, body: UserUpdate
) -> User:
    viewer.require_manage(user_id, "Access denied")
    user = await _get_user_or_raise(db, user_id)

    changes = {
        field: value
        for field, value in body.model_dump(exclude_unset=True).items()
        if value is not None or field in _NULLABLE_FIELDS
    }
    if not changes:
        raise InvalidArgumentError("No fields to update")

    for field, value in changes.items():
        setattr(user, field, value)
    await db.flush()

    logger.info("user_updated", user_id=str(user_id), fields=sorted(changes))
    return user


async def set_user_active(
    db: AsyncSession, viewer: Viewer, user_id: uuid.UUID, is_active: bool
) -> User:
    """Inactive users fail authentication on their next request."""
    user = await _get_user_or_raise(db, user_id)
    user.is_active = is_active
    await db.flush()

    logger.info(
        "user_activated" if is_active else "user_deactivated",
        user_id=str(user_id),
        by=str(viewer.user_id),
    )
    return user
