"""Page/limit/offset pagination shared by list endpoints."""

from math import ceil
from typing import Any

from pydantic import BaseModel
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


def page_info(page: int, limit: int, total: int) -> Pagination:
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        pages=ceil(total / limit) if total > 0 else 0,
    )


async def paginate(
    db: AsyncSession, stmt: Select[Any], page: int, limit: int
) -> tuple[list[Any], int]:
    """Run ``stmt`` for one page. ``stmt`` must already carry its ORDER BY."""
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = (await db.execute(count_stmt)).scalar_one()

    result = await db.execute(stmt.offset((page - 1) * limit).limit(limit))
    return list(result.scalars().all()), total
