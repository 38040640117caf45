"""Events API router."""

from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from growth_catalyst.auth.dependencies import get_viewer, require_role
from growth_catalyst.auth.viewer import Viewer
from growth_catalyst.core.config import settings
from growth_catalyst.core.database import get_db
from growth_catalyst.core.pagination import page_info
from growth_catalyst.models.enums import EventStage, EventStatus, RSVPStatus, UserRole
from growth_catalyst.modules.events import service
from growth_catalyst.modules.events.schemas import (
    AttendeeListResponse,
    AttendeeResponse,
    CheckInRequest,
    EventCreate,
    EventDetailResponse,
    EventListResponse,
    EventResponse,
    EventUpdate,
    RSVPRequest,
)

router = APIRouter(prefix="/events", tags=["events"])

_admin_only = [Depends(require_role([UserRole.ADMIN]))]


@router.get("", response_model=EventListResponse)
async def list_events(
    stage: EventStage | None = None,
    status_filter: EventStatus | None = Query(None, alias="status"),
    search: str | None = Query(None, max_length=200),
    is_public: bool | None = None,
    is_invite_only: bool | None = None,
    start_date: datetime | None = Query(None, description="Events starting at or after"),
    end_date: datetime | None = Query(None, description="Events ending at or before"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> EventListResponse:
    items, total = await service.list_events(
        db,
        viewer,
        stage=stage,
        status=status_filter,
        search=search,
        is_public=is_public,
        is_invite_only=is_invite_only,
        start_date=start_date,
        end_date=end_date,
        page=page,
        limit=limit,
    )
    return EventListResponse(items=items, **page_info(page, limit, total).model_dump())


@router.get("/{event_id}", response_model=EventDetailResponse)
async def get_event(
    event_id: uuid.UUID,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> EventDetailResponse:
    return await service.get_event(db, viewer, event_id)


@router.post(
    "",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=_admin_only,
)
async def create_event(
    body: EventCreate,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> EventResponse:
    event = await service.create_event(db, viewer, body)
    return EventResponse.model_validate(event)


@router.put("/{event_id}", response_model=EventResponse, dependencies=_admin_only)
async def update_event(
    event_id: uuid.UUID,
    body: EventUpdate,
    db: AsyncSession = Depends(get_db),
) -> EventResponse:
    event = await service.update_event(db, event_id, body)
    return EventResponse.model_validate(event)


@router.delete(
    "/{event_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=_admin_only
)
async def delete_event(
    event_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> None:
    await service.delete_event(db, event_id)


# ── RSVP ────────────────────────────────────────────────────────────────────


@router.post("/{event_id}/rsvp", response_model=AttendeeResponse)
async def rsvp(
    event_id: uuid.UUID,
    body: RSVPRequest,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> AttendeeResponse:
    attendee = await service.rsvp(db, viewer, event_id, body.rsvp_status)
    return AttendeeResponse.model_validate(attendee)


@router.delete("/{event_id}/rsvp", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_rsvp(
    event_id: uuid.UUID,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> None:
    await service.cancel_rsvp(db, viewer, event_id)


@router.get(
    "/{event_id}/attendees", response_model=AttendeeListResponse, dependencies=_admin_only
)
async def list_attendees(
    event_id: uuid.UUID,
    status_filter: RSVPStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=settings.MAX_PAGE_LIMIT),
    db: AsyncSession = Depends(get_db),
) -> AttendeeListResponse:
    attendees, total = await service.list_attendees(
        db, event_id, rsvp_status=status_filter, page=page, limit=limit
    )
    return AttendeeListResponse(
        items=[AttendeeResponse.model_validate(a) for a in attendees],
        **page_info(page, limit, total).model_dump(),
    )


@router.post(
    "/{event_id}/check-in/{user_id}",
    response_model=AttendeeResponse,
    dependencies=_admin_only,
)
async def check_in_out(
    event_id: uuid.UUID,
    user_id: uuid.UUID,
    body: CheckInRequest,
    db: AsyncSession = Depends(get_db),
) -> AttendeeResponse:
    attendee = await service.check_in_out(db, event_id, user_id, body.action)
    return AttendeeResponse.model_validate(attendee)
