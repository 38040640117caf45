"""Event Invitations API router."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from growth_catalyst.auth.dependencies import get_viewer, require_role
from growth_catalyst.auth.viewer import Viewer
from growth_catalyst.core.config import settings
from growth_catalyst.core.database import get_db
from growth_catalyst.core.pagination import page_info
from growth_catalyst.models.enums import InvitationStatus, UserRole
from growth_catalyst.modules.invitations import service
from growth_catalyst.modules.invitations.schemas import (
    BulkInvitationCreate,
    BulkInvitationResponse,
    InvitationCreate,
    InvitationListResponse,
    InvitationRespond,
    InvitationResponse,
    MyInvitationListResponse,
)

router = APIRouter(prefix="/event-invitations", tags=["event-invitations"])

_admin_only = [Depends(require_role([UserRole.ADMIN]))]


@router.post(
    "",
    response_model=InvitationResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=_admin_only,
)
async def create_invitation(
    body: InvitationCreate,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> InvitationResponse:
    invitation = await service.create_invitation(db, viewer, body.event_id, body.user_id)
    return InvitationResponse.model_validate(invitation)


@router.post(
    "/bulk",
    response_model=BulkInvitationResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=_admin_only,
)
async def create_bulk_invitations(
    body: BulkInvitationCreate,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> BulkInvitationResponse:
    invitations, skipped = await service.create_bulk_invitations(
        db, viewer, body.event_id, body.user_ids
    )
    return BulkInvitationResponse(
        invitations=[InvitationResponse.model_validate(i) for i in invitations],
        skipped=skipped,
    )


@router.get("/my-invitations", response_model=MyInvitationListResponse)
async def list_my_invitations(
    status_filter: InvitationStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> MyInvitationListResponse:
    items, total = await service.list_my_invitations(
        db, viewer, status=status_filter, page=page, limit=limit
    )
    return MyInvitationListResponse(items=items, **page_info(page, limit, total).model_dump())


@router.patch("/{invitation_id}/respond", response_model=InvitationResponse)
async def respond_to_invitation(
    invitation_id: uuid.UUID,
    body: InvitationRespond,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> InvitationResponse:
    invitation = await service.respond_to_invitation(db, viewer, invitation_id, body.status)
    return InvitationResponse.model_validate(invitation)


@router.get(
    "/event/{event_id}", response_model=InvitationListResponse, dependencies=_admin_only
)
async def list_event_invitations(
    event_id: uuid.UUID,
    status_filter: InvitationStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=settings.MAX_PAGE_LIMIT),
    db: AsyncSession = Depends(get_db),
) -> InvitationListResponse:
    invitations, total = await service.list_event_invitations(
        db, event_id, status=status_filter, page=page, limit=limit
    )
    return InvitationListResponse(
        items=[InvitationResponse.model_validate(i) for i in invitations],
        **page_info(page, limit, total).model_dump(),
    )


@router.delete(
    "/{invitation_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=_admin_only
)
async def delete_invitation(
    invitation_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> None:
    await service.delete_invitation(db, invitation_id)
