"""Event Invitations — Pydantic schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from growth_catalyst.models.enums import EventStage, InvitationStatus


class InvitationCreate(BaseModel):
    event_id: uuid.UUID
    user_id: uuid.UUID


class BulkInvitationCreate(BaseModel):
    event_id: uuid.UUID
    user_ids: list[uuid.UUID] = Field(..., min_length=1, max_length=100)


class InvitationRespond(BaseModel):
    status: InvitationStatus


class InvitationResponse(BaseModel):
    id: uuid.UUID
    event_id: uuid.UUID
    user_id: uuid.UUID
    status: InvitationStatus
    invited_by: uuid.UUID | None
    sent_at: datetime
    responded_at: datetime | None

    model_config = {"from_attributes": True}


class InvitedEventSummary(BaseModel):
    id: uuid.UUID
    name: str
    description: str
    stage: EventStage
    start_date: datetime
    end_date: datetime
    venue: str
    is_public: bool
    is_invite_only: bool

    model_config = {"from_attributes": True}


class MyInvitationResponse(InvitationResponse):
    event: InvitedEventSummary | None = None


class BulkInvitationResponse(BaseModel):
    invitations: list[InvitationResponse]
    # Users that already had an invitation
    skipped: int


class InvitationListResponse(BaseModel):
    items: list[InvitationResponse]
    total: int
    page: int
    limit: int
    pages: int


class MyInvitationListResponse(BaseModel):
    items: list[MyInvitationResponse]
    total: int
    page: int
    limit: int
    pages: int
