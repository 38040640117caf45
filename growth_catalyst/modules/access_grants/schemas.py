"""Access Grants — Pydantic schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from growth_catalyst.models.enums import AccessRequestStatus


class AccessReview(BaseModel):
    # Validated by the service so an unknown decision is a 400, not a 422
    status: str = Field(..., max_length=20)
    notes: str | None = Field(None, max_length=2000)


class AccessRequestResponse(BaseModel):
    id: uuid.UUID
    startup_id: uuid.UUID
    investor_id: uuid.UUID
    status: AccessRequestStatus
    notes: str | None
    reviewed_by: uuid.UUID | None
    requested_at: datetime
    reviewed_at: datetime | None

    model_config = {"from_attributes": True}


class AccessRequestListResponse(BaseModel):
    items: list[AccessRequestResponse]
    total: int
    page: int
    limit: int
    pages: int
