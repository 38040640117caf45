"""Startups — Pydantic schemas."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, EmailStr, Field

from growth_catalyst.models.enums import AccessRequestStatus, StartupStage


def _not_in_future(year: int) -> int:
    if year > date.today().year:
        raise ValueError("founded_year cannot be in the future")
    return year


FoundedYear = Annotated[int, Field(ge=1900), AfterValidator(_not_in_future)]


class StartupCreate(BaseModel):
    company_name: str = Field(..., min_length=2, max_length=255)
    tagline: str | None = Field(None, min_length=10, max_length=500)
    description: str = Field(..., min_length=50, max_length=2000)
    website: str | None = Field(None, max_length=512)
    industry: str = Field(..., min_length=2, max_length=100)
    stage: StartupStage
    founded_year: FoundedYear
    team_size: int = Field(..., ge=1, le=10000)
    location: str = Field(..., min_length=2, max_length=255)
    funding_raised: Decimal = Field(Decimal("0"), ge=0)
    funding_goal: Decimal = Field(Decimal("0"), ge=0)
    financial_info: dict[str, Any] = {}
    traction_metrics: dict[str, Any] = {}


class StartupUpdate(BaseModel):
    company_name: str | None = Field(None, min_length=2, max_length=255)
    tagline: str | None = Field(None, min_length=10, max_length=500)
    description: str | None = Field(None, min_length=50, max_length=2000)
    website: str | None = Field(None, max_length=512)
    industry: str | None = Field(None, min_length=2, max_length=100)
    stage: StartupStage | None = None
    founded_year: FoundedYear | None = None
    team_size: int | None = Field(None, ge=1, le=10000)
    location: str | None = Field(None, min_length=2, max_length=255)
    funding_raised: Decimal | None = Field(None, ge=0)
    funding_goal: Decimal | None = Field(None, ge=0)
    is_public: bool | None = None
    financial_info: dict[str, Any] | None = None
    traction_metrics: dict[str, Any] | None = None


class TeamMemberBody(BaseModel):
    """Create and update share one body; an update rewrites every field."""

    name: str = Field(..., min_length=2, max_length=100)
    title: str = Field(..., min_length=2, max_length=100)
    bio: str | None = Field(None, min_length=10, max_length=1000)
    linkedin: str | None = Field(None, max_length=512, pattern=r"^https?://")
    email: EmailStr | None = None


class TeamMemberResponse(BaseModel):
    id: uuid.UUID
    startup_id: uuid.UUID
    name: str
    title: str
    bio: str | None
    linkedin: str | None
    email: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class StartupResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    company_name: str
    tagline: str | None
    description: str
    website: str | None
    industry: str
    stage: StartupStage
    founded_year: int
    team_size: int
    location: str
    funding_raised: Decimal
    funding_goal: Decimal
    financial_info: dict[str, Any]
    traction_metrics: dict[str, Any]
    investability_score: float
    is_public: bool
    created_at: datetime
    updated_at: datetime
    # Viewer holds an approved access grant
    has_access: bool = False

    model_config = {"from_attributes": True}


class StartupDetailResponse(StartupResponse):
    access_status: AccessRequestStatus | None = None
    team_members: list[TeamMemberResponse] = []


class StartupListResponse(BaseModel):
    items: list[StartupResponse]
    total: int
    page: int
    limit: int
    pages: int
