"""Deal Flow — Pydantic schemas."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from growth_catalyst.models.enums import DealPriority, DealStatus, StartupStage


class DealFlowCreate(BaseModel):
    startup_id: uuid.UUID
    status: DealStatus
    notes: str | None = Field(None, max_length=1000)
    priority: DealPriority | None = None
    expected_close_date: date | None = None
    investment_amount: Decimal | None = Field(None, ge=0)


class DealFlowUpdate(BaseModel):
    """Full replace: optional fields left out are stored as null."""

    status: DealStatus
    notes: str | None = Field(None, max_length=1000)
    priority: DealPriority | None = None
    expected_close_date: date | None = None
    investment_amount: Decimal | None = Field(None, ge=0)


class DealFlowResponse(BaseModel):
    id: uuid.UUID
    investor_id: uuid.UUID
    startup_id: uuid.UUID
    status: DealStatus
    priority: DealPriority | None
    notes: str | None
    expected_close_date: date | None
    investment_amount: Decimal | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class DealFlowListResponse(BaseModel):
    items: list[DealFlowResponse]
    total: int
    page: int
    limit: int
    pages: int


class StatusStat(BaseModel):
    status: DealStatus
    count: int
    avg_investment: float | None


class IndustryStat(BaseModel):
    industry: str
    count: int


class StageStat(BaseModel):
    stage: StartupStage
    count: int


class MonthlyStat(BaseModel):
    month: str  # "2026-01"
    deals_added: int


class DealFlowAnalyticsResponse(BaseModel):
    investor_id: uuid.UUID
    by_status: list[StatusStat]
    by_industry: list[IndustryStat]
    by_stage: list[StageStat]
    monthly: list[MonthlyStat]
    generated_at: datetime
