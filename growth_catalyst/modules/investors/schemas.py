"""Investors — Pydantic schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, model_validator

from growth_catalyst.models.enums import InvestmentFocus, StartupStage
from growth_catalyst.modules.deal_flow.schemas import DealFlowResponse


class InvestmentRange(BaseModel):
    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)

    @model_validator(mode="after")
    def _ordered(self) -> "InvestmentRange":
        if self.min > self.max:
            raise ValueError("investment_range.min must not exceed max")
        return self


class InvestmentCriteria(BaseModel):
    """Stored as JSON under its camelCase keys."""

    min_revenue: float | None = Field(None, ge=0, alias="minRevenue")
    max_revenue: float | None = Field(None, ge=0, alias="maxRevenue")
    min_team_size: int | None = Field(None, ge=0, alias="minTeamSize")
    max_team_size: int | None = Field(None, ge=0, alias="maxTeamSize")
    required_stage: list[StartupStage] | None = Field(None, alias="requiredStage")
    geographic_focus: list[str] | None = Field(None, alias="geographicFocus")

    model_config = {"populate_by_name": True}


class InvestorCreate(BaseModel):
    company_name: str = Field(..., min_length=2, max_length=255)
    investment_focus: list[InvestmentFocus] = Field(..., min_length=1)
    investment_range: InvestmentRange
    industries: list[str] = Field(..., min_length=1)
    description: str = Field(..., min_length=50, max_length=2000)
    website: str | None = Field(None, max_length=512)
    linkedin: str | None = Field(None, max_length=512)
    location: str = Field(..., min_length=2, max_length=255)
    portfolio_size: int = Field(0, ge=0)
    average_investment: Decimal = Field(Decimal("0"), ge=0)
    total_invested: Decimal = Field(Decimal("0"), ge=0)
    notable_investments: list[str] = []
    investment_criteria: InvestmentCriteria = InvestmentCriteria()


class InvestorUpdate(BaseModel):
    company_name: str | None = Field(None, min_length=2, max_length=255)
    investment_focus: list[InvestmentFocus] | None = Field(None, min_length=1)
    investment_range: InvestmentRange | None = None
    industries: list[str] | None = Field(None, min_length=1)
    description: str | None = Field(None, min_length=50, max_length=2000)
    website: str | None = Field(None, max_length=512)
    linkedin: str | None = Field(None, max_length=512)
    location: str | None = Field(None, min_length=2, max_length=255)
    portfolio_size: int | None = Field(None, ge=0)
    average_investment: Decimal | None = Field(None, ge=0)
    total_invested: Decimal | None = Field(None, ge=0)
    notable_investments: list[str] | None = None
    investment_criteria: InvestmentCriteria | None = None
    is_active: bool | None = None


class InvestorResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    company_name: str
    investment_focus: list[str]
    investment_range: dict[str, Any]
    industries: list[str]
    description: str
    website: str | None
    linkedin: str | None
    location: str
    portfolio_size: int
    average_investment: Decimal
    total_invested: Decimal
    notable_investments: list[str]
    investment_criteria: dict[str, Any]
    is_active: bool
    created_at: datetime
    updated_at: datetime
    # Deals not yet approved or rejected
    active_deals: int = 0

    model_config = {"from_attributes": True}


class InvestorDetailResponse(InvestorResponse):
    # Only populated for the owning investor and admins
    deal_flow: list[DealFlowResponse] | None = None


class InvestorListResponse(BaseModel):
    items: list[InvestorResponse]
    total: int
    page: int
    limit: int
    pages: int
