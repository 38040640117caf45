"""Investor models: Investor profile and its DealFlow pipeline."""

import uuid
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import Date, ForeignKey, Index, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from growth_catalyst.core.database import JSONType
from growth_catalyst.models.base import BaseModel
from growth_catalyst.models.enums import DealPriority, DealStatus


class Investor(BaseModel):
    __tablename__ = "investors"
    __table_args__ = (
        Index("ix_investors_user_id", "user_id"),
        Index("ix_investors_is_active", "is_active"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    investment_focus: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    investment_range: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    industries: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    website: Mapped[str | None] = mapped_column(String(512))
    linkedin: Mapped[str | None] = mapped_column(String(512))
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    portfolio_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    average_investment: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    total_invested: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    notable_investments: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    # minRevenue, maxRevenue, minTeamSize, maxTeamSize, requiredStage[], geographicFocus[]
    investment_criteria: Mapped[dict[str, Any]] = mapped_column(
        JSONType, nullable=False, default=dict
    )
    is_active: Mapped[bool] = mapped_column(default=True, server_default="true", nullable=False)


class DealFlow(BaseModel):
    """One investor's pipeline entry for one startup."""

    __tablename__ = "deal_flow"
    __table_args__ = (
        UniqueConstraint("investor_id", "startup_id", name="uq_deal_flow_investor_startup"),
        Index("ix_deal_flow_investor_status", "investor_id", "status"),
        Index("ix_deal_flow_investor_created", "investor_id", "created_at"),
    )

    investor_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("investors.id", ondelete="CASCADE"),
        nullable=False,
    )
    startup_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("startups.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[DealStatus] = mapped_column(nullable=False)
    priority: Mapped[DealPriority | None] = mapped_column(default=DealPriority.MEDIUM)
    notes: Mapped[str | None] = mapped_column(Text)
    expected_close_date: Mapped[date | None] = mapped_column(Date)
    investment_amount: Mapped[Decimal | None] = mapped_column()
