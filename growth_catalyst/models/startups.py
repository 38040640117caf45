"""Startup models: Startup profile, its team, and the investor access-request workflow."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from growth_catalyst.core.database import JSONType
from growth_catalyst.models.base import BaseModel, utcnow
from growth_catalyst.models.enums import AccessRequestStatus, StartupStage


class Startup(BaseModel):
    __tablename__ = "startups"
    __table_args__ = (
        Index("ix_startups_user_id", "user_id"),
        Index("ix_startups_is_public", "is_public"),
        Index("ix_startups_score_created", "investability_score", "created_at"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    tagline: Mapped[str | None] = mapped_column(String(500))
    description: Mapped[str] = mapped_column(Text, nullable=False)
    website: Mapped[str | None] = mapped_column(String(512))
    industry: Mapped[str] = mapped_column(String(100), nullable=False)
    stage: Mapped[StartupStage] = mapped_column(nullable=False)
    founded_year: Mapped[int] = mapped_column(Integer, nullable=False)
    team_size: Mapped[int] = mapped_column(Integer, nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    funding_raised: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    funding_goal: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    financial_info: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    traction_metrics: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    investability_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    is_public: Mapped[bool] = mapped_column(default=False, server_default="false", nullable=False)


class StartupAccessRequest(BaseModel):
    """Approval record letting one investor see one private startup in full."""

    __tablename__ = "startup_access_requests"
    __table_args__ = (
        UniqueConstraint("startup_id", "investor_id", name="uq_access_request_startup_investor"),
        Index("ix_access_requests_startup_status", "startup_id", "status"),
    )

    startup_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("startups.id", ondelete="CASCADE"),
        nullable=False,
    )
    # The requesting investor's user id
    investor_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[AccessRequestStatus] = mapped_column(
        nullable=False, default=AccessRequestStatus.PENDING
    )
    notes: Mapped[str | None] = mapped_column(Text)
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
    )
    requested_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


class StartupTeamMember(BaseModel):
    __tablename__ = "startup_team_members"
    __table_args__ = (Index("ix_team_members_startup_created", "startup_id", "created_at"),)

    startup_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("startups.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    bio: Mapped[str | None] = mapped_column(Text)
    linkedin: Mapped[str | None] = mapped_column(String(512))
    email: Mapped[str | None] = mapped_column(String(320))
