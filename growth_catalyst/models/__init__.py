"""SQLAlchemy models package. Import all models so Base.metadata is populated."""

from growth_catalyst.models.base import BaseModel, ModelMixin
from growth_catalyst.models.core import User
from growth_catalyst.models.enums import (
    AccessRequestStatus,
    CheckAction,
    DealPriority,
    DealStatus,
    EventStage,
    EventStatus,
    InvestmentFocus,
    InvitationStatus,
    RSVPStatus,
    StartupStage,
    UserRole,
)
from growth_catalyst.models.events import Event, EventAttendee, EventInvitation
from growth_catalyst.models.investors import DealFlow, Investor
from growth_catalyst.models.startups import Startup, StartupAccessRequest, StartupTeamMember

__all__ = [
    "AccessRequestStatus",
    "BaseModel",
    "CheckAction",
    "DealFlow",
    "DealPriority",
    "DealStatus",
    "Event",
    "EventAttendee",
    "EventInvitation",
    "EventStage",
    "EventStatus",
    "InvestmentFocus",
    "Investor",
    "InvitationStatus",
    "ModelMixin",
    "RSVPStatus",
    "Startup",
    "StartupAccessRequest",
    "StartupStage",
    "StartupTeamMember",
    "User",
    "UserRole",
]
