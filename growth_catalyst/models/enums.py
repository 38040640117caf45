"""Native enums for all domain models."""

import enum


# ── Core ─────────────────────────────────────────────────────────────────────


class UserRole(str, enum.Enum):
    FOUNDER = "founder"
    INVESTOR = "investor"
    ADMIN = "admin"


# ── Startups ─────────────────────────────────────────────────────────────────


class StartupStage(str, enum.Enum):
    IDEA = "idea"
    MVP = "mvp"
    EARLY_TRACTION = "early_traction"
    GROWTH = "growth"
    SCALE = "scale"


class AccessRequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


# ── Investors ────────────────────────────────────────────────────────────────


class InvestmentFocus(str, enum.Enum):
    SEED = "seed"
    SERIES_A = "series_a"
    SERIES_B = "series_b"
    SERIES_C = "series_c"
    GROWTH = "growth"
    LATE_STAGE = "late_stage"


class DealStatus(str, enum.Enum):
    INTERESTED = "interested"
    IN_REVIEW = "in_review"
    DUE_DILIGENCE = "due_diligence"
    NEGOTIATING = "negotiating"
    APPROVED = "approved"
    REJECTED = "rejected"


class DealPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# ── Events ───────────────────────────────────────────────────────────────────


class EventStage(str, enum.Enum):
    SCOUTING = "scouting"
    DEAL_SOURCING = "deal_sourcing"
    RETREAT = "retreat"


class EventStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class InvitationStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class RSVPStatus(str, enum.Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class CheckAction(str, enum.Enum):
    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"
