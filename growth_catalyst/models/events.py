"""Event models: Event, EventInvitation, EventAttendee (RSVP)."""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from growth_catalyst.core.database import JSONType
from growth_catalyst.models.base import BaseModel, utcnow
from growth_catalyst.models.enums import EventStage, EventStatus, InvitationStatus, RSVPStatus


class Event(BaseModel):
    __tablename__ = "events"
    __table_args__ = (
        Index("ix_events_start_date", "start_date"),
        Index("ix_events_public_status", "is_public", "status"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    stage: Mapped[EventStage] = mapped_column(nullable=False)
    status: Mapped[EventStatus] = mapped_column(nullable=False, default=EventStatus.DRAFT)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    venue: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    max_capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    is_public: Mapped[bool] = mapped_column(default=False, server_default="false", nullable=False)
    is_invite_only: Mapped[bool] = mapped_column(
        default=False, server_default="false", nullable=False
    )
    agenda: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)
    speakers: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
    )


class EventInvitation(BaseModel):
    __tablename__ = "event_invitations"
    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_event_invitation_event_user"),
        Index("ix_event_invitations_user_status", "user_id", "status"),
    )

    event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[InvitationStatus] = mapped_column(
        nullable=False, default=InvitationStatus.PENDING
    )
    invited_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
    )
    sent_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


class EventAttendee(BaseModel):
    __tablename__ = "event_attendees"
    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_event_attendee_event_user"),
        Index("ix_event_attendees_event_rsvp", "event_id", "rsvp_status"),
    )

    event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    rsvp_status: Mapped[RSVPStatus] = mapped_column(nullable=False)
    attended: Mapped[bool] = mapped_column(default=False, server_default="false", nullable=False)
    check_in_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    check_out_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
