"""Events — Pydantic schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator

from growth_catalyst.models.base import as_utc
from growth_catalyst.models.enums import EventStage, EventStatus, RSVPStatus


class AgendaItem(BaseModel):
    time: str
    title: str
    description: str | None = None
    speaker: str | None = None


class Speaker(BaseModel):
    name: str
    title: str
    bio: str | None = None
    image: str | None = None


class EventCreate(BaseModel):
    name: str = Field(..., min_length=3, max_length=255)
    description: str = Field(..., min_length=10, max_length=2000)
    stage: EventStage
    start_date: datetime
    end_date: datetime
    venue: str = Field(..., min_length=3, max_length=255)
    address: str = Field(..., min_length=10, max_length=500)
    max_capacity: int = Field(..., ge=1, le=10000)
    is_public: bool = False
    is_invite_only: bool = False
    agenda: list[AgendaItem] = []
    speakers: list[Speaker] = []

    @model_validator(mode="after")
    def _end_after_start(self) -> "EventCreate":
        if as_utc(self.end_date) < as_utc(self.start_date):
            raise ValueError("end_date must not be before start_date")
        return self


class EventUpdate(BaseModel):
    name: str | None = Field(None, min_length=3, max_length=255)
    description: str | None = Field(None, min_length=10, max_length=2000)
    stage: EventStage | None = None
    status: EventStatus | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    venue: str | None = Field(None, min_length=3, max_length=255)
    address: str | None = Field(None, min_length=10, max_length=500)
    max_capacity: int | None = Field(None, ge=1, le=10000)
    is_public: bool | None = None
    is_invite_only: bool | None = None
    agenda: list[AgendaItem] | None = None
    speakers: list[Speaker] | None = None


class EventResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str
    stage: EventStage
    status: EventStatus
    start_date: datetime
    end_date: datetime
    venue: str
    address: str
    max_capacity: int
    is_public: bool
    is_invite_only: bool
    agenda: list[dict[str, Any]]
    speakers: list[dict[str, Any]]
    created_by: uuid.UUID | None
    created_at: datetime
    updated_at: datetime
    # Confirmed attendees
    attendee_count: int = 0
    is_attending: bool = False

    model_config = {"from_attributes": True}


class EventDetailResponse(EventResponse):
    is_invited: bool = False


class EventListResponse(BaseModel):
    items: list[EventResponse]
    total: int
    page: int
    limit: int
    pages: int


class RSVPRequest(BaseModel):
    rsvp_status: RSVPStatus


class CheckInRequest(BaseModel):
    # "check-in" or "check-out"; checked by the service
    action: str = Field(..., max_length=20)


class AttendeeResponse(BaseModel):
    id: uuid.UUID
    event_id: uuid.UUID
    user_id: uuid.UUID
    rsvp_status: RSVPStatus
    attended: bool
    check_in_time: datetime | None
    check_out_time: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AttendeeListResponse(BaseModel):
    items: list[AttendeeResponse]
    total: int
    page: int
    limit: int
    pages: int
