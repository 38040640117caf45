"""Events — CRUD, visibility and the capacity-bounded RSVP engine.

RSVP state per (event, user): absent -> confirmed <-> cancelled. Confirming
locks the event row until the request transaction ends, so concurrent RSVPs
for one event are serialized and the confirmed count never passes
``max_capacity``.
"""

from __future__ import annotations

import uuid
from datetime import datetime

import structlog
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from growth_catalyst.auth.viewer import Viewer
from growth_catalyst.core.database import add_unique
from growth_catalyst.core.errors import (
    AccessDeniedError,
    CapacityExceededError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
)
from growth_catalyst.core.pagination import paginate
from growth_catalyst.models.base import as_utc, utcnow
from growth_catalyst.models.enums import CheckAction, EventStage, EventStatus, RSVPStatus
from growth_catalyst.models.events import Event, EventAttendee, EventInvitation
from growth_catalyst.modules.events.schemas import (
    EventCreate,
    EventDetailResponse,
    EventResponse,
    EventUpdate,
)

logger = structlog.get_logger()


# ── Helpers ─────────────────────────────────────────────────────────────────


async def get_event_or_raise(
    db: AsyncSession, event_id: uuid.UUID, *, for_update: bool = False
) -> Event:
    stmt = select(Event).where(Event.id == event_id)
    if for_update:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    event = (await db.execute(stmt)).scalar_one_or_none()
    if event is None:
        raise NotFoundError("Event not found")
    return event


async def has_invitation(db: AsyncSession, event_id: uuid.UUID, user_id: uuid.UUID) -> bool:
    """Any invitation row counts, whatever its status."""
    stmt = select(EventInvitation.id).where(
        EventInvitation.event_id == event_id,
        EventInvitation.user_id == user_id,
    )
    return (await db.execute(stmt)).first() is not None


async def get_attendee(
    db: AsyncSession, event_id: uuid.UUID, user_id: uuid.UUID
) -> EventAttendee | None:
    stmt = select(EventAttendee).where(
        EventAttendee.event_id == event_id,
        EventAttendee.user_id == user_id,
    )
    return (await db.execute(stmt)).scalar_one_or_none()


async def confirmed_count(db: AsyncSession, event_id: uuid.UUID) -> int:
    stmt = select(func.count(EventAttendee.id)).where(
        EventAttendee.event_id == event_id,
        EventAttendee.rsvp_status == RSVPStatus.CONFIRMED,
    )
    return (await db.execute(stmt)).scalar_one()


async def _confirmed_counts(
    db: AsyncSession, event_ids: list[uuid.UUID]
) -> dict[uuid.UUID, int]:
    if not event_ids:
        return {}
    result = await db.execute(
        select(EventAttendee.event_id, func.count(EventAttendee.id))
        .where(
            EventAttendee.event_id.in_(event_ids),
            EventAttendee.rsvp_status == RSVPStatus.CONFIRMED,
        )
        .group_by(EventAttendee.event_id)
    )
    return dict(result.all())


async def _attending(
    db: AsyncSession, event_ids: list[uuid.UUID], user_id: uuid.UUID
) -> set[uuid.UUID]:
    if not event_ids:
        return set()
    result = await db.execute(
        select(EventAttendee.event_id).where(
            EventAttendee.event_id.in_(event_ids),
            EventAttendee.user_id == user_id,
            EventAttendee.rsvp_status == RSVPStatus.CONFIRMED,
        )
    )
    return set(result.scalars().all())


# ── Visibility ──────────────────────────────────────────────────────────────


async def can_view_event(db: AsyncSession, viewer: Viewer, event: Event) -> bool:
    """Public events, admins, and anyone holding an invitation (even a declined one)."""
    if event.is_public or viewer.is_admin:
        return True
    if await has_invitation(db, event.id, viewer.user_id):
        return True
    raise AccessDeniedError("Access denied")


# ── CRUD ────────────────────────────────────────────────────────────────────


async def create_event(db: AsyncSession, viewer: Viewer, body: EventCreate) -> Event:
    event = Event(
        **body.model_dump(exclude={"agenda", "speakers"}),
        agenda=[item.model_dump(exclude_none=True) for item in body.agenda],
        speakers=[speaker.model_dump(exclude_none=True) for speaker in body.speakers],
        status=EventStatus.DRAFT,
        created_by=viewer.user_id,
    )
    db.add(event)
    await db.flush()

    logger.info("event_created", event_id=str(event.id), created_by=str(viewer.user_id))
    return event


async def get_event(
    db: AsyncSession, viewer: Viewer, event_id: uuid.UUID
) -> EventDetailResponse:
    event = await get_event_or_raise(db, event_id)
    await can_view_event(db, viewer, event)

    attendee = await get_attendee(db, event_id, viewer.user_id)
    detail = EventDetailResponse.model_validate(event)
    detail.attendee_count = await confirmed_count(db, event_id)
    detail.is_attending = attendee is not None and attendee.rsvp_status is RSVPStatus.CONFIRMED
    detail.is_invited = await has_invitation(db, event_id, viewer.user_id)
    return detail


async def list_events(
    db: AsyncSession,
    viewer: Viewer,
    *,
    stage: EventStage | None = None,
    status: EventStatus | None = None,
    search: str | None = None,
    is_public: bool | None = None,
    is_invite_only: bool | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[EventResponse], int]:
    """Non-admins see public events plus the ones they are invited to."""
    stmt = select(Event)
    if not viewer.is_admin:
        invited = select(EventInvitation.event_id).where(EventInvitation.user_id == viewer.user_id)
        stmt = stmt.where(or_(Event.is_public.is_(True), Event.id.in_(invited)))

    if stage is not None:
        stmt = stmt.where(Event.stage == stage)
    if status is not None:
        stmt = stmt.where(Event.status == status)
    if search:
        stmt = stmt.where(
            or_(
                Event.name.icontains(search, autoescape=True),
                Event.description.icontains(search, autoescape=True),
            )
        )
    if is_public is not None:
        stmt = stmt.where(Event.is_public.is_(is_public))
    if is_invite_only is not None:
        stmt = stmt.where(Event.is_invite_only.is_(is_invite_only))
    if start_date is not None:
        stmt = stmt.where(Event.start_date >= start_date)
    if end_date is not None:
        stmt = stmt.where(Event.end_date <= end_date)
    stmt = stmt.order_by(Event.start_date.desc(), Event.id)

    events, total = await paginate(db, stmt, page, limit)
    ids = [e.id for e in events]
    counts = await _confirmed_counts(db, ids)
    attending = await _attending(db, ids, viewer.user_id)

    items = [
        EventResponse.model_validate(e).model_copy(
            update={"attendee_count": counts.get(e.id, 0), "is_attending": e.id in attending}
        )
        for e in events
    ]
    return items, total


async def update_event(db: AsyncSession, event_id: uuid.UUID, body: EventUpdate) -> Event:
    """Partial merge: only fields present in the request are written.

    Shrinking ``max_capacity`` takes the same row lock as ``rsvp`` so the
    confirmed count cannot grow past the new limit in between.
    """
    changes = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    event = await get_event_or_raise(db, event_id, for_update="max_capacity" in changes)
    if not changes:
        raise InvalidArgumentError("No fields to update")

    start = changes.get("start_date", event.start_date)
    end = changes.get("end_date", event.end_date)
    if as_utc(end) < as_utc(start):
        raise InvalidArgumentError("end_date must not be before start_date")

    if "max_capacity" in changes:
        confirmed = await confirmed_count(db, event_id)
        if changes["max_capacity"] < confirmed:
            raise InvalidStateError(
                "max_capacity cannot be lower than the confirmed attendee count",
                detail={"confirmed": confirmed},
            )

    for field, value in changes.items():
        setattr(event, field, value)
    await db.flush()

    logger.info("event_updated", event_id=str(event_id), fields=sorted(changes))
    return event


async def delete_event(db: AsyncSession, event_id: uuid.UUID) -> None:
    event = await get_event_or_raise(db, event_id)
    await db.delete(event)
    await db.flush()
    logger.info("event_deleted", event_id=str(event_id))


# ── RSVP ────────────────────────────────────────────────────────────────────


async def rsvp(
    db: AsyncSession, viewer: Viewer, event_id: uuid.UUID, target_status: RSVPStatus
) -> EventAttendee:
    """Upsert the viewer's RSVP. Confirming is capacity-checked under the event row lock."""
    event = await get_event_or_raise(db, event_id, for_update=True)

    if not event.is_public and not viewer.is_admin:
        if not await has_invitation(db, event_id, viewer.user_id):
            raise AccessDeniedError("You are not invited to this event")

    attendee = await get_attendee(db, event_id, viewer.user_id)
    already_confirmed = attendee is not None and attendee.rsvp_status is RSVPStatus.CONFIRMED

    # A confirmed user re-confirming does not count against themselves
    if target_status is RSVPStatus.CONFIRMED and not already_confirmed:
        confirmed = await confirmed_count(db, event_id)
        if confirmed >= event.max_capacity:
            logger.warning(
                "rsvp_capacity_exceeded",
                event_id=str(event_id),
                user_id=str(viewer.user_id),
                max_capacity=event.max_capacity,
            )
            raise CapacityExceededError(
                "Event is at full capacity", detail={"max_capacity": event.max_capacity}
            )

    if attendee is None:
        attendee = EventAttendee(
            event_id=event_id,
            user_id=viewer.user_id,
            rsvp_status=target_status,
            attended=False,
        )
        await add_unique(db, attendee, conflict_message="RSVP already recorded")
    else:
        attendee.rsvp_status = target_status
        await db.flush()

    logger.info(
        "rsvp_upserted",
        event_id=str(event_id),
        user_id=str(viewer.user_id),
        rsvp_status=target_status.value,
    )
    return attendee


async def cancel_rsvp(db: AsyncSession, viewer: Viewer, event_id: uuid.UUID) -> None:
    """Remove the viewer's attendee row entirely."""
    attendee = await get_attendee(db, event_id, viewer.user_id)
    if attendee is None:
        raise NotFoundError("RSVP not found")

    await db.delete(attendee)
    await db.flush()
    logger.info("rsvp_deleted", event_id=str(event_id), user_id=str(viewer.user_id))


async def list_attendees(
    db: AsyncSession,
    event_id: uuid.UUID,
    rsvp_status: RSVPStatus | None = None,
    page: int = 1,
    limit: int = 50,
) -> tuple[list[EventAttendee], int]:
    await get_event_or_raise(db, event_id)

    stmt = select(EventAttendee).where(EventAttendee.event_id == event_id)
    if rsvp_status is not None:
        stmt = stmt.where(EventAttendee.rsvp_status == rsvp_status)
    stmt = stmt.order_by(EventAttendee.created_at.desc(), EventAttendee.id)

    return await paginate(db, stmt, page, limit)


async def check_in_out(
    db: AsyncSession, event_id: uuid.UUID, user_id: uuid.UUID, action: str
) -> EventAttendee:
    try:
        check = CheckAction(action)
    except ValueError:
        raise InvalidArgumentError("Invalid action. Must be check-in or check-out") from None

    attendee = await get_attendee(db, event_id, user_id)
    if attendee is None:
        raise NotFoundError("Attendee not found")

    now = utcnow()
    if check is CheckAction.CHECK_IN:
        attendee.check_in_time = now
        attendee.attended = True
    else:
        attendee.check_out_time = now
    await db.flush()

    logger.info(
        "attendee_checked",
        event_id=str(event_id),
        user_id=str(user_id),
        action=check.value,
    )
    return attendee
