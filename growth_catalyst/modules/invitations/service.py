"""Event Invitations — admin-issued invites and the invitee's response."""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from growth_catalyst.auth.viewer import Viewer
from growth_catalyst.core.database import add_unique
from growth_catalyst.core.errors import ConflictError, InvalidArgumentError, NotFoundError
from growth_catalyst.core.pagination import paginate
from growth_catalyst.models.base import utcnow
from growth_catalyst.models.core import User
from growth_catalyst.models.enums import InvitationStatus, RSVPStatus
from growth_catalyst.models.events import Event, EventAttendee, EventInvitation
from growth_catalyst.modules.events import service as events
from growth_catalyst.modules.invitations.schemas import InvitedEventSummary, MyInvitationResponse

logger = structlog.get_logger()

_DUPLICATE_INVITATION = "Invitation already exists"


async def _get_invitation_or_raise(
    db: AsyncSession, invitation_id: uuid.UUID, user_id: uuid.UUID | None = None
) -> EventInvitation:
    stmt = select(EventInvitation).where(EventInvitation.id == invitation_id)
    if user_id is not None:
        stmt = stmt.where(EventInvitation.user_id == user_id)
    invitation = (await db.execute(stmt)).scalar_one_or_none()
    if invitation is None:
        raise NotFoundError("Invitation not found")
    return invitation


async def create_invitation(
    db: AsyncSession, viewer: Viewer, event_id: uuid.UUID, user_id: uuid.UUID
) -> EventInvitation:
    await events.get_event_or_raise(db, event_id)
    if await db.get(User, user_id) is None:
        raise NotFoundError("User not found")
    if await events.has_invitation(db, event_id, user_id):
        raise ConflictError(_DUPLICATE_INVITATION)

    invitation = EventInvitation(
        event_id=event_id,
        user_id=user_id,
        status=InvitationStatus.PENDING,
        invited_by=viewer.user_id,
        sent_at=utcnow(),
    )
    await add_unique(db, invitation, conflict_message=_DUPLICATE_INVITATION)

    logger.info(
        "invitation_sent",
        event_id=str(event_id),
        user_id=str(user_id),
        invited_by=str(viewer.user_id),
    )
    return invitation


async def create_bulk_invitations(
    db: AsyncSession, viewer: Viewer, event_id: uuid.UUID, user_ids: list[uuid.UUID]
) -> tuple[list[EventInvitation], int]:
    """Invite many users at once. Returns (created, skipped_already_invited)."""
    await events.get_event_or_raise(db, event_id)
    requested = list(dict.fromkeys(user_ids))

    found = await db.execute(select(User.id).where(User.id.in_(requested)))
    known = set(found.scalars().all())
    missing = [uid for uid in requested if uid not in known]
    if missing:
        raise NotFoundError(
            "Some users not found",
            detail={"non_existent_user_ids": [str(uid) for uid in missing]},
        )

    already = await db.execute(
        select(EventInvitation.user_id).where(
            EventInvitation.event_id == event_id,
            EventInvitation.user_id.in_(requested),
        )
    )
    invited = set(already.scalars().all())
    new_ids = [uid for uid in requested if uid not in invited]
    if not new_ids:
        raise ConflictError("All users already have invitations")

    now = utcnow()
    invitations = [
        EventInvitation(
            event_id=event_id,
            user_id=uid,
            status=InvitationStatus.PENDING,
            invited_by=viewer.user_id,
            sent_at=now,
        )
        for uid in new_ids
    ]
    await add_unique(db, *invitations, conflict_message=_DUPLICATE_INVITATION)

    logger.info(
        "invitations_sent",
        event_id=str(event_id),
        created=len(invitations),
        skipped=len(invited),
        invited_by=str(viewer.user_id),
    )
    return invitations, len(invited)


async def list_my_invitations(
    db: AsyncSession,
    viewer: Viewer,
    status: InvitationStatus | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[MyInvitationResponse], int]:
    """The viewer's invitations with the invited event, newest first."""
    stmt = select(EventInvitation).where(EventInvitation.user_id == viewer.user_id)
    if status is not None:
        stmt = stmt.where(EventInvitation.status == status)
    stmt = stmt.order_by(EventInvitation.sent_at.desc(), EventInvitation.id)

    invitations, total = await paginate(db, stmt, page, limit)

    event_map: dict[uuid.UUID, Event] = {}
    if invitations:
        result = await db.execute(
            select(Event).where(Event.id.in_([i.event_id for i in invitations]))
        )
        event_map = {e.id: e for e in result.scalars().all()}

    items = []
    for invitation in invitations:
        item = MyInvitationResponse.model_validate(invitation)
        event = event_map.get(invitation.event_id)
        if event is not None:
            item.event = InvitedEventSummary.model_validate(event)
        items.append(item)
    return items, total


async def respond_to_invitation(
    db: AsyncSession, viewer: Viewer, invitation_id: uuid.UUID, status: InvitationStatus
) -> EventInvitation:
    """Accept or decline. Accepting also confirms an RSVP if the user has none.

    The auto-created RSVP skips the capacity check.
    """
    if status is InvitationStatus.PENDING:
        raise InvalidArgumentError("Invalid status. Must be accepted or declined")

    invitation = await _get_invitation_or_raise(db, invitation_id, user_id=viewer.user_id)
    invitation.status = status
    invitation.responded_at = utcnow()
    await db.flush()

    if status is InvitationStatus.ACCEPTED:
        attendee = await events.get_attendee(db, invitation.event_id, viewer.user_id)
        if attendee is None:
            await add_unique(
                db,
                EventAttendee(
                    event_id=invitation.event_id,
                    user_id=viewer.user_id,
                    rsvp_status=RSVPStatus.CONFIRMED,
                    attended=False,
                ),
                conflict_message="RSVP already recorded",
            )

    logger.info(
        "invitation_responded",
        invitation_id=str(invitation_id),
        event_id=str(invitation.event_id),
        user_id=str(viewer.user_id),
        status=status.value,
    )
    return invitation


async def list_event_invitations(
    db: AsyncSession,
    event_id: uuid.UUID,
    status: InvitationStatus | None = None,
    page: int = 1,
    limit: int = 50,
) -> tuple[list[EventInvitation], int]:
    await events.get_event_or_raise(db, event_id)

    stmt = select(EventInvitation).where(EventInvitation.event_id == event_id)
    if status is not None:
        stmt = stmt.where(EventInvitation.status == status)
    stmt = stmt.order_by(EventInvitation.sent_at.desc(), EventInvitation.id)

    return await paginate(db, stmt, page, limit)


async def delete_invitation(db: AsyncSession, invitation_id: uuid.UUID) -> None:
    invitation = await _get_invitation_or_raise(db, invitation_id)
    await db.delete(invitation)
    await db.flush()
    logger.info("invitation_deleted", invitation_id=str(invitation_id))
