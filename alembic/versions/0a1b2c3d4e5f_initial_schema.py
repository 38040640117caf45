"""initial schema: users, startups, access requests, investors, deal flow, events

Revision ID: 0a1b2c3d4e5f
Revises:
Create Date: 2026-10-19 09:00:00.000000

Enum types store member names (e.g. EARLY_TRACTION), matching how the
ORM persists Python enums.
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "0a1b2c3d4e5f"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


_ENUMS: dict[str, tuple[str, ...]] = {
    "userrole": ("FOUNDER", "INVESTOR", "ADMIN"),
    "startupstage": ("IDEA", "MVP", "EARLY_TRACTION", "GROWTH", "SCALE"),
    "accessrequeststatus": ("PENDING", "APPROVED", "DENIED"),
    "dealstatus": (
        "INTERESTED", "IN_REVIEW", "DUE_DILIGENCE", "NEGOTIATING", "APPROVED", "REJECTED",
    ),
    "dealpriority": ("LOW", "MEDIUM", "HIGH"),
    "eventstage": ("SCOUTING", "DEAL_SOURCING", "RETREAT"),
    "eventstatus": ("DRAFT", "PUBLISHED", "ONGOING", "COMPLETED", "CANCELLED"),
    "invitationstatus": ("PENDING", "ACCEPTED", "DECLINED"),
    "rsvpstatus": ("CONFIRMED", "CANCELLED"),
}


def _enum(name: str) -> postgresql.ENUM:
    return postgresql.ENUM(*_ENUMS[name], name=name, create_type=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text("now()")),
    ]


def upgrade() -> None:
    conn = op.get_bind()

    # ── PostgreSQL enums ──────────────────────────────────────────────────────

    for name, values in _ENUMS.items():
        postgresql.ENUM(*values, name=name).create(conn, checkfirst=True)

    # ── users ─────────────────────────────────────────────────────────────────

    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("role", _enum("userrole"), nullable=False),
        sa.Column("profile_image_url", sa.String(512), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    # ── startups ──────────────────────────────────────────────────────────────

    op.create_table(
        "startups",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("tagline", sa.String(500), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("website", sa.String(512), nullable=True),
        sa.Column("industry", sa.String(100), nullable=False),
        sa.Column("stage", _enum("startupstage"), nullable=False),
        sa.Column("founded_year", sa.Integer(), nullable=False),
        sa.Column("team_size", sa.Integer(), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("funding_raised", sa.Numeric(19, 4), nullable=False),
        sa.Column("funding_goal", sa.Numeric(19, 4), nullable=False),
        sa.Column("financial_info", postgresql.JSONB(), nullable=False),
        sa.Column("traction_metrics", postgresql.JSONB(), nullable=False),
        sa.Column("investability_score", sa.Float(), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default="false"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_startups_user_id", "startups", ["user_id"])
    op.create_index("ix_startups_is_public", "startups", ["is_public"])
    op.create_index(
        "ix_startups_score_created", "startups", ["investability_score", "created_at"]
    )

    # ── startup_access_requests ───────────────────────────────────────────────

    op.create_table(
        "startup_access_requests",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("startup_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("investor_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("status", _enum("accessrequeststatus"), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("reviewed_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("requested_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["startup_id"], ["startups.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["investor_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reviewed_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "startup_id", "investor_id", name="uq_access_request_startup_investor"
        ),
    )
    op.create_index(
        "ix_access_requests_startup_status", "startup_access_requests", ["startup_id", "status"]
    )

    # ── investors ─────────────────────────────────────────────────────────────

    op.create_table(
        "investors",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("investment_focus", postgresql.JSONB(), nullable=False),
        sa.Column("investment_range", postgresql.JSONB(), nullable=False),
        sa.Column("industries", postgresql.JSONB(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("website", sa.String(512), nullable=True),
        sa.Column("linkedin", sa.String(512), nullable=True),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("portfolio_size", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("average_investment", sa.Numeric(19, 4), nullable=False),
        sa.Column("total_invested", sa.Numeric(19, 4), nullable=False),
        sa.Column("notable_investments", postgresql.JSONB(), nullable=False),
        sa.Column("investment_criteria", postgresql.JSONB(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_investors_user_id", "investors", ["user_id"])
    op.create_index("ix_investors_is_active", "investors", ["is_active"])

    # ── deal_flow ─────────────────────────────────────────────────────────────

    op.create_table(
        "deal_flow",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("investor_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("startup_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("status", _enum("dealstatus"), nullable=False),
        sa.Column("priority", _enum("dealpriority"), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("expected_close_date", sa.Date(), nullable=True),
        sa.Column("investment_amount", sa.Numeric(19, 4), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["investor_id"], ["investors.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["startup_id"], ["startups.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("investor_id", "startup_id", name="uq_deal_flow_investor_startup"),
    )
    op.create_index("ix_deal_flow_investor_status", "deal_flow", ["investor_id", "status"])
    op.create_index("ix_deal_flow_investor_created", "deal_flow", ["investor_id", "created_at"])

    # ── events ────────────────────────────────────────────────────────────────

    op.create_table(
        "events",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("stage", _enum("eventstage"), nullable=False),
        sa.Column("status", _enum("eventstatus"), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("venue", sa.String(255), nullable=False),
        sa.Column("address", sa.String(500), nullable=False),
        sa.Column("max_capacity", sa.Integer(), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_invite_only", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("agenda", postgresql.JSONB(), nullable=False),
        sa.Column("speakers", postgresql.JSONB(), nullable=False),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_events_start_date", "events", ["start_date"])
    op.create_index("ix_events_public_status", "events", ["is_public", "status"])

    # ── event_invitations ─────────────────────────────────────────────────────

    op.create_table(
        "event_invitations",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("event_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("status", _enum("invitationstatus"), nullable=False),
        sa.Column("invited_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["invited_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("event_id", "user_id", name="uq_event_invitation_event_user"),
    )
    op.create_index(
        "ix_event_invitations_user_status", "event_invitations", ["user_id", "status"]
    )

    # ── event_attendees ───────────────────────────────────────────────────────

    op.create_table(
        "event_attendees",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("event_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("rsvp_status", _enum("rsvpstatus"), nullable=False),
        sa.Column("attended", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("check_in_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("check_out_time", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("event_id", "user_id", name="uq_event_attendee_event_user"),
    )
    op.create_index(
        "ix_event_attendees_event_rsvp", "event_attendees", ["event_id", "rsvp_status"]
    )


def downgrade() -> None:
    for table in (
        "event_attendees",
        "event_invitations",
        "events",
        "deal_flow",
        "investors",
        "startup_access_requests",
        "startups",
        "users",
    ):
        op.drop_table(table)

    conn = op.get_bind()
    for name in reversed(list(_ENUMS)):
        postgresql.ENUM(name=name).drop(conn, checkfirst=True)
