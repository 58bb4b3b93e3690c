"""Initial booking schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-17
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

_PRICE_RULE_TYPES = (
    "SPECIFIC_DATE",
    "HOLIDAY",
    "SPECIFIC_DAY",
    "WEEKDAYS",
    "WEEKENDS",
    "ALL_DAYS",
)
_RESERVATION_STATUSES = (
    "RESERVED",
    "PENDING_PAYMENT",
    "PAID",
    "CANCELLED",
    "COMPLETED",
    "NO_SHOW",
)
_RESERVATION_MODES = ("ADMIN_DIRECT", "CUSTOMER_PENDING")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "clubs",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("timezone", sa.String(length=64), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "club_business_hours",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "club_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("clubs.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("open_time", sa.String(length=5)),
        sa.Column("close_time", sa.String(length=5)),
        sa.Column("is_closed", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.UniqueConstraint("club_id", "day_of_week", name="uq_club_hours_day"),
    )

    op.create_table(
        "club_special_hours",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "club_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("clubs.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("open_time", sa.String(length=5)),
        sa.Column("close_time", sa.String(length=5)),
        sa.Column("is_closed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("reason", sa.String(length=255)),
        *_timestamps(),
        sa.UniqueConstraint("club_id", "date", name="uq_club_special_hours_date"),
    )

    op.create_table(
        "holidays",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "club_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("clubs.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_holidays_date", "holidays", ["date"])

    op.create_table(
        "courts",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "club_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("clubs.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("sport_type", sa.String(length=64), nullable=False),
        sa.Column("default_price_cents", sa.Integer(), nullable=False),
        sa.Column("lock_version", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_courts_club_id", "courts", ["club_id"])

    op.create_table(
        "players",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("display_name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=255)),
        sa.Column("is_blocked", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    op.create_table(
        "court_price_rules",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "court_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("courts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "rule_type",
            sa.Enum(*_PRICE_RULE_TYPES, name="priceruletype"),
            nullable=False,
        ),
        sa.Column("date", sa.Date()),
        sa.Column(
            "holiday_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("holidays.id", ondelete="CASCADE"),
        ),
        sa.Column("day_of_week", sa.Integer()),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("price_cents", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("price_cents >= 0", name="price_non_negative"),
        sa.CheckConstraint("start_time < end_time", name="start_before_end"),
    )
    op.create_index("ix_court_price_rules_court_id", "court_price_rules", ["court_id"])

    op.create_table(
        "availability_blocks",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "court_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("courts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("reason", sa.String(length=255)),
        *_timestamps(),
    )
    op.create_index(
        "ix_availability_blocks_court_date", "availability_blocks", ["court_id", "date"]
    )

    op.create_table(
        "reservations",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "court_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("courts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "requester_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("players.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "mode", sa.Enum(*_RESERVATION_MODES, name="reservationmode"), nullable=False
        ),
        sa.Column(
            "status",
            sa.Enum(*_RESERVATION_STATUSES, name="reservationstatus"),
            nullable=False,
        ),
        sa.Column("start_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("price_cents", sa.Integer(), nullable=False),
        sa.Column("reservation_expires_at", sa.DateTime(timezone=True)),
        sa.Column("paid_at", sa.DateTime(timezone=True)),
        sa.Column("cancelled_at", sa.DateTime(timezone=True)),
        sa.Column("completed_at", sa.DateTime(timezone=True)),
        sa.Column("cancel_reason", sa.String(length=255)),
        sa.Column("notes", sa.String(length=1024)),
        *_timestamps(),
        sa.CheckConstraint("end_at > start_at", name="end_after_start"),
    )
    op.create_index(
        "ix_reservations_court_window",
        "reservations",
        ["court_id", "start_at", "end_at"],
    )
    op.create_index(
        "ix_reservations_status_expiry",
        "reservations",
        ["status", "reservation_expires_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_reservations_status_expiry", table_name="reservations")
    op.drop_index("ix_reservations_court_window", table_name="reservations")
    op.drop_table("reservations")
    op.drop_index("ix_availability_blocks_court_date", table_name="availability_blocks")
    op.drop_table("availability_blocks")
    op.drop_index("ix_court_price_rules_court_id", table_name="court_price_rules")
    op.drop_table("court_price_rules")
    op.drop_table("players")
    op.drop_index("ix_courts_club_id", table_name="courts")
    op.drop_table("courts")
    op.drop_index("ix_holidays_date", table_name="holidays")
    op.drop_table("holidays")
    op.drop_table("club_special_hours")
    op.drop_table("club_business_hours")
    op.drop_table("clubs")
    bind = op.get_bind()
    for enum_name in ("reservationstatus", "reservationmode", "priceruletype"):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
