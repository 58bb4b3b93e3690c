"""Reservation models."""
from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from courtslot.db.base import Base
from courtslot.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from courtslot.models.court import Court
    from courtslot.models.player import Player


class ReservationStatus(str, enum.Enum):
    """Lifecycle states for reservations."""

    RESERVED = "RESERVED"
    PENDING_PAYMENT = "PENDING_PAYMENT"
    PAID = "PAID"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    NO_SHOW = "NO_SHOW"


class ReservationMode(str, enum.Enum):
    """How a reservation entered the system."""

    ADMIN_DIRECT = "ADMIN_DIRECT"
    CUSTOMER_PENDING = "CUSTOMER_PENDING"


# Statuses that occupy time on a court.
ACTIVE_RESERVATION_STATUSES = frozenset(
    {
        ReservationStatus.RESERVED,
        ReservationStatus.PENDING_PAYMENT,
        ReservationStatus.PAID,
    }
)


class Reservation(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A requester's hold or booking of ``[start_at, end_at)`` on one court."""

    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("end_at > start_at", name="end_after_start"),
        Index("ix_reservations_court_window", "court_id", "start_at", "end_at"),
        Index("ix_reservations_status_expiry", "status", "reservation_expires_at"),
    )

    court_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("courts.id", ondelete="CASCADE"), nullable=False
    )
    requester_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("players.id", ondelete="CASCADE"), nullable=False
    )
    mode: Mapped[ReservationMode] = mapped_column(
        Enum(ReservationMode), nullable=False
    )
    status: Mapped[ReservationStatus] = mapped_column(
        Enum(ReservationStatus), nullable=False
    )
    start_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    reservation_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True)
    )
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    cancel_reason: Mapped[str | None] = mapped_column(String(255))
    notes: Mapped[str | None] = mapped_column(String(1024))

    court: Mapped["Court"] = relationship("Court", back_populates="reservations")
    requester: Mapped["Player"] = relationship("Player")
