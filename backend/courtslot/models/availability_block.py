"""Manual maintenance blocks on a court."""

from __future__ import annotations

import datetime
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from courtslot.db.base import Base
from courtslot.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from courtslot.models.court import Court


class AvailabilityBlock(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Local-time window on a date during which a court cannot be booked."""

    __tablename__ = "availability_blocks"
    __table_args__ = (Index("ix_availability_blocks_court_date", "court_id", "date"),)

    court_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("courts.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[datetime.date] = mapped_column(nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    reason: Mapped[str | None] = mapped_column(String(255))

    court: Mapped["Court"] = relationship("Court", back_populates="availability_blocks")
