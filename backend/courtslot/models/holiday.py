"""Holiday calendar entries referenced by HOLIDAY price rules."""

from __future__ import annotations

import datetime
import uuid

from sqlalchemy import Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from courtslot.db.base import Base
from courtslot.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin


class Holiday(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A dated holiday; ``club_id`` of ``None`` applies to every club."""

    __tablename__ = "holidays"
    __table_args__ = (Index("ix_holidays_date", "date"),)

    club_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("clubs.id", ondelete="CASCADE"), nullable=True
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
