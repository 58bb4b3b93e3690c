"""Clubs and their operating hours."""

from __future__ import annotations

import datetime
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from courtslot.core.time_ranges import get_zone
from courtslot.db.base import Base
from courtslot.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin


if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from courtslot.models.court import Court


class Club(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A venue owning courts; its timezone schedules every court it owns."""

    __tablename__ = "clubs"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="UTC")

    courts: Mapped[list["Court"]] = relationship(
        "Court", back_populates="club", cascade="all, delete-orphan"
    )
    business_hours: Mapped[list["ClubBusinessHour"]] = relationship(
        "ClubBusinessHour", back_populates="club", cascade="all, delete-orphan"
    )
    special_hours: Mapped[list["ClubSpecialHour"]] = relationship(
        "ClubSpecialHour", back_populates="club", cascade="all, delete-orphan"
    )

    @validates("timezone")
    def _validate_timezone(self, _key: str, value: str) -> str:
        return get_zone(value).key


class ClubBusinessHour(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Weekly operating hours for a club (0 = Sunday)."""

    __tablename__ = "club_business_hours"
    __table_args__ = (
        UniqueConstraint("club_id", "day_of_week", name="uq_club_hours_day"),
    )

    club_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False
    )
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    open_time: Mapped[str | None] = mapped_column(String(5))
    close_time: Mapped[str | None] = mapped_column(String(5))
    is_closed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    club: Mapped[Club] = relationship("Club", back_populates="business_hours")


class ClubSpecialHour(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Per-date override of a club's weekly hours."""

    __tablename__ = "club_special_hours"
    __table_args__ = (
        UniqueConstraint("club_id", "date", name="uq_club_special_hours_date"),
    )

    club_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    open_time: Mapped[str | None] = mapped_column(String(5))
    close_time: Mapped[str | None] = mapped_column(String(5))
    is_closed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    reason: Mapped[str | None] = mapped_column(String(255))

    club: Mapped[Club] = relationship("Club", back_populates="special_hours")
