"""Court pricing rules."""

from __future__ import annotations

import datetime
import enum
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from courtslot.db.base import Base
from courtslot.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from courtslot.models.court import Court
    from courtslot.models.holiday import Holiday


class PriceRuleType(str, enum.Enum):
    """Applicability scopes a price rule can take."""

    SPECIFIC_DATE = "SPECIFIC_DATE"
    HOLIDAY = "HOLIDAY"
    SPECIFIC_DAY = "SPECIFIC_DAY"
    WEEKDAYS = "WEEKDAYS"
    WEEKENDS = "WEEKENDS"
    ALL_DAYS = "ALL_DAYS"


class CourtPriceRule(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Price for a time-of-day window on the dates a rule applies to.

    Exactly one of ``date`` / ``holiday_id`` / ``day_of_week`` is populated
    depending on ``rule_type`` (none for the weekday groups and ALL_DAYS).
    ``price_cents`` is the hourly-equivalent price, scaled by duration.
    """

    __tablename__ = "court_price_rules"
    __table_args__ = (
        CheckConstraint("price_cents >= 0", name="price_non_negative"),
        CheckConstraint("start_time < end_time", name="start_before_end"),
    )

    court_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("courts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    rule_type: Mapped[PriceRuleType] = mapped_column(
        Enum(PriceRuleType), nullable=False
    )
    date: Mapped[datetime.date | None] = mapped_column(nullable=True)
    holiday_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("holidays.id", ondelete="CASCADE"), nullable=True
    )
    day_of_week: Mapped[int | None] = mapped_column(Integer, nullable=True)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    court: Mapped["Court"] = relationship("Court", back_populates="price_rules")
    holiday: Mapped["Holiday | None"] = relationship("Holiday")
