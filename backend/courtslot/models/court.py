"""Bookable courts."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from courtslot.db.base import Base
from courtslot.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin


if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from courtslot.models.availability_block import AvailabilityBlock
    from courtslot.models.club import Club
    from courtslot.models.price_rule import CourtPriceRule
    from courtslot.models.reservation import Reservation


class Court(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A single bookable court belonging to a club."""

    __tablename__ = "courts"

    club_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    sport_type: Mapped[str] = mapped_column(String(64), nullable=False)
    default_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    # Bumped by every writer that must serialise against other writers on the court.
    lock_version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    club: Mapped["Club"] = relationship("Club", back_populates="courts")
    price_rules: Mapped[list["CourtPriceRule"]] = relationship(
        "CourtPriceRule", back_populates="court", cascade="all, delete-orphan"
    )
    reservations: Mapped[list["Reservation"]] = relationship(
        "Reservation", back_populates="court", cascade="all, delete-orphan"
    )
    availability_blocks: Mapped[list["AvailabilityBlock"]] = relationship(
        "AvailabilityBlock", back_populates="court", cascade="all, delete-orphan"
    )
