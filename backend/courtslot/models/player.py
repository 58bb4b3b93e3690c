"""Players who request reservations."""

from __future__ import annotations

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from courtslot.db.base import Base
from courtslot.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin


class Player(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Requester identity as seen by the booking engine."""

    __tablename__ = "players"

    display_name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255))
    is_blocked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
