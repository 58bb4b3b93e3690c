"""Reservation schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from courtslot.models.reservation import ReservationMode, ReservationStatus


class ReservationCreate(BaseModel):
    """Payload for holding or booking a court."""

    court_id: uuid.UUID
    requester_id: uuid.UUID
    start_at: datetime
    end_at: datetime
    mode: ReservationMode = ReservationMode.CUSTOMER_PENDING
    notes: str | None = Field(default=None, max_length=1024)


class ReservationCancel(BaseModel):
    reason: str | None = Field(default=None, max_length=255)


class ReservationRead(BaseModel):
    """Serialized reservation."""

    id: uuid.UUID
    court_id: uuid.UUID
    requester_id: uuid.UUID
    mode: ReservationMode
    status: ReservationStatus
    start_at: datetime
    end_at: datetime
    price_cents: int
    reservation_expires_at: datetime | None = None
    paid_at: datetime | None = None
    cancelled_at: datetime | None = None
    completed_at: datetime | None = None
    cancel_reason: str | None = None
    notes: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
