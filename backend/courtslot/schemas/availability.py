"""Availability schemas."""

from __future__ import annotations

import datetime
import uuid
from typing import Literal

from pydantic import BaseModel, ConfigDict

SlotStatus = Literal["available", "booked", "partial"]


class SlotRead(BaseModel):
    start: datetime.datetime
    end: datetime.datetime
    start_time: str
    end_time: str
    status: SlotStatus
    price_cents: int

    model_config = ConfigDict(from_attributes=True)


class DayAvailabilityRead(BaseModel):
    """Fixed-width slots for one court on one local date."""

    court_id: uuid.UUID
    date: datetime.date
    timezone: str
    is_closed: bool
    open_time: str | None = None
    close_time: str | None = None
    slots: list[SlotRead]

    model_config = ConfigDict(from_attributes=True)


class SlotSummaryRead(BaseModel):
    start_time: str
    end_time: str
    available: int
    booked: int
    partial: int
    total: int
    status: Literal["available", "limited", "full"]

    model_config = ConfigDict(from_attributes=True)


class ClubDayAvailabilityRead(BaseModel):
    date: datetime.date
    courts: list[DayAvailabilityRead]
    summary: list[SlotSummaryRead]

    model_config = ConfigDict(from_attributes=True)


class ClubAvailabilityRead(BaseModel):
    club_id: uuid.UUID
    timezone: str
    days: list[ClubDayAvailabilityRead]

    model_config = ConfigDict(from_attributes=True)


class AvailableCourtRead(BaseModel):
    court_id: uuid.UUID
    name: str
    sport_type: str
    price_cents: int

    model_config = ConfigDict(from_attributes=True)
