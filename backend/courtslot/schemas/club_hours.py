"""Schemas for club business hours and per-date overrides."""

from __future__ import annotations

import datetime
import uuid

from pydantic import BaseModel, ConfigDict, Field


class BusinessHourUpsert(BaseModel):
    day_of_week: int = Field(ge=0, le=6)
    open_time: str | None = None
    close_time: str | None = None
    is_closed: bool = False


class BusinessHourRead(BusinessHourUpsert):
    id: uuid.UUID
    club_id: uuid.UUID

    model_config = ConfigDict(from_attributes=True)


class SpecialHourUpsert(BaseModel):
    date: datetime.date
    open_time: str | None = None
    close_time: str | None = None
    is_closed: bool = False
    reason: str | None = Field(default=None, max_length=255)


class SpecialHourRead(SpecialHourUpsert):
    id: uuid.UUID
    club_id: uuid.UUID

    model_config = ConfigDict(from_attributes=True)
