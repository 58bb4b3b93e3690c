"""Availability block schemas."""

from __future__ import annotations

import datetime
import uuid

from pydantic import BaseModel, ConfigDict, Field


class AvailabilityBlockCreate(BaseModel):
    date: datetime.date
    start_time: str
    end_time: str
    reason: str | None = Field(default=None, max_length=255)


class AvailabilityBlockRead(AvailabilityBlockCreate):
    id: uuid.UUID
    court_id: uuid.UUID

    model_config = ConfigDict(from_attributes=True)
