"""Holiday calendar schemas."""

from __future__ import annotations

import datetime
import uuid

from pydantic import BaseModel, ConfigDict, Field


class HolidayCreate(BaseModel):
    date: datetime.date
    name: str = Field(min_length=1, max_length=120)
    club_id: uuid.UUID | None = None


class HolidayRead(HolidayCreate):
    id: uuid.UUID

    model_config = ConfigDict(from_attributes=True)
