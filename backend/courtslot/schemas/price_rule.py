"""Schemas for court price rules and price quotes."""

from __future__ import annotations

import datetime
import uuid

from pydantic import BaseModel, ConfigDict, Field

from courtslot.models.price_rule import PriceRuleType


class PriceRuleCreate(BaseModel):
    rule_type: PriceRuleType
    date: datetime.date | None = None
    holiday_id: uuid.UUID | None = None
    day_of_week: int | None = None
    start_time: str
    end_time: str
    price_cents: int


class PriceRuleUpdate(BaseModel):
    rule_type: PriceRuleType | None = None
    date: datetime.date | None = None
    holiday_id: uuid.UUID | None = None
    day_of_week: int | None = None
    start_time: str | None = None
    end_time: str | None = None
    price_cents: int | None = None


class PriceRuleRead(BaseModel):
    id: uuid.UUID
    court_id: uuid.UUID
    rule_type: PriceRuleType
    date: datetime.date | None = None
    holiday_id: uuid.UUID | None = None
    day_of_week: int | None = None
    start_time: str
    end_time: str
    price_cents: int

    model_config = ConfigDict(from_attributes=True)


class PriceQuoteRead(BaseModel):
    """Charge for an arbitrary same-day range on a court."""

    court_id: uuid.UUID
    start_at: datetime.datetime
    end_at: datetime.datetime
    duration_minutes: int
    price_cents: int
    rule_id: uuid.UUID | None = None
    rule_type: PriceRuleType | None = None

    model_config = ConfigDict(from_attributes=True)


class PriceTimelineSegmentRead(BaseModel):
    start_time: str
    end_time: str
    price_cents: int
    rule_id: uuid.UUID | None = None
    rule_type: PriceRuleType | None = None

    model_config = ConfigDict(from_attributes=True)


class PriceTimelineRead(BaseModel):
    """Winning hourly price across a day, default price where no rule applies."""

    court_id: uuid.UUID
    date: datetime.date
    default_price_cents: int
    segments: list[PriceTimelineSegmentRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
