"""Lifecycle sweep schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SweepResultRead(BaseModel):
    cancelled_count: int
    completed_count: int

    model_config = ConfigDict(from_attributes=True)
