"""Manage club business hours and per-date overrides."""
from __future__ import annotations

import datetime
import uuid
from dataclasses import dataclass

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from courtslot.core.config import get_settings
from courtslot.core.errors import ResourceNotFoundError
from courtslot.core.time_ranges import (
    day_of_week,
    minutes_to_time,
    time_to_minutes,
    validate_time_range,
)
from courtslot.models.club import ClubBusinessHour, ClubSpecialHour
from courtslot.schemas.club_hours import BusinessHourUpsert, SpecialHourUpsert
from courtslot.services.court_service import get_club


@dataclass(slots=True, frozen=True)
class OperatingWindow:
    """Local opening window for one date; closed days have no slots."""

    is_closed: bool
    open_minute: int = 0
    close_minute: int = 0
    source: str = "default"

    @property
    def open_time(self) -> str | None:
        return None if self.is_closed else minutes_to_time(self.open_minute)

    @property
    def close_time(self) -> str | None:
        return None if self.is_closed else minutes_to_time(self.close_minute)


_CLOSED = OperatingWindow(is_closed=True)


def _window(
    open_time: str | None, close_time: str | None, is_closed: bool, source: str
) -> OperatingWindow:
    if is_closed:
        return OperatingWindow(is_closed=True, source=source)
    settings = get_settings()
    open_minute = time_to_minutes(open_time or settings.default_open_time)
    close_minute = time_to_minutes(close_time or settings.default_close_time)
    if open_minute >= close_minute:
        return OperatingWindow(is_closed=True, source=source)
    return OperatingWindow(
        is_closed=False,
        open_minute=open_minute,
        close_minute=close_minute,
        source=source,
    )


def default_window() -> OperatingWindow:
    return _window(None, None, False, "default")


def resolve_window(
    day: datetime.date,
    *,
    weekly: dict[int, ClubBusinessHour],
    special: dict[datetime.date, ClubSpecialHour],
) -> OperatingWindow:
    """Special hours win over weekly hours, which win over configured defaults."""
    override = special.get(day)
    if override is not None:
        return _window(
            override.open_time, override.close_time, override.is_closed, "special"
        )
    hour = weekly.get(day_of_week(day))
    if hour is not None:
        return _window(hour.open_time, hour.close_time, hour.is_closed, "weekly")
    return default_window()


async def operating_windows(
    session: AsyncSession,
    *,
    club_id: uuid.UUID,
    start: datetime.date,
    end: datetime.date,
) -> dict[datetime.date, OperatingWindow]:
    weekly_rows = await session.execute(
        select(ClubBusinessHour).where(ClubBusinessHour.club_id == club_id)
    )
    weekly = {row.day_of_week: row for row in weekly_rows.scalars().all()}
    special_rows = await session.execute(
        select(ClubSpecialHour).where(
            ClubSpecialHour.club_id == club_id,
            ClubSpecialHour.date >= start,
            ClubSpecialHour.date <= end,
        )
    )
    special = {row.date: row for row in special_rows.scalars().all()}
    windows: dict[datetime.date, OperatingWindow] = {}
    current = start
    while current <= end:
        windows[current] = resolve_window(current, weekly=weekly, special=special)
        current += datetime.timedelta(days=1)
    return windows


async def operating_window(
    session: AsyncSession, *, club_id: uuid.UUID, day: datetime.date
) -> OperatingWindow:
    windows = await operating_windows(session, club_id=club_id, start=day, end=day)
    return windows.get(day, _CLOSED)


def _validated_times(
    open_time: str | None, close_time: str | None, is_closed: bool
) -> tuple[str | None, str | None]:
    if is_closed or (open_time is None and close_time is None):
        return open_time, close_time
    settings = get_settings()
    return validate_time_range(
        open_time or settings.default_open_time,
        close_time or settings.default_close_time,
    )


async def list_hours(
    session: AsyncSession, *, club_id: uuid.UUID
) -> list[ClubBusinessHour]:
    await get_club(session, club_id)
    stmt: Select[tuple[ClubBusinessHour]] = (
        select(ClubBusinessHour)
        .where(ClubBusinessHour.club_id == club_id)
        .order_by(ClubBusinessHour.day_of_week.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().unique().all())


async def upsert_hour(
    session: AsyncSession,
    *,
    club_id: uuid.UUID,
    payload: BusinessHourUpsert,
) -> ClubBusinessHour:
    await get_club(session, club_id)
    open_time, close_time = _validated_times(
        payload.open_time, payload.close_time, payload.is_closed
    )
    existing_stmt = select(ClubBusinessHour).where(
        ClubBusinessHour.club_id == club_id,
        ClubBusinessHour.day_of_week == payload.day_of_week,
    )
    hour = (await session.execute(existing_stmt)).scalar_one_or_none()
    if hour is None:
        hour = ClubBusinessHour(club_id=club_id, day_of_week=payload.day_of_week)
        session.add(hour)
    hour.open_time = open_time
    hour.close_time = close_time
    hour.is_closed = payload.is_closed
    await session.commit()
    await session.refresh(hour)
    return hour


async def delete_hour(
    session: AsyncSession, *, club_id: uuid.UUID, hour_id: uuid.UUID
) -> None:
    hour = await session.get(ClubBusinessHour, hour_id)
    if hour is None or hour.club_id != club_id:
        raise ResourceNotFoundError("Business hour not found")
    await session.delete(hour)
    await session.commit()


async def list_special_hours(
    session: AsyncSession,
    *,
    club_id: uuid.UUID,
    from_date: datetime.date | None = None,
) -> list[ClubSpecialHour]:
    await get_club(session, club_id)
    stmt: Select[tuple[ClubSpecialHour]] = (
        select(ClubSpecialHour)
        .where(ClubSpecialHour.club_id == club_id)
        .order_by(ClubSpecialHour.date.asc())
    )
    if from_date is not None:
        stmt = stmt.where(ClubSpecialHour.date >= from_date)
    result = await session.execute(stmt)
    return list(result.scalars().unique().all())


async def upsert_special_hour(
    session: AsyncSession,
    *,
    club_id: uuid.UUID,
    payload: SpecialHourUpsert,
) -> ClubSpecialHour:
    await get_club(session, club_id)
    open_time, close_time = _validated_times(
        payload.open_time, payload.close_time, payload.is_closed
    )
    existing_stmt = select(ClubSpecialHour).where(
        ClubSpecialHour.club_id == club_id,
        ClubSpecialHour.date == payload.date,
    )
    special = (await session.execute(existing_stmt)).scalar_one_or_none()
    if special is None:
        special = ClubSpecialHour(club_id=club_id, date=payload.date)
        session.add(special)
    special.open_time = open_time
    special.close_time = close_time
    special.is_closed = payload.is_closed
    special.reason = payload.reason
    await session.commit()
    await session.refresh(special)
    return special


async def delete_special_hour(
    session: AsyncSession, *, club_id: uuid.UUID, special_id: uuid.UUID
) -> None:
    special = await session.get(ClubSpecialHour, special_id)
    if special is None or special.club_id != club_id:
        raise ResourceNotFoundError("Special hours not found")
    await session.delete(special)
    await session.commit()
