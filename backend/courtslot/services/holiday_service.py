"""Holiday calendar lookups."""

from __future__ import annotations

import datetime
import uuid

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from courtslot.core.errors import ResourceNotFoundError
from courtslot.models.holiday import Holiday
from courtslot.schemas.holiday import HolidayCreate
from courtslot.services.court_service import get_club


def _club_scope(club_id: uuid.UUID | None):
    if club_id is None:
        return Holiday.club_id.is_(None)
    return or_(Holiday.club_id.is_(None), Holiday.club_id == club_id)


async def holiday_ids_for(
    session: AsyncSession, *, club_id: uuid.UUID, day: datetime.date
) -> set[uuid.UUID]:
    """Return ids of global and club-specific holidays falling on ``day``."""
    stmt = select(Holiday.id).where(Holiday.date == day, _club_scope(club_id))
    result = await session.execute(stmt)
    return set(result.scalars().all())


async def holiday_ids_between(
    session: AsyncSession,
    *,
    club_id: uuid.UUID,
    start: datetime.date,
    end: datetime.date,
) -> dict[datetime.date, set[uuid.UUID]]:
    stmt = select(Holiday.id, Holiday.date).where(
        Holiday.date >= start, Holiday.date <= end, _club_scope(club_id)
    )
    grouped: dict[datetime.date, set[uuid.UUID]] = {}
    for holiday_id, holiday_date in (await session.execute(stmt)).all():
        grouped.setdefault(holiday_date, set()).add(holiday_id)
    return grouped


async def get_holiday(session: AsyncSession, holiday_id: uuid.UUID) -> Holiday:
    holiday = await session.get(Holiday, holiday_id)
    if holiday is None:
        raise ResourceNotFoundError(
            "Holiday not found", detail={"holiday_id": str(holiday_id)}
        )
    return holiday


async def list_holidays(
    session: AsyncSession,
    *,
    club_id: uuid.UUID | None = None,
    year: int | None = None,
) -> list[Holiday]:
    stmt: Select[tuple[Holiday]] = select(Holiday).order_by(Holiday.date.asc())
    if club_id is not None:
        stmt = stmt.where(_club_scope(club_id))
    if year is not None:
        stmt = stmt.where(
            Holiday.date >= datetime.date(year, 1, 1),
            Holiday.date <= datetime.date(year, 12, 31),
        )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def create_holiday(session: AsyncSession, *, payload: HolidayCreate) -> Holiday:
    if payload.club_id is not None:
        await get_club(session, payload.club_id)
    holiday = Holiday(date=payload.date, name=payload.name, club_id=payload.club_id)
    session.add(holiday)
    await session.commit()
    await session.refresh(holiday)
    return holiday
