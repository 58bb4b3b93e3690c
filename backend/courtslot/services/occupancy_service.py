"""Read model of what occupies a court: active reservations and blocks."""

from __future__ import annotations

import datetime
import uuid
from collections.abc import Sequence
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from courtslot.core.time_ranges import (
    coerce_utc,
    local_datetime,
    local_day_bounds,
    ranges_overlap,
    time_to_minutes,
)
from courtslot.models.availability_block import AvailabilityBlock
from courtslot.models.reservation import ACTIVE_RESERVATION_STATUSES, Reservation

Interval = tuple[datetime.datetime, datetime.datetime]


def block_interval(block: AvailabilityBlock, tz: ZoneInfo) -> Interval:
    """Return the UTC instants covered by a block's local date and times."""
    return (
        local_datetime(block.date, time_to_minutes(block.start_time), tz),
        local_datetime(block.date, time_to_minutes(block.end_time), tz),
    )


async def overlapping_reservations(
    session: AsyncSession,
    *,
    court_id: uuid.UUID,
    start_at: datetime.datetime,
    end_at: datetime.datetime,
) -> list[Reservation]:
    stmt = (
        select(Reservation)
        .where(
            Reservation.court_id == court_id,
            Reservation.status.in_(ACTIVE_RESERVATION_STATUSES),
            Reservation.start_at < coerce_utc(end_at),
            Reservation.end_at > coerce_utc(start_at),
        )
        .order_by(Reservation.start_at.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def blocks_between(
    session: AsyncSession,
    *,
    court_ids: Sequence[uuid.UUID],
    start: datetime.date,
    end: datetime.date,
) -> list[AvailabilityBlock]:
    if not court_ids:
        return []
    stmt = (
        select(AvailabilityBlock)
        .where(
            AvailabilityBlock.court_id.in_(court_ids),
            AvailabilityBlock.date >= start,
            AvailabilityBlock.date <= end,
        )
        .order_by(AvailabilityBlock.date.asc(), AvailabilityBlock.start_time.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def overlapping_blocks(
    session: AsyncSession,
    *,
    court_id: uuid.UUID,
    tz: ZoneInfo,
    start_at: datetime.datetime,
    end_at: datetime.datetime,
) -> list[AvailabilityBlock]:
    start_utc = coerce_utc(start_at)
    end_utc = coerce_utc(end_at)
    blocks = await blocks_between(
        session,
        court_ids=[court_id],
        start=start_utc.astimezone(tz).date(),
        end=end_utc.astimezone(tz).date(),
    )
    return [
        block
        for block in blocks
        if ranges_overlap(*block_interval(block, tz), start_utc, end_utc)
    ]


async def busy_intervals(
    session: AsyncSession,
    *,
    court_ids: Sequence[uuid.UUID],
    tz: ZoneInfo,
    start: datetime.date,
    end: datetime.date,
) -> dict[uuid.UUID, list[Interval]]:
    """Group active reservation and block intervals touching local dates ``start..end``."""
    if not court_ids:
        return {}
    window_start, _ = local_day_bounds(start, tz)
    _, window_end = local_day_bounds(end, tz)

    stmt = select(Reservation.court_id, Reservation.start_at, Reservation.end_at).where(
        Reservation.court_id.in_(court_ids),
        Reservation.status.in_(ACTIVE_RESERVATION_STATUSES),
        Reservation.start_at < window_end,
        Reservation.end_at > window_start,
    )
    grouped: dict[uuid.UUID, list[Interval]] = {court_id: [] for court_id in court_ids}
    for court_id, start_at, end_at in (await session.execute(stmt)).all():
        grouped[court_id].append((coerce_utc(start_at), coerce_utc(end_at)))

    for block in await blocks_between(session, court_ids=court_ids, start=start, end=end):
        grouped[block.court_id].append(block_interval(block, tz))
    return grouped
