"""Manual availability blocks on courts."""

from __future__ import annotations

import datetime
import logging
import uuid

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from courtslot.core.errors import ConflictError, ResourceNotFoundError
from courtslot.core.time_ranges import local_datetime, time_to_minutes, validate_time_range
from courtslot.models.availability_block import AvailabilityBlock
from courtslot.schemas.availability_block import AvailabilityBlockCreate
from courtslot.services.court_service import court_zone, get_court, lock_court
from courtslot.services.occupancy_service import overlapping_reservations

logger = logging.getLogger(__name__)


async def list_blocks(
    session: AsyncSession,
    *,
    court_id: uuid.UUID,
    from_date: datetime.date | None = None,
    to_date: datetime.date | None = None,
) -> list[AvailabilityBlock]:
    await get_court(session, court_id)
    stmt: Select[tuple[AvailabilityBlock]] = (
        select(AvailabilityBlock)
        .where(AvailabilityBlock.court_id == court_id)
        .order_by(AvailabilityBlock.date.asc(), AvailabilityBlock.start_time.asc())
    )
    if from_date is not None:
        stmt = stmt.where(AvailabilityBlock.date >= from_date)
    if to_date is not None:
        stmt = stmt.where(AvailabilityBlock.date <= to_date)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def create_block(
    session: AsyncSession,
    *,
    court_id: uuid.UUID,
    payload: AvailabilityBlockCreate,
) -> AvailabilityBlock:
    """Block a local window; refused while an active reservation overlaps it."""
    start_time, end_time = validate_time_range(payload.start_time, payload.end_time)
    court = await get_court(session, court_id)
    tz = court_zone(court)
    start_at = local_datetime(payload.date, time_to_minutes(start_time), tz)
    end_at = local_datetime(payload.date, time_to_minutes(end_time), tz)

    await lock_court(session, court_id)
    conflicts = await overlapping_reservations(
        session, court_id=court_id, start_at=start_at, end_at=end_at
    )
    if conflicts:
        reservation_ids = [str(reservation.id) for reservation in conflicts]
        await session.rollback()
        logger.info(
            "Rejected block on court %s %s %s-%s: %d reservations overlap",
            court_id,
            payload.date,
            start_time,
            end_time,
            len(reservation_ids),
        )
        raise ConflictError(
            "Block overlaps existing reservations",
            detail={"conflicting_reservation_ids": reservation_ids},
        )

    block = AvailabilityBlock(
        court_id=court_id,
        date=payload.date,
        start_time=start_time,
        end_time=end_time,
        reason=payload.reason,
    )
    session.add(block)
    await session.commit()
    await session.refresh(block)
    return block


async def delete_block(
    session: AsyncSession, *, court_id: uuid.UUID, block_id: uuid.UUID
) -> None:
    block = await session.get(AvailabilityBlock, block_id)
    if block is None or block.court_id != court_id:
        raise ResourceNotFoundError("Availability block not found")
    await session.delete(block)
    await session.commit()
