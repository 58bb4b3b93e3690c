"""Court and club lookups shared by the engine services."""

from __future__ import annotations

import uuid
from zoneinfo import ZoneInfo

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from courtslot.core.errors import ResourceNotFoundError
from courtslot.core.time_ranges import get_zone
from courtslot.models.club import Club
from courtslot.models.court import Court


async def get_court(session: AsyncSession, court_id: uuid.UUID) -> Court:
    stmt = select(Court).options(selectinload(Court.club)).where(Court.id == court_id)
    court = (await session.execute(stmt)).scalar_one_or_none()
    if court is None:
        raise ResourceNotFoundError("Court not found", detail={"court_id": str(court_id)})
    return court


async def get_club(session: AsyncSession, club_id: uuid.UUID) -> Club:
    club = await session.get(Club, club_id)
    if club is None:
        raise ResourceNotFoundError("Club not found", detail={"club_id": str(club_id)})
    return club


async def list_club_courts(session: AsyncSession, *, club_id: uuid.UUID) -> list[Court]:
    stmt = (
        select(Court)
        .options(selectinload(Court.club))
        .where(Court.club_id == club_id)
        .order_by(Court.name.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


def court_zone(court: Court) -> ZoneInfo:
    return get_zone(court.club.timezone)


async def lock_court(session: AsyncSession, court_id: uuid.UUID) -> None:
    """Serialise writers on one court for the rest of the current transaction.

    The version bump takes the court's row lock on PostgreSQL and the database
    write lock on SQLite, so a concurrent writer blocks here until this
    transaction commits or rolls back and then sees its rows.
    """
    stmt = (
        update(Court)
        .where(Court.id == court_id)
        .values(lock_version=Court.lock_version + 1)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    if result.rowcount == 0:
        raise ResourceNotFoundError("Court not found", detail={"court_id": str(court_id)})
