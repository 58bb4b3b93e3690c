"""Court and club availability endpoints."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from courtslot.api import deps
from courtslot.core.errors import BookingEngineError
from courtslot.schemas.availability import (
    AvailableCourtRead,
    ClubAvailabilityRead,
    DayAvailabilityRead,
)
from courtslot.services import availability_service

router = APIRouter()


@router.get(
    "/courts/{court_id}/availability",
    response_model=DayAvailabilityRead,
    summary="Slots for a court on one date",
)
async def get_court_availability(
    court_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    day: Annotated[str, Query(alias="date", description="YYYY-MM-DD")],
    slot_minutes: Annotated[int | None, Query(ge=5, le=240)] = None,
) -> DayAvailabilityRead:
    try:
        availability = await availability_service.generate_day_slots(
            session, court_id=court_id, day=day, slot_minutes=slot_minutes
        )
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return DayAvailabilityRead.model_validate(availability)


@router.get(
    "/clubs/{club_id}/availability",
    response_model=ClubAvailabilityRead,
    summary="Slots for every court of a club over several dates",
)
async def get_club_availability(
    club_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    start: Annotated[str, Query(description="YYYY-MM-DD")],
    days: Annotated[int, Query()] = 7,
    slot_minutes: Annotated[int | None, Query(ge=5, le=240)] = None,
) -> ClubAvailabilityRead:
    try:
        availability = await availability_service.get_club_availability(
            session,
            club_id=club_id,
            start=start,
            days=days,
            slot_minutes=slot_minutes,
        )
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return ClubAvailabilityRead.model_validate(availability)


@router.get(
    "/clubs/{club_id}/available-courts",
    response_model=list[AvailableCourtRead],
    summary="Courts free for a whole range",
)
async def list_available_courts(
    club_id: uuid.UUID,
    start_at: datetime,
    end_at: datetime,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> list[AvailableCourtRead]:
    try:
        courts = await availability_service.find_available_courts(
            session, club_id=club_id, start_at=start_at, end_at=end_at
        )
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return [AvailableCourtRead.model_validate(court) for court in courts]
