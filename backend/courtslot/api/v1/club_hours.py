"""Club business hours and special hours endpoints."""

from __future__ import annotations

import datetime
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from courtslot.api import deps
from courtslot.core.errors import BookingEngineError
from courtslot.schemas.club_hours import (
    BusinessHourRead,
    BusinessHourUpsert,
    SpecialHourRead,
    SpecialHourUpsert,
)
from courtslot.services import club_hours_service

router = APIRouter(prefix="/clubs/{club_id}")


@router.get("/hours", response_model=list[BusinessHourRead], summary="List weekly hours")
async def list_hours(
    club_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> list[BusinessHourRead]:
    try:
        hours = await club_hours_service.list_hours(session, club_id=club_id)
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return [BusinessHourRead.model_validate(item) for item in hours]


@router.put("/hours", response_model=BusinessHourRead, summary="Set hours for a weekday")
async def upsert_hour(
    club_id: uuid.UUID,
    payload: BusinessHourUpsert,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> BusinessHourRead:
    try:
        hour = await club_hours_service.upsert_hour(
            session, club_id=club_id, payload=payload
        )
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return BusinessHourRead.model_validate(hour)


@router.delete(
    "/hours/{hour_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Remove weekday hours"
)
async def delete_hour(
    club_id: uuid.UUID,
    hour_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> None:
    try:
        await club_hours_service.delete_hour(session, club_id=club_id, hour_id=hour_id)
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return None


@router.get(
    "/special-hours", response_model=list[SpecialHourRead], summary="List date overrides"
)
async def list_special_hours(
    club_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    from_date: Annotated[datetime.date | None, Query()] = None,
) -> list[SpecialHourRead]:
    try:
        specials = await club_hours_service.list_special_hours(
            session, club_id=club_id, from_date=from_date
        )
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return [SpecialHourRead.model_validate(item) for item in specials]


@router.put(
    "/special-hours", response_model=SpecialHourRead, summary="Override hours for a date"
)
async def upsert_special_hour(
    club_id: uuid.UUID,
    payload: SpecialHourUpsert,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> SpecialHourRead:
    try:
        special = await club_hours_service.upsert_special_hour(
            session, club_id=club_id, payload=payload
        )
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return SpecialHourRead.model_validate(special)


@router.delete(
    "/special-hours/{special_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a date override",
)
async def delete_special_hour(
    club_id: uuid.UUID,
    special_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> None:
    try:
        await club_hours_service.delete_special_hour(
            session, club_id=club_id, special_id=special_id
        )
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return None
