"""Holiday calendar endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from courtslot.api import deps
from courtslot.core.errors import BookingEngineError
from courtslot.schemas.holiday import HolidayCreate, HolidayRead
from courtslot.services import holiday_service

router = APIRouter()


@router.get("", response_model=list[HolidayRead], summary="List holidays")
async def list_holidays(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    club_id: Annotated[uuid.UUID | None, Query()] = None,
    year: Annotated[int | None, Query(ge=1900, le=2999)] = None,
) -> list[HolidayRead]:
    holidays = await holiday_service.list_holidays(session, club_id=club_id, year=year)
    return [HolidayRead.model_validate(item) for item in holidays]


@router.post(
    "",
    response_model=HolidayRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add a holiday",
)
async def create_holiday(
    payload: HolidayCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> HolidayRead:
    try:
        holiday = await holiday_service.create_holiday(session, payload=payload)
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return HolidayRead.model_validate(holiday)
