"""Availability block endpoints."""

from __future__ import annotations

import datetime
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from courtslot.api import deps
from courtslot.core.errors import BookingEngineError
from courtslot.schemas.availability_block import (
    AvailabilityBlockCreate,
    AvailabilityBlockRead,
)
from courtslot.services import block_service

router = APIRouter(prefix="/courts/{court_id}/blocks")


@router.get("", response_model=list[AvailabilityBlockRead], summary="List blocks")
async def list_blocks(
    court_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    from_date: Annotated[datetime.date | None, Query()] = None,
    to_date: Annotated[datetime.date | None, Query()] = None,
) -> list[AvailabilityBlockRead]:
    try:
        blocks = await block_service.list_blocks(
            session, court_id=court_id, from_date=from_date, to_date=to_date
        )
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return [AvailabilityBlockRead.model_validate(block) for block in blocks]


@router.post(
    "",
    response_model=AvailabilityBlockRead,
    status_code=status.HTTP_201_CREATED,
    summary="Block a time window",
    dependencies=[deps.DEFAULT_RATE_LIMIT],
)
async def create_block(
    court_id: uuid.UUID,
    payload: AvailabilityBlockCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> AvailabilityBlockRead:
    try:
        block = await block_service.create_block(
            session, court_id=court_id, payload=payload
        )
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return AvailabilityBlockRead.model_validate(block)


@router.delete(
    "/{block_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Remove block"
)
async def delete_block(
    court_id: uuid.UUID,
    block_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> None:
    try:
        await block_service.delete_block(session, court_id=court_id, block_id=block_id)
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return None
