"""Reservation endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from courtslot.api import deps
from courtslot.core.errors import BookingEngineError
from courtslot.models.reservation import ReservationStatus
from courtslot.schemas.reservation import (
    ReservationCancel,
    ReservationCreate,
    ReservationRead,
)
from courtslot.services import reservation_service

router = APIRouter()


@router.post(
    "/reservations",
    response_model=ReservationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Hold or book a court",
    dependencies=[deps.BOOKING_RATE_LIMIT],
)
async def create_reservation(
    payload: ReservationCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ReservationRead:
    try:
        reservation = await reservation_service.create_reservation(
            session,
            court_id=payload.court_id,
            requester_id=payload.requester_id,
            start_at=payload.start_at,
            end_at=payload.end_at,
            mode=payload.mode,
            notes=payload.notes,
        )
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return ReservationRead.model_validate(reservation)


@router.get(
    "/reservations/{reservation_id}",
    response_model=ReservationRead,
    summary="Get reservation",
)
async def get_reservation(
    reservation_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ReservationRead:
    try:
        reservation = await reservation_service.get_reservation(session, reservation_id)
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return ReservationRead.model_validate(reservation)


@router.get(
    "/courts/{court_id}/reservations",
    response_model=list[ReservationRead],
    summary="List a court's reservations",
)
async def list_court_reservations(
    court_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    day: Annotated[str | None, Query(alias="date", description="YYYY-MM-DD")] = None,
    statuses: Annotated[list[ReservationStatus] | None, Query(alias="status")] = None,
) -> list[ReservationRead]:
    try:
        reservations = await reservation_service.list_court_reservations(
            session, court_id=court_id, day=day, statuses=statuses
        )
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return [ReservationRead.model_validate(item) for item in reservations]


@router.post(
    "/reservations/{reservation_id}/confirm-payment",
    response_model=ReservationRead,
    summary="Record payment for a reservation",
)
async def confirm_payment(
    reservation_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ReservationRead:
    try:
        reservation = await reservation_service.confirm_payment(
            session, reservation_id=reservation_id
        )
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return ReservationRead.model_validate(reservation)


@router.post(
    "/reservations/{reservation_id}/cancel",
    response_model=ReservationRead,
    summary="Cancel a reservation",
)
async def cancel_reservation(
    reservation_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    payload: ReservationCancel | None = None,
) -> ReservationRead:
    try:
        reservation = await reservation_service.cancel_reservation(
            session,
            reservation_id=reservation_id,
            reason=payload.reason if payload else None,
        )
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return ReservationRead.model_validate(reservation)


@router.post(
    "/reservations/{reservation_id}/no-show",
    response_model=ReservationRead,
    summary="Mark a reservation as no-show",
)
async def mark_no_show(
    reservation_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ReservationRead:
    try:
        reservation = await reservation_service.mark_no_show(
            session, reservation_id=reservation_id
        )
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return ReservationRead.model_validate(reservation)
