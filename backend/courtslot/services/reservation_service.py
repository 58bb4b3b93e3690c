"""Reservation write path and status transitions."""
from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Iterable, Sequence
from datetime import UTC, date, datetime, timedelta
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from courtslot.core.config import get_settings
from courtslot.core.errors import (
    ConflictError,
    InvalidRangeError,
    InvalidTransitionError,
    ResourceNotFoundError,
)
from courtslot.core.time_ranges import (
    coerce_utc,
    local_day_bounds,
    parse_date,
    split_local_range,
)
from courtslot.models.reservation import (
    Reservation,
    ReservationMode,
    ReservationStatus,
)
from courtslot.services import event_service, pricing_service
from courtslot.services.court_service import court_zone, get_court, lock_court
from courtslot.services.occupancy_service import overlapping_blocks, overlapping_reservations
from courtslot.services.requester_service import ensure_requester_can_book

logger = logging.getLogger(__name__)

_ALLOWED_STATUS_TRANSITIONS: dict[ReservationStatus, set[ReservationStatus]] = {
    ReservationStatus.PENDING_PAYMENT: {
        ReservationStatus.PAID,
        ReservationStatus.CANCELLED,
    },
    ReservationStatus.RESERVED: {
        ReservationStatus.PAID,
        ReservationStatus.CANCELLED,
        ReservationStatus.COMPLETED,
        ReservationStatus.NO_SHOW,
    },
    ReservationStatus.PAID: {
        ReservationStatus.CANCELLED,
        ReservationStatus.COMPLETED,
        ReservationStatus.NO_SHOW,
    },
    ReservationStatus.CANCELLED: set(),
    ReservationStatus.COMPLETED: set(),
    ReservationStatus.NO_SHOW: set(),
}

# SQLSTATEs for serialization failure and deadlock.
_TRANSIENT_SQLSTATES = {"40001", "40P01"}
_TRANSIENT_MESSAGES = ("deadlock detected", "could not serialize", "database is locked")
_OVERLAP_CONSTRAINT = "ex_reservations_court_active_overlap"


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = getattr(exc, "orig", None)
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def _is_transient_error(exc: DBAPIError) -> bool:
    if _sqlstate(exc) in _TRANSIENT_SQLSTATES:
        return True
    message = str(getattr(exc, "orig", None) or exc).lower()
    return any(marker in message for marker in _TRANSIENT_MESSAGES)


def _is_overlap_violation(exc: IntegrityError) -> bool:
    return _sqlstate(exc) == "23P01" or _OVERLAP_CONSTRAINT in str(exc.orig)


def _slot_taken(reservations: Sequence[Reservation]) -> ConflictError:
    return ConflictError(
        "Selected time slot is already booked or reserved",
        detail={
            "conflicting_reservation_ids": [str(item.id) for item in reservations]
        },
    )


async def _create_once(
    session: AsyncSession,
    *,
    court_id: uuid.UUID,
    requester_id: uuid.UUID,
    start_at: datetime,
    end_at: datetime,
    mode: ReservationMode,
    notes: str | None,
    now: datetime,
) -> Reservation:
    court = await get_court(session, court_id)
    await ensure_requester_can_book(session, requester_id)
    tz = court_zone(court)
    split_local_range(start_at, end_at, tz)

    await lock_court(session, court.id)
    taken = await overlapping_reservations(
        session, court_id=court.id, start_at=start_at, end_at=end_at
    )
    if taken:
        error = _slot_taken(taken)
        await session.rollback()
        raise error
    blocks = await overlapping_blocks(
        session, court_id=court.id, tz=tz, start_at=start_at, end_at=end_at
    )
    if blocks:
        block_ids = [str(block.id) for block in blocks]
        await session.rollback()
        raise ConflictError(
            "Selected time slot is blocked",
            detail={"availability_block_ids": block_ids},
        )

    quote = await pricing_service.quote_for_court(
        session, court=court, start_at=start_at, end_at=end_at
    )
    if mode is ReservationMode.ADMIN_DIRECT:
        status = ReservationStatus.RESERVED
        expires_at = None
    else:
        status = ReservationStatus.PENDING_PAYMENT
        expires_at = now + timedelta(minutes=get_settings().hold_minutes)

    reservation = Reservation(
        court_id=court.id,
        requester_id=requester_id,
        mode=mode,
        status=status,
        start_at=start_at,
        end_at=end_at,
        price_cents=quote.price_cents,
        reservation_expires_at=expires_at,
        notes=notes,
    )
    session.add(reservation)
    await session.commit()
    await session.refresh(reservation)
    return reservation


async def create_reservation(
    session: AsyncSession,
    *,
    court_id: uuid.UUID,
    requester_id: uuid.UUID,
    start_at: datetime,
    end_at: datetime,
    mode: ReservationMode,
    notes: str | None = None,
    now: datetime | None = None,
) -> Reservation:
    """Atomically check for overlaps and insert a reservation.

    Writers on the same court are serialised by ``lock_court`` so the overlap
    query and the insert see a consistent set of active reservations; on
    PostgreSQL an exclusion constraint backs this up. Serialization failures
    and deadlocks are retried with linear backoff. The creation event is
    published only after commit and cannot undo it.
    """
    current = coerce_utc(now or datetime.now(UTC))
    start = coerce_utc(start_at)
    end = coerce_utc(end_at)
    if start >= end:
        raise InvalidRangeError("Reservation end time must be after start time")
    if start < current:
        raise InvalidRangeError("Reservation cannot start in the past")

    settings = get_settings()
    attempts = settings.reservation_retry_attempts
    attempt = 0
    while True:
        attempt += 1
        try:
            reservation = await _create_once(
                session,
                court_id=court_id,
                requester_id=requester_id,
                start_at=start,
                end_at=end,
                mode=mode,
                notes=notes,
                now=current,
            )
            break
        except IntegrityError as exc:
            await session.rollback()
            if _is_overlap_violation(exc):
                raise ConflictError(
                    "Selected time slot is already booked or reserved"
                ) from exc
            raise
        except DBAPIError as exc:
            await session.rollback()
            if not _is_transient_error(exc) or attempt >= attempts:
                raise
            logger.warning(
                "Transient failure creating reservation on court %s (attempt %d/%d): %s",
                court_id,
                attempt,
                attempts,
                exc.orig,
            )
            await asyncio.sleep(settings.reservation_retry_backoff_ms * attempt / 1000)

    await event_service.emit(
        event_service.RESERVATION_CREATED, reservation, mode=mode.value
    )
    return reservation


async def get_reservation(
    session: AsyncSession, reservation_id: uuid.UUID
) -> Reservation:
    reservation = await session.get(Reservation, reservation_id)
    if reservation is None:
        raise ResourceNotFoundError(
            "Reservation not found", detail={"reservation_id": str(reservation_id)}
        )
    return reservation


async def list_court_reservations(
    session: AsyncSession,
    *,
    court_id: uuid.UUID,
    day: date | str | None = None,
    statuses: Iterable[ReservationStatus] | None = None,
) -> list[Reservation]:
    court = await get_court(session, court_id)
    stmt = (
        select(Reservation)
        .where(Reservation.court_id == court.id)
        .order_by(Reservation.start_at.asc())
    )
    if day is not None:
        window_start, window_end = local_day_bounds(parse_date(day), court_zone(court))
        stmt = stmt.where(
            Reservation.start_at < window_end, Reservation.end_at > window_start
        )
    if statuses is not None:
        stmt = stmt.where(Reservation.status.in_(list(statuses)))
    result = await session.execute(stmt)
    return list(result.scalars().all())


def _validate_status_transition(
    current: ReservationStatus, target: ReservationStatus
) -> None:
    allowed = _ALLOWED_STATUS_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise InvalidTransitionError(
            f"Invalid status transition from {current.value} to {target.value}"
        )


async def _transition(
    session: AsyncSession,
    *,
    reservation_id: uuid.UUID,
    target: ReservationStatus,
    event_type: str,
    values: dict[str, Any],
) -> Reservation:
    reservation = await get_reservation(session, reservation_id)
    current = reservation.status
    _validate_status_transition(current, target)
    # Conditional on the status we validated so a concurrent sweep cannot be overwritten.
    stmt = (
        update(Reservation)
        .where(Reservation.id == reservation.id, Reservation.status == current)
        .values(status=target, **values)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    if result.rowcount == 0:
        await session.rollback()
        raise InvalidTransitionError(
            "Reservation status changed concurrently; reload and retry"
        )
    await session.commit()
    await session.refresh(reservation)
    await event_service.emit(event_type, reservation, previous_status=current.value)
    return reservation


async def confirm_payment(
    session: AsyncSession,
    *,
    reservation_id: uuid.UUID,
    now: datetime | None = None,
) -> Reservation:
    """Mark a hold or admin booking as paid; an unswept expired hold still counts."""
    current = coerce_utc(now or datetime.now(UTC))
    return await _transition(
        session,
        reservation_id=reservation_id,
        target=ReservationStatus.PAID,
        event_type=event_service.RESERVATION_PAID,
        values={"paid_at": current, "reservation_expires_at": None},
    )


async def cancel_reservation(
    session: AsyncSession,
    *,
    reservation_id: uuid.UUID,
    reason: str | None = None,
    now: datetime | None = None,
) -> Reservation:
    current = coerce_utc(now or datetime.now(UTC))
    return await _transition(
        session,
        reservation_id=reservation_id,
        target=ReservationStatus.CANCELLED,
        event_type=event_service.RESERVATION_CANCELLED,
        values={
            "cancelled_at": current,
            "cancel_reason": reason or "cancelled",
            "reservation_expires_at": None,
        },
    )


async def mark_no_show(
    session: AsyncSession,
    *,
    reservation_id: uuid.UUID,
    now: datetime | None = None,
) -> Reservation:
    current = coerce_utc(now or datetime.now(UTC))
    reservation = await get_reservation(session, reservation_id)
    if coerce_utc(reservation.start_at) > current:
        raise InvalidTransitionError("Cannot mark a reservation as no-show before it starts")
    return await _transition(
        session,
        reservation_id=reservation_id,
        target=ReservationStatus.NO_SHOW,
        event_type=event_service.RESERVATION_NO_SHOW,
        values={},
    )
