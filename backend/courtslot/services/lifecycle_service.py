"""Periodic reservation lifecycle sweeps."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from courtslot.core.time_ranges import coerce_utc
from courtslot.models.reservation import Reservation, ReservationStatus
from courtslot.services import event_service

logger = logging.getLogger(__name__)

HOLD_EXPIRED_REASON = "hold_expired"

_COMPLETABLE_STATUSES = (ReservationStatus.RESERVED, ReservationStatus.PAID)


@dataclass(slots=True, frozen=True)
class SweepResult:
    cancelled_count: int
    completed_count: int


async def _notify(
    session: AsyncSession, reservation_ids: list[uuid.UUID], event_type: str, **payload
) -> None:
    if not reservation_ids:
        return
    try:
        result = await session.execute(
            select(Reservation)
            .where(Reservation.id.in_(reservation_ids))
            .execution_options(populate_existing=True)
        )
        for reservation in result.scalars().all():
            await event_service.emit(event_type, reservation, **payload)
    except Exception:  # pragma: no cover - notifications are best effort
        logger.exception(
            "Failed to publish %s for %d reservations", event_type, len(reservation_ids)
        )


async def expire_pending_holds(
    session: AsyncSession, *, now: datetime | None = None
) -> list[uuid.UUID]:
    """Cancel every PENDING_PAYMENT hold whose deadline has passed."""
    current = coerce_utc(now or datetime.now(UTC))
    stmt = (
        update(Reservation)
        .where(
            Reservation.status == ReservationStatus.PENDING_PAYMENT,
            Reservation.reservation_expires_at.is_not(None),
            Reservation.reservation_expires_at < current,
        )
        .values(
            status=ReservationStatus.CANCELLED,
            cancelled_at=current,
            cancel_reason=HOLD_EXPIRED_REASON,
            reservation_expires_at=None,
        )
        .returning(Reservation.id)
        .execution_options(synchronize_session=False)
    )
    expired = list((await session.execute(stmt)).scalars().all())
    await session.commit()
    if expired:
        logger.info("Expired %d pending reservation holds", len(expired))
    await _notify(
        session, expired, event_service.RESERVATION_CANCELLED, reason=HOLD_EXPIRED_REASON
    )
    return expired


async def complete_finished_reservations(
    session: AsyncSession, *, now: datetime | None = None
) -> list[uuid.UUID]:
    """Move RESERVED and PAID reservations whose end has passed to COMPLETED."""
    current = coerce_utc(now or datetime.now(UTC))
    stmt = (
        update(Reservation)
        .where(
            Reservation.status.in_(_COMPLETABLE_STATUSES),
            Reservation.end_at <= current,
        )
        .values(status=ReservationStatus.COMPLETED, completed_at=current)
        .returning(Reservation.id)
        .execution_options(synchronize_session=False)
    )
    completed = list((await session.execute(stmt)).scalars().all())
    await session.commit()
    if completed:
        logger.info("Completed %d finished reservations", len(completed))
    await _notify(session, completed, event_service.RESERVATION_COMPLETED)
    return completed


async def run_lifecycle_sweep(
    session: AsyncSession, *, now: datetime | None = None
) -> SweepResult:
    """Run the expiry and completion sweeps against one point in time."""
    current = coerce_utc(now or datetime.now(UTC))
    cancelled = await expire_pending_holds(session, now=current)
    completed = await complete_finished_reservations(session, now=current)
    return SweepResult(cancelled_count=len(cancelled), completed_count=len(completed))
