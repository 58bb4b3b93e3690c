"""Fire-and-forget reservation events for external consumers."""

from __future__ import annotations

import inspect
import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from courtslot.models.reservation import Reservation

logger = logging.getLogger(__name__)

RESERVATION_CREATED = "reservation.created"
RESERVATION_PAID = "reservation.paid"
RESERVATION_CANCELLED = "reservation.cancelled"
RESERVATION_COMPLETED = "reservation.completed"
RESERVATION_NO_SHOW = "reservation.no_show"


@dataclass(slots=True, frozen=True)
class ReservationEvent:
    """Snapshot of a reservation transition handed to sinks."""

    event_type: str
    reservation_id: uuid.UUID
    court_id: uuid.UUID
    requester_id: uuid.UUID
    status: str
    start_at: datetime
    end_at: datetime
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    payload: dict[str, Any] = field(default_factory=dict)


EventSink = Callable[[ReservationEvent], Awaitable[None] | None]


def _log_sink(event: ReservationEvent) -> None:
    logger.info(
        "%s reservation=%s court=%s status=%s",
        event.event_type,
        event.reservation_id,
        event.court_id,
        event.status,
    )


_sinks: list[EventSink] = [_log_sink]


def register_sink(sink: EventSink) -> None:
    if sink not in _sinks:
        _sinks.append(sink)


def unregister_sink(sink: EventSink) -> None:
    if sink in _sinks:
        _sinks.remove(sink)


def clear_sinks() -> None:
    """Restore the default logging-only sink list."""
    _sinks[:] = [_log_sink]


def build_event(
    event_type: str, reservation: Reservation, **payload: Any
) -> ReservationEvent:
    return ReservationEvent(
        event_type=event_type,
        reservation_id=reservation.id,
        court_id=reservation.court_id,
        requester_id=reservation.requester_id,
        status=reservation.status.value,
        start_at=reservation.start_at,
        end_at=reservation.end_at,
        payload=payload,
    )


async def publish(event: ReservationEvent) -> None:
    """Deliver ``event`` to every sink; sink failures are logged, never raised."""
    for sink in list(_sinks):
        try:
            result = sink(event)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception(
                "Event sink failed for %s on reservation %s",
                event.event_type,
                event.reservation_id,
            )


async def emit(event_type: str, reservation: Reservation, **payload: Any) -> None:
    await publish(build_event(event_type, reservation, **payload))


__all__ = [
    "EventSink",
    "RESERVATION_CANCELLED",
    "RESERVATION_COMPLETED",
    "RESERVATION_CREATED",
    "RESERVATION_NO_SHOW",
    "RESERVATION_PAID",
    "ReservationEvent",
    "build_event",
    "clear_sinks",
    "emit",
    "publish",
    "register_sink",
    "unregister_sink",
]
