"""Typed errors raised by the booking engine.

Services raise these instead of returning sentinel values; the API layer maps
each one onto an HTTP status through ``status_code``. None of them is retried
by the engine itself.
"""

from __future__ import annotations

from typing import Any


class BookingEngineError(Exception):
    """Base class for engine errors surfaced to callers."""

    status_code = 400

    def __init__(self, message: str, *, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or {}

    def to_payload(self) -> dict[str, Any] | str:
        if not self.detail:
            return self.message
        return {"message": self.message, **self.detail}


class InvalidRangeError(BookingEngineError, ValueError):
    """Malformed, inverted, past or multi-day time range."""


class InvalidDateError(BookingEngineError, ValueError):
    """Date string that is not a valid ``YYYY-MM-DD`` calendar date."""


class InvalidRuleError(BookingEngineError, ValueError):
    """Price rule fields inconsistent with its rule type."""


class InvalidTimezoneError(BookingEngineError, ValueError):
    """Club timezone that is not a known IANA zone name."""


class InvalidTransitionError(BookingEngineError, ValueError):
    """Reservation status change not allowed from the current state."""


class ResourceNotFoundError(BookingEngineError, LookupError):
    """Court, club, rule, requester or reservation does not exist."""

    status_code = 404


class RequesterBlockedError(BookingEngineError):
    """Requester is barred from creating reservations."""

    status_code = 403


class ConflictError(BookingEngineError):
    """Overlapping reservation, availability block or pricing rule."""

    status_code = 409


__all__ = [
    "BookingEngineError",
    "ConflictError",
    "InvalidDateError",
    "InvalidRangeError",
    "InvalidRuleError",
    "InvalidTimezoneError",
    "InvalidTransitionError",
    "RequesterBlockedError",
    "ResourceNotFoundError",
]
