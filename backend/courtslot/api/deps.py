"""Common API dependencies."""

from __future__ import annotations

import hmac
import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, Response, status
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from sqlalchemy.ext.asyncio import AsyncSession

from courtslot.core.config import get_settings
from courtslot.core.errors import BookingEngineError
from courtslot.db.session import get_session

logger = logging.getLogger(__name__)

LIFECYCLE_SECRET_HEADER = "X-Lifecycle-Secret"

_SECONDS_PER_WINDOW = {
    "second": 1,
    "seconds": 1,
    "minute": 60,
    "minutes": 60,
    "hour": 3600,
    "hours": 3600,
    "day": 86400,
    "days": 86400,
}


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session."""
    async for session in get_session():
        yield session


def http_error(exc: BookingEngineError) -> HTTPException:
    """Translate an engine error into the matching HTTP error."""
    return HTTPException(status_code=exc.status_code, detail=exc.to_payload())


def parse_rate(value: str, *, fallback: tuple[int, int]) -> tuple[int, int]:
    """Parse ``"<count>/<window>"`` into ``(times, seconds)``."""
    try:
        count_str, window_str = value.split("/", 1)
        count = int(count_str.strip())
    except ValueError:
        return fallback
    seconds = _SECONDS_PER_WINDOW.get(window_str.strip().lower())
    if seconds is None or count <= 0:
        return fallback
    return count, seconds


def rate_limit(limit: tuple[int, int]):
    """Rate-limit a route when the limiter has a Redis backend; no-op otherwise."""

    async def _dependency(request: Request, response: Response) -> None:
        if FastAPILimiter.redis is None:
            return None
        limiter = RateLimiter(times=limit[0], seconds=limit[1])
        await limiter(request, response)

    return Depends(_dependency)


_settings = get_settings()
BOOKING_RATE_LIMIT = rate_limit(parse_rate(_settings.rate_limit_booking, fallback=(20, 60)))
DEFAULT_RATE_LIMIT = rate_limit(parse_rate(_settings.rate_limit_default, fallback=(100, 60)))


async def require_lifecycle_secret(
    secret: Annotated[str | None, Header(alias=LIFECYCLE_SECRET_HEADER)] = None,
) -> None:
    """Guard internal trigger routes with the shared lifecycle secret."""
    expected = get_settings().lifecycle_trigger_secret
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Lifecycle trigger is not configured",
        )
    if secret is None or not hmac.compare_digest(secret.encode(), expected.encode()):
        logger.warning("Rejected lifecycle trigger with missing or invalid secret")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Invalid lifecycle secret"
        )
