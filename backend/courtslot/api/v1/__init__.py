"""Versioned API router."""

from fastapi import APIRouter

from . import (
    availability,
    blocks,
    club_hours,
    health,
    holidays,
    lifecycle,
    price_rules,
    reservations,
)

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(availability.router, tags=["availability"])
router.include_router(price_rules.router, tags=["pricing"])
router.include_router(reservations.router, tags=["reservations"])
router.include_router(blocks.router, tags=["blocks"])
router.include_router(club_hours.router, tags=["club-hours"])
router.include_router(holidays.router, prefix="/holidays", tags=["holidays"])
router.include_router(
    lifecycle.router, prefix="/internal/lifecycle", tags=["internal"]
)
