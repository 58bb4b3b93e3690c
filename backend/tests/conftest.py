"""Test fixtures for the court booking engine."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator, Iterator
from datetime import UTC, date, datetime, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("LIFECYCLE_TRIGGER_SECRET", "test-lifecycle-secret")

from courtslot.core.config import get_settings
from courtslot.db.base import Base
from courtslot.db.session import dispose_engine, get_sessionmaker
from courtslot.main import app
from courtslot.models import (
    Club,
    Court,
    Player,
    Reservation,
    ReservationMode,
    ReservationStatus,
)
from courtslot.services import event_service

# 2030-01-07 is a Monday; every scenario runs on dates well in the future.
MONDAY = date(2030, 1, 7)
LIFECYCLE_SECRET = os.environ["LIFECYCLE_TRIGGER_SECRET"]


def at(hour: int, minute: int = 0, *, day: date = MONDAY) -> datetime:
    """UTC instant on ``day``; the seeded club runs on UTC."""
    return datetime(day.year, day.month, day.day, tzinfo=UTC) + timedelta(
        hours=hour, minutes=minute
    )


async def add_reservation(
    session,
    *,
    court_id,
    requester_id,
    start_at: datetime,
    end_at: datetime,
    status: ReservationStatus = ReservationStatus.RESERVED,
    expires_at: datetime | None = None,
) -> Reservation:
    """Insert a reservation row directly, bypassing the booking checks."""
    reservation = Reservation(
        court_id=court_id,
        requester_id=requester_id,
        mode=(
            ReservationMode.CUSTOMER_PENDING
            if status is ReservationStatus.PENDING_PAYMENT
            else ReservationMode.ADMIN_DIRECT
        ),
        status=status,
        start_at=start_at,
        end_at=end_at,
        price_cents=5000,
        reservation_expires_at=expires_at,
    )
    session.add(reservation)
    await session.commit()
    return reservation


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest.fixture(autouse=True)
def reset_event_sinks() -> Iterator[None]:
    event_service.clear_sinks()
    yield
    event_service.clear_sinks()


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def booking_context(
    reset_database: AsyncIterator[None], db_url: str
) -> dict[str, object]:
    """Seed a UTC club with one 5000-cent court, a player and a blocked player."""
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        club = Club(name="Riverside Padel", timezone="UTC")
        session.add(club)
        await session.flush()

        court = Court(
            club_id=club.id,
            name="C1",
            sport_type="padel",
            default_price_cents=5000,
        )
        player = Player(display_name="Alex Rivera", email="alex@example.com")
        blocked = Player(display_name="Blocked Player", is_blocked=True)
        session.add_all([court, player, blocked])
        await session.commit()

        return {
            "sessionmaker": sessionmaker,
            "club_id": club.id,
            "court_id": court.id,
            "player_id": player.id,
            "blocked_player_id": blocked.id,
        }


@pytest_asyncio.fixture()
async def app_context(
    booking_context: dict[str, object],
) -> AsyncIterator[dict[str, object]]:
    """Yield an async client alongside the seeded booking data."""
    context = dict(booking_context)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        context["client"] = client
        yield context
