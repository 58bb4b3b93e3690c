"""Async engines and sessions for the booking database."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from courtslot.core.config import get_settings

# Seconds a SQLite connection waits on another writer before "database is locked".
SQLITE_BUSY_TIMEOUT = 15


@dataclass(slots=True, frozen=True)
class BookingDatabase:
    """One engine and its session factory, shared per database URL."""

    engine: AsyncEngine
    sessionmaker: async_sessionmaker[AsyncSession]


_databases: dict[str, BookingDatabase] = {}


def _open(url: str) -> BookingDatabase:
    if make_url(url).get_backend_name() == "sqlite":
        # Court locks rely on SQLite's single writer; waiting beats failing fast.
        engine = create_async_engine(url, connect_args={"timeout": SQLITE_BUSY_TIMEOUT})
    else:
        engine = create_async_engine(url, pool_pre_ping=True)
    return BookingDatabase(
        engine=engine,
        sessionmaker=async_sessionmaker(engine, expire_on_commit=False),
    )


def get_database(database_url: str | None = None) -> BookingDatabase:
    """Return the shared database handle, opening it on first use."""
    url = database_url or get_settings().database_url
    database = _databases.get(url)
    if database is None:
        database = _databases[url] = _open(url)
    return database


def get_sessionmaker(
    database_url: str | None = None,
) -> async_sessionmaker[AsyncSession]:
    return get_database(database_url).sessionmaker


async def get_session() -> AsyncIterator[AsyncSession]:
    """Request-scoped session; services commit or roll back themselves."""
    async with get_sessionmaker()() as session:
        yield session


@asynccontextmanager
async def session_scope(database_url: str | None = None) -> AsyncIterator[AsyncSession]:
    """Session for scripts that rolls back whatever is left open on failure."""
    async with get_sessionmaker(database_url)() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def dispose_engine(database_url: str | None = None) -> None:
    """Close the pooled connections for a URL and forget its handle."""
    url = database_url or get_settings().database_url
    database = _databases.pop(url, None)
    if database is not None:
        await database.engine.dispose()
