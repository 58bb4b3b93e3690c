"""Run one reservation lifecycle sweep; meant to be scheduled from cron."""

from __future__ import annotations

import asyncio
import logging

from courtslot.db.session import dispose_engine, session_scope
from courtslot.services.lifecycle_service import run_lifecycle_sweep

logger = logging.getLogger("courtslot.scripts.lifecycle")


async def sweep() -> None:
    try:
        async with session_scope() as session:
            result = await run_lifecycle_sweep(session)
        logger.info(
            "Lifecycle sweep cancelled %d holds and completed %d reservations",
            result.cancelled_count,
            result.completed_count,
        )
    finally:
        await dispose_engine()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    asyncio.run(sweep())


if __name__ == "__main__":
    main()
