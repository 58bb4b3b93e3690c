"""Internal trigger for the reservation lifecycle sweep."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from courtslot.api import deps
from courtslot.schemas.lifecycle import SweepResultRead
from courtslot.services import lifecycle_service

router = APIRouter(dependencies=[Depends(deps.require_lifecycle_secret)])


@router.post("/sweep", response_model=SweepResultRead, summary="Run lifecycle sweep")
async def run_sweep(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> SweepResultRead:
    """Expire stale holds and complete finished reservations."""
    result = await lifecycle_service.run_lifecycle_sweep(session)
    return SweepResultRead.model_validate(result)
