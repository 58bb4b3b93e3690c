"""Requester eligibility checks."""

from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from courtslot.core.errors import RequesterBlockedError, ResourceNotFoundError
from courtslot.models.player import Player


async def ensure_requester_can_book(
    session: AsyncSession, requester_id: uuid.UUID
) -> Player:
    player = await session.get(Player, requester_id)
    if player is None:
        raise ResourceNotFoundError(
            "Requester not found", detail={"requester_id": str(requester_id)}
        )
    if player.is_blocked:
        raise RequesterBlockedError(
            "Requester is blocked from booking",
            detail={"requester_id": str(requester_id)},
        )
    return player
