"""Court price rule and price quote endpoints."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from courtslot.api import deps
from courtslot.core.errors import BookingEngineError
from courtslot.schemas.price_rule import (
    PriceQuoteRead,
    PriceRuleCreate,
    PriceRuleRead,
    PriceRuleUpdate,
    PriceTimelineRead,
)
from courtslot.services import price_rule_service, pricing_service

router = APIRouter(prefix="/courts/{court_id}")


@router.get("/price-rules", response_model=list[PriceRuleRead], summary="List price rules")
async def list_price_rules(
    court_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> list[PriceRuleRead]:
    try:
        rules = await price_rule_service.list_rules(session, court_id=court_id)
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return [PriceRuleRead.model_validate(rule) for rule in rules]


@router.post(
    "/price-rules",
    response_model=PriceRuleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create price rule",
    dependencies=[deps.DEFAULT_RATE_LIMIT],
)
async def create_price_rule(
    court_id: uuid.UUID,
    payload: PriceRuleCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> PriceRuleRead:
    try:
        rule = await price_rule_service.create_rule(
            session, court_id=court_id, payload=payload
        )
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return PriceRuleRead.model_validate(rule)


@router.get(
    "/price-rules/{rule_id}", response_model=PriceRuleRead, summary="Get price rule"
)
async def get_price_rule(
    court_id: uuid.UUID,
    rule_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> PriceRuleRead:
    try:
        rule = await price_rule_service.get_rule(
            session, court_id=court_id, rule_id=rule_id
        )
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return PriceRuleRead.model_validate(rule)


@router.put(
    "/price-rules/{rule_id}",
    response_model=PriceRuleRead,
    summary="Update price rule",
    dependencies=[deps.DEFAULT_RATE_LIMIT],
)
async def update_price_rule(
    court_id: uuid.UUID,
    rule_id: uuid.UUID,
    payload: PriceRuleUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> PriceRuleRead:
    try:
        rule = await price_rule_service.update_rule(
            session, court_id=court_id, rule_id=rule_id, payload=payload
        )
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return PriceRuleRead.model_validate(rule)


@router.delete(
    "/price-rules/{rule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete price rule",
)
async def delete_price_rule(
    court_id: uuid.UUID,
    rule_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> None:
    try:
        await price_rule_service.delete_rule(session, court_id=court_id, rule_id=rule_id)
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return None


@router.get("/price", response_model=PriceQuoteRead, summary="Quote a time range")
async def quote_price(
    court_id: uuid.UUID,
    start_at: datetime,
    end_at: datetime,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> PriceQuoteRead:
    try:
        quote = await pricing_service.quote_price(
            session, court_id=court_id, start_at=start_at, end_at=end_at
        )
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return PriceQuoteRead.model_validate(quote)


@router.get(
    "/price-timeline",
    response_model=PriceTimelineRead,
    summary="Winning price across a day",
)
async def get_price_timeline(
    court_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    day: Annotated[str, Query(alias="date", description="YYYY-MM-DD")],
) -> PriceTimelineRead:
    try:
        timeline = await pricing_service.get_price_timeline(
            session, court_id=court_id, day=day
        )
    except BookingEngineError as exc:
        raise deps.http_error(exc) from exc
    return PriceTimelineRead.model_validate(timeline)
