"""Tests for price rule management."""

from __future__ import annotations

import uuid

import pytest

from conftest import MONDAY
from courtslot.core.errors import ConflictError, InvalidRuleError, ResourceNotFoundError
from courtslot.models import PriceRuleType
from courtslot.schemas.price_rule import PriceRuleCreate, PriceRuleUpdate
from courtslot.services import price_rule_service

pytestmark = pytest.mark.asyncio


async def test_overlapping_rule_is_rejected(booking_context) -> None:
    court_id = booking_context["court_id"]
    async with booking_context["sessionmaker"]() as session:
        existing = await price_rule_service.create_rule(
            session,
            court_id=court_id,
            payload=PriceRuleCreate(
                rule_type=PriceRuleType.WEEKDAYS,
                start_time="08:00",
                end_time="12:00",
                price_cents=1000,
            ),
        )
        existing_id = existing.id
        with pytest.raises(ConflictError) as excinfo:
            await price_rule_service.create_rule(
                session,
                court_id=court_id,
                payload=PriceRuleCreate(
                    rule_type=PriceRuleType.SPECIFIC_DAY,
                    day_of_week=1,
                    start_time="10:00",
                    end_time="14:00",
                    price_cents=1500,
                ),
            )
        rules = await price_rule_service.list_rules(session, court_id=court_id)

    assert excinfo.value.detail["conflicting_rule"]["id"] == str(existing_id)
    assert "WEEKDAYS" in excinfo.value.message
    assert [rule.id for rule in rules] == [existing_id]


async def test_update_does_not_conflict_with_itself(booking_context) -> None:
    court_id = booking_context["court_id"]
    async with booking_context["sessionmaker"]() as session:
        rule = await price_rule_service.create_rule(
            session,
            court_id=court_id,
            payload=PriceRuleCreate(
                rule_type=PriceRuleType.WEEKDAYS,
                start_time="08:00",
                end_time="12:00",
                price_cents=1000,
            ),
        )
        updated = await price_rule_service.update_rule(
            session,
            court_id=court_id,
            rule_id=rule.id,
            payload=PriceRuleUpdate(end_time="13:00", price_cents=1100),
        )

    assert updated.start_time == "08:00"
    assert updated.end_time == "13:00"
    assert updated.price_cents == 1100


async def test_update_into_another_rule_conflicts(booking_context) -> None:
    court_id = booking_context["court_id"]
    async with booking_context["sessionmaker"]() as session:
        await price_rule_service.create_rule(
            session,
            court_id=court_id,
            payload=PriceRuleCreate(
                rule_type=PriceRuleType.WEEKENDS,
                start_time="08:00",
                end_time="12:00",
                price_cents=1000,
            ),
        )
        weekday_rule = await price_rule_service.create_rule(
            session,
            court_id=court_id,
            payload=PriceRuleCreate(
                rule_type=PriceRuleType.WEEKDAYS,
                start_time="08:00",
                end_time="12:00",
                price_cents=1000,
            ),
        )
        with pytest.raises(ConflictError):
            await price_rule_service.update_rule(
                session,
                court_id=court_id,
                rule_id=weekday_rule.id,
                payload=PriceRuleUpdate(rule_type=PriceRuleType.ALL_DAYS),
            )


async def test_rule_type_change_clears_unrelated_fields(booking_context) -> None:
    court_id = booking_context["court_id"]
    async with booking_context["sessionmaker"]() as session:
        rule = await price_rule_service.create_rule(
            session,
            court_id=court_id,
            payload=PriceRuleCreate(
                rule_type=PriceRuleType.SPECIFIC_DATE,
                date=MONDAY,
                day_of_week=3,
                start_time="08:00",
                end_time="12:00",
                price_cents=1000,
            ),
        )
        assert rule.day_of_week is None
        updated = await price_rule_service.update_rule(
            session,
            court_id=court_id,
            rule_id=rule.id,
            payload=PriceRuleUpdate(rule_type=PriceRuleType.SPECIFIC_DAY, day_of_week=2),
        )

    assert updated.date is None
    assert updated.day_of_week == 2


@pytest.mark.parametrize(
    "fields",
    [
        {"rule_type": PriceRuleType.SPECIFIC_DAY, "day_of_week": None},
        {"rule_type": PriceRuleType.SPECIFIC_DAY, "day_of_week": 7},
        {"rule_type": PriceRuleType.SPECIFIC_DATE},
        {"rule_type": PriceRuleType.HOLIDAY},
        {"rule_type": PriceRuleType.ALL_DAYS, "price_cents": -1},
    ],
)
async def test_inconsistent_rule_fields_are_rejected(booking_context, fields) -> None:
    payload = {"start_time": "08:00", "end_time": "12:00", "price_cents": 1000, **fields}
    async with booking_context["sessionmaker"]() as session:
        with pytest.raises(InvalidRuleError):
            await price_rule_service.create_rule(
                session,
                court_id=booking_context["court_id"],
                payload=PriceRuleCreate(**payload),
            )


async def test_holiday_rule_requires_known_holiday(booking_context) -> None:
    async with booking_context["sessionmaker"]() as session:
        with pytest.raises(ResourceNotFoundError):
            await price_rule_service.create_rule(
                session,
                court_id=booking_context["court_id"],
                payload=PriceRuleCreate(
                    rule_type=PriceRuleType.HOLIDAY,
                    holiday_id=uuid.uuid4(),
                    start_time="08:00",
                    end_time="12:00",
                    price_cents=1000,
                ),
            )


async def test_rule_for_unknown_court_is_not_found(booking_context) -> None:
    async with booking_context["sessionmaker"]() as session:
        with pytest.raises(ResourceNotFoundError):
            await price_rule_service.create_rule(
                session,
                court_id=uuid.uuid4(),
                payload=PriceRuleCreate(
                    rule_type=PriceRuleType.ALL_DAYS,
                    start_time="08:00",
                    end_time="12:00",
                    price_cents=1000,
                ),
            )


async def test_delete_rule(booking_context) -> None:
    court_id = booking_context["court_id"]
    async with booking_context["sessionmaker"]() as session:
        rule = await price_rule_service.create_rule(
            session,
            court_id=court_id,
            payload=PriceRuleCreate(
                rule_type=PriceRuleType.ALL_DAYS,
                start_time="08:00",
                end_time="12:00",
                price_cents=1000,
            ),
        )
        await price_rule_service.delete_rule(session, court_id=court_id, rule_id=rule.id)
        with pytest.raises(ResourceNotFoundError):
            await price_rule_service.get_rule(session, court_id=court_id, rule_id=rule.id)
