"""Court price rule management and conflict validation."""

from __future__ import annotations

import datetime
import enum
import logging
import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from courtslot.core.errors import ConflictError, InvalidRuleError, ResourceNotFoundError
from courtslot.core.time_ranges import (
    ALL_DAY_NUMBERS,
    WEEKDAY_NUMBERS,
    WEEKEND_NUMBERS,
    ranges_overlap,
    time_to_minutes,
    validate_time_range,
)
from courtslot.models.price_rule import CourtPriceRule, PriceRuleType
from courtslot.schemas.price_rule import PriceRuleCreate, PriceRuleUpdate
from courtslot.services import holiday_service
from courtslot.services.court_service import get_court, lock_court
from courtslot.services.pricing_service import list_court_rules

logger = logging.getLogger(__name__)


class DateFamily(str, enum.Enum):
    """Rules only compete with rules of the same family; precedence settles the rest."""

    EXACT_DATE = "exact_date"
    HOLIDAY = "holiday"
    WEEKLY = "weekly"


@dataclass(slots=True, frozen=True)
class RuleProjection:
    """A rule reduced to the dates it can match and its time-of-day window."""

    family: DateFamily
    members: frozenset[Any]
    start_minute: int
    end_minute: int

    def dates_intersect(self, other: "RuleProjection") -> bool:
        return self.family is other.family and not self.members.isdisjoint(other.members)

    def intersects(self, other: "RuleProjection") -> bool:
        return self.dates_intersect(other) and ranges_overlap(
            self.start_minute, self.end_minute, other.start_minute, other.end_minute
        )


@dataclass(slots=True, frozen=True)
class RuleCandidate:
    """Validated, normalised rule fields awaiting a conflict check."""

    rule_type: PriceRuleType
    start_time: str
    end_time: str
    price_cents: int
    date: datetime.date | None = None
    holiday_id: uuid.UUID | None = None
    day_of_week: int | None = None


def _members(rule: CourtPriceRule | RuleCandidate) -> tuple[DateFamily, frozenset[Any]]:
    if rule.rule_type is PriceRuleType.SPECIFIC_DATE:
        return DateFamily.EXACT_DATE, frozenset({rule.date})
    if rule.rule_type is PriceRuleType.HOLIDAY:
        return DateFamily.HOLIDAY, frozenset({rule.holiday_id})
    if rule.rule_type is PriceRuleType.SPECIFIC_DAY:
        return DateFamily.WEEKLY, frozenset({rule.day_of_week})
    if rule.rule_type is PriceRuleType.WEEKDAYS:
        return DateFamily.WEEKLY, WEEKDAY_NUMBERS
    if rule.rule_type is PriceRuleType.WEEKENDS:
        return DateFamily.WEEKLY, WEEKEND_NUMBERS
    return DateFamily.WEEKLY, ALL_DAY_NUMBERS


def project(rule: CourtPriceRule | RuleCandidate) -> RuleProjection:
    family, members = _members(rule)
    return RuleProjection(
        family=family,
        members=members,
        start_minute=time_to_minutes(rule.start_time),
        end_minute=time_to_minutes(rule.end_time),
    )


def conflicting_rule(
    candidate: RuleCandidate,
    rules: list[CourtPriceRule],
    *,
    exclude_rule_id: uuid.UUID | None = None,
) -> CourtPriceRule | None:
    target = project(candidate)
    for rule in rules:
        if exclude_rule_id is not None and rule.id == exclude_rule_id:
            continue
        if project(rule).intersects(target):
            return rule
    return None


async def find_conflict(
    session: AsyncSession,
    *,
    court_id: uuid.UUID,
    candidate: RuleCandidate,
    exclude_rule_id: uuid.UUID | None = None,
) -> CourtPriceRule | None:
    """Return the first existing rule whose dates and time window overlap ``candidate``."""
    rules = await list_court_rules(session, court_id=court_id)
    return conflicting_rule(candidate, rules, exclude_rule_id=exclude_rule_id)


def _conflict_error(rule: CourtPriceRule) -> ConflictError:
    return ConflictError(
        f"Time range conflicts with existing {rule.rule_type.value} rule "
        f"({rule.start_time}-{rule.end_time})",
        detail={
            "conflicting_rule": {
                "id": str(rule.id),
                "rule_type": rule.rule_type.value,
                "start_time": rule.start_time,
                "end_time": rule.end_time,
            }
        },
    )


async def build_candidate(
    session: AsyncSession,
    *,
    rule_type: PriceRuleType,
    start_time: str,
    end_time: str,
    price_cents: int,
    date: datetime.date | None = None,
    holiday_id: uuid.UUID | None = None,
    day_of_week: int | None = None,
) -> RuleCandidate:
    start_value, end_value = validate_time_range(start_time, end_time)
    if price_cents < 0:
        raise InvalidRuleError("Price must be a non-negative amount of cents")

    if rule_type is PriceRuleType.SPECIFIC_DAY:
        if day_of_week is None or not 0 <= day_of_week <= 6:
            raise InvalidRuleError("SPECIFIC_DAY rules require day_of_week between 0 and 6")
    elif rule_type is PriceRuleType.SPECIFIC_DATE:
        if date is None:
            raise InvalidRuleError("SPECIFIC_DATE rules require a date")
    elif rule_type is PriceRuleType.HOLIDAY:
        if holiday_id is None:
            raise InvalidRuleError("HOLIDAY rules require a holiday_id")
        await holiday_service.get_holiday(session, holiday_id)

    return RuleCandidate(
        rule_type=rule_type,
        start_time=start_value,
        end_time=end_value,
        price_cents=price_cents,
        date=date if rule_type is PriceRuleType.SPECIFIC_DATE else None,
        holiday_id=holiday_id if rule_type is PriceRuleType.HOLIDAY else None,
        day_of_week=day_of_week if rule_type is PriceRuleType.SPECIFIC_DAY else None,
    )


async def list_rules(
    session: AsyncSession, *, court_id: uuid.UUID
) -> list[CourtPriceRule]:
    await get_court(session, court_id)
    return await list_court_rules(session, court_id=court_id)


async def get_rule(
    session: AsyncSession, *, court_id: uuid.UUID, rule_id: uuid.UUID
) -> CourtPriceRule:
    rule = await session.get(CourtPriceRule, rule_id)
    if rule is None or rule.court_id != court_id:
        raise ResourceNotFoundError("Price rule not found", detail={"rule_id": str(rule_id)})
    return rule


async def _check_conflict_locked(
    session: AsyncSession,
    *,
    court_id: uuid.UUID,
    candidate: RuleCandidate,
    exclude_rule_id: uuid.UUID | None = None,
) -> None:
    await lock_court(session, court_id)
    conflict = await find_conflict(
        session,
        court_id=court_id,
        candidate=candidate,
        exclude_rule_id=exclude_rule_id,
    )
    if conflict is not None:
        error = _conflict_error(conflict)
        await session.rollback()
        logger.info("Rejected price rule on court %s: %s", court_id, error.message)
        raise error


async def create_rule(
    session: AsyncSession,
    *,
    court_id: uuid.UUID,
    payload: PriceRuleCreate,
) -> CourtPriceRule:
    candidate = await build_candidate(session, **payload.model_dump())
    await _check_conflict_locked(session, court_id=court_id, candidate=candidate)
    rule = CourtPriceRule(
        court_id=court_id,
        rule_type=candidate.rule_type,
        date=candidate.date,
        holiday_id=candidate.holiday_id,
        day_of_week=candidate.day_of_week,
        start_time=candidate.start_time,
        end_time=candidate.end_time,
        price_cents=candidate.price_cents,
    )
    session.add(rule)
    await session.commit()
    await session.refresh(rule)
    return rule


async def update_rule(
    session: AsyncSession,
    *,
    court_id: uuid.UUID,
    rule_id: uuid.UUID,
    payload: PriceRuleUpdate,
) -> CourtPriceRule:
    rule = await get_rule(session, court_id=court_id, rule_id=rule_id)
    fields: dict[str, Any] = {
        "rule_type": rule.rule_type,
        "date": rule.date,
        "holiday_id": rule.holiday_id,
        "day_of_week": rule.day_of_week,
        "start_time": rule.start_time,
        "end_time": rule.end_time,
        "price_cents": rule.price_cents,
    }
    changes = payload.model_dump(exclude_unset=True)
    fields.update({key: value for key, value in changes.items() if value is not None})
    candidate = await build_candidate(session, **fields)
    await _check_conflict_locked(
        session, court_id=court_id, candidate=candidate, exclude_rule_id=rule.id
    )
    rule.rule_type = candidate.rule_type
    rule.date = candidate.date
    rule.holiday_id = candidate.holiday_id
    rule.day_of_week = candidate.day_of_week
    rule.start_time = candidate.start_time
    rule.end_time = candidate.end_time
    rule.price_cents = candidate.price_cents
    await session.commit()
    await session.refresh(rule)
    return rule


async def delete_rule(
    session: AsyncSession, *, court_id: uuid.UUID, rule_id: uuid.UUID
) -> None:
    rule = await get_rule(session, court_id=court_id, rule_id=rule_id)
    await session.delete(rule)
    await session.commit()
