"""Price resolution for court time ranges.

Rules are classified through ``RULE_CLASSES``, an ordered table pairing each
rule type with its precedence and a date matcher. A ``PriceResolver`` is built
once per court and local date; it keeps only the rules whose matcher accepts
that date, ordered by precedence, and answers range queries against them.
"""

from __future__ import annotations

import datetime
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from courtslot.core.time_ranges import (
    MINUTES_PER_DAY,
    WEEKDAY_NUMBERS,
    WEEKEND_NUMBERS,
    day_of_week,
    minutes_to_time,
    parse_date,
    range_contains,
    split_local_range,
    time_to_minutes,
)
from courtslot.models.court import Court
from courtslot.models.price_rule import CourtPriceRule, PriceRuleType
from courtslot.services import holiday_service
from courtslot.services.court_service import court_zone, get_court

CENT = Decimal("1")
MINUTES_PER_HOUR = Decimal(60)


@dataclass(slots=True, frozen=True)
class DayContext:
    """What a rule matcher needs to know about a local date."""

    day: datetime.date
    day_of_week: int
    holiday_ids: frozenset[UUID]

    @classmethod
    def for_day(
        cls, day: datetime.date, holiday_ids: Iterable[UUID] = ()
    ) -> "DayContext":
        return cls(day=day, day_of_week=day_of_week(day), holiday_ids=frozenset(holiday_ids))


RuleMatcher = Callable[[CourtPriceRule, DayContext], bool]


def _matches_specific_date(rule: CourtPriceRule, context: DayContext) -> bool:
    return rule.date == context.day


def _matches_holiday(rule: CourtPriceRule, context: DayContext) -> bool:
    return rule.holiday_id is not None and rule.holiday_id in context.holiday_ids


def _matches_specific_day(rule: CourtPriceRule, context: DayContext) -> bool:
    return rule.day_of_week == context.day_of_week


def _matches_weekdays(rule: CourtPriceRule, context: DayContext) -> bool:
    return context.day_of_week in WEEKDAY_NUMBERS


def _matches_weekends(rule: CourtPriceRule, context: DayContext) -> bool:
    return context.day_of_week in WEEKEND_NUMBERS


def _matches_all_days(rule: CourtPriceRule, context: DayContext) -> bool:
    return True


@dataclass(slots=True, frozen=True)
class RuleClass:
    rule_type: PriceRuleType
    precedence: int
    matcher: RuleMatcher


# Highest precedence first. WEEKDAYS and WEEKENDS share a rank; no date matches both.
RULE_CLASSES: tuple[RuleClass, ...] = (
    RuleClass(PriceRuleType.SPECIFIC_DATE, 50, _matches_specific_date),
    RuleClass(PriceRuleType.HOLIDAY, 40, _matches_holiday),
    RuleClass(PriceRuleType.SPECIFIC_DAY, 30, _matches_specific_day),
    RuleClass(PriceRuleType.WEEKDAYS, 20, _matches_weekdays),
    RuleClass(PriceRuleType.WEEKENDS, 20, _matches_weekends),
    RuleClass(PriceRuleType.ALL_DAYS, 10, _matches_all_days),
)
_RULE_CLASS_BY_TYPE = {rule_class.rule_type: rule_class for rule_class in RULE_CLASSES}


def precedence_of(rule_type: PriceRuleType) -> int:
    return _RULE_CLASS_BY_TYPE[rule_type].precedence


def rule_applies_on(rule: CourtPriceRule, context: DayContext) -> bool:
    rule_class = _RULE_CLASS_BY_TYPE.get(rule.rule_type)
    return rule_class is not None and rule_class.matcher(rule, context)


def scale_price(price_cents: int, minutes: int) -> int:
    """Scale an hourly price to ``minutes``, rounding half-up to a whole cent."""
    amount = Decimal(price_cents) * Decimal(minutes) / MINUTES_PER_HOUR
    return int(amount.quantize(CENT, rounding=ROUND_HALF_UP))


@dataclass(slots=True, frozen=True)
class _Candidate:
    rule: CourtPriceRule
    precedence: int
    start_minute: int
    end_minute: int


@dataclass(slots=True, frozen=True)
class PriceMatch:
    """Hourly price chosen for a range and the rule that supplied it."""

    hourly_price_cents: int
    rule: CourtPriceRule | None

    @property
    def rule_id(self) -> UUID | None:
        return self.rule.id if self.rule is not None else None

    @property
    def rule_type(self) -> PriceRuleType | None:
        return self.rule.rule_type if self.rule is not None else None


@dataclass(slots=True, frozen=True)
class TimelineSegment:
    start_time: str
    end_time: str
    price_cents: int
    rule_id: UUID | None = None
    rule_type: PriceRuleType | None = None


class PriceResolver:
    """Resolve prices for one court on one local date."""

    def __init__(
        self,
        *,
        default_price_cents: int,
        rules: Iterable[CourtPriceRule],
        context: DayContext,
    ) -> None:
        self.default_price_cents = default_price_cents
        self.context = context
        candidates = [
            _Candidate(
                rule=rule,
                precedence=precedence_of(rule.rule_type),
                start_minute=time_to_minutes(rule.start_time),
                end_minute=time_to_minutes(rule.end_time),
            )
            for rule in rules
            if rule_applies_on(rule, context)
        ]
        candidates.sort(key=lambda item: (-item.precedence, item.start_minute))
        self._candidates = candidates

    def match(self, start_minute: int, end_minute: int) -> PriceMatch:
        """Pick the highest-precedence rule fully containing the range."""
        for candidate in self._candidates:
            if range_contains(
                candidate.start_minute, candidate.end_minute, start_minute, end_minute
            ):
                return PriceMatch(candidate.rule.price_cents, candidate.rule)
        return PriceMatch(self.default_price_cents, None)

    def price(
        self, start_minute: int, end_minute: int, duration_minutes: int | None = None
    ) -> int:
        minutes = duration_minutes if duration_minutes is not None else end_minute - start_minute
        return scale_price(self.match(start_minute, end_minute).hourly_price_cents, minutes)

    def timeline(self) -> list[TimelineSegment]:
        """Winning hourly price across the whole day, merged into segments."""
        boundaries = {0, MINUTES_PER_DAY}
        for candidate in self._candidates:
            boundaries.update((candidate.start_minute, candidate.end_minute))
        points = sorted(boundaries)

        segments: list[TimelineSegment] = []
        for start, end in zip(points, points[1:]):
            winner = self.match(start, end)
            previous = segments[-1] if segments else None
            if (
                previous is not None
                and previous.rule_id == winner.rule_id
                and previous.price_cents == winner.hourly_price_cents
            ):
                segments[-1] = TimelineSegment(
                    start_time=previous.start_time,
                    end_time=minutes_to_time(end),
                    price_cents=previous.price_cents,
                    rule_id=previous.rule_id,
                    rule_type=previous.rule_type,
                )
                continue
            segments.append(
                TimelineSegment(
                    start_time=minutes_to_time(start),
                    end_time=minutes_to_time(end),
                    price_cents=winner.hourly_price_cents,
                    rule_id=winner.rule_id,
                    rule_type=winner.rule_type,
                )
            )
        return segments


@dataclass(slots=True)
class PriceQuote:
    court_id: UUID
    start_at: datetime.datetime
    end_at: datetime.datetime
    duration_minutes: int
    price_cents: int
    rule_id: UUID | None = None
    rule_type: PriceRuleType | None = None


@dataclass(slots=True)
class PriceTimeline:
    court_id: UUID
    date: datetime.date
    default_price_cents: int
    segments: list[TimelineSegment]


async def list_court_rules(
    session: AsyncSession, *, court_id: UUID
) -> list[CourtPriceRule]:
    stmt = (
        select(CourtPriceRule)
        .where(CourtPriceRule.court_id == court_id)
        .order_by(CourtPriceRule.rule_type.asc(), CourtPriceRule.start_time.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def build_resolver(
    session: AsyncSession,
    *,
    court: Court,
    day: datetime.date,
    rules: list[CourtPriceRule] | None = None,
    holiday_ids: Iterable[UUID] | None = None,
) -> PriceResolver:
    if rules is None:
        rules = await list_court_rules(session, court_id=court.id)
    if holiday_ids is None:
        holiday_ids = await holiday_service.holiday_ids_for(
            session, club_id=court.club_id, day=day
        )
    return PriceResolver(
        default_price_cents=court.default_price_cents,
        rules=rules,
        context=DayContext.for_day(day, holiday_ids),
    )


async def quote_for_court(
    session: AsyncSession,
    *,
    court: Court,
    start_at: datetime.datetime,
    end_at: datetime.datetime,
) -> PriceQuote:
    local = split_local_range(start_at, end_at, court_zone(court))
    resolver = await build_resolver(session, court=court, day=local.day)
    match = resolver.match(local.start_minute, local.end_minute)
    return PriceQuote(
        court_id=court.id,
        start_at=start_at,
        end_at=end_at,
        duration_minutes=local.duration_minutes,
        price_cents=scale_price(match.hourly_price_cents, local.duration_minutes),
        rule_id=match.rule_id,
        rule_type=match.rule_type,
    )


async def quote_price(
    session: AsyncSession,
    *,
    court_id: UUID,
    start_at: datetime.datetime,
    end_at: datetime.datetime,
) -> PriceQuote:
    court = await get_court(session, court_id)
    return await quote_for_court(session, court=court, start_at=start_at, end_at=end_at)


async def resolve_price(
    session: AsyncSession,
    *,
    court_id: UUID,
    start_at: datetime.datetime,
    end_at: datetime.datetime,
) -> int:
    """Return the charge in cents for ``[start_at, end_at)`` on a court."""
    quote = await quote_price(session, court_id=court_id, start_at=start_at, end_at=end_at)
    return quote.price_cents


async def get_price_timeline(
    session: AsyncSession,
    *,
    court_id: UUID,
    day: datetime.date | str,
) -> PriceTimeline:
    target = parse_date(day)
    court = await get_court(session, court_id)
    resolver = await build_resolver(session, court=court, day=target)
    return PriceTimeline(
        court_id=court.id,
        date=target,
        default_price_cents=court.default_price_cents,
        segments=resolver.timeline(),
    )
