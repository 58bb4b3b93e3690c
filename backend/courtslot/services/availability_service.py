"""Slot availability for courts and clubs."""

from __future__ import annotations

import datetime
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from courtslot.core.config import get_settings
from courtslot.core.errors import InvalidRangeError
from courtslot.core.time_ranges import (
    get_zone,
    iter_dates,
    local_datetime,
    minutes_to_time,
    parse_date,
    range_contains,
    ranges_overlap,
    split_local_range,
)
from courtslot.models.court import Court
from courtslot.models.price_rule import CourtPriceRule
from courtslot.services import club_hours_service, holiday_service
from courtslot.services.club_hours_service import OperatingWindow
from courtslot.services.court_service import court_zone, get_club, get_court, list_club_courts
from courtslot.services.occupancy_service import Interval, busy_intervals
from courtslot.services.pricing_service import DayContext, PriceResolver, build_resolver

SLOT_AVAILABLE = "available"
SLOT_BOOKED = "booked"
SLOT_PARTIAL = "partial"

MAX_CLUB_DAYS = 31


@dataclass(slots=True, frozen=True)
class Slot:
    start: datetime.datetime
    end: datetime.datetime
    start_time: str
    end_time: str
    status: str
    price_cents: int


@dataclass(slots=True)
class DayAvailability:
    court_id: uuid.UUID
    date: datetime.date
    timezone: str
    is_closed: bool
    open_time: str | None
    close_time: str | None
    slots: list[Slot] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class SlotSummary:
    start_time: str
    end_time: str
    available: int
    booked: int
    partial: int
    total: int

    @property
    def status(self) -> str:
        if self.available == self.total:
            return "available"
        if self.available == 0:
            return "full"
        return "limited"


@dataclass(slots=True)
class ClubDayAvailability:
    date: datetime.date
    courts: list[DayAvailability]
    summary: list[SlotSummary]


@dataclass(slots=True)
class ClubAvailability:
    club_id: uuid.UUID
    timezone: str
    days: list[ClubDayAvailability]


@dataclass(slots=True, frozen=True)
class AvailableCourt:
    court_id: uuid.UUID
    name: str
    sport_type: str
    price_cents: int


def classify_slot(
    slot_start: datetime.datetime,
    slot_end: datetime.datetime,
    busy: Iterable[Interval],
) -> str:
    """Return ``booked`` if one interval covers the slot, ``partial`` if any overlaps."""
    status = SLOT_AVAILABLE
    for busy_start, busy_end in busy:
        if not ranges_overlap(slot_start, slot_end, busy_start, busy_end):
            continue
        if range_contains(busy_start, busy_end, slot_start, slot_end):
            return SLOT_BOOKED
        status = SLOT_PARTIAL
    return status


def build_day_slots(
    *,
    court_id: uuid.UUID,
    day: datetime.date,
    tz: ZoneInfo,
    window: OperatingWindow,
    slot_minutes: int,
    busy: list[Interval],
    resolver: PriceResolver,
) -> DayAvailability:
    availability = DayAvailability(
        court_id=court_id,
        date=day,
        timezone=tz.key,
        is_closed=window.is_closed,
        open_time=window.open_time,
        close_time=window.close_time,
    )
    if window.is_closed:
        return availability

    cursor = window.open_minute
    while cursor + slot_minutes <= window.close_minute:
        slot_end_minute = cursor + slot_minutes
        start = local_datetime(day, cursor, tz)
        end = local_datetime(day, slot_end_minute, tz)
        availability.slots.append(
            Slot(
                start=start,
                end=end,
                start_time=minutes_to_time(cursor),
                end_time=minutes_to_time(slot_end_minute),
                status=classify_slot(start, end, busy),
                price_cents=resolver.price(
                    cursor,
                    slot_end_minute,
                    duration_minutes=int((end - start).total_seconds() // 60),
                ),
            )
        )
        cursor = slot_end_minute
    return availability


def _slot_width(slot_minutes: int | None) -> int:
    width = slot_minutes if slot_minutes is not None else get_settings().slot_minutes
    if width <= 0:
        raise InvalidRangeError("Slot width must be a positive number of minutes")
    return width


async def generate_day_slots(
    session: AsyncSession,
    *,
    court_id: uuid.UUID,
    day: datetime.date | str,
    slot_minutes: int | None = None,
) -> DayAvailability:
    """Fixed-width slots over the court's operating hours on a local date."""
    target = parse_date(day)
    width = _slot_width(slot_minutes)
    court = await get_court(session, court_id)
    tz = court_zone(court)
    window = await club_hours_service.operating_window(
        session, club_id=court.club_id, day=target
    )
    busy = await busy_intervals(
        session, court_ids=[court.id], tz=tz, start=target, end=target
    )
    resolver = await build_resolver(session, court=court, day=target)
    return build_day_slots(
        court_id=court.id,
        day=target,
        tz=tz,
        window=window,
        slot_minutes=width,
        busy=busy.get(court.id, []),
        resolver=resolver,
    )


def summarize_slots(courts: list[DayAvailability]) -> list[SlotSummary]:
    counts: dict[tuple[str, str], dict[str, int]] = {}
    for availability in courts:
        for slot in availability.slots:
            bucket = counts.setdefault(
                (slot.start_time, slot.end_time),
                {SLOT_AVAILABLE: 0, SLOT_BOOKED: 0, SLOT_PARTIAL: 0},
            )
            bucket[slot.status] += 1
    return [
        SlotSummary(
            start_time=start_time,
            end_time=end_time,
            available=bucket[SLOT_AVAILABLE],
            booked=bucket[SLOT_BOOKED],
            partial=bucket[SLOT_PARTIAL],
            total=sum(bucket.values()),
        )
        for (start_time, end_time), bucket in sorted(counts.items())
    ]


async def _rules_by_court(
    session: AsyncSession, court_ids: list[uuid.UUID]
) -> dict[uuid.UUID, list[CourtPriceRule]]:
    grouped: dict[uuid.UUID, list[CourtPriceRule]] = {court_id: [] for court_id in court_ids}
    if not court_ids:
        return grouped
    result = await session.execute(
        select(CourtPriceRule).where(CourtPriceRule.court_id.in_(court_ids))
    )
    for rule in result.scalars().all():
        grouped[rule.court_id].append(rule)
    return grouped


async def get_club_availability(
    session: AsyncSession,
    *,
    club_id: uuid.UUID,
    start: datetime.date | str,
    days: int = 7,
    slot_minutes: int | None = None,
) -> ClubAvailability:
    """Slots for every court of a club over ``days`` consecutive local dates."""
    first_day = parse_date(start)
    if not 1 <= days <= MAX_CLUB_DAYS:
        raise InvalidRangeError(f"days must be between 1 and {MAX_CLUB_DAYS}")
    width = _slot_width(slot_minutes)
    club = await get_club(session, club_id)
    tz = get_zone(club.timezone)
    courts = await list_club_courts(session, club_id=club_id)
    dates = iter_dates(first_day, days)
    last_day = dates[-1]

    court_ids = [court.id for court in courts]
    windows = await club_hours_service.operating_windows(
        session, club_id=club_id, start=first_day, end=last_day
    )
    busy = await busy_intervals(
        session, court_ids=court_ids, tz=tz, start=first_day, end=last_day
    )
    rules = await _rules_by_court(session, court_ids)
    holidays = await holiday_service.holiday_ids_between(
        session, club_id=club_id, start=first_day, end=last_day
    )

    club_days: list[ClubDayAvailability] = []
    for day in dates:
        context = DayContext.for_day(day, holidays.get(day, set()))
        per_court = [
            build_day_slots(
                court_id=court.id,
                day=day,
                tz=tz,
                window=windows[day],
                slot_minutes=width,
                busy=busy.get(court.id, []),
                resolver=PriceResolver(
                    default_price_cents=court.default_price_cents,
                    rules=rules.get(court.id, []),
                    context=context,
                ),
            )
            for court in courts
        ]
        club_days.append(
            ClubDayAvailability(date=day, courts=per_court, summary=summarize_slots(per_court))
        )
    return ClubAvailability(club_id=club.id, timezone=club.timezone, days=club_days)


async def find_available_courts(
    session: AsyncSession,
    *,
    club_id: uuid.UUID,
    start_at: datetime.datetime,
    end_at: datetime.datetime,
) -> list[AvailableCourt]:
    """Courts of a club free for the whole range, each priced for it.

    A range outside the club's opening window for that date matches no court.
    """
    club = await get_club(session, club_id)
    tz = get_zone(club.timezone)
    local = split_local_range(start_at, end_at, tz)
    window = await club_hours_service.operating_window(
        session, club_id=club.id, day=local.day
    )
    if window.is_closed or not (
        window.open_minute <= local.start_minute
        and local.end_minute <= window.close_minute
    ):
        return []
    courts: list[Court] = await list_club_courts(session, club_id=club_id)
    court_ids = [court.id for court in courts]
    busy = await busy_intervals(
        session, court_ids=court_ids, tz=tz, start=local.day, end=local.day
    )
    rules = await _rules_by_court(session, court_ids)
    holiday_ids = await holiday_service.holiday_ids_for(
        session, club_id=club_id, day=local.day
    )

    requested_start = local_datetime(local.day, local.start_minute, tz)
    requested_end = local_datetime(local.day, local.end_minute, tz)
    available: list[AvailableCourt] = []
    for court in courts:
        if classify_slot(requested_start, requested_end, busy.get(court.id, [])) != SLOT_AVAILABLE:
            continue
        resolver = await build_resolver(
            session,
            court=court,
            day=local.day,
            rules=rules.get(court.id, []),
            holiday_ids=holiday_ids,
        )
        available.append(
            AvailableCourt(
                court_id=court.id,
                name=court.name,
                sport_type=court.sport_type,
                price_cents=resolver.price(
                    local.start_minute, local.end_minute, local.duration_minutes
                ),
            )
        )
    return available
