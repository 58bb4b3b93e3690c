"""Seed a demo club with courts, hours, a holiday and price rules."""

from __future__ import annotations

import asyncio
from datetime import date

from sqlalchemy import select

from courtslot.db.session import session_scope
from courtslot.models import (
    Club,
    ClubBusinessHour,
    Court,
    CourtPriceRule,
    Holiday,
    Player,
    PriceRuleType,
)

DEMO_CLUB_NAME = "Demo Padel Club"


def _next_new_year(today: date | None = None) -> date:
    today = today or date.today()
    return date(today.year + 1, 1, 1)


async def seed_demo_club() -> None:
    async with session_scope() as session:
        existing = (
            await session.execute(select(Club).where(Club.name == DEMO_CLUB_NAME))
        ).scalar_one_or_none()
        if existing is not None:
            print(f"{DEMO_CLUB_NAME} already exists ({existing.id}); nothing to seed.")
            return

        club = Club(name=DEMO_CLUB_NAME, timezone="Europe/Madrid")
        session.add(club)
        await session.flush()

        for day_of_week in range(7):
            weekend = day_of_week in (0, 6)
            session.add(
                ClubBusinessHour(
                    club_id=club.id,
                    day_of_week=day_of_week,
                    open_time="09:00" if weekend else "08:00",
                    close_time="21:00" if weekend else "23:00",
                )
            )

        holiday = Holiday(club_id=club.id, date=_next_new_year(), name="New Year")
        session.add(holiday)

        courts = [
            Court(
                club_id=club.id,
                name=f"Court {index}",
                sport_type="padel",
                default_price_cents=2400,
            )
            for index in range(1, 4)
        ]
        session.add_all(courts)
        await session.flush()

        for court in courts:
            session.add_all(
                [
                    CourtPriceRule(
                        court_id=court.id,
                        rule_type=PriceRuleType.WEEKDAYS,
                        start_time="18:00",
                        end_time="22:00",
                        price_cents=3200,
                    ),
                    CourtPriceRule(
                        court_id=court.id,
                        rule_type=PriceRuleType.WEEKENDS,
                        start_time="09:00",
                        end_time="21:00",
                        price_cents=3000,
                    ),
                    CourtPriceRule(
                        court_id=court.id,
                        rule_type=PriceRuleType.HOLIDAY,
                        holiday_id=holiday.id,
                        start_time="00:00",
                        end_time="24:00",
                        price_cents=3600,
                    ),
                ]
            )

        session.add(Player(display_name="Demo Player", email="player@example.com"))
        await session.commit()
        print(f"Seeded {DEMO_CLUB_NAME} ({club.id}) with {len(courts)} courts.")


def main() -> None:
    asyncio.run(seed_demo_club())


if __name__ == "__main__":
    main()
