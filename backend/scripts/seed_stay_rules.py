"""Seed baseline seasonal and holiday stay rules for every property."""
from __future__ import annotations

import asyncio
from datetime import date

from sqlalchemy import select

from staybook.core.clock import today as current_day
from staybook.db.session import get_sessionmaker
from staybook.models import Property, SeasonalPricing, SpecialEventPricing

SUMMER_LABEL = "Summer high season"
HOLIDAY_LABEL = "Year-end holidays"
SUMMER_MIN_STAY = 3
HOLIDAY_MIN_STAY = 4
HOLIDAY_MAX_STAY = 14


def _season_year(today: date | None = None) -> int:
    today = today or current_day()
    return today.year if today <= date(today.year, 8, 31) else today.year + 1


async def seed_stay_rules() -> None:
    sessionmaker = get_sessionmaker()
    async with sessionmaker() as session:
        properties = (await session.execute(select(Property))).scalars().all()
        if not properties:
            print("No properties found; nothing to seed.")
            return

        year = _season_year()
        seasons_created = 0
        events_created = 0
        for prop in properties:
            existing_season = await session.execute(
                select(SeasonalPricing.id).where(
                    SeasonalPricing.property_id == prop.id,
                    SeasonalPricing.name == SUMMER_LABEL,
                    SeasonalPricing.start_date == date(year, 6, 1),
                )
            )
            if existing_season.scalar_one_or_none() is None:
                session.add(
                    SeasonalPricing(
                        property_id=prop.id,
                        name=SUMMER_LABEL,
                        start_date=date(year, 6, 1),
                        end_date=date(year, 8, 31),
                        priority=10,
                        min_stay=SUMMER_MIN_STAY,
                    )
                )
                seasons_created += 1

            existing_event = await session.execute(
                select(SpecialEventPricing.id).where(
                    SpecialEventPricing.property_id == prop.id,
                    SpecialEventPricing.name == HOLIDAY_LABEL,
                    SpecialEventPricing.start_date == date(year, 12, 24),
                )
            )
            if existing_event.scalar_one_or_none() is None:
                session.add(
                    SpecialEventPricing(
                        property_id=prop.id,
                        name=HOLIDAY_LABEL,
                        start_date=date(year, 12, 24),
                        end_date=date(year + 1, 1, 2),
                        min_stay=HOLIDAY_MIN_STAY,
                        max_stay=HOLIDAY_MAX_STAY,
                    )
                )
                events_created += 1

        if seasons_created or events_created:
            await session.commit()
        print(f"Seeded {seasons_created} seasonal and {events_created} event rule(s).")


def main() -> None:
    asyncio.run(seed_stay_rules())


if __name__ == "__main__":
    main()
