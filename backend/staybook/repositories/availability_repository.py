"""Data access for the availability engine.

Every lookup the engine performs goes through these helpers so the
per-date decision logic never touches SQL directly. Ranged variants load a
whole stay window in one query and group it in memory.
"""
from __future__ import annotations

import uuid
from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.core.config import get_settings
from staybook.models import (
    BookingStatus,
    PropertyBooking,
    RoomAvailability,
    RoomType,
    SeasonalPricing,
    SpecialEventPricing,
)


def excluded_booking_statuses() -> frozenset[BookingStatus]:
    """Statuses whose bookings no longer hold inventory."""
    settings = get_settings()
    return frozenset(BookingStatus(value.lower()) for value in settings.booking_excluded_statuses)


async def get_room_type(
    session: AsyncSession,
    *,
    room_type_id: uuid.UUID,
) -> RoomType | None:
    return await session.get(RoomType, room_type_id)


async def get_date_override(
    session: AsyncSession,
    *,
    room_type_id: uuid.UUID,
    day: date,
) -> RoomAvailability | None:
    """Return the override row for ``(room_type_id, day)`` if one exists."""
    result = await session.execute(
        select(RoomAvailability).where(
            RoomAvailability.room_type_id == room_type_id,
            RoomAvailability.date == day,
        )
    )
    return result.scalar_one_or_none()


async def list_date_overrides(
    session: AsyncSession,
    *,
    room_type_id: uuid.UUID,
    start: date,
    end: date,
) -> dict[date, RoomAvailability]:
    """Return override rows keyed by date for ``start <= date < end``."""
    if end <= start:
        return {}
    result = await session.execute(
        select(RoomAvailability).where(
            RoomAvailability.room_type_id == room_type_id,
            RoomAvailability.date >= start,
            RoomAvailability.date < end,
        )
    )
    return {row.date: row for row in result.scalars().all()}


async def sum_booked_units(
    session: AsyncSession,
    *,
    room_type_id: uuid.UUID,
    day: date,
    excluded_statuses: Iterable[BookingStatus] | None = None,
) -> int:
    """Return the rooms reserved on ``day`` by bookings that still hold inventory."""
    if excluded_statuses is None:
        excluded_statuses = excluded_booking_statuses()
    excluded = set(excluded_statuses)
    stmt = select(func.coalesce(func.sum(PropertyBooking.number_of_rooms), 0)).where(
        PropertyBooking.room_type_id == room_type_id,
        PropertyBooking.check_in <= day,
        PropertyBooking.check_out > day,
    )
    if excluded:
        stmt = stmt.where(PropertyBooking.status.not_in(excluded))
    return int((await session.execute(stmt)).scalar_one())


async def booked_units_by_date(
    session: AsyncSession,
    *,
    room_type_id: uuid.UUID,
    start: date,
    end: date,
    excluded_statuses: Iterable[BookingStatus] | None = None,
) -> dict[date, int]:
    """Return reserved rooms per date for ``start <= date < end``.

    Dates without bookings are absent from the mapping.
    """
    if end <= start:
        return {}
    if excluded_statuses is None:
        excluded_statuses = excluded_booking_statuses()
    excluded = set(excluded_statuses)
    stmt = select(
        PropertyBooking.check_in,
        PropertyBooking.check_out,
        PropertyBooking.number_of_rooms,
    ).where(
        PropertyBooking.room_type_id == room_type_id,
        PropertyBooking.check_out > start,
        PropertyBooking.check_in < end,
    )
    if excluded:
        stmt = stmt.where(PropertyBooking.status.not_in(excluded))

    booked: dict[date, int] = {}
    for check_in, check_out, rooms in (await session.execute(stmt)).all():
        current = max(check_in, start)
        last = min(check_out, end)
        while current < last:
            booked[current] = booked.get(current, 0) + (rooms or 0)
            current += timedelta(days=1)
    return booked


def _rule_scope(model: type[SeasonalPricing] | type[SpecialEventPricing], room_type: RoomType):
    return or_(
        model.room_type_id == room_type.id,
        and_(model.room_type_id.is_(None), model.property_id == room_type.property_id),
    )


async def find_seasonal_rules(
    session: AsyncSession,
    *,
    room_type: RoomType,
    day: date,
    active_only: bool = True,
) -> Sequence[SeasonalPricing]:
    """Return seasonal rules covering ``day``, highest priority first.

    Equal priorities come back in creation order.
    """
    stmt = (
        select(SeasonalPricing)
        .where(
            _rule_scope(SeasonalPricing, room_type),
            SeasonalPricing.start_date <= day,
            SeasonalPricing.end_date >= day,
        )
        .order_by(
            SeasonalPricing.priority.desc(),
            SeasonalPricing.created_at.asc(),
            SeasonalPricing.id.asc(),
        )
    )
    if active_only:
        stmt = stmt.where(SeasonalPricing.is_active.is_(True))
    result = await session.execute(stmt)
    return result.scalars().all()


async def find_event_rules(
    session: AsyncSession,
    *,
    room_type: RoomType,
    day: date,
    active_only: bool = True,
) -> Sequence[SpecialEventPricing]:
    """Return special-event rules covering ``day`` in creation order."""
    stmt = (
        select(SpecialEventPricing)
        .where(
            _rule_scope(SpecialEventPricing, room_type),
            SpecialEventPricing.start_date <= day,
            SpecialEventPricing.end_date >= day,
        )
        .order_by(SpecialEventPricing.created_at.asc(), SpecialEventPricing.id.asc())
    )
    if active_only:
        stmt = stmt.where(SpecialEventPricing.is_active.is_(True))
    result = await session.execute(stmt)
    return result.scalars().all()
