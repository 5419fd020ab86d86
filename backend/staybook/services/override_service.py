"""Per-date availability override management."""
from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.models import RoomAvailability, RoomType

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_REASON = "Blocked by owner"


async def _ensure_room_type(session: AsyncSession, *, room_type_id: uuid.UUID) -> RoomType:
    room_type = await session.get(RoomType, room_type_id)
    if room_type is None:
        raise LookupError("Room type not found")
    return room_type


async def list_overrides_between(
    session: AsyncSession,
    *,
    room_type_id: uuid.UUID,
    start_date: date,
    end_date: date,
) -> list[RoomAvailability]:
    """Return overrides for ``start_date <= date <= end_date`` ordered by date."""
    await _ensure_room_type(session, room_type_id=room_type_id)
    result = await session.execute(
        select(RoomAvailability)
        .where(
            RoomAvailability.room_type_id == room_type_id,
            RoomAvailability.date >= start_date,
            RoomAvailability.date <= end_date,
        )
        .order_by(RoomAvailability.date.asc())
    )
    return list(result.scalars().all())


async def update_date_overrides(
    session: AsyncSession,
    *,
    room_type_id: uuid.UUID,
    dates: Sequence[date],
    is_blocked: bool | None = None,
    reason: str | None = None,
    available_units: int | None = None,
    min_stay: int | None = None,
    max_stay: int | None = None,
    custom_price: Decimal | None = None,
    notes: str | None = None,
) -> list[RoomAvailability]:
    """Create or update the override row of each date in ``dates``.

    Only the arguments that are not ``None`` change a row; everything else
    keeps its stored value. New rows start open with the room type's total
    units (at least one).

    ``is_blocked=True`` closes the date, zeroes its units and records
    ``reason`` (default "Blocked by owner") and ``notes``.
    ``is_blocked=False`` reopens it, restores the total units and clears the
    reason and notes. An explicit ``available_units`` is applied last.
    """
    if not dates:
        raise ValueError("At least one date is required")
    if min_stay and max_stay and min_stay > max_stay:
        raise ValueError("min_stay cannot exceed max_stay")

    room_type = await _ensure_room_type(session, room_type_id=room_type_id)
    total_units = room_type.total_units or 1
    unique_dates = sorted(set(dates))

    result = await session.execute(
        select(RoomAvailability).where(
            RoomAvailability.room_type_id == room_type_id,
            RoomAvailability.date.in_(unique_dates),
        )
    )
    existing = {row.date: row for row in result.scalars().all()}

    rows: list[RoomAvailability] = []
    for day in unique_dates:
        row = existing.get(day)
        if row is None:
            row = RoomAvailability(
                room_type_id=room_type_id,
                date=day,
                is_available=True,
                available_units=total_units,
            )
            session.add(row)

        if is_blocked:
            row.is_available = False
            row.available_units = 0
            row.reason = reason or DEFAULT_BLOCK_REASON
            row.notes = notes or None
        elif is_blocked is not None:
            row.is_available = True
            row.available_units = total_units
            row.reason = None
            row.notes = None
        elif notes is not None:
            row.notes = notes or None

        if available_units is not None:
            row.available_units = available_units
        if min_stay is not None:
            row.min_stay = min_stay
        if max_stay is not None:
            row.max_stay = max_stay
        if custom_price is not None:
            row.custom_price = custom_price

        if row.min_stay and row.max_stay and row.min_stay > row.max_stay:
            await session.rollback()
            raise ValueError(f"min_stay cannot exceed max_stay on {day.isoformat()}")
        rows.append(row)

    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise
    logger.info(
        "Updated %d availability override(s) for room type %s (blocked=%s)",
        len(rows),
        room_type_id,
        is_blocked,
    )
    return rows


async def clear_date_overrides(
    session: AsyncSession,
    *,
    room_type_id: uuid.UUID,
    dates: Sequence[date],
) -> int:
    """Delete the override rows for ``dates``; returns how many were removed."""
    await _ensure_room_type(session, room_type_id=room_type_id)
    if not dates:
        return 0
    result = await session.execute(
        delete(RoomAvailability).where(
            RoomAvailability.room_type_id == room_type_id,
            RoomAvailability.date.in_(sorted(set(dates))),
        )
    )
    await session.commit()
    removed = result.rowcount or 0
    logger.info("Cleared %d availability override(s) for room type %s", removed, room_type_id)
    return removed
