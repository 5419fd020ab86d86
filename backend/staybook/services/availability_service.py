"""Room availability and stay-constraint evaluation.

All dates are calendar days. A stay ``[check_in, check_out)`` occupies every
night from ``check_in`` up to, but excluding, ``check_out``. Datetimes passed
in are reduced to their date.

Stay limits resolve per date in this order: the date override, then the
highest-priority active seasonal rule, then an active special-event rule.
``get_maximum_stay`` stops after the seasonal rule; the range-level check
also consults event rules for the maximum.
"""

from __future__ import annotations

import calendar
import logging
import uuid
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from functools import cmp_to_key

from sqlalchemy.ext.asyncio import AsyncSession

from staybook.core.config import get_settings
from staybook.models import RoomAvailability, RoomType
from staybook.repositories import availability_repository as repository

logger = logging.getLogger(__name__)

MONEY_PLACES = Decimal("0.01")


class ConflictType(str, Enum):
    """Why a single date cannot host the requested rooms."""

    BLOCKED = "BLOCKED"
    FULLY_BOOKED = "FULLY_BOOKED"


@dataclass(slots=True)
class DateAvailability:
    """Availability of one date within a checked or summarised range."""

    date: date
    is_available: bool
    available_units: int
    reason: str | None = None
    total_units: int | None = None
    booked_units: int | None = None
    is_blocked: bool | None = None


@dataclass(slots=True)
class AvailabilityResult:
    """Outcome of :func:`check_room_availability`."""

    is_available: bool
    reason: str | None = None
    available_units: int | None = None
    unavailable_dates: list[date] = field(default_factory=list)
    availability_details: list[DateAvailability] = field(default_factory=list)
    min_stay: int | None = None
    max_stay: int | None = None
    requested_nights: int | None = None


@dataclass(slots=True)
class DateConflict:
    """A date inside a requested range that cannot be booked."""

    date: date
    type: ConflictType
    reason: str
    available_units: int
    requested_units: int


@dataclass(slots=True)
class DateRangeAvailability:
    """Outcome of :func:`check_date_range_availability`."""

    is_available: bool
    number_of_nights: int
    reason: str | None = None
    conflicts: list[DateConflict] = field(default_factory=list)
    min_stay: int | None = None
    max_stay: int | None = None


@dataclass(slots=True)
class CalendarDay:
    """One day of a room type's occupancy calendar."""

    date: date
    is_available: bool
    is_blocked: bool
    available_units: int
    total_units: int
    booked_units: int
    occupancy_percent: float
    reason: str | None = None
    price: Decimal | None = None


@dataclass(slots=True)
class AlternativeDate:
    """A bookable window near the guest's preferred check-in."""

    check_in: date
    check_out: date
    total_price: Decimal
    avg_price_per_night: Decimal
    days_different: int


@dataclass(slots=True)
class AvailabilitySummary:
    """Per-date details plus aggregate counts for a date range."""

    room_type_id: uuid.UUID
    start_date: date
    end_date: date
    dates: list[DateAvailability]
    total_dates: int
    available_dates: int
    blocked_dates: int
    fully_booked_dates: int
    min_available_units: int
    max_available_units: int


@dataclass(slots=True)
class MonthDay:
    """One cell of the month booking grid."""

    date: date
    day_of_week: str
    is_available: bool
    is_blocked: bool
    is_fully_booked: bool
    available_units: int
    total_units: int
    occupancy_percent: float
    base_price: Decimal
    block_reason: str | None = None
    min_stay: int | None = None
    max_stay: int | None = None


@dataclass(slots=True)
class MonthAvailability:
    """Month booking grid for a room type."""

    room_type_id: uuid.UUID
    room_name: str
    month: str
    base_price: Decimal
    total_units: int
    days: list[MonthDay]
    message: str | None = None


@dataclass(slots=True)
class _DayState:
    day: date
    override: RoomAvailability | None
    booked_units: int
    capacity: int

    @property
    def blocked(self) -> bool:
        return self.override is not None and not self.override.is_available

    @property
    def remaining(self) -> int:
        return self.capacity - self.booked_units


def _as_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _iter_days(start: date, end: date) -> Iterator[date]:
    current = start
    while current < end:
        yield current
        current += timedelta(days=1)


def _add_months(value: date, months: int) -> date:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _to_money(value: Decimal | int | str) -> Decimal:
    return Decimal(value).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def _occupancy(booked_units: int, total_units: int) -> float:
    if total_units <= 0:
        return 0.0
    return booked_units / total_units * 100


async def _load_day_states(
    session: AsyncSession,
    *,
    room_type_id: uuid.UUID,
    total_units: int,
    start: date,
    end: date,
) -> list[_DayState]:
    """Resolve override, bookings and capacity for every date in ``[start, end)``."""
    overrides = await repository.list_date_overrides(
        session, room_type_id=room_type_id, start=start, end=end
    )
    booked = await repository.booked_units_by_date(
        session, room_type_id=room_type_id, start=start, end=end
    )
    states: list[_DayState] = []
    for day in _iter_days(start, end):
        override = overrides.get(day)
        capacity = total_units
        if override is not None and override.available_units is not None:
            capacity = override.available_units
        states.append(
            _DayState(
                day=day,
                override=override,
                booked_units=booked.get(day, 0),
                capacity=capacity,
            )
        )
    return states


async def check_room_availability(
    session: AsyncSession,
    *,
    room_type_id: uuid.UUID,
    check_in: date | datetime,
    check_out: date | datetime,
    number_of_rooms: int = 1,
) -> AvailabilityResult:
    """Check whether ``number_of_rooms`` units are free for every night of the stay.

    Every date is evaluated before answering so the result lists all
    unavailable dates. Stay limits are checked only once all dates are free,
    and only against the limits in force on the check-in date.
    """
    room_type = await repository.get_room_type(session, room_type_id=room_type_id)
    if room_type is None:
        return AvailabilityResult(is_available=False, reason="Room type not found")
    if not room_type.available:
        return AvailabilityResult(
            is_available=False, reason="Room type is not available for booking"
        )

    start, end = _as_day(check_in), _as_day(check_out)
    unavailable_dates: list[date] = []
    details: list[DateAvailability] = []

    states = await _load_day_states(
        session,
        room_type_id=room_type.id,
        total_units=room_type.total_units,
        start=start,
        end=end,
    )
    for state in states:
        if state.blocked:
            unavailable_dates.append(state.day)
            details.append(
                DateAvailability(
                    date=state.day,
                    is_available=False,
                    available_units=0,
                    reason=state.override.reason or "Date is blocked",
                )
            )
            continue

        remaining = state.remaining
        if remaining < number_of_rooms:
            unavailable_dates.append(state.day)
            details.append(
                DateAvailability(
                    date=state.day,
                    is_available=False,
                    available_units=max(remaining, 0),
                    reason=f"Only {remaining} room(s) available, need {number_of_rooms}",
                )
            )
        else:
            details.append(
                DateAvailability(date=state.day, is_available=True, available_units=remaining)
            )

    if unavailable_dates:
        return AvailabilityResult(
            is_available=False,
            reason=f"Room not available for {len(unavailable_dates)} date(s)",
            unavailable_dates=unavailable_dates,
            availability_details=details,
        )

    requested_nights = (end - start).days

    min_stay = await get_minimum_stay(session, room_type_id=room_type.id, day=start)
    if min_stay and requested_nights < min_stay:
        return AvailabilityResult(
            is_available=False,
            reason=f"Minimum {min_stay} night(s) required for these dates",
            min_stay=min_stay,
            requested_nights=requested_nights,
        )

    max_stay = await get_maximum_stay(session, room_type_id=room_type.id, day=start)
    if max_stay and requested_nights > max_stay:
        return AvailabilityResult(
            is_available=False,
            reason=f"Maximum {max_stay} night(s) allowed for these dates",
            max_stay=max_stay,
            requested_nights=requested_nights,
        )

    available_units = details[0].available_units if details else room_type.total_units
    return AvailabilityResult(
        is_available=True,
        available_units=available_units,
        availability_details=details,
    )


async def get_minimum_stay(
    session: AsyncSession,
    *,
    room_type_id: uuid.UUID,
    day: date | datetime,
) -> int | None:
    """Return the minimum nights required for a stay starting on ``day``."""
    day = _as_day(day)
    override = await repository.get_date_override(
        session, room_type_id=room_type_id, day=day
    )
    if override is not None and override.min_stay:
        return override.min_stay

    room_type = await repository.get_room_type(session, room_type_id=room_type_id)
    if room_type is None:
        return None

    seasonal_rules = await repository.find_seasonal_rules(
        session, room_type=room_type, day=day
    )
    if seasonal_rules and seasonal_rules[0].min_stay:
        return seasonal_rules[0].min_stay

    event_rules = await repository.find_event_rules(session, room_type=room_type, day=day)
    return event_rules[0].min_stay if event_rules else None


async def get_maximum_stay(
    session: AsyncSession,
    *,
    room_type_id: uuid.UUID,
    day: date | datetime,
) -> int | None:
    """Return the maximum nights allowed for a stay starting on ``day``.

    Special-event rules are not consulted here.
    """
    day = _as_day(day)
    override = await repository.get_date_override(
        session, room_type_id=room_type_id, day=day
    )
    if override is not None and override.max_stay:
        return override.max_stay

    room_type = await repository.get_room_type(session, room_type_id=room_type_id)
    if room_type is None:
        return None

    seasonal_rules = await repository.find_seasonal_rules(
        session, room_type=room_type, day=day
    )
    return seasonal_rules[0].max_stay if seasonal_rules else None


async def _stay_limits_for_day(
    session: AsyncSession,
    *,
    room_type: RoomType,
    state: _DayState,
) -> tuple[int | None, int | None]:
    override = state.override
    min_stay = override.min_stay if override is not None and override.min_stay else None
    max_stay = override.max_stay if override is not None and override.max_stay else None
    if min_stay is not None and max_stay is not None:
        return min_stay, max_stay

    seasonal_rules = await repository.find_seasonal_rules(
        session, room_type=room_type, day=state.day
    )
    if seasonal_rules:
        top = seasonal_rules[0]
        min_stay = min_stay or top.min_stay or None
        max_stay = max_stay or top.max_stay or None
    if min_stay is not None and max_stay is not None:
        return min_stay, max_stay

    event_rules = await repository.find_event_rules(
        session, room_type=room_type, day=state.day
    )
    if event_rules:
        event = event_rules[0]
        min_stay = min_stay or event.min_stay or None
        max_stay = max_stay or event.max_stay or None
    return min_stay, max_stay


async def check_date_range_availability(
    session: AsyncSession,
    *,
    room_type_id: uuid.UUID,
    check_in: date | datetime,
    check_out: date | datetime,
    number_of_rooms: int = 1,
) -> DateRangeAvailability:
    """Collect every conflicting date in the stay, then apply range-wide stay limits.

    The governing minimum is the largest minimum of any night in the stay and
    the governing maximum the smallest maximum.
    """
    start, end = _as_day(check_in), _as_day(check_out)
    number_of_nights = (end - start).days

    room_type = await repository.get_room_type(session, room_type_id=room_type_id)
    if room_type is None:
        return DateRangeAvailability(
            is_available=False,
            number_of_nights=number_of_nights,
            reason="Room type not found",
        )
    if not room_type.available:
        return DateRangeAvailability(
            is_available=False,
            number_of_nights=number_of_nights,
            reason="Room type is not available for booking",
        )

    states = await _load_day_states(
        session,
        room_type_id=room_type.id,
        total_units=room_type.total_units,
        start=start,
        end=end,
    )
    conflicts: list[DateConflict] = []
    for state in states:
        if state.blocked:
            conflicts.append(
                DateConflict(
                    date=state.day,
                    type=ConflictType.BLOCKED,
                    reason=state.override.reason or "Date is blocked",
                    available_units=0,
                    requested_units=number_of_rooms,
                )
            )
        elif state.remaining < number_of_rooms:
            conflicts.append(
                DateConflict(
                    date=state.day,
                    type=ConflictType.FULLY_BOOKED,
                    reason=(
                        f"Only {state.remaining} room(s) available, "
                        f"need {number_of_rooms}"
                    ),
                    available_units=max(state.remaining, 0),
                    requested_units=number_of_rooms,
                )
            )

    if conflicts:
        return DateRangeAvailability(
            is_available=False,
            number_of_nights=number_of_nights,
            reason=f"Room not available for {len(conflicts)} date(s)",
            conflicts=conflicts,
        )

    minimums: list[int] = []
    maximums: list[int] = []
    for state in states:
        min_stay, max_stay = await _stay_limits_for_day(
            session, room_type=room_type, state=state
        )
        if min_stay:
            minimums.append(min_stay)
        if max_stay:
            maximums.append(max_stay)
    min_stay = max(minimums) if minimums else None
    max_stay = min(maximums) if maximums else None

    if min_stay and number_of_nights < min_stay:
        return DateRangeAvailability(
            is_available=False,
            number_of_nights=number_of_nights,
            reason=f"Minimum {min_stay} night(s) required for these dates",
            min_stay=min_stay,
            max_stay=max_stay,
        )
    if max_stay and number_of_nights > max_stay:
        return DateRangeAvailability(
            is_available=False,
            number_of_nights=number_of_nights,
            reason=f"Maximum {max_stay} night(s) allowed for these dates",
            min_stay=min_stay,
            max_stay=max_stay,
        )

    return DateRangeAvailability(
        is_available=True,
        number_of_nights=number_of_nights,
        min_stay=min_stay,
        max_stay=max_stay,
    )


async def get_room_availability_calendar(
    session: AsyncSession,
    *,
    room_type_id: uuid.UUID,
    start_date: date | datetime,
    months: int | None = None,
) -> list[CalendarDay]:
    """Return one entry per day from ``start_date`` through ``start_date + months``.

    The end boundary date itself is included. Prices are left empty for the
    pricing engine to fill in.
    """
    if months is None:
        months = get_settings().calendar_default_months

    room_type = await repository.get_room_type(session, room_type_id=room_type_id)
    if room_type is None or not room_type.available:
        return []

    start = _as_day(start_date)
    end = _add_months(start, months)
    states = await _load_day_states(
        session,
        room_type_id=room_type.id,
        total_units=room_type.total_units,
        start=start,
        end=end + timedelta(days=1),
    )

    entries: list[CalendarDay] = []
    for state in states:
        if state.blocked:
            entries.append(
                CalendarDay(
                    date=state.day,
                    is_available=False,
                    is_blocked=True,
                    available_units=0,
                    total_units=room_type.total_units,
                    booked_units=state.booked_units,
                    occupancy_percent=100.0,
                    reason="BLOCKED",
                )
            )
            continue

        available_units = max(0, state.remaining)
        entries.append(
            CalendarDay(
                date=state.day,
                is_available=available_units > 0,
                is_blocked=False,
                available_units=available_units,
                total_units=room_type.total_units,
                booked_units=state.booked_units,
                occupancy_percent=_occupancy(state.booked_units, room_type.total_units),
                reason="FULLY_BOOKED" if available_units == 0 else None,
            )
        )
    logger.debug(
        "Built %d calendar days for room type %s from %s", len(entries), room_type.id, start
    )
    return entries


def compare_suggestions(
    left: AlternativeDate, right: AlternativeDate, *, price_band: Decimal | int = 50
) -> Decimal | int:
    """Order by total price unless the two prices are within ``price_band``.

    Inside the band the closer check-in to the preferred date comes first.
    """
    price_diff = left.total_price - right.total_price
    if abs(price_diff) > price_band:
        return price_diff
    return abs(left.days_different) - abs(right.days_different)


async def _candidate(
    session: AsyncSession,
    *,
    room_type: RoomType,
    check_in: date,
    number_of_nights: int,
    days_different: int,
) -> AlternativeDate | None:
    check_out = check_in + timedelta(days=number_of_nights)
    availability = await check_date_range_availability(
        session, room_type_id=room_type.id, check_in=check_in, check_out=check_out
    )
    if not availability.is_available:
        return None
    total_price = _to_money(room_type.base_price * number_of_nights)
    if number_of_nights:
        avg_price = _to_money(total_price / number_of_nights)
    else:
        avg_price = _to_money(room_type.base_price)
    return AlternativeDate(
        check_in=check_in,
        check_out=check_out,
        total_price=total_price,
        avg_price_per_night=avg_price,
        days_different=days_different,
    )


async def suggest_alternative_dates(
    session: AsyncSession,
    *,
    room_type_id: uuid.UUID,
    preferred_check_in: date | datetime,
    number_of_nights: int,
    search_radius: int | None = None,
) -> list[AlternativeDate]:
    """Suggest bookable windows of ``number_of_nights`` around the preferred check-in.

    Every earlier start within the radius is tried. Later starts are tried
    until the suggestion list reaches the configured limit.
    """
    settings = get_settings()
    if search_radius is None:
        search_radius = settings.suggestion_search_radius

    room_type = await repository.get_room_type(session, room_type_id=room_type_id)
    if room_type is None or not room_type.available:
        return []

    preferred = _as_day(preferred_check_in)
    suggestions: list[AlternativeDate] = []

    for offset in range(1, search_radius + 1):
        suggestion = await _candidate(
            session,
            room_type=room_type,
            check_in=preferred - timedelta(days=offset),
            number_of_nights=number_of_nights,
            days_different=-offset,
        )
        if suggestion is not None:
            suggestions.append(suggestion)

    for offset in range(1, search_radius + 1):
        suggestion = await _candidate(
            session,
            room_type=room_type,
            check_in=preferred + timedelta(days=offset),
            number_of_nights=number_of_nights,
            days_different=offset,
        )
        if suggestion is not None:
            suggestions.append(suggestion)
        if len(suggestions) >= settings.suggestion_limit:
            break

    band = Decimal(settings.suggestion_price_band)
    return sorted(
        suggestions,
        key=cmp_to_key(lambda left, right: compare_suggestions(left, right, price_band=band)),
    )


async def get_availability_summary(
    session: AsyncSession,
    *,
    room_type_id: uuid.UUID,
    start_date: date | datetime,
    end_date: date | datetime,
) -> AvailabilitySummary:
    """Summarise availability for every date in ``[start_date, end_date)``."""
    start, end = _as_day(start_date), _as_day(end_date)
    room_type = await repository.get_room_type(session, room_type_id=room_type_id)
    total_units = room_type.total_units if room_type is not None else 0

    states = await _load_day_states(
        session,
        room_type_id=room_type_id,
        total_units=total_units,
        start=start,
        end=end,
    )
    dates: list[DateAvailability] = []
    for state in states:
        available_units = max(0, state.remaining)
        dates.append(
            DateAvailability(
                date=state.day,
                is_available=False if state.blocked else available_units > 0,
                available_units=available_units,
                total_units=total_units,
                booked_units=state.booked_units,
                is_blocked=state.blocked,
                reason=(state.override.reason or "Blocked") if state.blocked else None,
            )
        )

    units = [entry.available_units for entry in dates]
    return AvailabilitySummary(
        room_type_id=room_type_id,
        start_date=start,
        end_date=end,
        dates=dates,
        total_dates=len(dates),
        available_dates=sum(1 for entry in dates if entry.is_available and not entry.is_blocked),
        blocked_dates=sum(1 for entry in dates if entry.is_blocked),
        fully_booked_dates=sum(
            1 for entry in dates if not entry.is_blocked and entry.available_units == 0
        ),
        min_available_units=min(units, default=0),
        max_available_units=max(units, default=0),
    )


async def get_month_availability(
    session: AsyncSession,
    *,
    room_type_id: uuid.UUID,
    year: int,
    month: int,
) -> MonthAvailability:
    """Return the booking grid for one calendar month.

    Raises ``LookupError`` when the room type does not exist.
    """
    room_type = await repository.get_room_type(session, room_type_id=room_type_id)
    if room_type is None:
        raise LookupError("Room type not found")

    first_day = date(year, month, 1)
    label = first_day.strftime("%B %Y")
    base_price = _to_money(room_type.base_price)
    if not room_type.available:
        return MonthAvailability(
            room_type_id=room_type.id,
            room_name=room_type.name,
            month=label,
            base_price=base_price,
            total_units=room_type.total_units,
            days=[],
            message="Room is not available for booking",
        )

    states = await _load_day_states(
        session,
        room_type_id=room_type.id,
        total_units=room_type.total_units,
        start=first_day,
        end=_add_months(first_day, 1),
    )
    days: list[MonthDay] = []
    for state in states:
        override = state.override
        available_units = max(0, state.remaining)
        days.append(
            MonthDay(
                date=state.day,
                day_of_week=state.day.strftime("%A"),
                is_available=not state.blocked and available_units > 0,
                is_blocked=state.blocked,
                is_fully_booked=available_units == 0 and not state.blocked,
                available_units=available_units,
                total_units=room_type.total_units,
                occupancy_percent=_occupancy(state.booked_units, room_type.total_units),
                base_price=base_price,
                block_reason=override.reason if override is not None else None,
                min_stay=override.min_stay if override is not None else None,
                max_stay=override.max_stay if override is not None else None,
            )
        )
    return MonthAvailability(
        room_type_id=room_type.id,
        room_name=room_type.name,
        month=label,
        base_price=base_price,
        total_units=room_type.total_units,
        days=days,
    )
