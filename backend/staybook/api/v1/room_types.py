"""Room type availability, calendar and override endpoints."""
from __future__ import annotations

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.api import deps
from staybook.core.config import get_settings
from staybook.schemas.availability import (
    AvailabilityResultRead,
    AvailabilitySummaryRead,
    CalendarDayRead,
    DateOverrideClear,
    DateOverrideClearResult,
    DateOverrideRead,
    DateOverrideUpdate,
    StayRulesRead,
)
from staybook.services import availability_service, override_service

router = APIRouter(prefix="/room-types/{room_type_id}")

_MAX_CALENDAR_MONTHS = 24


@router.get(
    "/availability",
    response_model=AvailabilityResultRead,
    summary="Check a room type for a stay",
)
async def check_room_availability(
    room_type_id: uuid.UUID,
    check_in: date,
    check_out: date,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    rooms: Annotated[int, Query(ge=1)] = 1,
) -> AvailabilityResultRead:
    result = await availability_service.check_room_availability(
        session,
        room_type_id=room_type_id,
        check_in=check_in,
        check_out=check_out,
        number_of_rooms=rooms,
    )
    return AvailabilityResultRead.model_validate(result)


@router.get(
    "/calendar",
    response_model=list[CalendarDayRead],
    summary="Day-by-day occupancy calendar",
)
async def get_calendar(
    room_type_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    today: Annotated[date, Depends(deps.get_today)],
    start_date: date | None = None,
    months: Annotated[int | None, Query(ge=1, le=_MAX_CALENDAR_MONTHS)] = None,
) -> list[CalendarDayRead]:
    days = await availability_service.get_room_availability_calendar(
        session,
        room_type_id=room_type_id,
        start_date=start_date or today,
        months=months or get_settings().calendar_default_months,
    )
    return [CalendarDayRead.model_validate(day) for day in days]


@router.get(
    "/summary",
    response_model=AvailabilitySummaryRead,
    summary="Availability summary for a date range",
)
async def get_summary(
    room_type_id: uuid.UUID,
    start_date: date,
    end_date: date,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> AvailabilitySummaryRead:
    if start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start_date must be before or equal to end_date",
        )
    summary = await availability_service.get_availability_summary(
        session,
        room_type_id=room_type_id,
        start_date=start_date,
        end_date=end_date,
    )
    return AvailabilitySummaryRead.model_validate(summary)


@router.get(
    "/stay-rules",
    response_model=StayRulesRead,
    summary="Minimum and maximum stay for a check-in date",
)
async def get_stay_rules(
    room_type_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    today: Annotated[date, Depends(deps.get_today)],
    day: Annotated[date | None, Query(alias="date")] = None,
) -> StayRulesRead:
    day = day or today
    min_stay = await availability_service.get_minimum_stay(
        session, room_type_id=room_type_id, day=day
    )
    max_stay = await availability_service.get_maximum_stay(
        session, room_type_id=room_type_id, day=day
    )
    return StayRulesRead(date=day, min_stay=min_stay, max_stay=max_stay)


@router.get(
    "/overrides",
    response_model=list[DateOverrideRead],
    summary="List per-date overrides",
)
async def list_overrides(
    room_type_id: uuid.UUID,
    start_date: date,
    end_date: date,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> list[DateOverrideRead]:
    try:
        rows = await override_service.list_overrides_between(
            session,
            room_type_id=room_type_id,
            start_date=start_date,
            end_date=end_date,
        )
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return [DateOverrideRead.model_validate(row) for row in rows]


@router.put(
    "/overrides",
    response_model=list[DateOverrideRead],
    summary="Block, unblock or adjust dates",
)
async def update_overrides(
    room_type_id: uuid.UUID,
    payload: DateOverrideUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> list[DateOverrideRead]:
    try:
        rows = await override_service.update_date_overrides(
            session,
            room_type_id=room_type_id,
            dates=payload.dates,
            **payload.model_dump(exclude_unset=True, exclude={"dates"}),
        )
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except IntegrityError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Override was modified concurrently",
        ) from exc
    return [DateOverrideRead.model_validate(row) for row in rows]


@router.delete(
    "/overrides",
    response_model=DateOverrideClearResult,
    summary="Remove per-date overrides",
)
async def clear_overrides(
    room_type_id: uuid.UUID,
    payload: DateOverrideClear,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> DateOverrideClearResult:
    try:
        removed = await override_service.clear_date_overrides(
            session, room_type_id=room_type_id, dates=payload.dates
        )
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return DateOverrideClearResult(removed=removed)
