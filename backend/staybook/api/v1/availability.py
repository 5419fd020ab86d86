"""Public availability endpoints used by the booking widget."""
from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.api import deps
from staybook.schemas.availability import (
    AlternativeDateRead,
    AvailabilityCheckRequest,
    AvailabilityCheckResponse,
    DateConflictRead,
    MonthAvailabilityRead,
)
from staybook.services import availability_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/availability")


@router.get(
    "/check",
    response_model=AvailabilityCheckResponse,
    summary="Check a stay and suggest alternatives",
    dependencies=[deps.rate_limited()],
)
async def check_availability(
    params: Annotated[AvailabilityCheckRequest, Depends()],
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    today: Annotated[date, Depends(deps.get_today)],
) -> AvailabilityCheckResponse:
    if params.check_out < params.check_in:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Check-out must be after check-in",
        )
    if params.check_in < today:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot book dates in the past",
        )

    result = await availability_service.check_date_range_availability(
        session,
        room_type_id=params.room_type_id,
        check_in=params.check_in,
        check_out=params.check_out,
        number_of_rooms=params.rooms,
    )
    if result.is_available:
        return AvailabilityCheckResponse(
            is_available=True,
            number_of_nights=result.number_of_nights,
            min_stay=result.min_stay,
            max_stay=result.max_stay,
        )

    suggestions = await availability_service.suggest_alternative_dates(
        session,
        room_type_id=params.room_type_id,
        preferred_check_in=params.check_in,
        number_of_nights=result.number_of_nights,
    )
    logger.info(
        "Room type %s unavailable for %s..%s; %d alternative(s) found",
        params.room_type_id,
        params.check_in,
        params.check_out,
        len(suggestions),
    )
    return AvailabilityCheckResponse(
        is_available=False,
        number_of_nights=result.number_of_nights,
        reason=result.reason,
        conflicts=[DateConflictRead.model_validate(item) for item in result.conflicts],
        min_stay=result.min_stay,
        max_stay=result.max_stay,
        suggestions=[AlternativeDateRead.model_validate(item) for item in suggestions],
    )


@router.get(
    "/month",
    response_model=MonthAvailabilityRead,
    summary="Month booking grid for a room type",
)
async def get_month_availability(
    room_type_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    today: Annotated[date, Depends(deps.get_today)],
    year: Annotated[int | None, Query(ge=2000, le=2100)] = None,
    month: Annotated[int | None, Query(ge=1, le=12)] = None,
) -> MonthAvailabilityRead:
    try:
        grid = await availability_service.get_month_availability(
            session,
            room_type_id=room_type_id,
            year=year or today.year,
            month=month or today.month,
        )
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return MonthAvailabilityRead.model_validate(grid)
