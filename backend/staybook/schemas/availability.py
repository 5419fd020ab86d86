"""Pydantic schemas for availability endpoints."""
from __future__ import annotations

import uuid
import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from staybook.services.availability_service import ConflictType


class DateAvailabilityRead(BaseModel):
    """Availability of a single date."""

    date: datetime.date
    is_available: bool
    available_units: int
    reason: str | None = None
    total_units: int | None = None
    booked_units: int | None = None
    is_blocked: bool | None = None

    model_config = ConfigDict(from_attributes=True)


class AvailabilityResultRead(BaseModel):
    """Result of a room availability check."""

    is_available: bool
    reason: str | None = None
    available_units: int | None = None
    unavailable_dates: list[datetime.date] = Field(default_factory=list)
    availability_details: list[DateAvailabilityRead] = Field(default_factory=list)
    min_stay: int | None = None
    max_stay: int | None = None
    requested_nights: int | None = None

    model_config = ConfigDict(from_attributes=True)


class DateConflictRead(BaseModel):
    """A date that blocks the requested stay."""

    date: datetime.date
    type: ConflictType
    reason: str
    available_units: int
    requested_units: int

    model_config = ConfigDict(from_attributes=True)


class AlternativeDateRead(BaseModel):
    """A suggested stay window near the preferred dates."""

    check_in: datetime.date
    check_out: datetime.date
    total_price: Decimal
    avg_price_per_night: Decimal
    days_different: int

    model_config = ConfigDict(from_attributes=True)


class AvailabilityCheckRequest(BaseModel):
    """Query parameters for the public availability check."""

    room_type_id: uuid.UUID
    check_in: datetime.date
    check_out: datetime.date
    rooms: int = Field(default=1, ge=1)


class AvailabilityCheckResponse(BaseModel):
    """Range availability plus alternatives when the range is taken."""

    is_available: bool
    number_of_nights: int
    reason: str | None = None
    conflicts: list[DateConflictRead] = Field(default_factory=list)
    min_stay: int | None = None
    max_stay: int | None = None
    suggestions: list[AlternativeDateRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class CalendarDayRead(BaseModel):
    """One day of the occupancy calendar."""

    date: datetime.date
    is_available: bool
    is_blocked: bool
    available_units: int
    total_units: int
    booked_units: int
    occupancy_percent: float
    reason: str | None = None
    price: Decimal | None = None

    model_config = ConfigDict(from_attributes=True)


class AvailabilitySummaryRead(BaseModel):
    """Aggregated availability for a date range."""

    room_type_id: uuid.UUID
    start_date: datetime.date
    end_date: datetime.date
    dates: list[DateAvailabilityRead]
    total_dates: int
    available_dates: int
    blocked_dates: int
    fully_booked_dates: int
    min_available_units: int
    max_available_units: int

    model_config = ConfigDict(from_attributes=True)


class MonthDayRead(BaseModel):
    """One cell of the month grid."""

    date: datetime.date
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

    model_config = ConfigDict(from_attributes=True)


class MonthAvailabilityRead(BaseModel):
    """Month booking grid for a room type."""

    room_type_id: uuid.UUID
    room_name: str
    month: str
    base_price: Decimal
    total_units: int
    days: list[MonthDayRead]
    message: str | None = None

    model_config = ConfigDict(from_attributes=True)


class StayRulesRead(BaseModel):
    """Minimum and maximum nights for a stay starting on ``date``."""

    date: datetime.date
    min_stay: int | None = None
    max_stay: int | None = None


class DateOverrideUpdate(BaseModel):
    """Bulk edit applied to every listed date; omitted fields keep their value."""

    dates: list[datetime.date] = Field(min_length=1)
    is_blocked: bool | None = None
    reason: str | None = Field(default=None, max_length=255)
    available_units: int | None = Field(default=None, ge=0)
    min_stay: int | None = Field(default=None, ge=1)
    max_stay: int | None = Field(default=None, ge=1)
    custom_price: Decimal | None = Field(default=None, ge=Decimal("0"))
    notes: str | None = Field(default=None, max_length=1024)

    @model_validator(mode="after")
    def _check_stay_bounds(self) -> "DateOverrideUpdate":
        if self.min_stay and self.max_stay and self.min_stay > self.max_stay:
            raise ValueError("min_stay cannot exceed max_stay")
        return self


class DateOverrideClear(BaseModel):
    """Dates whose overrides should be removed."""

    dates: list[datetime.date] = Field(min_length=1)


class DateOverrideRead(BaseModel):
    """Serialized per-date override."""

    id: uuid.UUID
    room_type_id: uuid.UUID
    date: datetime.date
    is_available: bool
    reason: str | None = None
    available_units: int | None = None
    min_stay: int | None = None
    max_stay: int | None = None
    custom_price: Decimal | None = None
    notes: str | None = None
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class DateOverrideClearResult(BaseModel):
    """Count of removed overrides."""

    removed: int
