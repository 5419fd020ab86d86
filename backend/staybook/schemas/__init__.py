"""Schema exports."""

from staybook.schemas.availability import (
    AlternativeDateRead,
    AvailabilityCheckRequest,
    AvailabilityCheckResponse,
    AvailabilityResultRead,
    AvailabilitySummaryRead,
    CalendarDayRead,
    DateAvailabilityRead,
    DateConflictRead,
    DateOverrideClear,
    DateOverrideClearResult,
    DateOverrideRead,
    DateOverrideUpdate,
    MonthAvailabilityRead,
    MonthDayRead,
    StayRulesRead,
)

__all__ = [
    "AlternativeDateRead",
    "AvailabilityCheckRequest",
    "AvailabilityCheckResponse",
    "AvailabilityResultRead",
    "AvailabilitySummaryRead",
    "CalendarDayRead",
    "DateAvailabilityRead",
    "DateConflictRead",
    "DateOverrideClear",
    "DateOverrideClearResult",
    "DateOverrideRead",
    "DateOverrideUpdate",
    "MonthAvailabilityRead",
    "MonthDayRead",
    "StayRulesRead",
]
