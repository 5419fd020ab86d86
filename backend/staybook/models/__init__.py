"""ORM models package export."""

from staybook.models.availability import RoomAvailability
from staybook.models.booking import BookingStatus, PropertyBooking
from staybook.models.pricing import SeasonalPricing, SpecialEventPricing
from staybook.models.property import Property, RoomType

__all__ = [
    "BookingStatus",
    "Property",
    "PropertyBooking",
    "RoomAvailability",
    "RoomType",
    "SeasonalPricing",
    "SpecialEventPricing",
]
