"""Property booking models."""
from __future__ import annotations

import enum
import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, Enum, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staybook.db.base import Base
from staybook.models.mixins import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from staybook.models.property import RoomType


class BookingStatus(str, enum.Enum):
    """Lifecycle states for property bookings."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PropertyBooking(TimestampMixin, Base):
    """Reserves ``number_of_rooms`` units of a room type for ``[check_in, check_out)``."""

    __tablename__ = "property_bookings"
    __table_args__ = (
        Index("ix_property_bookings_room_dates", "room_type_id", "check_in", "check_out"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    room_type_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("room_types.id", ondelete="CASCADE"), nullable=False
    )
    check_in: Mapped[date] = mapped_column(Date, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)
    number_of_rooms: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus), default=BookingStatus.PENDING, nullable=False
    )

    room_type: Mapped["RoomType"] = relationship("RoomType", back_populates="bookings")
