"""Property and room type inventory models."""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staybook.db.base import Base
from staybook.models.mixins import TimestampMixin


if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from staybook.models.availability import RoomAvailability
    from staybook.models.booking import PropertyBooking


class Property(TimestampMixin, Base):
    """A listed accommodation that groups bookable room types."""

    __tablename__ = "properties"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    room_types: Mapped[list["RoomType"]] = relationship(
        "RoomType", back_populates="property", cascade="all, delete-orphan"
    )


class RoomType(TimestampMixin, Base):
    """A unit type within a property; ``total_units`` identical units exist."""

    __tablename__ = "room_types"
    __table_args__ = (Index("ix_room_types_property", "property_id"),)

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    total_units: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    base_price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0")
    )

    property: Mapped["Property"] = relationship("Property", back_populates="room_types")
    date_overrides: Mapped[list["RoomAvailability"]] = relationship(
        "RoomAvailability", back_populates="room_type", cascade="all, delete-orphan"
    )
    bookings: Mapped[list["PropertyBooking"]] = relationship(
        "PropertyBooking", back_populates="room_type"
    )
