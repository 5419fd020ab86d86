"""Per-date availability overrides for room types."""

from __future__ import annotations

import datetime
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staybook.db.base import Base
from staybook.models.mixins import TimestampMixin


if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from staybook.models.property import RoomType


class RoomAvailability(TimestampMixin, Base):
    """Overrides blocking, capacity and stay limits for one room type on one date.

    A missing row means "no override": the room type's total units apply and
    stay limits come from pricing rules.
    """

    __tablename__ = "room_availability"
    __table_args__ = (
        UniqueConstraint("room_type_id", "date", name="uq_room_availability_type_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    room_type_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("room_types.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    reason: Mapped[str | None] = mapped_column(String(255))
    available_units: Mapped[int | None] = mapped_column(Integer())
    min_stay: Mapped[int | None] = mapped_column(Integer())
    max_stay: Mapped[int | None] = mapped_column(Integer())
    custom_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    notes: Mapped[str | None] = mapped_column(String(1024))

    room_type: Mapped["RoomType"] = relationship(
        "RoomType", back_populates="date_overrides"
    )

    @property
    def is_blocked(self) -> bool:
        return not self.is_available
