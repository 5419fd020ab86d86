"""Seasonal and special-event pricing rules.

Only the stay-length fields of these rules are read by the availability
engine; the price adjustments belong to the external pricing engine.
"""

from __future__ import annotations

import datetime
import uuid
from decimal import Decimal

from sqlalchemy import Boolean, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from staybook.db.base import Base
from staybook.models.mixins import TimestampMixin


class _StayRuleMixin:
    """Columns shared by seasonal and event rules.

    A rule with ``room_type_id`` set applies to that room type only; with
    ``room_type_id`` empty it applies to every room type of ``property_id``.
    """

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    property_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"), nullable=True
    )
    room_type_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("room_types.id", ondelete="CASCADE"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    start_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    end_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    price_multiplier: Mapped[Decimal | None] = mapped_column(Numeric(6, 3))
    min_stay: Mapped[int | None] = mapped_column(Integer())
    max_stay: Mapped[int | None] = mapped_column(Integer())
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class SeasonalPricing(_StayRuleMixin, TimestampMixin, Base):
    """Date-ranged seasonal rule; the highest ``priority`` wins on overlap."""

    __tablename__ = "seasonal_pricing"

    priority: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class SpecialEventPricing(_StayRuleMixin, TimestampMixin, Base):
    """Date-ranged rule for one-off events (festivals, holidays)."""

    __tablename__ = "special_event_pricing"
