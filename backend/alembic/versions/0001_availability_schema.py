"""Availability schema: properties, room types, overrides, bookings, stay rules.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def _stay_rule_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "property_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("properties.id", ondelete="CASCADE"),
        ),
        sa.Column(
            "room_type_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("room_types.id", ondelete="CASCADE"),
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("price_multiplier", sa.Numeric(6, 3)),
        sa.Column("min_stay", sa.Integer()),
        sa.Column("max_stay", sa.Integer()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    ]


def upgrade() -> None:
    op.create_table(
        "properties",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "room_types",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "property_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("properties.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("total_units", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("base_price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_room_types_property", "room_types", ["property_id"])

    op.create_table(
        "room_availability",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "room_type_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("room_types.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("reason", sa.String(length=255)),
        sa.Column("available_units", sa.Integer()),
        sa.Column("min_stay", sa.Integer()),
        sa.Column("max_stay", sa.Integer()),
        sa.Column("custom_price", sa.Numeric(10, 2)),
        sa.Column("notes", sa.String(length=1024)),
        *_timestamps(),
        sa.UniqueConstraint("room_type_id", "date", name="uq_room_availability_type_date"),
    )

    booking_status_enum = sa.Enum(
        "PENDING",
        "CONFIRMED",
        "CHECKED_IN",
        "COMPLETED",
        "CANCELLED",
        "REFUNDED",
        name="bookingstatus",
    )
    op.create_table(
        "property_bookings",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "room_type_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("room_types.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("check_in", sa.Date(), nullable=False),
        sa.Column("check_out", sa.Date(), nullable=False),
        sa.Column("number_of_rooms", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("status", booking_status_enum, nullable=False, server_default="PENDING"),
        *_timestamps(),
    )
    op.create_index(
        "ix_property_bookings_room_dates",
        "property_bookings",
        ["room_type_id", "check_in", "check_out"],
    )

    op.create_table(
        "seasonal_pricing",
        *_stay_rule_columns(),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index(
        "ix_seasonal_pricing_dates", "seasonal_pricing", ["start_date", "end_date"]
    )

    op.create_table(
        "special_event_pricing",
        *_stay_rule_columns(),
        *_timestamps(),
    )
    op.create_index(
        "ix_special_event_pricing_dates", "special_event_pricing", ["start_date", "end_date"]
    )


def downgrade() -> None:
    op.drop_index("ix_special_event_pricing_dates", table_name="special_event_pricing")
    op.drop_table("special_event_pricing")

    op.drop_index("ix_seasonal_pricing_dates", table_name="seasonal_pricing")
    op.drop_table("seasonal_pricing")

    op.drop_index("ix_property_bookings_room_dates", table_name="property_bookings")
    op.drop_table("property_bookings")
    sa.Enum(name="bookingstatus").drop(op.get_bind(), checkfirst=False)

    op.drop_table("room_availability")

    op.drop_index("ix_room_types_property", table_name="room_types")
    op.drop_table("room_types")
    op.drop_table("properties")
