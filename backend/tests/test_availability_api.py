"""Availability endpoints."""

from __future__ import annotations

import uuid
from datetime import date

import pytest

from staybook.db.session import get_sessionmaker
from staybook.models import BookingStatus, PropertyBooking, SeasonalPricing

pytestmark = pytest.mark.asyncio


def _check_params(context, check_in: str, check_out: str, **extra) -> dict[str, str]:
    params = {
        "room_type_id": str(context["room_type_id"]),
        "check_in": check_in,
        "check_out": check_out,
    }
    params.update({key: str(value) for key, value in extra.items()})
    return params


async def test_check_validates_range_and_past_dates(app_context) -> None:
    client = app_context["client"]

    inverted = await client.get(
        "/api/v1/availability/check",
        params=_check_params(app_context, "2024-06-12", "2024-06-11"),
    )
    assert inverted.status_code == 400
    assert inverted.json()["detail"] == "Check-out must be after check-in"

    same_day = await client.get(
        "/api/v1/availability/check",
        params=_check_params(app_context, "2024-06-12", "2024-06-12"),
    )
    assert same_day.status_code == 200
    assert same_day.json()["number_of_nights"] == 0
    assert same_day.json()["is_available"] is True

    past = await client.get(
        "/api/v1/availability/check",
        params=_check_params(app_context, "2024-05-30", "2024-06-02"),
    )
    assert past.status_code == 400
    assert past.json()["detail"] == "Cannot book dates in the past"


async def test_check_open_range(app_context) -> None:
    response = await app_context["client"].get(
        "/api/v1/availability/check",
        params=_check_params(app_context, "2024-06-10", "2024-06-12", rooms=2),
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["is_available"] is True
    assert payload["number_of_nights"] == 2
    assert payload["conflicts"] == []
    assert payload["suggestions"] == []


async def test_check_unavailable_range_suggests_alternatives(app_context) -> None:
    async with get_sessionmaker()() as session:
        session.add(
            PropertyBooking(
                room_type_id=app_context["room_type_id"],
                check_in=date(2024, 6, 10),
                check_out=date(2024, 6, 11),
                number_of_rooms=7,
                status=BookingStatus.CONFIRMED,
            )
        )
        await session.commit()

    response = await app_context["client"].get(
        "/api/v1/availability/check",
        params=_check_params(app_context, "2024-06-10", "2024-06-11", rooms=5),
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["is_available"] is False
    assert payload["conflicts"] == [
        {
            "date": "2024-06-10",
            "type": "FULLY_BOOKED",
            "reason": "Only 3 room(s) available, need 5",
            "available_units": 3,
            "requested_units": 5,
        }
    ]
    assert payload["suggestions"]
    first = payload["suggestions"][0]
    assert abs(first["days_different"]) == 1
    assert first["total_price"] == "100.00"


async def test_room_type_availability(app_context) -> None:
    response = await app_context["client"].get(
        f"/api/v1/room-types/{app_context['room_type_id']}/availability",
        params={"check_in": "2024-06-10", "check_out": "2024-06-12", "rooms": 4},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["is_available"] is True
    assert payload["available_units"] == 10
    assert len(payload["availability_details"]) == 2

    missing = await app_context["client"].get(
        f"/api/v1/room-types/{uuid.uuid4()}/availability",
        params={"check_in": "2024-06-10", "check_out": "2024-06-12"},
    )
    assert missing.status_code == 200
    assert missing.json()["reason"] == "Room type not found"


async def test_calendar_starts_today(app_context) -> None:
    client = app_context["client"]
    url = f"/api/v1/room-types/{app_context['room_type_id']}/calendar"

    response = await client.get(url, params={"months": 1})
    assert response.status_code == 200
    days = response.json()
    assert days[0]["date"] == "2024-06-01"
    assert days[-1]["date"] == "2024-07-01"

    shifted = await client.get(url, params={"months": 1, "start_date": "2024-02-01"})
    assert len(shifted.json()) == 30

    too_long = await client.get(url, params={"months": 25})
    assert too_long.status_code == 422


async def test_summary_endpoint(app_context) -> None:
    client = app_context["client"]
    url = f"/api/v1/room-types/{app_context['room_type_id']}/summary"

    response = await client.get(
        url, params={"start_date": "2024-06-10", "end_date": "2024-06-15"}
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["total_dates"] == 5
    assert payload["available_dates"] == 5
    assert payload["max_available_units"] == 10

    inverted = await client.get(
        url, params={"start_date": "2024-06-15", "end_date": "2024-06-10"}
    )
    assert inverted.status_code == 400


async def test_stay_rules_endpoint(app_context) -> None:
    async with get_sessionmaker()() as session:
        session.add(
            SeasonalPricing(
                property_id=app_context["property_id"],
                name="July",
                start_date=date(2024, 7, 1),
                end_date=date(2024, 7, 31),
                min_stay=3,
                max_stay=10,
            )
        )
        await session.commit()

    client = app_context["client"]
    url = f"/api/v1/room-types/{app_context['room_type_id']}/stay-rules"

    july = await client.get(url, params={"date": "2024-07-05"})
    assert july.status_code == 200
    assert july.json() == {"date": "2024-07-05", "min_stay": 3, "max_stay": 10}

    today = await client.get(url)
    assert today.json() == {"date": "2024-06-01", "min_stay": None, "max_stay": None}


async def test_month_endpoint(app_context) -> None:
    client = app_context["client"]

    response = await client.get(
        "/api/v1/availability/month",
        params={"room_type_id": str(app_context["room_type_id"])},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["month"] == "June 2024"
    assert len(payload["days"]) == 30

    february = await client.get(
        "/api/v1/availability/month",
        params={"room_type_id": str(app_context["room_type_id"]), "year": 2024, "month": 2},
    )
    assert len(february.json()["days"]) == 29

    missing = await client.get(
        "/api/v1/availability/month", params={"room_type_id": str(uuid.uuid4())}
    )
    assert missing.status_code == 404
