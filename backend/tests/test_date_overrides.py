"""Per-date override management through the service and the API."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from staybook.db.session import get_sessionmaker
from staybook.models import RoomAvailability
from staybook.services import availability_service, override_service

pytestmark = pytest.mark.asyncio

JUNE_10 = date(2024, 6, 10)
JUNE_11 = date(2024, 6, 11)


async def _override_count(session) -> int:
    return (await session.execute(select(func.count(RoomAvailability.id)))).scalar_one()


async def test_block_then_partial_edits_keep_other_fields(inventory) -> None:
    room_type_id = inventory["room_type_id"]
    async with get_sessionmaker()() as session:
        created = await override_service.update_date_overrides(
            session,
            room_type_id=room_type_id,
            dates=[JUNE_11, JUNE_10, JUNE_10],
            is_blocked=True,
            reason="Maintenance",
        )
        assert [row.date for row in created] == [JUNE_10, JUNE_11]
        assert all(row.is_blocked for row in created)
        assert all(row.available_units == 0 for row in created)
        assert created[0].reason == "Maintenance"

        await override_service.update_date_overrides(
            session,
            room_type_id=room_type_id,
            dates=[JUNE_10],
            custom_price=Decimal("150.00"),
        )
        updated = await override_service.update_date_overrides(
            session,
            room_type_id=room_type_id,
            dates=[JUNE_10],
            min_stay=3,
            max_stay=7,
            notes="Contractor on site",
        )
        assert updated[0].id == created[0].id
        assert await _override_count(session) == 2

        rows = await override_service.list_overrides_between(
            session,
            room_type_id=room_type_id,
            start_date=JUNE_10,
            end_date=JUNE_11,
        )
        check = await availability_service.check_room_availability(
            session,
            room_type_id=room_type_id,
            check_in=JUNE_10,
            check_out=date(2024, 6, 13),
        )

    assert len(rows) == 2
    june_10 = rows[0]
    assert june_10.is_available is False
    assert june_10.reason == "Maintenance"
    assert june_10.available_units == 0
    assert june_10.custom_price == Decimal("150.00")
    assert (june_10.min_stay, june_10.max_stay) == (3, 7)
    assert june_10.notes == "Contractor on site"
    assert check.is_available is False
    assert JUNE_10 in check.unavailable_dates


async def test_unblock_restores_units_and_clears_reason(inventory) -> None:
    room_type_id = inventory["room_type_id"]
    async with get_sessionmaker()() as session:
        await override_service.update_date_overrides(
            session,
            room_type_id=room_type_id,
            dates=[JUNE_10],
            is_blocked=True,
            notes="Owner visiting",
            min_stay=2,
            custom_price=Decimal("90.00"),
        )
        rows = await override_service.update_date_overrides(
            session, room_type_id=room_type_id, dates=[JUNE_10], is_blocked=False
        )

    row = rows[0]
    assert row.is_available is True
    assert row.available_units == 10
    assert row.reason is None
    assert row.notes is None
    assert row.min_stay == 2
    assert row.custom_price == Decimal("90.00")


async def test_block_without_reason_uses_default(inventory) -> None:
    async with get_sessionmaker()() as session:
        rows = await override_service.update_date_overrides(
            session,
            room_type_id=inventory["room_type_id"],
            dates=[JUNE_10],
            is_blocked=True,
        )
    assert rows[0].reason == "Blocked by owner"


async def test_new_rows_start_open_with_total_units(inventory) -> None:
    async with get_sessionmaker()() as session:
        rows = await override_service.update_date_overrides(
            session,
            room_type_id=inventory["room_type_id"],
            dates=[JUNE_10],
            min_stay=2,
        )
    row = rows[0]
    assert row.is_available is True
    assert row.available_units == 10
    assert row.reason is None
    assert row.custom_price is None


async def test_partial_edit_cannot_invert_stored_limits(inventory) -> None:
    room_type_id = inventory["room_type_id"]
    async with get_sessionmaker()() as session:
        await override_service.update_date_overrides(
            session, room_type_id=room_type_id, dates=[JUNE_10], max_stay=4
        )
        with pytest.raises(ValueError):
            await override_service.update_date_overrides(
                session, room_type_id=room_type_id, dates=[JUNE_10], min_stay=6
            )
        rows = await override_service.list_overrides_between(
            session, room_type_id=room_type_id, start_date=JUNE_10, end_date=JUNE_10
        )
    assert (rows[0].min_stay, rows[0].max_stay) == (None, 4)


async def test_update_validates_input(inventory) -> None:
    room_type_id = inventory["room_type_id"]
    async with get_sessionmaker()() as session:
        with pytest.raises(ValueError):
            await override_service.update_date_overrides(
                session, room_type_id=room_type_id, dates=[]
            )
        with pytest.raises(ValueError):
            await override_service.update_date_overrides(
                session,
                room_type_id=room_type_id,
                dates=[JUNE_10],
                min_stay=5,
                max_stay=2,
            )
        with pytest.raises(LookupError):
            await override_service.update_date_overrides(
                session, room_type_id=uuid.uuid4(), dates=[JUNE_10]
            )
        assert await _override_count(session) == 0


async def test_clear_removes_only_listed_dates(inventory) -> None:
    room_type_id = inventory["room_type_id"]
    async with get_sessionmaker()() as session:
        await override_service.update_date_overrides(
            session,
            room_type_id=room_type_id,
            dates=[JUNE_10, JUNE_11, date(2024, 6, 12)],
            is_blocked=True,
        )
        removed = await override_service.clear_date_overrides(
            session, room_type_id=room_type_id, dates=[JUNE_10, JUNE_11, date(2024, 6, 20)]
        )
        assert removed == 2
        assert await _override_count(session) == 1


async def test_new_rows_hold_at_least_one_unit(inventory) -> None:
    from staybook.models import RoomType

    room_type_id = inventory["room_type_id"]
    async with get_sessionmaker()() as session:
        room_type = await session.get(RoomType, room_type_id)
        room_type.total_units = 0
        await session.commit()

        rows = await override_service.update_date_overrides(
            session, room_type_id=room_type_id, dates=[JUNE_10]
        )
    assert rows[0].available_units == 1


async def test_override_endpoints_round_trip(app_context) -> None:
    client = app_context["client"]
    url = f"/api/v1/room-types/{app_context['room_type_id']}/overrides"

    response = await client.put(
        url,
        json={
            "dates": ["2024-06-10", "2024-06-11"],
            "is_blocked": True,
            "reason": "Maintenance",
        },
    )
    assert response.status_code == 200
    payload = response.json()
    assert [item["date"] for item in payload] == ["2024-06-10", "2024-06-11"]
    assert all(item["is_available"] is False for item in payload)
    assert payload[0]["reason"] == "Maintenance"

    listed = await client.get(url, params={"start_date": "2024-06-01", "end_date": "2024-06-30"})
    assert listed.status_code == 200
    assert len(listed.json()) == 2

    check = await client.get(
        "/api/v1/availability/check",
        params={
            "room_type_id": str(app_context["room_type_id"]),
            "check_in": "2024-06-09",
            "check_out": "2024-06-12",
        },
    )
    assert check.status_code == 200
    conflicts = check.json()["conflicts"]
    assert [item["type"] for item in conflicts] == ["BLOCKED", "BLOCKED"]

    cleared = await client.request("DELETE", url, json={"dates": ["2024-06-10", "2024-06-11"]})
    assert cleared.status_code == 200
    assert cleared.json() == {"removed": 2}


async def test_min_stay_edit_keeps_blocked_date_closed(app_context) -> None:
    client = app_context["client"]
    url = f"/api/v1/room-types/{app_context['room_type_id']}/overrides"

    blocked = await client.put(
        url, json={"dates": ["2024-06-20"], "is_blocked": True, "reason": "Owner stay"}
    )
    assert blocked.status_code == 200

    priced = await client.put(url, json={"dates": ["2024-06-20"], "custom_price": "150.00"})
    assert priced.status_code == 200

    limited = await client.put(url, json={"dates": ["2024-06-20"], "min_stay": 3})
    assert limited.status_code == 200
    row = limited.json()[0]
    assert row["is_available"] is False
    assert row["reason"] == "Owner stay"
    assert row["available_units"] == 0
    assert row["custom_price"] == "150.00"
    assert row["min_stay"] == 3

    check = await client.get(
        "/api/v1/availability/check",
        params={
            "room_type_id": str(app_context["room_type_id"]),
            "check_in": "2024-06-20",
            "check_out": "2024-06-23",
        },
    )
    assert check.json()["is_available"] is False
    assert check.json()["conflicts"][0]["type"] == "BLOCKED"


async def test_override_endpoint_errors(app_context) -> None:
    client = app_context["client"]
    url = f"/api/v1/room-types/{app_context['room_type_id']}/overrides"

    inverted = await client.put(
        url, json={"dates": ["2024-06-10"], "min_stay": 5, "max_stay": 2}
    )
    assert inverted.status_code == 422

    empty = await client.put(url, json={"dates": []})
    assert empty.status_code == 422

    missing = await client.put(
        f"/api/v1/room-types/{uuid.uuid4()}/overrides", json={"dates": ["2024-06-10"]}
    )
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Room type not found"

    missing_clear = await client.request(
        "DELETE",
        f"/api/v1/room-types/{uuid.uuid4()}/overrides",
        json={"dates": ["2024-06-10"]},
    )
    assert missing_clear.status_code == 404
