"""Ordering of alternative date suggestions."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from functools import cmp_to_key

from staybook.services.availability_service import AlternativeDate, compare_suggestions

PREFERRED = date(2024, 9, 10)


def _suggestion(total: str, days_different: int) -> AlternativeDate:
    check_in = PREFERRED + timedelta(days=days_different)
    return AlternativeDate(
        check_in=check_in,
        check_out=check_in + timedelta(days=3),
        total_price=Decimal(total),
        avg_price_per_night=Decimal(total) / 3,
        days_different=days_different,
    )


def test_price_difference_outside_band_orders_by_price() -> None:
    cheap_far = _suggestion("200", -10)
    pricey_near = _suggestion("300", 1)
    assert compare_suggestions(cheap_far, pricey_near) < 0
    assert compare_suggestions(pricey_near, cheap_far) > 0


def test_prices_within_band_order_by_proximity() -> None:
    near = _suggestion("340", -1)
    far = _suggestion("300", 6)
    assert compare_suggestions(near, far) < 0
    assert compare_suggestions(far, near) > 0


def test_band_width_is_configurable() -> None:
    near = _suggestion("340", -1)
    far = _suggestion("300", 6)
    assert compare_suggestions(near, far, price_band=Decimal("10")) > 0


def test_band_edge_is_inclusive() -> None:
    near = _suggestion("350", 2)
    far = _suggestion("300", -7)
    assert compare_suggestions(near, far) < 0


def test_sorting_with_the_comparator() -> None:
    items = [
        _suggestion("500", 1),
        _suggestion("300", 9),
        _suggestion("320", -2),
        _suggestion("100", 12),
    ]
    ordered = sorted(items, key=cmp_to_key(compare_suggestions))
    assert [item.days_different for item in ordered] == [12, -2, 9, 1]
