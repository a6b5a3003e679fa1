from datetime import datetime
from decimal import Decimal

import pytest

from backend.app.core.errors import InvalidEntryData
from backend.app.services.line_items import BillableEntry, calculate_line_item, describe_line


def _entry(**overrides):
    fields = dict(
        entry_id=1,
        customer_id=1,
        quantity=1,
        start_date=datetime(2024, 6, 1, 14, 0),
        end_date=datetime(2024, 6, 4, 10, 0),
        recorded_price_without_vat=Decimal("100.00"),
        recorded_vat_rate=Decimal("21.00"),
        item_name="Room",
        item_unit="night",
        item_currency="EUR",
        item_duration_type="night",
    )
    fields.update(overrides)
    return BillableEntry(**fields)


def test_night_priced_entry_same_currency():
    line = calculate_line_item(_entry(), Decimal("1"), "EUR")

    assert line.duration_multiplier == 3
    assert line.duration_unit == "nights"
    assert line.quantity == Decimal("3")
    assert line.unit_price_without_vat == Decimal("100.00")
    assert line.line_total_without_vat == Decimal("300.00")
    assert line.line_vat_amount == Decimal("63.00")
    assert line.line_total_with_vat == Decimal("363.00")
    assert line.exchange_rate_used is None
    assert line.description == "Room (1 x 3 nights)"
    assert line.duration_fallback is False


def test_night_priced_entry_converted():
    line = calculate_line_item(_entry(), Decimal("1.10"), "USD")

    assert line.unit_price_without_vat == Decimal("110.00")
    assert line.line_total_without_vat == Decimal("330.00")
    assert line.line_vat_amount == Decimal("69.30")
    assert line.line_total_with_vat == Decimal("399.30")
    assert line.exchange_rate_used == Decimal("1.10")
    assert line.original_unit_price_without_vat == Decimal("100.00")
    assert line.original_currency == "EUR"


def test_day_priced_entry_counts_inclusive_days():
    entry = _entry(item_duration_type="day", item_unit="day", quantity=2, item_name="Bike")

    line = calculate_line_item(entry, Decimal("1"), "EUR")

    assert line.duration_multiplier == 4
    assert line.quantity == Decimal("8")
    assert line.description == "Bike (2 x 4 days)"


def test_point_in_time_night_entry_falls_back_to_multiplier_one():
    entry = _entry(end_date=None)

    line = calculate_line_item(entry, Decimal("1"), "EUR")

    assert line.duration_multiplier == 1
    assert line.duration_unit is None
    assert line.duration_fallback is True
    assert line.line_total_without_vat == Decimal("100.00")
    assert line.description == "Room"


def test_point_in_time_day_entry_is_one_day():
    line = calculate_line_item(_entry(end_date=None, item_duration_type="day"), Decimal("1"), "EUR")

    assert line.duration_multiplier == 1
    assert line.duration_unit == "days"
    assert line.duration_fallback is False


def test_non_duration_item_with_quantity_describes_unit():
    entry = _entry(item_duration_type=None, item_unit="pcs", item_name="Towel", quantity=4, recorded_vat_rate="0")

    line = calculate_line_item(entry, Decimal("1"), "EUR")

    assert line.duration_multiplier == 1
    assert line.duration_fallback is False
    assert line.description == "Towel (4 pcs)"
    assert line.line_vat_amount == Decimal("0.00")
    assert line.line_total_with_vat == Decimal("400.00")


def test_line_totals_satisfy_invariants_with_awkward_rates():
    entry = _entry(recorded_price_without_vat="19.99", recorded_vat_rate="15", item_duration_type=None, quantity=7)

    line = calculate_line_item(entry, Decimal("0.913457"), "GBP")

    assert abs(line.line_total_without_vat - line.unit_price_without_vat * line.quantity) <= Decimal("0.01")
    assert abs(line.line_vat_amount - line.line_total_without_vat * Decimal("0.15")) <= Decimal("0.01")
    assert line.line_total_with_vat == line.line_total_without_vat + line.line_vat_amount


def test_line_total_uses_unrounded_converted_price():
    entry = _entry(
        recorded_price_without_vat="1234.00",
        item_currency="CZK",
        item_duration_type=None,
        item_unit="pcs",
        item_name="Catering",
        quantity=100,
    )

    line = calculate_line_item(entry, Decimal("0.039812"), "EUR")

    assert line.unit_price_without_vat == Decimal("49.13")
    assert line.line_total_without_vat == Decimal("4912.80")
    assert line.line_vat_amount == Decimal("1031.69")
    assert line.line_total_with_vat == Decimal("5944.49")
    assert line.exchange_rate_used == Decimal("0.039812")


@pytest.mark.parametrize(
    "overrides",
    [
        {"recorded_price_without_vat": "abc"},
        {"recorded_price_without_vat": None},
        {"recorded_price_without_vat": "-1"},
        {"recorded_vat_rate": "n/a"},
        {"quantity": 0},
        {"quantity": "1.5"},
        {"start_date": None},
        {"item_currency": None},
    ],
)
def test_invalid_entry_data(overrides):
    with pytest.raises(InvalidEntryData) as exc_info:
        calculate_line_item(_entry(**overrides), Decimal("1"), "EUR")
    assert exc_info.value.status_code == 500


def test_describe_line_single_quantity_is_plain_name():
    assert describe_line("Cleaning", 1, "service", 1, None) == "Cleaning"
