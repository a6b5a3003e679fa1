"""Per-entry line computation: duration multiplier, currency conversion and VAT."""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from backend.app.core.errors import InvalidEntryData
from backend.app.services.duration import days_inclusive, nights_between

logger = logging.getLogger(__name__)

MONEY = Decimal("0.01")
DURATION_UNITS = {"night": "nights", "day": "days"}


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class BillableEntry:
    """An unbilled ledger entry joined with the item fields billing needs."""

    entry_id: int
    customer_id: int
    quantity: object
    start_date: datetime | None
    end_date: datetime | None
    recorded_price_without_vat: object
    recorded_vat_rate: object
    item_name: str
    item_unit: str
    item_currency: str | None
    item_duration_type: str | None = None


@dataclass(frozen=True)
class LineItemResult:
    entry_id: int
    description: str
    base_quantity: int
    duration_multiplier: int
    duration_unit: str | None
    duration_fallback: bool
    quantity: Decimal
    unit: str
    original_unit_price_without_vat: Decimal
    original_currency: str
    original_vat_rate: Decimal
    exchange_rate_used: Decimal | None
    unit_price_without_vat: Decimal
    vat_rate: Decimal
    line_total_without_vat: Decimal
    line_vat_amount: Decimal
    line_total_with_vat: Decimal


def _non_negative_decimal(value, field: str, entry_id: int) -> Decimal:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        number = None
    if value is None or number is None or not number.is_finite() or number < 0:
        raise InvalidEntryData(f"Invalid {field} in ledger entry {entry_id}.")
    return number


def _positive_quantity(value, entry_id: int) -> int:
    number = _non_negative_decimal(value, "quantity", entry_id)
    if number <= 0 or number != number.to_integral_value():
        raise InvalidEntryData(f"Invalid quantity in ledger entry {entry_id}.")
    return int(number)


def duration_multiplier_for(entry: BillableEntry) -> tuple[int, str | None, bool]:
    """Return ``(multiplier, duration unit, fell_back)`` for an entry.

    A duration-priced entry whose span cannot be measured is billed as if it had
    no duration; the third element reports that so callers can surface it.
    """
    duration_type = entry.item_duration_type
    if duration_type not in DURATION_UNITS:
        return 1, None, False

    end_date = entry.end_date or entry.start_date
    if duration_type == "night":
        count = nights_between(entry.start_date, end_date)
    else:
        count = days_inclusive(entry.start_date, end_date)

    if count is None or count <= 0:
        logger.warning(
            "Could not calculate %s for ledger entry %s, using multiplier 1", DURATION_UNITS[duration_type], entry.entry_id
        )
        return 1, None, True
    return count, DURATION_UNITS[duration_type], False


def describe_line(name: str, quantity: int, unit: str, multiplier: int, duration_unit: str | None) -> str:
    if duration_unit:
        return f"{name} ({quantity} x {multiplier} {duration_unit})"
    if quantity != 1:
        return f"{name} ({quantity} {unit})"
    return name


def calculate_line_item(entry: BillableEntry, rate: Decimal, target_currency: str) -> LineItemResult:
    if entry.start_date is None or not isinstance(entry.start_date, datetime):
        raise InvalidEntryData(f"Invalid start date in ledger entry {entry.entry_id}.")
    if not entry.item_currency:
        raise InvalidEntryData(f"Ledger entry {entry.entry_id} has invalid item/currency data.")

    price = _non_negative_decimal(entry.recorded_price_without_vat, "price", entry.entry_id)
    vat_rate = _non_negative_decimal(entry.recorded_vat_rate, "VAT rate", entry.entry_id)
    base_quantity = _positive_quantity(entry.quantity, entry.entry_id)
    original_currency = entry.item_currency.upper()
    target_currency = target_currency.upper()

    multiplier, duration_unit, fell_back = duration_multiplier_for(entry)

    converted_price = price * rate
    effective_quantity = Decimal(base_quantity * multiplier)
    # Rounded once per line; the stored unit price is a display snapshot.
    line_total = quantize_money(converted_price * effective_quantity)
    line_vat = quantize_money(line_total * vat_rate / Decimal("100"))

    return LineItemResult(
        entry_id=entry.entry_id,
        description=describe_line(entry.item_name, base_quantity, entry.item_unit, multiplier, duration_unit),
        base_quantity=base_quantity,
        duration_multiplier=multiplier,
        duration_unit=duration_unit,
        duration_fallback=fell_back,
        quantity=effective_quantity,
        unit=entry.item_unit,
        original_unit_price_without_vat=quantize_money(price),
        original_currency=original_currency,
        original_vat_rate=vat_rate,
        exchange_rate_used=None if original_currency == target_currency else rate,
        unit_price_without_vat=quantize_money(converted_price),
        vat_rate=vat_rate,
        line_total_without_vat=line_total,
        line_vat_amount=line_vat,
        line_total_with_vat=line_total + line_vat,
    )
