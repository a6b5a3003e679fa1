"""Display formatting for rendered invoices."""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP


def format_currency(amount, currency_code) -> str:
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        value = None
    if value is None or not value.is_finite() or not isinstance(currency_code, str) or len(currency_code) != 3:
        return f"{amount if amount not in (None, '') else '-'} {currency_code or ''}".strip()
    return f"{value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)} {currency_code}"


def format_date(value) -> str:
    if not value:
        return "-"
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    try:
        return datetime.fromisoformat(str(value)).strftime("%Y-%m-%d")
    except ValueError:
        return str(value)


def format_quantity(value) -> str:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return str(value)
    if number == number.to_integral_value():
        return str(number.quantize(Decimal("1")))
    return str(number.normalize())


def format_rate(value) -> str:
    if value is None:
        return ""
    return f"{Decimal(str(value)):.4f}"
