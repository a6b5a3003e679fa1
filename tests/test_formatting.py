from datetime import date, datetime
from decimal import Decimal

from backend.app.services.formatting import format_currency, format_date, format_quantity, format_rate


def test_format_currency():
    assert format_currency(Decimal("363"), "EUR") == "363.00 EUR"
    assert format_currency("69.305", "USD") == "69.31 USD"
    assert format_currency("abc", "EUR") == "abc EUR"
    assert format_currency(None, None) == "-"
    assert format_currency(10, "EURO") == "10 EURO"


def test_format_date():
    assert format_date(date(2024, 6, 1)) == "2024-06-01"
    assert format_date(datetime(2024, 6, 1, 13, 45)) == "2024-06-01"
    assert format_date("2024-06-01T10:00:00") == "2024-06-01"
    assert format_date(None) == "-"
    assert format_date("soon") == "soon"


def test_format_quantity_and_rate():
    assert format_quantity(Decimal("3.00")) == "3"
    assert format_quantity(Decimal("1.50")) == "1.5"
    assert format_rate(Decimal("1.1")) == "1.1000"
    assert format_rate(None) == ""
