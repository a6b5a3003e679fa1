import os

os.environ.setdefault("LEDGER_DATABASE_URL", "sqlite:///./test_ledger.db")

from datetime import datetime
from decimal import Decimal

import pytest

from backend.app.core.errors import RateServiceError, RateUnavailable
from backend.app.core.settings import get_settings
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.models.customer import Customer
from backend.app.models.item import Item
from backend.app.models.ledger_entry import UNBILLED, LedgerEntry
from backend.app.services.business_settings import ensure_business_settings


class FakeRateClient:
    """Stands in for the HTTP rate client; records every lookup."""

    def __init__(self, rates=None, unavailable=(), broken=()):
        self.rates = {pair: Decimal(str(rate)) for pair, rate in (rates or {}).items()}
        self.unavailable = set(unavailable)
        self.broken = set(broken)
        self.calls = []

    def fetch_rate(self, on_date, from_currency, to_currency):
        self.calls.append((on_date, from_currency, to_currency))
        pair = (from_currency, to_currency)
        if from_currency in self.broken:
            raise RateServiceError(f"Could not fetch exchange rate for {from_currency} to {to_currency}.")
        if from_currency in self.unavailable or pair not in self.rates:
            raise RateUnavailable(f"Could not find exchange rate from {from_currency} to {to_currency}.")
        return self.rates[pair]


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def business_settings(db):
    return ensure_business_settings(db, get_settings())


@pytest.fixture
def rate_client():
    return FakeRateClient(rates={("EUR", "USD"): "1.10", ("CZK", "EUR"): "0.04", ("USD", "EUR"): "0.90"})


@pytest.fixture
def make_customer(db):
    def _make(name="Customer C", **fields):
        customer = Customer(name=name, **fields)
        db.add(customer)
        db.commit()
        db.refresh(customer)
        return customer

    return _make


@pytest.fixture
def make_item(db):
    def _make(name="Room", price="100.00", currency="EUR", vat_rate="21.00", unit="night", duration_type="night"):
        item = Item(
            name=name,
            unit=unit,
            duration_type=duration_type,
            unit_price_without_vat=Decimal(price),
            currency=currency,
            vat_rate=Decimal(vat_rate),
        )
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    return _make


@pytest.fixture
def make_entry(db):
    def _make(customer, item, start, end=None, quantity=1, billing_status=UNBILLED):
        entry = LedgerEntry(
            customer_id=customer.id,
            item_id=item.id,
            quantity=quantity,
            start_date=start,
            end_date=end,
            recorded_price_without_vat=item.unit_price_without_vat,
            recorded_vat_rate=item.vat_rate,
            billing_status=billing_status,
        )
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry

    return _make

