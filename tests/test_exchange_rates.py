from datetime import date
from decimal import Decimal

import pytest
import requests

from backend.app.core.errors import RateServiceError, RateUnavailable
from backend.app.services.exchange_rates import ExchangeRateClient, ExchangeRateResolver


class FakeResponse:
    def __init__(self, status_code=200, payload=None, json_error=False):
        self.status_code = status_code
        self._payload = payload
        self._json_error = json_error

    def json(self):
        if self._json_error:
            raise ValueError("not json")
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params, timeout))
        if self.error:
            raise self.error
        return self.response


def test_client_queries_dated_endpoint():
    session = FakeSession(FakeResponse(payload={"amount": 1.0, "base": "EUR", "rates": {"USD": 1.1}}))
    client = ExchangeRateClient("https://rates.example/", timeout=5, session=session)

    rate = client.fetch_rate(date(2024, 6, 4), "EUR", "USD")

    assert rate == Decimal("1.1")
    assert session.requests == [("https://rates.example/2024-06-04", {"from": "EUR", "to": "USD"}, 5)]


def test_client_uses_latest_without_date():
    session = FakeSession(FakeResponse(payload={"rates": {"CZK": 25.1}}))
    client = ExchangeRateClient("https://rates.example", session=session)

    client.fetch_rate(None, "EUR", "CZK")

    assert session.requests[0][0] == "https://rates.example/latest"


def test_client_missing_rate_key_is_unavailable():
    session = FakeSession(FakeResponse(payload={"rates": {}}))
    client = ExchangeRateClient("https://rates.example", session=session)

    with pytest.raises(RateUnavailable) as exc_info:
        client.fetch_rate(date(2024, 6, 4), "EUR", "XYZ")
    assert exc_info.value.status_code == 400
    assert "XYZ" in str(exc_info.value)


def test_client_not_found_is_unavailable():
    client = ExchangeRateClient("https://rates.example", session=FakeSession(FakeResponse(status_code=404)))

    with pytest.raises(RateUnavailable):
        client.fetch_rate(date(2024, 6, 4), "EUR", "XYZ")


def test_client_transport_failure_is_service_error():
    session = FakeSession(error=requests.ConnectionError("boom"))
    client = ExchangeRateClient("https://rates.example", session=session)

    with pytest.raises(RateServiceError) as exc_info:
        client.fetch_rate(date(2024, 6, 4), "EUR", "USD")
    assert exc_info.value.status_code == 500


def test_client_server_error_and_bad_body_are_service_errors():
    client = ExchangeRateClient("https://rates.example", session=FakeSession(FakeResponse(status_code=502)))
    with pytest.raises(RateServiceError):
        client.fetch_rate(date(2024, 6, 4), "EUR", "USD")

    client = ExchangeRateClient("https://rates.example", session=FakeSession(FakeResponse(json_error=True)))
    with pytest.raises(RateServiceError):
        client.fetch_rate(date(2024, 6, 4), "EUR", "USD")


def test_client_defaults_to_requests_module(monkeypatch):
    captured = {}

    def fake_get(url, params=None, timeout=None):
        captured["url"] = url
        return FakeResponse(payload={"rates": {"USD": "1.0850"}})

    monkeypatch.setattr(requests, "get", fake_get)
    client = ExchangeRateClient("https://rates.example")

    assert client.fetch_rate(date(2024, 1, 2), "EUR", "USD") == Decimal("1.0850")
    assert captured["url"] == "https://rates.example/2024-01-02"


def test_same_currency_never_calls_service(rate_client):
    resolver = ExchangeRateResolver(rate_client)

    assert resolver.resolve(date(2024, 6, 4), "EUR", "EUR") == Decimal("1")
    assert resolver.resolve(date(2024, 6, 4), "usd", "USD") == Decimal("1")
    assert rate_client.calls == []


def test_resolver_memoizes_per_date_and_pair(rate_client):
    resolver = ExchangeRateResolver(rate_client)
    issue = date(2024, 6, 4)

    assert resolver.resolve(issue, "EUR", "USD") == Decimal("1.100000")
    assert resolver.resolve(issue, "EUR", "USD") == Decimal("1.100000")
    assert rate_client.calls == [(issue, "EUR", "USD")]

    resolver.resolve(date(2024, 6, 5), "EUR", "USD")
    assert len(rate_client.calls) == 2


def test_resolve_all_fails_on_any_missing_currency(rate_client):
    resolver = ExchangeRateResolver(rate_client)

    with pytest.raises(RateUnavailable):
        resolver.resolve_all(date(2024, 6, 4), ["EUR", "GBP"], "USD")


def test_resolve_all_resolves_each_currency_once(rate_client):
    resolver = ExchangeRateResolver(rate_client)

    rates = resolver.resolve_all(date(2024, 6, 4), ["CZK", "USD", "CZK", "EUR"], "EUR")

    assert rates == {"CZK": Decimal("0.040000"), "EUR": Decimal("1"), "USD": Decimal("0.900000")}
    assert len(rate_client.calls) == 2
