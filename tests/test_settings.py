import pytest
from fastapi.testclient import TestClient

from backend.app.core.settings import Settings, get_settings, reset_settings
from backend.app.main import app


@pytest.fixture
def auth_headers():
    client = TestClient(app)
    client.post("/auth/register", json={"email": "settings@example.com", "password": "secret"})
    resp = client.post("/auth/login", json={"email": "settings@example.com", "password": "secret"})
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def test_get_business_settings(business_settings, auth_headers):
    client = TestClient(app)
    resp = client.get("/settings", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["default_currency"] == "EUR"


def test_business_settings_missing(auth_headers):
    client = TestClient(app)
    assert client.get("/settings", headers=auth_headers).status_code == 404


def test_update_business_settings(business_settings, auth_headers):
    client = TestClient(app)
    resp = client.put(
        "/settings",
        json={"business_name": "  Villa Sol  ", "default_currency": " czk ", "vat_id": "CZ123"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["business_name"] == "Villa Sol"
    assert data["default_currency"] == "CZK"
    assert data["vat_id"] == "CZ123"


def test_update_business_settings_rejects_bad_currency(business_settings, auth_headers):
    client = TestClient(app)
    resp = client.put("/settings", json={"default_currency": "KORUNA"}, headers=auth_headers)
    assert resp.status_code == 400


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("LEDGER_DEFAULT_CURRENCY", "usd")
    monkeypatch.setenv("LEDGER_INVOICE_NUMBER_PREFIX", "BILL-")

    settings = Settings()

    assert settings.default_currency == "USD"
    assert settings.invoice_number_prefix == "BILL-"


def test_get_settings_is_singleton():
    assert get_settings() is get_settings()
    first = get_settings()
    reset_settings()
    try:
        assert get_settings() is not first
    finally:
        reset_settings()
