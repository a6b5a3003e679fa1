"""Exchange-rate lookup against a date-indexed rate service (Frankfurter API shape)."""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation

import requests

from backend.app.core.errors import RateServiceError, RateUnavailable
from backend.app.core.settings import get_settings

logger = logging.getLogger(__name__)

RATE_PRECISION = Decimal("0.000001")


class ExchangeRateClient:
    """Thin HTTP client for ``GET {base}/{date|latest}?from=CUR&to=CUR``."""

    def __init__(self, base_url: str, timeout: float = 10.0, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests

    def fetch_rate(self, on_date: date | None, from_currency: str, to_currency: str) -> Decimal:
        date_param = on_date.isoformat() if on_date else "latest"
        url = f"{self.base_url}/{date_param}"
        logger.debug("Fetching rate %s -> %s for %s", from_currency, to_currency, date_param)
        try:
            response = self.session.get(
                url,
                params={"from": from_currency, "to": to_currency},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Rate service request failed for %s -> %s: %s", from_currency, to_currency, exc)
            raise RateServiceError(f"Could not fetch exchange rate for {from_currency} to {to_currency}.") from exc

        if response.status_code == 404:
            raise RateUnavailable(
                f"Could not find exchange rate from {from_currency} to {to_currency} for {date_param}."
            )
        if response.status_code >= 400:
            logger.warning(
                "Rate service answered %s for %s -> %s", response.status_code, from_currency, to_currency
            )
            raise RateServiceError(f"Could not fetch exchange rate for {from_currency} to {to_currency}.")

        try:
            payload = response.json()
        except ValueError as exc:
            raise RateServiceError(f"Could not fetch exchange rate for {from_currency} to {to_currency}.") from exc

        rates = payload.get("rates") if isinstance(payload, dict) else None
        raw_rate = rates.get(to_currency) if isinstance(rates, dict) else None
        if raw_rate is None:
            logger.warning("No rate from %s to %s for %s", from_currency, to_currency, date_param)
            raise RateUnavailable(
                f"Could not find exchange rate from {from_currency} to {to_currency} for {date_param}."
            )
        try:
            rate = Decimal(str(raw_rate))
        except InvalidOperation as exc:
            raise RateServiceError(f"Rate service returned a malformed rate for {to_currency}.") from exc
        if rate <= 0:
            raise RateUnavailable(f"Rate service returned a non-positive rate for {from_currency} to {to_currency}.")
        return rate


class ExchangeRateResolver:
    """Resolves and memoizes rates for the lifetime of one invoice generation."""

    def __init__(self, client: ExchangeRateClient):
        self.client = client
        self._cache: dict[tuple[date | None, str, str], Decimal] = {}

    def resolve(self, on_date: date | None, from_currency: str, to_currency: str) -> Decimal:
        from_currency = from_currency.upper()
        to_currency = to_currency.upper()
        if from_currency == to_currency:
            return Decimal("1")
        key = (on_date, from_currency, to_currency)
        if key not in self._cache:
            rate = self.client.fetch_rate(on_date, from_currency, to_currency)
            self._cache[key] = rate.quantize(RATE_PRECISION)
        return self._cache[key]

    def resolve_all(self, on_date: date | None, currencies, to_currency: str) -> dict[str, Decimal]:
        """Resolve every source currency, failing on the first one that cannot be resolved."""
        return {currency: self.resolve(on_date, currency, to_currency) for currency in sorted(set(currencies))}


def get_exchange_rate_client() -> ExchangeRateClient:
    settings = get_settings()
    return ExchangeRateClient(settings.exchange_rate_api_url, timeout=settings.exchange_rate_timeout_seconds)
