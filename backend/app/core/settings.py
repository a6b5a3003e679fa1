import os


def _env(name: str, default: str) -> str:
    return os.getenv(f"LEDGER_{name.upper()}", default)


class Settings:
    def __init__(self):
        self.app_name = "Ledger Invoicing"
        self.api_version = "1.0.0"
        self.environment = _env("environment", "development")
        self.secret_key = _env("secret_key", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        self.access_token_expire_minutes = int(_env("access_token_expire_minutes", "30"))
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes
        self.database_url = _env("database_url", "sqlite:///./ledger.db")
        self.log_level = _env("log_level", "INFO")

        self.exchange_rate_api_url = _env("exchange_rate_api_url", "https://api.frankfurter.app")
        self.exchange_rate_timeout_seconds = float(_env("exchange_rate_timeout_seconds", "10"))
        self.invoice_number_prefix = _env("invoice_number_prefix", "INV-")

        # Seed values for the business settings row
        self.business_name = _env("business_name", "My Business")
        self.business_address = _env("business_address", "")
        self.business_vat_id = _env("business_vat_id", "")
        self.default_currency = _env("default_currency", "EUR").upper()


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached Settings so the next call re-reads the environment."""
    global _settings_instance
    _settings_instance = None
