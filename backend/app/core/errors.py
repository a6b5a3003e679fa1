"""Typed errors raised by the invoicing services.

Each error carries the HTTP status the API layer should answer with, so the
services stay free of transport concerns while the routes only translate.
"""


class InvoicingError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class ValidationError(InvoicingError):
    """Malformed or missing request fields."""

    status_code = 400


class NotFound(InvoicingError):
    status_code = 404


class SettingsMissing(NotFound):
    """The business settings row is absent; a configuration fault, not a user error."""

    status_code = 500


class NoEntriesFound(InvoicingError):
    status_code = 404


class RateUnavailable(InvoicingError):
    """The rate service answered but has no rate for the pair/date."""

    status_code = 400


class RateServiceError(InvoicingError):
    """Transport or service failure while fetching a rate."""

    status_code = 500


class InvalidEntryData(InvoicingError):
    status_code = 500


class PersistenceError(InvoicingError):
    status_code = 500
