"""Invoice generation: turns unbilled ledger entries into one finalized invoice.

The whole run is a single unit of work. Entries are matched, one exchange rate
per source currency is resolved for the issue date, lines and totals are
computed, the invoice and its items are inserted and the entries are flipped to
``billed``. Any failure rolls the session back so no invoice, no item and no
status change survives.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.errors import (
    InvoicingError,
    NoEntriesFound,
    NotFound,
    PersistenceError,
    SettingsMissing,
    ValidationError,
)
from backend.app.models.customer import Customer
from backend.app.models.invoice import Invoice
from backend.app.models.invoice_item import InvoiceItem
from backend.app.models.ledger_entry import BILLED, UNBILLED, LedgerEntry
from backend.app.services.entry_matching import match_unbilled_entries, period_bounds
from backend.app.services.exchange_rates import ExchangeRateClient, ExchangeRateResolver
from backend.app.services.invoice_numbering import next_invoice_number
from backend.app.services.invoices import get_invoice
from backend.app.services.line_items import LineItemResult, calculate_line_item

logger = logging.getLogger(__name__)


class GenerationState(str, Enum):
    STARTED = "started"
    ENTRIES_MATCHED = "entries_matched"
    RATES_RESOLVED = "rates_resolved"
    LINES_COMPUTED = "lines_computed"
    PERSISTED = "persisted"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass(frozen=True)
class BusinessDetails:
    business_name: Optional[str]
    default_currency: str
    address: Optional[str] = None
    vat_id: Optional[str] = None

    def snapshot(self) -> dict:
        return {
            "business_name": self.business_name,
            "default_currency": self.default_currency,
            "address": self.address,
            "vat_id": self.vat_id,
        }


@dataclass
class InvoiceRequest:
    customer_id: Optional[int]
    start_date: Optional[date]
    end_date: Optional[date]
    issue_date: Optional[date]
    target_currency: Optional[str] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None


@dataclass
class InvoiceTotals:
    subtotal_without_vat: Decimal = Decimal("0.00")
    total_vat_amount: Decimal = Decimal("0.00")
    lines: List[LineItemResult] = field(default_factory=list)

    @property
    def grand_total(self) -> Decimal:
        return self.subtotal_without_vat + self.total_vat_amount

    def add(self, line: LineItemResult) -> None:
        self.lines.append(line)
        self.subtotal_without_vat += line.line_total_without_vat
        self.total_vat_amount += line.line_vat_amount


def normalize_currency(value, field_name: str = "targetCurrency") -> str:
    if not isinstance(value, str) or len(value.strip()) != 3 or not value.strip().isalpha():
        raise ValidationError(f"Invalid {field_name} format. Must be 3 letters.")
    return value.strip().upper()


def validate_request(request: InvoiceRequest) -> InvoiceRequest:
    """Check request shape before anything touches the store."""
    missing = [
        name
        for name, value in (
            ("customerId", request.customer_id),
            ("startDate", request.start_date),
            ("endDate", request.end_date),
            ("issueDate", request.issue_date),
            ("targetCurrency", request.target_currency),
        )
        if value is None
    ]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    if request.end_date < request.start_date:
        raise ValidationError("End date cannot be before start date for invoice period.")
    if request.due_date is not None and request.due_date < request.issue_date:
        raise ValidationError("Due date cannot be before issue date.")

    return InvoiceRequest(
        customer_id=request.customer_id,
        start_date=request.start_date,
        end_date=request.end_date,
        issue_date=request.issue_date,
        target_currency=normalize_currency(request.target_currency),
        due_date=request.due_date,
        notes=(request.notes or "").strip() or None,
    )


def customer_snapshot(customer: Customer) -> dict:
    return {
        "id": customer.id,
        "name": customer.name,
        "company_name": customer.company_name,
        "email": customer.email,
        "phone": customer.phone,
        "address": customer.address,
        "vat_id": customer.vat_id,
    }


class InvoiceAssembler:
    """Runs one invoice generation against a session; use a fresh instance per request."""

    def __init__(
        self,
        db: Session,
        rate_client: ExchangeRateClient,
        business: Optional[BusinessDetails],
        number_prefix: str = "INV-",
    ):
        self.db = db
        self.resolver = ExchangeRateResolver(rate_client)
        self.business = business
        self.number_prefix = number_prefix
        self.state = GenerationState.STARTED
        self.transitions: List[GenerationState] = [GenerationState.STARTED]

    def _advance(self, state: GenerationState) -> None:
        self.state = state
        self.transitions.append(state)

    def generate(self, request: InvoiceRequest) -> Invoice:
        try:
            request = validate_request(request)
        except ValidationError:
            self._advance(GenerationState.ROLLED_BACK)
            raise
        logger.info(
            "Generating invoice for customer %s (%s to %s) in %s",
            request.customer_id,
            request.start_date,
            request.end_date,
            request.target_currency,
        )
        try:
            invoice_id = self._run(request)
            self.db.commit()
        except InvoicingError as exc:
            self._rollback(exc)
            raise
        except IntegrityError as exc:
            self._rollback(exc)
            raise PersistenceError("Invoice could not be saved: a constraint was violated.", status_code=400) from exc
        except SQLAlchemyError as exc:
            self._rollback(exc)
            logger.exception("Database error during invoice generation")
            raise PersistenceError("Database error during invoice generation.") from exc
        except Exception as exc:
            self._rollback(exc)
            logger.exception("Unexpected error during invoice generation")
            raise

        self._advance(GenerationState.COMMITTED)
        logger.info("Committed invoice %s for customer %s", invoice_id, request.customer_id)
        return get_invoice(self.db, invoice_id)

    def _rollback(self, exc: Exception) -> None:
        self.db.rollback()
        self._advance(GenerationState.ROLLED_BACK)
        logger.warning("Invoice generation rolled back: %s: %s", type(exc).__name__, exc)

    def _run(self, request: InvoiceRequest) -> int:
        customer = self.db.get(Customer, request.customer_id)
        if customer is None:
            raise NotFound("Customer not found.")
        if self.business is None:
            raise SettingsMissing("Business settings not found or not seeded.")

        period_start, period_end = period_bounds(request.start_date, request.end_date)
        entries = match_unbilled_entries(self.db, customer.id, period_start, period_end, lock=True)
        if not entries:
            raise NoEntriesFound(
                "No unbilled entries found for this customer overlapping the specified date range."
            )
        self._advance(GenerationState.ENTRIES_MATCHED)

        currencies = [entry.item_currency.upper() for entry in entries if entry.item_currency]
        rates = self.resolver.resolve_all(request.issue_date, currencies, request.target_currency)
        self._advance(GenerationState.RATES_RESOLVED)

        totals = InvoiceTotals()
        for entry in entries:
            rate = rates.get((entry.item_currency or "").upper(), Decimal("1"))
            totals.add(calculate_line_item(entry, rate, request.target_currency))
        self._advance(GenerationState.LINES_COMPUTED)

        invoice = Invoice(
            invoice_number=next_invoice_number(self.db, self.number_prefix, request.issue_date),
            customer_id=customer.id,
            issue_date=request.issue_date,
            due_date=request.due_date,
            subtotal_without_vat=totals.subtotal_without_vat,
            total_vat_amount=totals.total_vat_amount,
            grand_total=totals.grand_total,
            currency=request.target_currency,
            status="issued",
            notes=request.notes,
            business_details_snapshot=self.business.snapshot(),
            customer_details_snapshot=customer_snapshot(customer),
        )
        for line in totals.lines:
            invoice.items.append(
                InvoiceItem(
                    ledger_entry_id=line.entry_id,
                    description=line.description,
                    quantity=line.quantity,
                    unit=line.unit,
                    original_unit_price_without_vat=line.original_unit_price_without_vat,
                    original_currency=line.original_currency,
                    original_vat_rate=line.original_vat_rate,
                    exchange_rate_used=line.exchange_rate_used,
                    unit_price_without_vat=line.unit_price_without_vat,
                    vat_rate=line.vat_rate,
                    line_total_without_vat=line.line_total_without_vat,
                    line_vat_amount=line.line_vat_amount,
                    line_total_with_vat=line.line_total_with_vat,
                    duration_multiplier=line.duration_multiplier,
                    duration_unit=line.duration_unit,
                    duration_fallback=line.duration_fallback,
                )
            )
        self.db.add(invoice)
        self.db.flush()  # obtain invoice id for the entry update

        self._claim_entries([entry.entry_id for entry in entries], invoice.id)
        self._advance(GenerationState.PERSISTED)
        return invoice.id

    def _claim_entries(self, entry_ids: List[int], invoice_id: int) -> None:
        # Only rows still unbilled are flipped; a shortfall means another run claimed some.
        claimed = (
            self.db.query(LedgerEntry)
            .filter(LedgerEntry.id.in_(entry_ids), LedgerEntry.billing_status == UNBILLED)
            .update({"billing_status": BILLED, "invoice_id": invoice_id}, synchronize_session=False)
        )
        if claimed != len(entry_ids):
            raise PersistenceError("Some ledger entries were billed by another invoice; retry the generation.")
