"""Invoice document rendering: Jinja2 HTML, converted to PDF with WeasyPrint."""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from backend.app.models.invoice import Invoice
from backend.app.services.formatting import format_currency, format_date, format_quantity, format_rate
from backend.app.services.invoice_generation import BusinessDetails

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"

# The first page also carries the header and bill-to blocks.
FIRST_PAGE_ROWS = 12
ROWS_PER_PAGE = 22


def paginate_items(items: Sequence, first_page_rows: int = FIRST_PAGE_ROWS, rows_per_page: int = ROWS_PER_PAGE) -> List[list]:
    if first_page_rows < 1 or rows_per_page < 1:
        raise ValueError("Page sizes must be positive")
    items = list(items)
    pages = [items[:first_page_rows]]
    for offset in range(first_page_rows, len(items), rows_per_page):
        pages.append(items[offset : offset + rows_per_page])
    return pages


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
    )
    env.filters["currency"] = format_currency
    env.filters["date"] = format_date
    env.filters["quantity"] = format_quantity
    env.filters["rate"] = format_rate
    return env


def _business_context(invoice: Invoice, business: Optional[BusinessDetails]) -> dict:
    if business is not None:
        return business.snapshot()
    return dict(invoice.business_details_snapshot or {})


def _customer_context(invoice: Invoice) -> dict:
    customer = invoice.customer
    if customer is None:
        return dict(invoice.customer_details_snapshot or {})
    return {
        "name": customer.name,
        "company_name": customer.company_name,
        "address": customer.address,
        "vat_id": customer.vat_id,
        "email": customer.email,
        "phone": customer.phone,
    }


def _line_context(item, currency: str) -> dict:
    converted = item.exchange_rate_used is not None and item.original_currency != currency
    return {
        "description": item.description,
        "quantity": item.quantity,
        "unit": item.unit,
        "original_price": format_currency(item.original_unit_price_without_vat, item.original_currency),
        "exchange_rate": item.exchange_rate_used if converted else None,
        "unit_price": item.unit_price_without_vat,
        "line_total": item.line_total_with_vat,
    }


def build_invoice_context(invoice: Invoice, business: Optional[BusinessDetails] = None) -> dict:
    currency = invoice.currency
    lines = [_line_context(item, currency) for item in invoice.items]
    return {
        "invoice": {
            "number": invoice.invoice_number or str(invoice.id),
            "issue_date": invoice.issue_date,
            "due_date": invoice.due_date,
            "currency": currency,
            "subtotal": invoice.subtotal_without_vat,
            "vat": invoice.total_vat_amount,
            "grand_total": invoice.grand_total,
            "notes": invoice.notes,
        },
        "business": _business_context(invoice, business),
        "customer": _customer_context(invoice),
        "pages": paginate_items(lines),
    }


def render_invoice_html(invoice: Invoice, business: Optional[BusinessDetails] = None) -> str:
    template = _environment().get_template("invoice.html")
    return template.render(**build_invoice_context(invoice, business))


class WeasyPrintRenderer:
    def render(self, invoice: Invoice, business: Optional[BusinessDetails] = None) -> bytes:
        html = render_invoice_html(invoice, business)
        from weasyprint import HTML

        logger.debug("Rendering PDF for invoice %s", invoice.id)
        return HTML(string=html, base_url=str(TEMPLATES_DIR)).write_pdf()


def get_invoice_renderer() -> WeasyPrintRenderer:
    return WeasyPrintRenderer()
