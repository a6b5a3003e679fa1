"""Invoice routes: generation, listing, detail and PDF download."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from backend.app.core.errors import InvoicingError
from backend.app.core.settings import get_settings
from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user
from backend.app.models.user import User
from backend.app.schemas.invoice import InvoiceGenerateRequest, InvoiceRead, InvoiceSummary
from backend.app.services.business_settings import get_business_settings, to_business_details
from backend.app.services.exchange_rates import ExchangeRateClient, get_exchange_rate_client
from backend.app.services.invoice_generation import InvoiceAssembler, InvoiceRequest
from backend.app.services.invoice_rendering import WeasyPrintRenderer, get_invoice_renderer
from backend.app.services.invoices import get_invoice, list_invoices

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoices", tags=["invoices"])


def _get_invoice_or_404(db: Session, invoice_id: int):
    invoice = get_invoice(db, invoice_id)
    if not invoice:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found.")
    return invoice


@router.post("/generate", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
def generate_invoice(
    payload: InvoiceGenerateRequest,
    db: Session = Depends(get_db),
    rate_client: ExchangeRateClient = Depends(get_exchange_rate_client),
    current_user: User = Depends(get_current_user),
):
    settings = get_settings()
    business = to_business_details(get_business_settings(db))
    assembler = InvoiceAssembler(db, rate_client, business, number_prefix=settings.invoice_number_prefix)
    request = InvoiceRequest(
        customer_id=payload.customer_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        issue_date=payload.issue_date,
        target_currency=payload.target_currency,
        due_date=payload.due_date,
        notes=payload.notes,
    )
    try:
        return assembler.generate(request)
    except InvoicingError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc


@router.get("", response_model=List[InvoiceSummary])
def read_invoices(
    customer_id: int | None = None,
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return list_invoices(db, customer_id=customer_id, skip=skip, limit=limit)


@router.get("/{invoice_id}", response_model=InvoiceRead)
def read_invoice(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_invoice_or_404(db, invoice_id)


@router.get("/{invoice_id}/pdf", response_class=Response)
def download_invoice_pdf(
    invoice_id: int,
    db: Session = Depends(get_db),
    renderer: WeasyPrintRenderer = Depends(get_invoice_renderer),
    current_user: User = Depends(get_current_user),
):
    invoice = _get_invoice_or_404(db, invoice_id)
    business = to_business_details(get_business_settings(db))
    try:
        pdf_bytes = renderer.render(invoice, business)
    except Exception as exc:
        logger.exception("Error generating PDF for invoice %s", invoice_id)
        raise HTTPException(status_code=500, detail="Server error generating invoice PDF.") from exc

    filename = f"Invoice-{invoice.invoice_number or invoice.id}.pdf"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return Response(content=pdf_bytes, media_type="application/pdf", headers=headers)
