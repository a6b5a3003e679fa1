"""Invoice read helpers."""

from typing import List, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from backend.app.models.invoice import Invoice


def get_invoice(db: Session, invoice_id: int) -> Optional[Invoice]:
    """Load an invoice with its customer and line items attached."""
    return (
        db.query(Invoice)
        .options(joinedload(Invoice.customer), selectinload(Invoice.items))
        .filter(Invoice.id == invoice_id)
        .first()
    )


def list_invoices(db: Session, customer_id: Optional[int] = None, skip: int = 0, limit: int = 50) -> List[Invoice]:
    query = db.query(Invoice).options(joinedload(Invoice.customer))
    if customer_id:
        query = query.filter(Invoice.customer_id == customer_id)
    query = query.order_by(Invoice.issue_date.desc(), Invoice.invoice_number.desc()).offset(skip).limit(limit)
    return query.all()
