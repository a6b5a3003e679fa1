"""Monotonic invoice numbers backed by a counter row."""

from datetime import date

from sqlalchemy.orm import Session

from backend.app.models.invoice_sequence import InvoiceSequence

INVOICE_SEQUENCE = "invoice"


def next_sequence_value(db: Session, name: str = INVOICE_SEQUENCE) -> int:
    """Increment and return the named counter inside the caller's transaction."""
    sequence = (
        db.query(InvoiceSequence)
        .filter(InvoiceSequence.name == name)
        .with_for_update()
        .first()
    )
    if sequence is None:
        sequence = InvoiceSequence(name=name, last_value=0)
        db.add(sequence)
    sequence.last_value = (sequence.last_value or 0) + 1
    db.flush()
    return sequence.last_value


def ensure_invoice_sequence(db: Session, name: str = INVOICE_SEQUENCE) -> InvoiceSequence:
    """Create the counter row at zero so later increments always lock an existing row."""
    sequence = db.query(InvoiceSequence).filter(InvoiceSequence.name == name).first()
    if sequence is None:
        sequence = InvoiceSequence(name=name, last_value=0)
        db.add(sequence)
        db.flush()
    return sequence


def format_invoice_number(prefix: str, issue_date: date, value: int) -> str:
    return f"{prefix}{issue_date.year}-{value:06d}"


def next_invoice_number(db: Session, prefix: str, issue_date: date) -> str:
    return format_invoice_number(prefix, issue_date, next_sequence_value(db))
