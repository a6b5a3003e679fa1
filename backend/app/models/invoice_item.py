"""Invoice line items, immutable snapshots of one billed ledger entry."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False, index=True)
    ledger_entry_id = Column(Integer, ForeignKey("ledger_entries.id"), nullable=True)
    description = Column(String(255), nullable=False)
    quantity = Column(Numeric(10, 2), nullable=False)
    unit = Column(String, nullable=False)

    original_unit_price_without_vat = Column(Numeric(10, 2), nullable=False)
    original_currency = Column(String(3), nullable=False)
    original_vat_rate = Column(Numeric(5, 2), nullable=False)
    exchange_rate_used = Column(Numeric(18, 6), nullable=True)

    unit_price_without_vat = Column(Numeric(10, 2), nullable=False)
    vat_rate = Column(Numeric(5, 2), nullable=False)
    line_total_without_vat = Column(Numeric(12, 2), nullable=False)
    line_vat_amount = Column(Numeric(12, 2), nullable=False)
    line_total_with_vat = Column(Numeric(12, 2), nullable=False)

    duration_multiplier = Column(Integer, nullable=False, default=1)
    duration_unit = Column(String, nullable=True)
    duration_fallback = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    invoice = relationship("Invoice", back_populates="items")
