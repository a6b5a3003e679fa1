"""Invoice model for billing."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String, unique=True, nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False, index=True)

    issue_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=True)

    subtotal_without_vat = Column(Numeric(12, 2), nullable=False)
    total_vat_amount = Column(Numeric(12, 2), nullable=False)
    grand_total = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)

    status = Column(String, default="issued", nullable=False)
    notes = Column(Text, nullable=True)
    business_details_snapshot = Column(JSON, nullable=True)
    customer_details_snapshot = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc), nullable=False)

    customer = relationship("Customer", back_populates="invoices")
    items = relationship("InvoiceItem", back_populates="invoice", cascade="all, delete-orphan", order_by="InvoiceItem.id")
    billed_entries = relationship("LedgerEntry", back_populates="invoice")
