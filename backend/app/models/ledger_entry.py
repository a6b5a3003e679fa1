"""Ledger entry model: one customer's consumption of one item over a time span."""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base
from backend.app.core.time import utc_now

UNBILLED = "unbilled"
BILLED = "billed"
PAID = "paid"
BILLING_STATUSES = (UNBILLED, BILLED, PAID)


class LedgerEntry(Base):
    __tablename__ = "ledger_entries"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_ledger_entries_quantity_positive"),
        CheckConstraint("billing_status IN ('unbilled', 'billed', 'paid')", name="ck_ledger_entries_billing_status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey("items.id", ondelete="RESTRICT"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    # Naive UTC instants
    start_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime, nullable=True)
    recorded_price_without_vat = Column(Numeric(10, 2), nullable=False)
    recorded_vat_rate = Column(Numeric(5, 2), nullable=False)
    billing_status = Column(String, nullable=False, default=UNBILLED, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=True, index=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    customer = relationship("Customer", back_populates="ledger_entries")
    item = relationship("Item", back_populates="ledger_entries")
    invoice = relationship("Invoice", back_populates="billed_entries")
