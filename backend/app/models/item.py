"""Billable item catalogue."""

from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base
from backend.app.core.time import utc_now

ALLOWED_UNITS = ("pcs", "night", "day", "hour", "kg", "litre", "service", "other")
DURATION_TYPES = ("night", "day")


class Item(Base):
    __tablename__ = "items"
    __table_args__ = (
        CheckConstraint(f"unit IN {ALLOWED_UNITS}", name="ck_items_unit"),
        CheckConstraint("duration_type IS NULL OR duration_type IN ('night', 'day')", name="ck_items_duration_type"),
        CheckConstraint("unit_price_without_vat >= 0", name="ck_items_price_non_negative"),
        CheckConstraint("vat_rate >= 0", name="ck_items_vat_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    unit = Column(String, nullable=False, default="pcs")
    duration_type = Column(String, nullable=True)
    unit_price_without_vat = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    vat_rate = Column(Numeric(5, 2), nullable=False, default=Decimal("0.00"))
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    ledger_entries = relationship("LedgerEntry", back_populates="item", passive_deletes="all")
