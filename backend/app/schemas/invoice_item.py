"""Invoice item schemas."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class InvoiceItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_id: int
    ledger_entry_id: Optional[int] = None
    description: str
    quantity: Decimal
    unit: str
    original_unit_price_without_vat: Decimal
    original_currency: str
    original_vat_rate: Decimal
    exchange_rate_used: Optional[Decimal] = None
    unit_price_without_vat: Decimal
    vat_rate: Decimal
    line_total_without_vat: Decimal
    line_vat_amount: Decimal
    line_total_with_vat: Decimal
    duration_multiplier: int
    duration_unit: Optional[str] = None
    duration_fallback: bool
