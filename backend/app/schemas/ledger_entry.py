"""Ledger entry schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LedgerEntryCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_id: int = Field(alias="customerId")
    item_id: int = Field(alias="itemId")
    quantity: int
    start_date: datetime = Field(alias="startDate")
    end_date: Optional[datetime] = Field(default=None, alias="endDate")
    notes: Optional[str] = None


class LedgerEntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    item_id: int
    quantity: int
    start_date: datetime
    end_date: Optional[datetime] = None
    recorded_price_without_vat: Decimal
    recorded_vat_rate: Decimal
    billing_status: str
    invoice_id: Optional[int] = None
    notes: Optional[str] = None
