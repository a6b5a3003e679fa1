"""Invoice schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.app.schemas.customer import CustomerRead, CustomerSummary
from backend.app.schemas.invoice_item import InvoiceItemRead


class InvoiceGenerateRequest(BaseModel):
    """Body of ``POST /invoices/generate``; accepts camelCase or snake_case keys."""

    model_config = ConfigDict(populate_by_name=True)

    customer_id: Optional[int] = Field(default=None, alias="customerId")
    start_date: Optional[date] = Field(default=None, alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")
    issue_date: Optional[date] = Field(default=None, alias="issueDate")
    due_date: Optional[date] = Field(default=None, alias="dueDate")
    notes: Optional[str] = None
    target_currency: Optional[str] = Field(default=None, alias="targetCurrency")


class InvoiceSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_number: str
    customer_id: int
    issue_date: date
    due_date: Optional[date] = None
    subtotal_without_vat: Decimal
    total_vat_amount: Decimal
    grand_total: Decimal
    currency: str
    status: str
    customer: Optional[CustomerSummary] = None


class InvoiceRead(InvoiceSummary):
    notes: Optional[str] = None
    customer: Optional[CustomerRead] = None
    items: List[InvoiceItemRead] = []
    created_at: datetime
    updated_at: datetime
