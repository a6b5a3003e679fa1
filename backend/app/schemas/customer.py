from typing import Optional

from pydantic import BaseModel, ConfigDict


class CustomerSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    company_name: Optional[str] = None


class CustomerRead(CustomerSummary):
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    vat_id: Optional[str] = None
