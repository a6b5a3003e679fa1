from typing import Optional

from pydantic import BaseModel, ConfigDict


class BusinessSettingsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    business_name: Optional[str] = None
    default_currency: str
    address: Optional[str] = None
    vat_id: Optional[str] = None


class BusinessSettingsUpdate(BaseModel):
    business_name: Optional[str] = None
    default_currency: Optional[str] = None
    address: Optional[str] = None
    vat_id: Optional[str] = None
