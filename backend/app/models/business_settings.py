from sqlalchemy import Column, DateTime, Integer, String, Text

from backend.app.db.base_class import Base
from backend.app.core.time import utc_now


class BusinessSettings(Base):
    __tablename__ = "business_settings"

    id = Column(Integer, primary_key=True, index=True)
    business_name = Column(String, nullable=True)
    default_currency = Column(String(3), nullable=False, default="EUR")
    address = Column(Text, nullable=True)
    vat_id = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)
