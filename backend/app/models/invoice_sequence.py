from sqlalchemy import Column, Integer, String

from backend.app.db.base_class import Base


class InvoiceSequence(Base):
    """Named monotonic counter backing invoice numbers."""

    __tablename__ = "invoice_sequences"

    name = Column(String, primary_key=True)
    last_value = Column(Integer, nullable=False, default=0)
