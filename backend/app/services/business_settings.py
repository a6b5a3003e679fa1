"""Business settings row: seeding, loading and conversion to the value the assembler takes."""

from typing import Optional

from sqlalchemy.orm import Session

from backend.app.core.settings import Settings
from backend.app.models.business_settings import BusinessSettings
from backend.app.services.invoice_generation import BusinessDetails
from backend.app.services.invoice_numbering import ensure_invoice_sequence


def get_business_settings(db: Session) -> Optional[BusinessSettings]:
    return db.query(BusinessSettings).order_by(BusinessSettings.id.asc()).first()


def ensure_business_settings(db: Session, settings: Settings) -> BusinessSettings:
    """Create the settings row from configuration defaults when it does not exist yet.

    The invoice counter row is seeded alongside it.
    """
    ensure_invoice_sequence(db)
    row = get_business_settings(db)
    if row is None:
        row = BusinessSettings(
            business_name=settings.business_name or None,
            default_currency=settings.default_currency,
            address=settings.business_address or None,
            vat_id=settings.business_vat_id or None,
        )
        db.add(row)
    db.commit()
    db.refresh(row)
    return row


def to_business_details(row: Optional[BusinessSettings]) -> Optional[BusinessDetails]:
    if row is None:
        return None
    return BusinessDetails(
        business_name=row.business_name,
        default_currency=row.default_currency,
        address=row.address,
        vat_id=row.vat_id,
    )
