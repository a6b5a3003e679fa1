from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.errors import ValidationError
from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user
from backend.app.models.user import User
from backend.app.schemas.business_settings import BusinessSettingsRead, BusinessSettingsUpdate
from backend.app.services.business_settings import get_business_settings
from backend.app.services.invoice_generation import normalize_currency

router = APIRouter(prefix="/settings", tags=["settings"])


def _get_settings_or_404(db: Session):
    settings = get_business_settings(db)
    if not settings:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Business settings not found.")
    return settings


@router.get("", response_model=BusinessSettingsRead)
def read_business_settings(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_settings_or_404(db)


@router.put("", response_model=BusinessSettingsRead)
def update_business_settings(
    payload: BusinessSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    settings = _get_settings_or_404(db)
    if payload.business_name is not None:
        settings.business_name = payload.business_name.strip() or None
    if payload.default_currency is not None:
        try:
            settings.default_currency = normalize_currency(payload.default_currency, "default currency")
        except ValidationError as exc:
            raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    if payload.address is not None:
        settings.address = payload.address.strip() or None
    if payload.vat_id is not None:
        settings.vat_id = payload.vat_id.strip() or None
    db.commit()
    db.refresh(settings)
    return settings
