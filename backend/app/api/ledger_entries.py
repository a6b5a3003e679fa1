"""Usage recording and ledger listing."""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.time import to_naive_utc
from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user
from backend.app.models.customer import Customer
from backend.app.models.item import Item
from backend.app.models.ledger_entry import BILLING_STATUSES, UNBILLED, LedgerEntry
from backend.app.models.user import User
from backend.app.schemas.ledger_entry import LedgerEntryCreate, LedgerEntryRead
from backend.app.services.entry_matching import overlaps_period, period_bounds

router = APIRouter(prefix="/ledger-entries", tags=["ledger"])


@router.post("", response_model=LedgerEntryRead, status_code=status.HTTP_201_CREATED)
def create_ledger_entry(
    payload: LedgerEntryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if payload.quantity <= 0:
        raise HTTPException(status_code=400, detail="Quantity must be a positive whole number.")
    start_date = to_naive_utc(payload.start_date)
    end_date = to_naive_utc(payload.end_date)
    if end_date is not None and end_date < start_date:
        raise HTTPException(status_code=400, detail="End date cannot be before start date.")

    item = db.get(Item, payload.item_id)
    if not item:
        raise HTTPException(status_code=404, detail=f"Item with ID {payload.item_id} not found.")
    customer = db.get(Customer, payload.customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail=f"Customer with ID {payload.customer_id} not found.")

    # Price and VAT are snapshotted so later item edits never reprice this entry
    entry = LedgerEntry(
        customer_id=customer.id,
        item_id=item.id,
        quantity=payload.quantity,
        start_date=start_date,
        end_date=end_date,
        recorded_price_without_vat=item.unit_price_without_vat,
        recorded_vat_rate=item.vat_rate,
        billing_status=UNBILLED,
        notes=payload.notes or None,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


@router.get("", response_model=List[LedgerEntryRead])
def list_ledger_entries(
    customer_id: int | None = None,
    billing_status: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(LedgerEntry)
    if customer_id:
        query = query.filter(LedgerEntry.customer_id == customer_id)
    if billing_status:
        if billing_status not in BILLING_STATUSES:
            raise HTTPException(status_code=400, detail="Invalid billing_status value")
        query = query.filter(LedgerEntry.billing_status == billing_status)
    entries = query.order_by(LedgerEntry.start_date.desc(), LedgerEntry.id.desc()).all()

    if start_date or end_date:
        period_start, period_end = period_bounds(start_date or date.min, end_date or date.max)
        entries = [e for e in entries if overlaps_period(e.start_date, e.end_date, period_start, period_end)]
    return entries
