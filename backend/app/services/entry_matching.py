"""Selection of ledger entries eligible for billing in a period."""

from datetime import date, datetime, time
from typing import List

from sqlalchemy.orm import Session

from backend.app.models.item import Item
from backend.app.models.ledger_entry import UNBILLED, LedgerEntry
from backend.app.services.line_items import BillableEntry


def period_bounds(start: date, end: date) -> tuple[datetime, datetime]:
    """Expand a calendar-date period to the first and last instant it covers."""
    return datetime.combine(start, time.min), datetime.combine(end, time.max)


def overlaps_period(
    entry_start: datetime,
    entry_end: datetime | None,
    period_start: datetime,
    period_end: datetime,
) -> bool:
    """Interval overlap test; an entry with no end is treated as ongoing."""
    if entry_start > period_end:
        return False
    return entry_end is None or entry_end >= period_start


def to_billable_entry(entry: LedgerEntry) -> BillableEntry:
    item = entry.item
    return BillableEntry(
        entry_id=entry.id,
        customer_id=entry.customer_id,
        quantity=entry.quantity,
        start_date=entry.start_date,
        end_date=entry.end_date,
        recorded_price_without_vat=entry.recorded_price_without_vat,
        recorded_vat_rate=entry.recorded_vat_rate,
        item_name=item.name if item else "",
        item_unit=item.unit if item else "",
        item_currency=item.currency if item else None,
        item_duration_type=item.duration_type if item else None,
    )


def match_unbilled_entries(
    db: Session,
    customer_id: int,
    period_start: datetime,
    period_end: datetime,
    lock: bool = False,
) -> List[BillableEntry]:
    """Return unbilled entries of a customer overlapping the period, oldest first.

    With ``lock`` the candidate rows are selected ``FOR UPDATE`` on stores that
    support row locks.
    """
    query = (
        db.query(LedgerEntry)
        .join(Item, LedgerEntry.item_id == Item.id)
        .filter(
            LedgerEntry.customer_id == customer_id,
            LedgerEntry.billing_status == UNBILLED,
            LedgerEntry.start_date <= period_end,
        )
        .order_by(LedgerEntry.start_date.asc(), LedgerEntry.id.asc())
    )
    if lock:
        query = query.with_for_update(of=LedgerEntry)

    return [
        to_billable_entry(entry)
        for entry in query.all()
        if overlaps_period(entry.start_date, entry.end_date, period_start, period_end)
    ]
