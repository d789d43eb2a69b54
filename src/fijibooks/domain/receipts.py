"""Receipt scan results and how they pre-fill an entry draft.

A scan is a best-effort extraction and is never trusted on its own: it only
fills a draft that the user reviews before saving.
"""

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from fijibooks.domain.entry import EntryDraft


class ReceiptScanError(Exception):
    """Scanning failed; the draft stays open for manual entry."""


@dataclass(frozen=True)
class ReceiptScan:
    """Fields extracted from a receipt image. Any field may be absent."""

    invoice_no: Optional[str] = None
    counterparty_name: Optional[str] = None
    tin: Optional[str] = None
    date: Optional[date] = None
    total_amount: Optional[Decimal] = None
    vat_amount: Optional[Decimal] = None
    suggested_category: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in self.__dataclass_fields__)


def apply_scan(draft: EntryDraft, scan: ReceiptScan, rate: Any) -> EntryDraft:
    """Return a new draft pre-filled from a scan.

    Absent fields keep the draft's current values; in particular a missing
    total leaves the amounts blank rather than zero. A present total derives
    net and VAT at the company rate, so the scan's own VAT figure is only
    informational. The input draft is never modified.
    """
    updated = draft
    if scan.total_amount is not None and scan.total_amount > 0:
        updated = updated.with_total(scan.total_amount, rate)

    changes: dict[str, Any] = {}
    if scan.invoice_no:
        changes["invoice_no"] = scan.invoice_no
    if scan.counterparty_name:
        changes["counterparty_id"] = None
        changes["new_counterparty_name"] = scan.counterparty_name
    if scan.tin:
        changes["new_counterparty_tin"] = scan.tin
    if scan.date is not None:
        changes["date"] = scan.date
    if scan.suggested_category:
        changes["category"] = scan.suggested_category
    return replace(updated, **changes)
