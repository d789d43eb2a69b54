"""Entry drafts and the save path from draft to ledger entry."""

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence

from fijibooks.domain.categories import default_category
from fijibooks.domain.contacts import ContactResolution, resolve_counterparty
from fijibooks.domain.entities import Company, Contact, Entry, EntryType
from fijibooks.domain.errors import ValidationError
from fijibooks.domain.money import from_gross, from_net, to_money, totals_consistent
from fijibooks.utils.amount_parser import parse_amount_or_zero


@dataclass(frozen=True)
class EntryDraft:
    """An entry being prepared, before it is saved.

    Amounts are None while the user has not provided them. Editing either the
    net or the gross figure recomputes the other two through the money model.
    """

    type: EntryType
    date: date
    invoice_no: str = ""
    counterparty_id: Optional[str] = None
    new_counterparty_name: str = ""
    new_counterparty_tin: str = ""
    subtotal: Optional[Decimal] = None
    vat_amount: Optional[Decimal] = None
    total_amount: Optional[Decimal] = None
    category: str = ""
    description: Optional[str] = None

    @classmethod
    def blank(cls, entry_type: EntryType, on: Optional[date] = None) -> "EntryDraft":
        """Start a draft dated today with the default category for its type."""
        return cls(
            type=entry_type,
            date=on or date.today(),
            category=default_category(entry_type),
        )

    def with_total(self, raw: Any, rate: Any) -> "EntryDraft":
        """Set the gross figure and derive net and VAT from it."""
        total = to_money(parse_amount_or_zero(raw))
        net, vat = from_gross(total, rate)
        return replace(self, total_amount=total, subtotal=net, vat_amount=vat)

    def with_subtotal(self, raw: Any, rate: Any) -> "EntryDraft":
        """Set the net figure and derive VAT and total from it."""
        net = to_money(parse_amount_or_zero(raw))
        vat, total = from_net(net, rate)
        return replace(self, subtotal=net, vat_amount=vat, total_amount=total)


@dataclass(frozen=True)
class SavedEntry:
    """Entry built from a draft, plus the counterparty it resolved to."""

    entry: Entry
    counterparty: ContactResolution


class EntryService:
    """Service for turning drafts into ledger entries."""

    def __init__(self, company: Company, contacts: Sequence[Contact]):
        """Initialize entry service.

        Args:
            company: Company the entries are recorded for
            contacts: All known contacts
        """
        self.company = company
        self.contacts = contacts

    def create_entry(self, draft: EntryDraft) -> SavedEntry:
        """Validate a draft and build the entry to add to the ledger.

        The entry has no identifier yet; the ledger assigns one.

        Args:
            draft: Completed draft

        Returns:
            SavedEntry with the entry and its resolved counterparty

        Raises:
            ValidationError: If the total is missing or zero, amounts are
                inconsistent, or the reference number is empty
            NotFoundError: If the selected counterparty does not exist
        """
        if draft.total_amount is None:
            raise ValidationError("Total amount is required")
        if draft.total_amount <= 0:
            raise ValidationError("Total amount must be greater than zero")
        if not draft.invoice_no.strip():
            raise ValidationError("Invoice/reference number is required")

        subtotal = draft.subtotal
        vat_amount = draft.vat_amount
        if subtotal is None or vat_amount is None:
            subtotal, vat_amount = from_gross(draft.total_amount, self.company.vat_rate)
        if not totals_consistent(subtotal, vat_amount, draft.total_amount):
            raise ValidationError(
                f"Net {subtotal} plus VAT {vat_amount} does not match total {draft.total_amount}"
            )

        resolution = resolve_counterparty(
            self.contacts,
            company_id=self.company.id,
            entry_type=draft.type,
            contact_id=draft.counterparty_id,
            new_name=draft.new_counterparty_name,
            new_tin=draft.new_counterparty_tin,
        )

        entry = Entry(
            id=None,
            company_id=self.company.id,
            type=draft.type,
            counterparty_id=resolution.contact.id,
            invoice_no=draft.invoice_no.strip(),
            date=draft.date,
            subtotal=subtotal,
            vat_amount=vat_amount,
            total_amount=draft.total_amount,
            category=draft.category.strip() or default_category(draft.type),
            description=draft.description or None,
        )
        return SavedEntry(entry=entry, counterparty=resolution)
