"""Entry ledger: append-only, most-recent-first collection of entries."""

from dataclasses import replace
from datetime import date
from typing import Iterable, Optional, Sequence

from fijibooks.domain.entities import Entry, EntryType
from fijibooks.domain.errors import ValidationError, duplicate_entry_id
from fijibooks.utils.ids import generate_id


class EntryLedger:
    """In-memory ledger of entries.

    Entries are kept most-recent-first. There is no update or delete; the
    surrounding application persists the ledger after each ``add``.
    """

    def __init__(self, entries: Iterable[Entry] = ()):
        self._entries: list[Entry] = list(entries)

    @property
    def entries(self) -> tuple[Entry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, entry: Entry) -> Entry:
        """Prepend an entry, assigning an identifier if it has none.

        Args:
            entry: Entry to record

        Returns:
            The stored entry (with its identifier)

        Raises:
            ValidationError: If company, type or total is missing or invalid,
                or the identifier is already taken
        """
        if not entry.company_id:
            raise ValidationError("Entry must belong to a company")
        if not isinstance(entry.type, EntryType):
            raise ValidationError(f"Invalid entry type '{entry.type}'")
        if entry.total_amount is None or entry.total_amount < 0:
            raise ValidationError("Entry total must not be negative")

        existing_ids = {e.id for e in self._entries}
        if entry.id is None:
            entry = replace(entry, id=generate_id(existing_ids))
        elif entry.id in existing_ids:
            raise ValidationError(duplicate_entry_id(entry.id))

        self._entries.insert(0, entry)
        return entry

    def by_company(self, company_id: str) -> list[Entry]:
        """Return all entries of a company, preserving stored order."""
        return [e for e in self._entries if e.company_id == company_id]


def by_type(entries: Sequence[Entry], entry_type: EntryType) -> list[Entry]:
    """Filter entries to INCOME or EXPENSE."""
    return [e for e in entries if e.type == entry_type]


def by_date_range(
    entries: Sequence[Entry],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list[Entry]:
    """Filter entries to an inclusive date range; open ends are unbounded."""
    result = []
    for entry in entries:
        if start_date is not None and entry.date < start_date:
            continue
        if end_date is not None and entry.date > end_date:
            continue
        result.append(entry)
    return result
