"""Domain layer for fijibooks application."""

from fijibooks.domain.ledger import EntryLedger
from fijibooks.domain.entry import EntryDraft, EntryService

__all__ = [
    "EntryLedger",
    "EntryDraft",
    "EntryService",
]
