"""Suggested entry categories and tax constants for Fiji businesses."""

from decimal import Decimal

from fijibooks.domain.entities import EntryType

VAT_RATE_FIJI = Decimal("0.125")

INCOME_CATEGORIES = (
    "Sales - Goods",
    "Sales - Services",
    "Rental Income",
    "Other Income",
)

EXPENSE_CATEGORIES = (
    "Purchases (Trading Stock)",
    "Rent & Rates",
    "Electricity & Water",
    "Salaries & Wages",
    "Transport & Freight",
    "Telecommunications",
    "Repairs & Maintenance",
    "Office Supplies",
    "Other Expenses",
)


def suggested_categories(entry_type: EntryType) -> tuple[str, ...]:
    """Return the suggested category list for an entry type."""
    if entry_type == EntryType.INCOME:
        return INCOME_CATEGORIES
    return EXPENSE_CATEGORIES


def default_category(entry_type: EntryType) -> str:
    return suggested_categories(entry_type)[0]
