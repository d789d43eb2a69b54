"""Domain model entities for fijibooks.

These are pure data classes representing business concepts, independent of
how the state snapshot is stored. Every entity is immutable; changes produce
new instances.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class EntryType(str, Enum):
    """Direction of a ledger entry."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class ContactRole(str, Enum):
    """Role a contact plays for its company."""

    CUSTOMER = "CUSTOMER"
    SUPPLIER = "SUPPLIER"

    @classmethod
    def for_entry_type(cls, entry_type: EntryType) -> "ContactRole":
        """Customers are counterparties of income, suppliers of expenses."""
        if entry_type == EntryType.INCOME:
            return cls.CUSTOMER
        return cls.SUPPLIER


class UserRole(str, Enum):
    """Role of the signed-in user."""

    BOSS = "BOSS"
    STAFF = "STAFF"
    ACCOUNTANT = "ACCOUNTANT"


class PeriodStatus(str, Enum):
    OPEN = "OPEN"
    FILED = "FILED"


class AlertStatus(str, Enum):
    URGENT = "urgent"
    INFO = "info"


@dataclass(frozen=True)
class User:
    """Signed-in user for the local session."""

    id: str
    name: str
    email: str
    role: UserRole


@dataclass(frozen=True)
class Company:
    """Registered business profile."""

    id: str
    name: str
    tin: str
    address: str
    phone: str
    email: str
    vat_registered: bool
    vat_rate: Decimal


@dataclass(frozen=True)
class Contact:
    """Customer or supplier of a company, distinguished by role."""

    id: str
    company_id: str
    name: str
    tin: str
    role: ContactRole


@dataclass(frozen=True)
class Entry:
    """Sales or expense document recorded in the ledger.

    ``id`` is None until the ledger assigns one.
    """

    id: Optional[str]
    company_id: str
    type: EntryType
    counterparty_id: str
    invoice_no: str
    date: date
    subtotal: Decimal
    vat_amount: Decimal
    total_amount: Decimal
    category: str
    description: Optional[str] = None


@dataclass(frozen=True)
class TaxPeriod:
    """Monthly VAT filing window."""

    company_id: str
    month: int
    year: int
    status: PeriodStatus = PeriodStatus.OPEN

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True)
class VatSummary:
    """Output/input VAT position for one tax period."""

    period: TaxPeriod
    output_vat: Decimal
    input_vat: Decimal
    vat_payable: Decimal
    generated_at: datetime


@dataclass(frozen=True)
class DeadlineAlert:
    title: str
    due_date: date
    status: AlertStatus


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    total: Decimal


@dataclass(frozen=True)
class MonthlyTotals:
    """Income and expense totals for one YYYY-MM month."""

    month: str
    income: Decimal
    expense: Decimal


@dataclass(frozen=True)
class AppState:
    """Everything the application persists apart from the session.

    Entries are most-recent-first; contacts hold customers and suppliers.
    """

    companies: tuple[Company, ...] = ()
    active_company_id: str = ""
    entries: tuple[Entry, ...] = ()
    contacts: tuple[Contact, ...] = ()

    def get_company(self, company_id: str) -> Optional[Company]:
        for company in self.companies:
            if company.id == company_id:
                return company
        return None

    @property
    def active_company(self) -> Optional[Company]:
        return self.get_company(self.active_company_id)


@dataclass(frozen=True)
class DashboardSummary:
    """Everything the dashboard view shows, derived from one entry set."""

    total_income: Decimal
    total_expense: Decimal
    vat_payable: Decimal
    entry_count: int
    top_expense_categories: tuple[CategoryTotal, ...] = ()
    monthly_trend: tuple[MonthlyTotals, ...] = ()
    alerts: tuple[DeadlineAlert, ...] = ()
