"""Aggregation over ledger entries for dashboard and report views.

Every function is pure and recomputes from the full entry set it is given.
"""

from collections import defaultdict
from datetime import MAXYEAR, MINYEAR, date, datetime, timedelta, UTC
from decimal import Decimal
from typing import Optional, Sequence

from dateutil.relativedelta import relativedelta

from fijibooks.domain.entities import (
    AlertStatus,
    CategoryTotal,
    DashboardSummary,
    DeadlineAlert,
    Entry,
    EntryType,
    MonthlyTotals,
    TaxPeriod,
    VatSummary,
)
from fijibooks.domain.errors import ValidationError
from fijibooks.domain.ledger import by_type

URGENT_WITHIN_DAYS = 7
DASHBOARD_TOP_CATEGORIES = 4
DASHBOARD_TREND_MONTHS = 4


def total_by_type(entries: Sequence[Entry], entry_type: EntryType) -> Decimal:
    """Sum ``total_amount`` over entries of one type."""
    return sum((e.total_amount for e in by_type(entries, entry_type)), Decimal("0.00"))


def estimated_vat_payable(entries: Sequence[Entry]) -> Decimal:
    """Output VAT (income) minus input VAT (expenses).

    A negative result is a refund position, not an error.
    """
    payable = Decimal("0.00")
    for entry in entries:
        if entry.type == EntryType.INCOME:
            payable += entry.vat_amount
        else:
            payable -= entry.vat_amount
    return payable


def top_categories(entries: Sequence[Entry], n: int) -> list[CategoryTotal]:
    """Return the ``n`` categories with the highest summed totals.

    ``entries`` are in ledger order, most recent first. Ties go to the
    category whose first entry was recorded earliest.
    """
    if n <= 0:
        return []

    totals: dict[str, Decimal] = {}
    for entry in reversed(entries):
        totals[entry.category] = totals.get(entry.category, Decimal("0.00")) + entry.total_amount

    # sorted() is stable, so equal totals stay in insertion order
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [CategoryTotal(category=name, total=total) for name, total in ranked[:n]]


def group_entries_by_month(entries: Sequence[Entry]) -> dict[str, list[Entry]]:
    """Group entries by YYYY-MM key."""
    grouped: dict[str, list[Entry]] = defaultdict(list)
    for entry in entries:
        grouped[entry.date.strftime("%Y-%m")].append(entry)
    return dict(grouped)


def monthly_trend(entries: Sequence[Entry], months: int) -> list[MonthlyTotals]:
    """Income and expense totals for the latest ``months`` months with data.

    Returns oldest month first.
    """
    grouped = group_entries_by_month(entries)
    keys = sorted(grouped.keys())[-months:] if months > 0 else []
    return [
        MonthlyTotals(
            month=key,
            income=total_by_type(grouped[key], EntryType.INCOME),
            expense=total_by_type(grouped[key], EntryType.EXPENSE),
        )
        for key in keys
    ]


def period_entries(entries: Sequence[Entry], period: TaxPeriod) -> list[Entry]:
    """Entries of the period's company dated within its month."""
    return [
        e
        for e in entries
        if e.company_id == period.company_id
        and e.date.year == period.year
        and e.date.month == period.month
    ]


def vat_summary(
    entries: Sequence[Entry],
    period: TaxPeriod,
    generated_at: Optional[datetime] = None,
) -> VatSummary:
    """Compute the VAT return figures for one monthly period.

    Raises:
        ValidationError: If the period month is not 1-12
    """
    if not 1 <= period.month <= 12:
        raise ValidationError(f"Invalid month {period.month}, expected 1-12")
    # The due date lies in the following month
    if not MINYEAR <= period.year < MAXYEAR:
        raise ValidationError(f"Invalid year {period.year}, expected {MINYEAR}-{MAXYEAR - 1}")

    in_period = period_entries(entries, period)
    output_vat = sum((e.vat_amount for e in by_type(in_period, EntryType.INCOME)), Decimal("0.00"))
    input_vat = sum((e.vat_amount for e in by_type(in_period, EntryType.EXPENSE)), Decimal("0.00"))
    return VatSummary(
        period=period,
        output_vat=output_vat,
        input_vat=input_vat,
        vat_payable=output_vat - input_vat,
        generated_at=generated_at or datetime.now(UTC),
    )


def previous_month(today: date) -> date:
    """First day of the month before ``today``."""
    return today.replace(day=1) - relativedelta(months=1)


def return_due_date(year: int, month: int) -> date:
    """A monthly VAT return is due on the last day of the following month."""
    first_of_following = date(year, month, 1) + relativedelta(months=1)
    return first_of_following + relativedelta(months=1) - timedelta(days=1)


def filing_alerts(entries: Sequence[Entry], today: date) -> list[DeadlineAlert]:
    """Build compliance alerts for the dashboard.

    The previous month's return is always reported while it is due; it is
    urgent once the due date is a week away or has passed. A refund position
    in the current month is reported for information.
    """
    alerts: list[DeadlineAlert] = []

    previous = previous_month(today)
    due = return_due_date(previous.year, previous.month)
    days_left = (due - today).days
    status = AlertStatus.URGENT if days_left <= URGENT_WITHIN_DAYS else AlertStatus.INFO
    alerts.append(
        DeadlineAlert(
            title=f"VAT return for {previous.strftime('%B %Y')}",
            due_date=due,
            status=status,
        )
    )

    current = [e for e in entries if e.date.year == today.year and e.date.month == today.month]
    if current and estimated_vat_payable(current) < 0:
        alerts.append(
            DeadlineAlert(
                title=f"VAT refund position for {today.strftime('%B %Y')}",
                due_date=return_due_date(today.year, today.month),
                status=AlertStatus.INFO,
            )
        )

    return alerts


def build_dashboard(entries: Sequence[Entry], today: Optional[date] = None) -> DashboardSummary:
    """Summarise one company's entries for the dashboard view."""
    today = today or date.today()
    expenses = by_type(entries, EntryType.EXPENSE)
    return DashboardSummary(
        total_income=total_by_type(entries, EntryType.INCOME),
        total_expense=total_by_type(entries, EntryType.EXPENSE),
        vat_payable=estimated_vat_payable(entries),
        entry_count=len(entries),
        top_expense_categories=tuple(top_categories(expenses, DASHBOARD_TOP_CATEGORIES)),
        monthly_trend=tuple(monthly_trend(entries, DASHBOARD_TREND_MONTHS)),
        alerts=tuple(filing_alerts(entries, today)),
    )
