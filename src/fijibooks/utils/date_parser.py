"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports ISO and free-form absolute dates ("2024-01-15", "15 Jan 2024")
    and a few relative forms: "today", "yesterday", "this month",
    "last month", "this year", "last year". Day-first is preferred for
    ambiguous numeric dates, as printed on Fiji receipts.

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        # ISO dates are unambiguous; dayfirst only applies to other forms
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    try:
        return date_parser.parse(date_str, dayfirst=True).date()
    except (ValueError, OverflowError, TypeError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def month_range(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a month.

    Raises:
        ValueError: If month is not 1-12
    """
    start = date(year, month, 1)
    end = start + relativedelta(months=1) - timedelta(days=1)
    return start, end


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: One of this-month, last-month, this-year, last-year

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return today.replace(day=1), today

    elif period == "last-month":
        previous = today.replace(day=1) - relativedelta(months=1)
        return month_range(previous.year, previous.month)

    elif period == "this-year":
        return today.replace(month=1, day=1), today

    elif period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        return start_date, today.replace(month=1, day=1) - timedelta(days=1)

    else:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: this-month, last-month, this-year, last-year"
        )
