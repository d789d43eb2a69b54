"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "FJD 123.45"
    - "1,234.56"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if amount_str is None or not str(amount_str).strip():
        raise ValueError("Empty amount string")

    amount_str = str(amount_str).strip()

    # Remove currency markers
    amount_str = re.sub(r"(?i)^fjd\s*|[$]", "", amount_str)

    # Remove thousands separators
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Amount '{amount_str}' is not a finite number")
    return amount


def parse_amount_or_zero(amount_str) -> Decimal:
    """Parse an amount, treating empty or malformed input as zero."""
    try:
        return parse_amount(amount_str)
    except ValueError:
        return Decimal(0)
