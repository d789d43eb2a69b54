"""Money model: VAT-inclusive and VAT-exclusive conversions.

All amounts are ``Decimal`` values in FJD. Results are rounded to cents
independently, so ``net + vat`` may differ from the gross figure by one
cent after a round trip. That drift is accepted and never corrected.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from fijibooks.domain.errors import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def _coerce(value: Any) -> Decimal:
    """Coerce user input to a non-negative Decimal, unrounded.

    Empty, malformed, negative or non-finite values become zero.
    """
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        amount = value
    else:
        text = str(value).strip()
        if not text:
            return Decimal(0)
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return Decimal(0)
    if not amount.is_finite() or amount < 0:
        return Decimal(0)
    return amount


def round_money(amount: Decimal) -> Decimal:
    """Round to currency minor units (half up)."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def to_money(value: Any) -> Decimal:
    """Leniently convert input to a cent-rounded amount."""
    return round_money(_coerce(value))


def _rate(rate: Any) -> Decimal:
    try:
        value = rate if isinstance(rate, Decimal) else Decimal(str(rate))
    except InvalidOperation:
        raise ValidationError(f"Invalid VAT rate '{rate}'")
    if not value.is_finite() or value < 0:
        raise ValidationError(f"VAT rate must not be negative, got {rate}")
    return value


def from_gross(total: Any, rate: Any) -> tuple[Decimal, Decimal]:
    """Split a VAT-inclusive total into ``(net, vat)``.

    Args:
        total: Gross amount including VAT
        rate: Fractional VAT rate (e.g. 0.125)

    Returns:
        Tuple of (net, vat), each rounded to cents

    Raises:
        ValidationError: If rate is negative or not a number
    """
    gross = _coerce(total)
    r = _rate(rate)
    vat = gross * r / (1 + r)
    net = gross - vat
    return round_money(net), round_money(vat)


def from_net(net: Any, rate: Any) -> tuple[Decimal, Decimal]:
    """Add VAT to a net amount, returning ``(vat, total)``.

    Args:
        net: Amount excluding VAT
        rate: Fractional VAT rate (e.g. 0.125)

    Returns:
        Tuple of (vat, total), each rounded to cents

    Raises:
        ValidationError: If rate is negative or not a number
    """
    amount = _coerce(net)
    r = _rate(rate)
    vat = amount * r
    total = amount + vat
    return round_money(vat), round_money(total)


def totals_consistent(subtotal: Decimal, vat_amount: Decimal, total_amount: Decimal) -> bool:
    """Check ``total == subtotal + vat`` within one cent."""
    return abs(subtotal + vat_amount - total_amount) <= CENT
