"""Company profile construction and validation."""

from dataclasses import replace
from decimal import Decimal, InvalidOperation
from typing import Any, Collection, Optional

from fijibooks.domain.categories import VAT_RATE_FIJI
from fijibooks.domain.entities import Company
from fijibooks.domain.errors import ValidationError, invalid_vat_rate
from fijibooks.utils.ids import generate_id


def parse_vat_rate(rate: Any) -> Decimal:
    """Validate a fractional VAT rate.

    Args:
        rate: Rate as Decimal, number or string (e.g. "0.125")

    Returns:
        Rate as Decimal

    Raises:
        ValidationError: If rate is not a number in [0, 1)
    """
    try:
        value = rate if isinstance(rate, Decimal) else Decimal(str(rate).strip())
    except InvalidOperation:
        raise ValidationError(invalid_vat_rate(rate))
    if not value.is_finite() or value < 0 or value >= 1:
        raise ValidationError(invalid_vat_rate(rate))
    return value


def _require(value: Optional[str], label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{label} is required")
    return value


def build_company(
    name: str,
    tin: str,
    address: str = "",
    phone: str = "",
    email: str = "",
    vat_registered: bool = True,
    vat_rate: Any = VAT_RATE_FIJI,
    existing_ids: Collection[str] = (),
) -> Company:
    """Create a new company profile with a fresh identifier.

    Raises:
        ValidationError: If name or TIN is missing or the VAT rate is invalid
    """
    return Company(
        id=generate_id(existing_ids),
        name=_require(name, "Business name"),
        tin=_require(tin, "TIN"),
        address=(address or "").strip(),
        phone=(phone or "").strip(),
        email=(email or "").strip(),
        vat_registered=vat_registered,
        vat_rate=parse_vat_rate(vat_rate),
    )


def update_profile(company: Company, **changes: Any) -> Company:
    """Replace profile fields, keeping the company's identity.

    Unknown field names or an attempt to change ``id`` raise ValidationError.
    """
    if "id" in changes:
        raise ValidationError("Company identity cannot change")
    allowed = {"name", "tin", "address", "phone", "email", "vat_registered", "vat_rate"}
    unknown = set(changes) - allowed
    if unknown:
        raise ValidationError(f"Unknown company fields: {', '.join(sorted(unknown))}")

    if "name" in changes:
        changes["name"] = _require(changes["name"], "Business name")
    if "tin" in changes:
        changes["tin"] = _require(changes["tin"], "TIN")
    if "vat_rate" in changes:
        changes["vat_rate"] = parse_vat_rate(changes["vat_rate"])
    for key in ("address", "phone", "email"):
        if key in changes:
            changes[key] = (changes[key] or "").strip()
    return replace(company, **changes)
