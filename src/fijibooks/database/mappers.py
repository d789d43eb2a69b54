"""Mapper functions to convert between domain models and stored records.

Records use the camelCase field names of the persisted snapshot layout.
Amounts are written as decimal strings and accepted as strings or numbers.
"""

from datetime import date
from decimal import Decimal
from typing import Any

from fijibooks.domain import entities as domain
from fijibooks.domain.categories import VAT_RATE_FIJI


def _decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0.00")
    return Decimal(str(value))


def user_to_record(user: domain.User) -> dict[str, Any]:
    """Convert a domain User to its session record."""
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
    }


def user_from_record(record: dict[str, Any]) -> domain.User:
    """Convert a session record to a domain User."""
    return domain.User(
        id=record["id"],
        name=record["name"],
        email=record["email"],
        role=domain.UserRole(record["role"]),
    )


def company_to_record(company: domain.Company) -> dict[str, Any]:
    return {
        "id": company.id,
        "name": company.name,
        "tin": company.tin,
        "address": company.address,
        "phone": company.phone,
        "email": company.email,
        "vatRegistered": company.vat_registered,
        "vatRate": str(company.vat_rate),
    }


def company_from_record(record: dict[str, Any]) -> domain.Company:
    """Convert a stored company record to a domain Company.

    A record without a VAT rate gets the standard Fiji rate.
    """
    vat_rate = record.get("vatRate")
    if vat_rate is None or vat_rate == "":
        vat_rate = VAT_RATE_FIJI
    return domain.Company(
        id=record["id"],
        name=record["name"],
        tin=record.get("tin", ""),
        address=record.get("address", ""),
        phone=record.get("phone", ""),
        email=record.get("email", ""),
        vat_registered=bool(record.get("vatRegistered", True)),
        vat_rate=_decimal(vat_rate),
    )


def contact_to_record(contact: domain.Contact) -> dict[str, Any]:
    """Convert a Contact to a customer/supplier record (role is implied by the list)."""
    return {
        "id": contact.id,
        "companyId": contact.company_id,
        "name": contact.name,
        "tin": contact.tin,
    }


def contact_from_record(record: dict[str, Any], role: domain.ContactRole) -> domain.Contact:
    return domain.Contact(
        id=record["id"],
        company_id=record["companyId"],
        name=record["name"],
        tin=record.get("tin", ""),
        role=role,
    )


def entry_to_record(entry: domain.Entry) -> dict[str, Any]:
    """Convert a domain Entry to a stored entry record."""
    record = {
        "id": entry.id,
        "companyId": entry.company_id,
        "type": entry.type.value,
        "counterpartyId": entry.counterparty_id,
        "invoiceNo": entry.invoice_no,
        "date": entry.date.isoformat(),
        "subtotal": str(entry.subtotal),
        "vatAmount": str(entry.vat_amount),
        "totalAmount": str(entry.total_amount),
        "category": entry.category,
    }
    if entry.description is not None:
        record["description"] = entry.description
    return record


def entry_from_record(record: dict[str, Any]) -> domain.Entry:
    """Convert a stored entry record to a domain Entry."""
    return domain.Entry(
        id=record["id"],
        company_id=record["companyId"],
        type=domain.EntryType(record["type"]),
        counterparty_id=record.get("counterpartyId", ""),
        invoice_no=record.get("invoiceNo", ""),
        date=date.fromisoformat(record["date"]),
        subtotal=_decimal(record.get("subtotal")),
        vat_amount=_decimal(record.get("vatAmount")),
        total_amount=_decimal(record.get("totalAmount")),
        category=record.get("category", ""),
        description=record.get("description"),
    )


def state_to_snapshot(state: domain.AppState) -> dict[str, Any]:
    """Convert AppState to the full-state snapshot layout."""
    return {
        "companies": [company_to_record(c) for c in state.companies],
        "activeCompanyId": state.active_company_id,
        "entries": [entry_to_record(e) for e in state.entries],
        "customers": [
            contact_to_record(c)
            for c in state.contacts
            if c.role == domain.ContactRole.CUSTOMER
        ],
        "suppliers": [
            contact_to_record(c)
            for c in state.contacts
            if c.role == domain.ContactRole.SUPPLIER
        ],
    }


def state_from_snapshot(snapshot: dict[str, Any]) -> domain.AppState:
    """Convert a full-state snapshot to AppState.

    Missing lists are treated as empty. A missing active company falls back
    to the first registered company.
    """
    companies = tuple(company_from_record(r) for r in snapshot.get("companies") or [])
    active_company_id = snapshot.get("activeCompanyId") or (
        companies[0].id if companies else ""
    )
    contacts = tuple(
        contact_from_record(r, domain.ContactRole.CUSTOMER)
        for r in snapshot.get("customers") or []
    ) + tuple(
        contact_from_record(r, domain.ContactRole.SUPPLIER)
        for r in snapshot.get("suppliers") or []
    )
    return domain.AppState(
        companies=companies,
        active_company_id=active_company_id,
        entries=tuple(entry_from_record(r) for r in snapshot.get("entries") or []),
        contacts=contacts,
    )
