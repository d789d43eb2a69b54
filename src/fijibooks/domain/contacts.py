"""Contact resolution for customers and suppliers."""

from dataclasses import dataclass
from typing import Optional, Sequence

from fijibooks.domain.entities import Contact, ContactRole, EntryType
from fijibooks.domain.errors import NotFoundError, ValidationError, contact_not_found
from fijibooks.log import get_logger
from fijibooks.utils.ids import generate_id

logger = get_logger(__name__)


@dataclass(frozen=True)
class ContactResolution:
    """Outcome of resolving a counterparty.

    ``created`` is True when ``contact`` is new and must be persisted.
    """

    contact: Contact
    created: bool


def contacts_for(
    contacts: Sequence[Contact], company_id: str, role: ContactRole
) -> list[Contact]:
    """Return a company's contacts with the given role, in stored order."""
    return [c for c in contacts if c.company_id == company_id and c.role == role]


def find_by_tin(
    contacts: Sequence[Contact], company_id: str, role: ContactRole, tin: str
) -> Optional[Contact]:
    """Find a contact by exact (trimmed) TIN. Empty TINs never match."""
    tin = tin.strip()
    if not tin:
        return None
    for contact in contacts_for(contacts, company_id, role):
        if contact.tin.strip() == tin:
            return contact
    return None


def new_contact(
    contacts: Sequence[Contact],
    company_id: str,
    role: ContactRole,
    name: str,
    tin: str = "",
) -> Contact:
    """Build a new contact for a company.

    Raises:
        ValidationError: If the name is empty
    """
    name = name.strip()
    if not name:
        raise ValidationError("Contact name is required")
    return Contact(
        id=generate_id({c.id for c in contacts}),
        company_id=company_id,
        name=name,
        tin=tin.strip(),
        role=role,
    )


def resolve_counterparty(
    contacts: Sequence[Contact],
    company_id: str,
    entry_type: EntryType,
    contact_id: Optional[str] = None,
    new_name: Optional[str] = None,
    new_tin: Optional[str] = None,
) -> ContactResolution:
    """Resolve the counterparty for an entry being saved.

    An existing ``contact_id`` must belong to the company's customers (for
    income) or suppliers (for expenses). Otherwise a contact is captured from
    ``new_name``/``new_tin``: an exact TIN match reuses the existing contact,
    anything else creates a new one.

    Args:
        contacts: All known contacts
        company_id: Owning company
        entry_type: Type of the entry, selecting the contact role
        contact_id: Identifier of an existing contact
        new_name: Name typed for a new contact
        new_tin: TIN typed for a new contact

    Returns:
        ContactResolution with the contact to attach

    Raises:
        NotFoundError: If contact_id is not one of the company's contacts
        ValidationError: If neither contact_id nor new_name is given
    """
    role = ContactRole.for_entry_type(entry_type)
    candidates = contacts_for(contacts, company_id, role)

    if contact_id:
        for contact in candidates:
            if contact.id == contact_id:
                return ContactResolution(contact=contact, created=False)
        raise NotFoundError(contact_not_found(contact_id, role.value))

    if not new_name or not new_name.strip():
        raise ValidationError(
            f"A {role.value.lower()} is required: choose an existing contact or enter a new name"
        )

    tin = (new_tin or "").strip()
    match = find_by_tin(contacts, company_id, role, tin)
    if match is not None:
        logger.info("contact_reused", contact_id=match.id, tin=tin)
        return ContactResolution(contact=match, created=False)

    contact = new_contact(contacts, company_id, role, new_name, tin)
    lowered = contact.name.lower()
    for existing in candidates:
        if existing.name.lower() == lowered:
            logger.warning(
                "possible_duplicate_contact",
                name=contact.name,
                existing_id=existing.id,
                existing_tin=existing.tin,
            )
            break
    return ContactResolution(contact=contact, created=True)
