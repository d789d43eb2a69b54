"""Application state and the controller that owns it.

``AppState`` is an immutable snapshot. ``Bookkeeper`` holds the current
snapshot, applies commands by building a new one, and persists every new
snapshot as a unit.
"""

from dataclasses import replace
from typing import Any, Optional

from fijibooks.database.base import Database
from fijibooks.domain.company import build_company, update_profile
from fijibooks.domain.contacts import contacts_for, find_by_tin, new_contact
from fijibooks.domain.entities import (
    AppState,
    Company,
    Contact,
    ContactRole,
    Entry,
    User,
    UserRole,
)
from fijibooks.domain.entry import EntryDraft, EntryService
from fijibooks.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    company_not_found,
    no_active_company,
)
from fijibooks.domain.ledger import EntryLedger
from fijibooks.log import get_logger
from fijibooks.utils.ids import generate_id

logger = get_logger(__name__)


class Bookkeeper:
    """Controller exposing command methods over the application state."""

    def __init__(self, db: Database):
        """Load the persisted state once.

        Args:
            db: Database instance
        """
        self.db = db
        self.state = db.load_state() or AppState()

    def _commit(self, state: AppState) -> AppState:
        self.db.save_state(state)
        self.state = state
        return state

    # Session
    def login(self, name: str, email: str, role: UserRole = UserRole.BOSS) -> User:
        """Start a local session. No credentials are checked."""
        name = name.strip()
        email = email.strip()
        if not name or not email:
            raise ValidationError("Name and email are required to sign in")
        user = User(id=generate_id(), name=name, email=email, role=role)
        self.db.save_session(user)
        logger.info("user_logged_in", user_id=user.id, role=role.value)
        return user

    def logout(self) -> None:
        self.db.clear_session()

    def current_user(self) -> Optional[User]:
        return self.db.load_session()

    # Queries
    def require_active_company(self) -> Company:
        """Return the active company.

        Raises:
            NotFoundError: If no company is active
        """
        company = self.state.active_company
        if company is None:
            raise NotFoundError(no_active_company())
        return company

    def company_entries(self, company_id: Optional[str] = None) -> list[Entry]:
        """Entries of a company (the active one by default), most recent first."""
        company_id = company_id or self.require_active_company().id
        return EntryLedger(self.state.entries).by_company(company_id)

    def contacts_for(self, role: ContactRole, company_id: Optional[str] = None) -> list[Contact]:
        company_id = company_id or self.require_active_company().id
        return contacts_for(self.state.contacts, company_id, role)

    def get_contact(self, contact_id: str) -> Optional[Contact]:
        for contact in self.state.contacts:
            if contact.id == contact_id:
                return contact
        return None

    # Commands
    def register_company(self, **profile: Any) -> AppState:
        """Register a company and make it the active one.

        Raises:
            ValidationError: If the profile is invalid
        """
        company = build_company(
            existing_ids={c.id for c in self.state.companies}, **profile
        )
        logger.info("company_registered", company_id=company.id, name=company.name)
        return self._commit(
            replace(
                self.state,
                companies=self.state.companies + (company,),
                active_company_id=company.id,
            )
        )

    def update_company(self, company_id: str, **changes: Any) -> AppState:
        """Replace a company's profile fields.

        Raises:
            NotFoundError: If the company does not exist
            ValidationError: If the new profile is invalid
        """
        company = self.state.get_company(company_id)
        if company is None:
            raise NotFoundError(company_not_found(company_id))
        updated = update_profile(company, **changes)
        logger.info("company_updated", company_id=company_id, fields=sorted(changes))
        return self._commit(
            replace(
                self.state,
                companies=tuple(updated if c.id == company_id else c for c in self.state.companies),
            )
        )

    def switch_company(self, company_id: str) -> AppState:
        """Make another registered company the active one.

        Raises:
            NotFoundError: If the company does not exist
        """
        if self.state.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))
        return self._commit(replace(self.state, active_company_id=company_id))

    def add_contact(self, role: ContactRole, name: str, tin: str = "") -> AppState:
        """Add a customer or supplier to the active company.

        Raises:
            ConflictError: If a contact with the same role already has this TIN
            ValidationError: If the name is empty
        """
        company = self.require_active_company()
        existing = find_by_tin(self.state.contacts, company.id, role, tin)
        if existing is not None:
            raise ConflictError(
                f"{role.value.capitalize()} '{existing.name}' already has TIN {existing.tin}"
            )
        contact = new_contact(self.state.contacts, company.id, role, name, tin)
        logger.info("contact_created", contact_id=contact.id, role=role.value)
        return self._commit(replace(self.state, contacts=self.state.contacts + (contact,)))

    def add_entry(self, draft: EntryDraft) -> AppState:
        """Save a draft as a new entry of the active company.

        A counterparty typed as a new contact is created in the same commit.
        The new entry is ``state.entries[0]`` of the returned state.

        Raises:
            ValidationError: If the draft is incomplete or inconsistent
            NotFoundError: If there is no active company or the selected
                counterparty does not exist
        """
        company = self.require_active_company()
        saved = EntryService(company, self.state.contacts).create_entry(draft)

        contacts = self.state.contacts
        if saved.counterparty.created:
            contacts = contacts + (saved.counterparty.contact,)
            logger.info(
                "contact_created",
                contact_id=saved.counterparty.contact.id,
                role=saved.counterparty.contact.role.value,
            )

        ledger = EntryLedger(self.state.entries)
        entry = ledger.add(saved.entry)
        logger.info(
            "entry_added",
            entry_id=entry.id,
            company_id=company.id,
            type=entry.type.value,
            total=str(entry.total_amount),
        )
        return self._commit(replace(self.state, entries=ledger.entries, contacts=contacts))
