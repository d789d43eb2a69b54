"""Abstract database interface."""

import json
from abc import ABC, abstractmethod
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from fijibooks.domain.entities import AppState, User
from fijibooks.database.mappers import (
    state_from_snapshot,
    state_to_snapshot,
    user_from_record,
    user_to_record,
)

SESSION_KEY = "fiji_tax_user"
STATE_KEY = "fiji_tax_full_state"


class Database(ABC):
    """Abstract key-value store for fijibooks.

    The application keeps exactly two records: the signed-in user and the
    full state snapshot. Both are stored as JSON text.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Key-value operations
    @abstractmethod
    def get_value(self, key: str) -> Optional[str]:
        """Get the stored text for a key, or None."""
        pass

    @abstractmethod
    def set_value(self, key: str, value: str) -> None:
        """Store text under a key, replacing any previous value."""
        pass

    @abstractmethod
    def delete_value(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        pass

    # Session record
    def load_session(self) -> Optional[User]:
        """Get the signed-in user, if any."""
        raw = self.get_value(SESSION_KEY)
        if raw is None:
            return None
        return user_from_record(json.loads(raw))

    def save_session(self, user: User) -> None:
        self.set_value(SESSION_KEY, json.dumps(user_to_record(user)))

    def clear_session(self) -> None:
        self.delete_value(SESSION_KEY)

    # State snapshot
    def load_state(self) -> Optional[AppState]:
        """Read the full state snapshot, or None when nothing was saved."""
        raw = self.get_value(STATE_KEY)
        if raw is None:
            return None
        return state_from_snapshot(json.loads(raw))

    def save_state(self, state: AppState) -> None:
        """Write the full state snapshot as one unit."""
        self.set_value(STATE_KEY, json.dumps(state_to_snapshot(state)))
