"""Generic SQLAlchemy database implementation."""

from typing import Optional
from sqlalchemy.orm import Session

from fijibooks.database.base import Database
from fijibooks.database.models import StoreRecord, create_session_factory


class SQLAlchemyDatabase(Database):
    """SQLAlchemy-based implementation of Database interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy database.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db',
                'sqlite://' for an in-memory store)
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        # Schema is created automatically by create_session_factory
        pass

    def get_value(self, key: str) -> Optional[str]:
        """Get the stored text for a key, or None."""
        session = self._get_session()
        record = session.get(StoreRecord, key)
        if record is None:
            return None
        return record.value

    def set_value(self, key: str, value: str) -> None:
        """Store text under a key, replacing any previous value."""
        session = self._get_session()
        record = session.get(StoreRecord, key)
        if record is None:
            session.add(StoreRecord(key=key, value=value))
        else:
            record.value = value
        session.commit()

    def delete_value(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        session = self._get_session()
        record = session.get(StoreRecord, key)
        if record is not None:
            session.delete(record)
            session.commit()
