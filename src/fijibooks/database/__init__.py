"""Database layer for fijibooks application."""

from fijibooks.database.base import Database
from fijibooks.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
