"""Shared pytest fixtures for fijibooks tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from fijibooks.database.factories import create_sqlite_database
from fijibooks.domain.entities import Company, Contact, ContactRole, Entry, EntryType, UserRole
from fijibooks.domain.state import Bookkeeper


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def bookkeeper(temp_db):
    """Create a Bookkeeper over a temporary database."""
    return Bookkeeper(temp_db)


@pytest.fixture
def signed_in(bookkeeper):
    """Sign in a boss user."""
    return bookkeeper.login(name="Mere Tui", email="mere@bula.com.fj", role=UserRole.BOSS)


@pytest.fixture
def sample_company(bookkeeper, signed_in):
    """Register a sample VAT-registered company and return it."""
    state = bookkeeper.register_company(
        name="Bula Trading Limited",
        tin="50-12345-0-1",
        address="Victoria Parade, Suva",
        phone="+679 330 0000",
        email="accounts@bula.com.fj",
    )
    return state.active_company


@pytest.fixture
def company():
    """A company value not tied to any database."""
    return Company(
        id="c1",
        name="Bula Trading Limited",
        tin="50-12345-0-1",
        address="",
        phone="",
        email="",
        vat_registered=True,
        vat_rate=Decimal("0.125"),
    )


@pytest.fixture
def make_entry():
    """Build entries with sensible defaults."""

    def _make(
        total="112.50",
        type=EntryType.INCOME,
        company_id="c1",
        category="Sales - Goods",
        on=date(2024, 3, 15),
        vat=None,
        id=None,
    ):
        total = Decimal(total)
        vat = Decimal(vat) if vat is not None else (total * Decimal("0.125") / Decimal("1.125")).quantize(
            Decimal("0.01")
        )
        return Entry(
            id=id,
            company_id=company_id,
            type=type,
            counterparty_id="k1",
            invoice_no="INV-1",
            date=on,
            subtotal=total - vat,
            vat_amount=vat,
            total_amount=total,
            category=category,
        )

    return _make


@pytest.fixture
def supplier():
    return Contact(
        id="s1",
        company_id="c1",
        name="Energy Fiji Limited",
        tin="50-00001-0-1",
        role=ContactRole.SUPPLIER,
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
