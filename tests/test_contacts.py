"""Tests for counterparty resolution."""

import pytest

from fijibooks.domain.contacts import contacts_for, find_by_tin, new_contact, resolve_counterparty
from fijibooks.domain.entities import Contact, ContactRole, EntryType
from fijibooks.domain.errors import NotFoundError, ValidationError


@pytest.fixture
def contacts(supplier):
    return [
        supplier,
        Contact(id="k1", company_id="c1", name="Lautoka Hardware", tin="50-11111-0-1", role=ContactRole.CUSTOMER),
        Contact(id="k2", company_id="c2", name="Nadi Tours", tin="", role=ContactRole.CUSTOMER),
    ]


def test_contacts_for_filters_company_and_role(contacts):
    assert [c.id for c in contacts_for(contacts, "c1", ContactRole.CUSTOMER)] == ["k1"]
    assert [c.id for c in contacts_for(contacts, "c1", ContactRole.SUPPLIER)] == ["s1"]
    assert contacts_for(contacts, "c3", ContactRole.CUSTOMER) == []


def test_find_by_tin_trims_and_ignores_empty(contacts):
    assert find_by_tin(contacts, "c1", ContactRole.SUPPLIER, " 50-00001-0-1 ").id == "s1"
    assert find_by_tin(contacts, "c2", ContactRole.CUSTOMER, "") is None


def test_new_contact_requires_name(contacts):
    with pytest.raises(ValidationError):
        new_contact(contacts, "c1", ContactRole.CUSTOMER, "   ")


def test_resolve_existing_contact(contacts):
    result = resolve_counterparty(contacts, "c1", EntryType.EXPENSE, contact_id="s1")
    assert result.contact.id == "s1"
    assert not result.created


def test_resolve_rejects_contact_with_wrong_role(contacts):
    """A customer cannot be the counterparty of an expense."""
    with pytest.raises(NotFoundError):
        resolve_counterparty(contacts, "c1", EntryType.EXPENSE, contact_id="k1")


def test_resolve_rejects_contact_of_other_company(contacts):
    with pytest.raises(NotFoundError):
        resolve_counterparty(contacts, "c1", EntryType.INCOME, contact_id="k2")


def test_resolve_requires_contact_or_name(contacts):
    with pytest.raises(ValidationError, match="supplier is required"):
        resolve_counterparty(contacts, "c1", EntryType.EXPENSE)


def test_resolve_creates_new_contact(contacts):
    result = resolve_counterparty(
        contacts, "c1", EntryType.INCOME, new_name=" Suva Bakery ", new_tin="50-22222-0-1"
    )
    assert result.created
    assert result.contact.name == "Suva Bakery"
    assert result.contact.tin == "50-22222-0-1"
    assert result.contact.role == ContactRole.CUSTOMER
    assert result.contact.company_id == "c1"
    assert result.contact.id not in {c.id for c in contacts}


def test_resolve_reuses_contact_with_same_tin(contacts):
    result = resolve_counterparty(
        contacts, "c1", EntryType.EXPENSE, new_name="EFL", new_tin="50-00001-0-1"
    )
    assert not result.created
    assert result.contact.id == "s1"


def test_resolve_same_name_creates_new_contact(contacts):
    """A name match without a TIN match is only a possible duplicate."""
    result = resolve_counterparty(contacts, "c1", EntryType.EXPENSE, new_name="energy fiji limited")
    assert result.created
    assert result.contact.id != "s1"
