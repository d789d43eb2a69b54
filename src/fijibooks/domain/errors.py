"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class PermissionDeniedError(DomainError):
    """The current user's role does not allow the operation."""


def company_not_found(company_id: str) -> str:
    """Return message for missing company."""
    return f"Company {company_id} not found"


def contact_not_found(contact_id: str, role: str) -> str:
    """Return message for a counterparty missing from the company's contacts."""
    return f"{role.capitalize()} {contact_id} not found"


def no_active_company() -> str:
    return "No active company. Register one with 'fijibooks company register'"


def invalid_vat_rate(rate) -> str:
    """Return message for a VAT rate outside [0, 1)."""
    return f"VAT rate must be at least 0 and below 1, got {rate}"


def duplicate_entry_id(entry_id: str) -> str:
    return f"Entry with id '{entry_id}' already exists"


def capability_denied(role: str, capability: str) -> str:
    """Return message when a role lacks a capability."""
    return f"Role {role} is not allowed to access {capability}"
