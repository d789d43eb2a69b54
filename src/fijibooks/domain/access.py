"""Role-based capabilities."""

from enum import Enum

from fijibooks.domain.entities import UserRole
from fijibooks.domain.errors import PermissionDeniedError, capability_denied


class Capability(str, Enum):
    DASHBOARD = "dashboard"
    INCOME = "income"
    EXPENSE = "expense"
    CONTACTS = "contacts"
    REPORTS = "reports"
    SETTINGS = "settings"
    RECORD = "record"


CAPABILITIES: dict[UserRole, frozenset[Capability]] = {
    UserRole.BOSS: frozenset(Capability),
    UserRole.STAFF: frozenset(
        {
            Capability.DASHBOARD,
            Capability.INCOME,
            Capability.EXPENSE,
            Capability.CONTACTS,
            Capability.RECORD,
        }
    ),
    UserRole.ACCOUNTANT: frozenset(
        {
            Capability.DASHBOARD,
            Capability.INCOME,
            Capability.EXPENSE,
            Capability.CONTACTS,
            Capability.REPORTS,
        }
    ),
}


def can(role: UserRole, capability: Capability) -> bool:
    return capability in CAPABILITIES.get(role, frozenset())


def require(role: UserRole, capability: Capability) -> None:
    """Raise PermissionDeniedError unless ``role`` has ``capability``."""
    if not can(role, capability):
        raise PermissionDeniedError(capability_denied(role.value, capability.value))
