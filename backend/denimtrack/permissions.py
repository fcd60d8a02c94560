"""
Role and access-requirement definitions.

Every protected route declares one Requirement; a single authorize()
function decides whether an identity satisfies it. Roles are a closed set:
ADMIN can do everything DATA_ENTRY can, plus review and reporting.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ForbiddenError


# =============================================================================
# ROLES
# =============================================================================

ROLE_ADMIN = "ADMIN"
ROLE_DATA_ENTRY = "DATA_ENTRY"

ROLES = (ROLE_ADMIN, ROLE_DATA_ENTRY)


# =============================================================================
# ACCESS REQUIREMENTS
# =============================================================================

@dataclass(frozen=True)
class Requirement:
    """
    Declarative access requirement for a route.

    roles=None means any authenticated user. denied_message is what a
    caller with the wrong role sees.
    """
    name: str
    roles: frozenset[str] | None = None
    denied_message: str = "Not authorized"


AUTHENTICATED = Requirement(name="AUTHENTICATED")

DATA_ENTRY_ACCESS = Requirement(
    name="DATA_ENTRY_ACCESS",
    roles=frozenset({ROLE_DATA_ENTRY, ROLE_ADMIN}),
    denied_message="Not authorized for data entry",
)

ADMIN_ONLY = Requirement(
    name="ADMIN_ONLY",
    roles=frozenset({ROLE_ADMIN}),
    denied_message="Not authorized as an Admin",
)


def is_valid_role(role) -> bool:
    return role in ROLES


def authorize(identity, requirement: Requirement) -> None:
    """Raise ForbiddenError unless identity's role satisfies requirement."""
    if requirement.roles is None:
        return
    if identity.role not in requirement.roles:
        raise ForbiddenError(requirement.denied_message)
