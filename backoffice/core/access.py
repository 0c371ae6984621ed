"""Role-based page visibility for the dashboard.

This is a display gate, not a security boundary: there are no credentials,
only a role picked in the UI and the permissions that role grants.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet


class Role(str, Enum):
    ADMIN = "admin"
    WARDEN = "warden"
    OFFICER = "officer"
    MEDICAL = "medical"


ALL_PERMISSIONS = "all"

ROLE_PERMISSIONS: Dict[Role, FrozenSet[str]] = {
    Role.ADMIN: frozenset({ALL_PERMISSIONS}),
    Role.WARDEN: frozenset({"inmates", "staff", "security", "reports"}),
    Role.OFFICER: frozenset({"inmates", "visitors", "security"}),
    Role.MEDICAL: frozenset({"medical", "inmates"}),
}


def has_permission(role: Role | str, permission: str) -> bool:
    """Return True when ``role`` may see pages guarded by ``permission``."""

    try:
        granted = ROLE_PERMISSIONS[Role(role)]
    except ValueError:
        return False
    return ALL_PERMISSIONS in granted or permission in granted
