# backend/utils/permissions.py
"""Role-based permission policy.

Every action maps to the set of roles allowed to perform it. The lookup is
pure and total: unknown roles and unknown actions are denied, nothing raises.
User-account management is listed separately from inventory mutations and is
restricted to SUPER_USER.
"""
from typing import FrozenSet, Optional, Union

from models.users import Role

_ALL_ROLES = frozenset(Role)
_INVENTORY_EDITORS = frozenset({Role.SUPER_USER, Role.EDITOR})
_USER_ADMINS = frozenset({Role.SUPER_USER})

# Inventory entities whose create/update/delete is gated by the same roles
INVENTORY_RESOURCES = ("material", "project", "category", "unit", "inflow", "outflow")

PERMISSIONS: dict = {
    # User management
    "manage_users": _USER_ADMINS,
    "create_user": _USER_ADMINS,
    "view_users": _USER_ADMINS,
    "update_user": _USER_ADMINS,
    "delete_user": _USER_ADMINS,

    # Read-only views, every signed-in role
    "view_dashboard": _ALL_ROLES,
    "view_inventory": _ALL_ROLES,
    "view_reports": _ALL_ROLES,
}

for _resource in INVENTORY_RESOURCES:
    for _verb in ("create", "update", "delete"):
        PERMISSIONS[f"{_verb}_{_resource}"] = _INVENTORY_EDITORS


def allowed_roles(action: str) -> FrozenSet[Role]:
    return PERMISSIONS.get(action, frozenset())


def can_perform(role: Union[Role, str, None], action: str) -> bool:
    parsed: Optional[Role] = Role.parse(role) if role is not None else None
    if parsed is None:
        return False
    return parsed in allowed_roles(action)


def can_manage_inventory(role) -> bool:
    return can_perform(role, "create_inflow")


def can_manage_users(role) -> bool:
    return can_perform(role, "manage_users")


def can_view_dashboard(role) -> bool:
    return can_perform(role, "view_dashboard")
