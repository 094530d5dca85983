"""Permission catalog and the default grants of the seeded roles.

Every permission the system understands is listed here once. Role grants are
plain data; the MySQL seed (database/seed.sql) mirrors DEFAULT_ROLE_GRANTS.
"""
from __future__ import annotations

from typing import Iterable, Mapping

from ..core.constants import EMPLOYEE_ROLE_NAME, MANAGER_ROLE_NAME
from ..core.exceptions import ValidationError
from .model import Permission, Role, parse_permission_name

_DESCRIPTIONS: dict[str, str] = {
    "EMPLOYEE:READ:OWN": "View own profile",
    "EMPLOYEE:UPDATE:OWN": "Edit own profile",
    "EMPLOYEE:READ:DEPARTMENT": "View employees in own department",
    "EMPLOYEE:UPDATE:DEPARTMENT": "Edit employees in own department",
    "EMPLOYEE:CREATE:DEPARTMENT": "Create employees in own department",
    "EMPLOYEE:DELETE:DEPARTMENT": "Deactivate employees in own department",
    "EMPLOYEE:READ:ALL": "View all employees including sensitive fields",
    "EMPLOYEE:UPDATE:ALL": "Edit any employee, promote to manager",
    "EMPLOYEE:CREATE:ALL": "Create employees in any department",
    "EMPLOYEE:DELETE:ALL": "Deactivate any employee",
    "ABSENCE:CREATE:OWN": "Create own absence requests",
    "ABSENCE:READ:OWN": "View own absence requests",
    "ABSENCE:UPDATE:OWN": "Edit own absence requests",
    "ABSENCE:DELETE:OWN": "Cancel own absence requests",
    "ABSENCE:READ:DEPARTMENT": "View absence requests in own department",
    "ABSENCE:APPROVE:DEPARTMENT": "Approve/reject absence requests in own department",
    "ABSENCE:READ:ALL": "View all absence requests",
    "ABSENCE:APPROVE:ALL": "Approve/reject any absence request",
    "FEEDBACK:CREATE:OWN": "Create own feedback",
    "FEEDBACK:READ:OWN": "View feedback one has written",
    "FEEDBACK:READ:DEPARTMENT": "View feedback in own department",
    "FEEDBACK:CREATE:DEPARTMENT": "Create feedback for department colleagues",
    "FEEDBACK:READ:ALL": "View all feedback, hidden entries included",
    "FEEDBACK:CREATE:ALL": "Create feedback for anyone",
    "FEEDBACK:DELETE:OWN": "Delete feedback one has written",
    "FEEDBACK:UPDATE:ALL": "Moderate feedback visibility",
    "FEEDBACK:DELETE:ALL": "Delete any feedback",
    "DEPARTMENT:READ:ALL": "View all departments",
    "DEPARTMENT:CREATE:ALL": "Create new departments",
    "DEPARTMENT:UPDATE:ALL": "Edit department information",
    "DEPARTMENT:DELETE:ALL": "Delete departments",
    "ROLE:READ:ALL": "View all roles",
    "ROLE:CREATE:ALL": "Create new roles",
    "ROLE:UPDATE:ALL": "Edit role permissions",
    "ROLE:DELETE:ALL": "Delete roles",
}


def _build_catalog() -> dict[str, Permission]:
    out: dict[str, Permission] = {}
    for name, description in _DESCRIPTIONS.items():
        p = parse_permission_name(name)
        out[p.name] = Permission(p.resource, p.action, p.scope, description)
    return out


PERMISSION_CATALOG: Mapping[str, Permission] = _build_catalog()

_EMPLOYEE_GRANTS = (
    "EMPLOYEE:READ:OWN",
    "EMPLOYEE:UPDATE:OWN",
    "EMPLOYEE:READ:DEPARTMENT",
    "ABSENCE:CREATE:OWN",
    "ABSENCE:READ:OWN",
    "ABSENCE:UPDATE:OWN",
    "ABSENCE:DELETE:OWN",
    "FEEDBACK:CREATE:OWN",
    "FEEDBACK:READ:OWN",
    "FEEDBACK:CREATE:DEPARTMENT",
    "FEEDBACK:DELETE:OWN",
)

_MANAGER_GRANTS = _EMPLOYEE_GRANTS + (
    "EMPLOYEE:UPDATE:DEPARTMENT",
    "EMPLOYEE:CREATE:DEPARTMENT",
    "ABSENCE:READ:DEPARTMENT",
    "ABSENCE:APPROVE:DEPARTMENT",
    "FEEDBACK:READ:DEPARTMENT",
    "EMPLOYEE:UPDATE:ALL",
    "EMPLOYEE:READ:ALL",
    "FEEDBACK:READ:ALL",
    "FEEDBACK:UPDATE:ALL",
    "FEEDBACK:DELETE:ALL",
)

DEFAULT_ROLE_GRANTS: Mapping[str, tuple[str, ...]] = {
    EMPLOYEE_ROLE_NAME: _EMPLOYEE_GRANTS,
    MANAGER_ROLE_NAME: _MANAGER_GRANTS,
}


def lookup(name: str) -> Permission:
    """Return the catalog permission for a RESOURCE:ACTION:SCOPE name."""
    key = parse_permission_name(name).name
    try:
        return PERMISSION_CATALOG[key]
    except KeyError:
        raise ValidationError(f"Permission {key} is not part of the catalog")


def permissions_for(names: Iterable[str]) -> frozenset[Permission]:
    return frozenset(lookup(n) for n in names)


def build_role(role_id: int, name: str, permission_names: Iterable[str], description: str | None = None) -> Role:
    return Role(role_id=int(role_id), name=name, permissions=permissions_for(permission_names), description=description)


def default_roles() -> list[Role]:
    return [build_role(i, name, grants) for i, (name, grants) in enumerate(DEFAULT_ROLE_GRANTS.items(), start=1)]
