from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from ..core.enums import Action, Resource, Scope
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Permission:
    """Atomic (resource, action, scope) grant, e.g. EMPLOYEE:READ:DEPARTMENT."""

    resource: Resource
    action: Action
    scope: Scope
    description: Optional[str] = field(default=None, compare=False, hash=False)

    @property
    def name(self) -> str:
        return f"{self.resource.value}:{self.action.value}:{self.scope.value}"

    def grants(self, resource: Resource, action: Action, scope: Scope) -> bool:
        return self.resource == resource and self.action == action and self.scope.includes(scope)

    def __str__(self) -> str:
        return self.name


def parse_permission_name(name: str) -> Permission:
    if not isinstance(name, str):
        raise ValidationError(f"Permission name must be a string, got {name!r}")
    parts = name.strip().upper().split(":")
    if len(parts) != 3:
        raise ValidationError(f"Permission name must look like RESOURCE:ACTION:SCOPE, got {name!r}")
    try:
        return Permission(Resource(parts[0]), Action(parts[1]), Scope(parts[2]))
    except ValueError:
        raise ValidationError(f"Unknown permission {name!r}")


def _grants(permissions: Iterable[Permission], resource: Resource, action: Action, scope: Scope) -> bool:
    return any(p.grants(resource, action, scope) for p in permissions)


@dataclass(frozen=True)
class Role:
    """A named, immutable set of permissions.

    Roles are data: adding a role never requires code changes.
    """

    role_id: int
    name: str
    permissions: FrozenSet[Permission] = frozenset()
    description: Optional[str] = None

    def grants(self, resource: Resource, action: Action, scope: Scope) -> bool:
        return _grants(self.permissions, resource, action, scope)

    def has_permission(self, permission_name: str) -> bool:
        return any(p.name == permission_name for p in self.permissions)

    @property
    def permission_names(self) -> list[str]:
        return sorted(p.name for p in self.permissions)


@dataclass(frozen=True)
class Principal:
    """The authenticated actor of one request.

    Built once per request; the permission set is a frozen copy of the role's grants.
    """

    employee_id: int
    department_id: Optional[int]
    role_name: str
    permissions: FrozenSet[Permission] = frozenset()

    @classmethod
    def for_role(cls, *, employee_id: int, department_id: Optional[int], role: Role) -> "Principal":
        return cls(
            employee_id=int(employee_id),
            department_id=department_id,
            role_name=role.name,
            permissions=frozenset(role.permissions),
        )

    def grants(self, resource: Resource, action: Action, scope: Scope) -> bool:
        return _grants(self.permissions, resource, action, scope)
