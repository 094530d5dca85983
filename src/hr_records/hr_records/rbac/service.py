from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..authz.resolver import require_scope
from ..common.validators import optional_text, require_non_empty
from ..core.constants import MANAGER_ROLE_NAME
from ..core.enums import Action, Resource, Scope
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .cache import RoleCache
from .catalog import lookup
from .model import Principal, Role
from .repository import RoleRepository

log = logging.getLogger(__name__)


class RoleService:
    """Use case: read and administer roles.

    Every mutation invalidates the role cache before returning.
    """

    def __init__(
        self,
        roles: RoleRepository,
        cache: RoleCache,
        *,
        manager_role_name: str = MANAGER_ROLE_NAME,
    ):
        self._roles = roles
        self._cache = cache
        self._manager_role_name = manager_role_name

    def _get_or_404(self, role_id: int) -> Role:
        role = self._roles.get_by_id(int(role_id))
        if not role:
            raise NotFoundError(f"Role not found with id: {role_id}")
        return role

    def get_manager_role(self) -> Role:
        role = self._roles.get_by_name(self._manager_role_name)
        if not role:
            raise NotFoundError(f"{self._manager_role_name} role not found")
        return role

    def list_roles(self, principal: Principal) -> Sequence[Role]:
        require_scope(principal, Resource.ROLE, Action.READ, Scope.ALL)
        return self._roles.list_all()

    def get_role(self, principal: Principal, role_id: int) -> Role:
        require_scope(principal, Resource.ROLE, Action.READ, Scope.ALL)
        return self._get_or_404(role_id)

    def create_role(
        self,
        principal: Principal,
        *,
        name: str,
        permission_names: Iterable[str],
        description: Optional[str] = None,
    ) -> Role:
        name = require_non_empty(name, "Role name").upper()
        if not isinstance(permission_names, (list, tuple, set, frozenset)):
            raise ValidationError("Permissions must be a list of permission names")
        permissions = [lookup(n) for n in permission_names]
        require_scope(principal, Resource.ROLE, Action.CREATE, Scope.ALL)

        if self._roles.get_by_name(name):
            raise ConflictError(f"Role with name '{name}' already exists")

        role_id = self._roles.create_role(
            name=name,
            description=optional_text(description, "Description"),
            permission_names=[p.name for p in permissions],
        )
        log.info("Role %s created by employee %s with %d permissions", name, principal.employee_id, len(permissions))
        return self._get_or_404(role_id)

    def grant_permission(self, principal: Principal, *, role_id: int, permission_name: str) -> Role:
        permission = lookup(permission_name)
        require_scope(principal, Resource.ROLE, Action.UPDATE, Scope.ALL)

        role = self._get_or_404(role_id)
        if permission in role.permissions:
            return role

        self._roles.add_permission(role_id=role.role_id, permission_name=permission.name)
        self._cache.invalidate(role.role_id)
        log.info("Permission %s granted to role %s by employee %s", permission.name, role.name, principal.employee_id)
        return self._get_or_404(role.role_id)

    def revoke_permission(self, principal: Principal, *, role_id: int, permission_name: str) -> Role:
        permission = lookup(permission_name)
        require_scope(principal, Resource.ROLE, Action.UPDATE, Scope.ALL)

        role = self._get_or_404(role_id)
        if permission not in role.permissions:
            return role

        self._roles.remove_permission(role_id=role.role_id, permission_name=permission.name)
        self._cache.invalidate(role.role_id)
        log.info("Permission %s revoked from role %s by employee %s", permission.name, role.name, principal.employee_id)
        return self._get_or_404(role.role_id)
