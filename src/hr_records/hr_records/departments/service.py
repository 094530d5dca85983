from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..authz.resolver import require_scope
from ..common.validators import optional_text, require_int, require_length_between, require_max_length
from ..core.enums import Action, Resource, Scope
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..rbac.model import Principal
from .model import Department
from .repository import DepartmentRepository

log = logging.getLogger(__name__)

DEPARTMENT_NAME_MAX_LENGTH = 100
DEPARTMENT_DESCRIPTION_MAX_LENGTH = 500


def to_representation(department: Department) -> dict:
    return {
        "id": department.department_id,
        "name": department.name,
        "description": department.description,
        "manager_id": department.manager_id,
        "parent_id": department.parent_id,
        "active": department.is_active,
    }


class DepartmentService:
    """Department reference data.

    Reads are open to any resolved principal; every mutation needs the
    matching DEPARTMENT permission at ALL scope.
    """

    def __init__(self, departments: DepartmentRepository, employees: EmployeeRepository):
        self._departments = departments
        self._employees = employees

    def _get_or_404(self, department_id: int) -> Department:
        department = self._departments.get_by_id(int(department_id))
        if not department:
            raise NotFoundError(f"Department not found with id: {department_id}")
        return department

    def _check_manager(self, manager_id: Optional[int]) -> Optional[int]:
        if manager_id is None:
            return None
        manager_id = require_int(manager_id, "Manager")
        if not self._employees.get_by_id(manager_id):
            raise NotFoundError(f"Employee not found with id: {manager_id}")
        return manager_id

    def _check_parent(self, parent_id: Optional[int], *, department_id: Optional[int] = None) -> Optional[int]:
        if parent_id is None:
            return None
        parent = self._get_or_404(require_int(parent_id, "Parent department"))

        # Walk up from the new parent; meeting ourselves means a cycle.
        seen: set[int] = set()
        node: Optional[Department] = parent
        while node is not None and node.department_id not in seen:
            if department_id is not None and node.department_id == int(department_id):
                raise ValidationError("A department cannot be its own ancestor")
            seen.add(node.department_id)
            node = self._departments.get_by_id(node.parent_id) if node.parent_id is not None else None
        return parent.department_id

    def list_departments(self, principal: Principal) -> list[dict]:
        return [to_representation(d) for d in self._departments.list_all()]

    def get_department(self, principal: Principal, department_id: int) -> dict:
        return to_representation(self._get_or_404(department_id))

    def create_department(
        self,
        principal: Principal,
        *,
        name: str,
        description: Optional[str] = None,
        manager_id: Optional[int] = None,
        parent_id: Optional[int] = None,
    ) -> dict:
        name = require_length_between(name, "Department name", 2, DEPARTMENT_NAME_MAX_LENGTH)
        description = require_max_length(
            optional_text(description, "Description"), "Description", DEPARTMENT_DESCRIPTION_MAX_LENGTH
        )
        require_scope(principal, Resource.DEPARTMENT, Action.CREATE, Scope.ALL)

        if self._departments.get_by_name(name):
            raise ConflictError(f"Department with name '{name}' already exists")
        manager_id = self._check_manager(manager_id)
        parent_id = self._check_parent(parent_id)

        department_id = self._departments.create(
            name=name, description=description, manager_id=manager_id, parent_id=parent_id
        )
        log.info("Department %s (%s) created by %s", department_id, name, principal.employee_id)
        return to_representation(self._get_or_404(department_id))

    def update_department(self, principal: Principal, department_id: int, *, changes: Mapping[str, Any]) -> dict:
        unknown = set(changes) - {"name", "description", "manager_id", "parent_id"}
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        require_scope(principal, Resource.DEPARTMENT, Action.UPDATE, Scope.ALL)
        department = self._get_or_404(department_id)

        cleaned: dict[str, Any] = {}
        if "name" in changes:
            name = require_length_between(changes["name"], "Department name", 2, DEPARTMENT_NAME_MAX_LENGTH)
            existing = self._departments.get_by_name(name)
            if existing and existing.department_id != department.department_id:
                raise ConflictError(f"Department with name '{name}' already exists")
            cleaned["name"] = name
        if "description" in changes:
            cleaned["description"] = require_max_length(
                optional_text(changes["description"], "Description"), "Description", DEPARTMENT_DESCRIPTION_MAX_LENGTH
            )
        if "manager_id" in changes:
            cleaned["manager_id"] = self._check_manager(changes["manager_id"])
        if "parent_id" in changes:
            cleaned["parent_id"] = self._check_parent(changes["parent_id"], department_id=department.department_id)

        if cleaned:
            self._departments.update(department_id=department.department_id, changes=cleaned)
            log.info("Department %s updated by %s", department.department_id, principal.employee_id)
        return to_representation(self._get_or_404(department.department_id))

    def delete_department(self, principal: Principal, department_id: int) -> None:
        require_scope(principal, Resource.DEPARTMENT, Action.DELETE, Scope.ALL)
        department = self._get_or_404(department_id)

        if self._employees.count_by_department(department.department_id) > 0:
            raise ConflictError("Cannot delete department with existing employees")
        children: Sequence[Department] = self._departments.list_children(department.department_id)
        if children:
            raise ConflictError("Cannot delete department with sub-departments")

        self._departments.delete(department_id=department.department_id)
        log.info("Department %s deleted by %s", department.department_id, principal.employee_id)
