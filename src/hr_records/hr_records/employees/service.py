from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from ..authz.filters import filter_visible, listing_scope
from ..authz.redaction import redact_all
from ..authz.resolver import Target, require, require_any, require_scope
from ..common.datetime_utils import parse_iso_date
from ..common.validators import (
    optional_text,
    require_email,
    require_int,
    require_length_between,
    require_max_length,
    require_non_empty,
    require_pattern,
)
from ..core.constants import BIO_MAX_LENGTH, NAME_MAX_LENGTH, NAME_MIN_LENGTH, PHONE_PATTERN
from ..core.enums import Action, Resource, Scope
from ..core.exceptions import ConcurrentModificationError, NotFoundError, ValidationError
from ..departments.repository import DepartmentRepository
from ..rbac.model import Principal
from ..rbac.service import RoleService
from .model import Employee
from .repository import EmployeeRepository

log = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {"first_name", "last_name", "email", "position", "phone", "date_of_birth", "bio", "skills", "department_id"}
)


def employee_target(employee: Employee) -> Target:
    return Target(owner_id=employee.employee_id, department_id=employee.department_id)


def to_representation(employee: Employee) -> dict:
    def _iso(d: Optional[date]) -> Optional[str]:
        return d.isoformat() if d else None

    return {
        "id": employee.employee_id,
        "first_name": employee.first_name,
        "last_name": employee.last_name,
        "full_name": employee.full_name,
        "email": employee.email,
        "role": employee.role_name,
        "department_id": employee.department_id,
        "position": employee.position,
        "phone": employee.phone,
        "date_of_birth": _iso(employee.date_of_birth),
        "hire_date": _iso(employee.hire_date),
        "bio": employee.bio,
        "skills": employee.skills,
        "active": employee.is_active,
        "version": employee.version,
    }


def _clean_changes(changes: Mapping[str, Any]) -> dict:
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

    out: dict[str, Any] = {}
    for key, value in changes.items():
        if key in {"first_name", "last_name"}:
            label = "First name" if key == "first_name" else "Last name"
            out[key] = require_length_between(value, label, NAME_MIN_LENGTH, NAME_MAX_LENGTH)
        elif key == "email":
            out[key] = require_email(require_non_empty(value, "Email"))
        elif key == "phone":
            out[key] = require_pattern(optional_text(value, "Phone"), "Phone", PHONE_PATTERN)
        elif key == "date_of_birth":
            out[key] = value if value is None or isinstance(value, date) else parse_iso_date(value)
        elif key == "bio":
            out[key] = require_max_length(value, "Bio", BIO_MAX_LENGTH)
        elif key == "department_id":
            if value is None:
                raise ValidationError("Department is required")
            out[key] = require_int(value, "Department")
        else:
            out[key] = value
    return out


class EmployeeService:
    """Use case: read and maintain employee profiles.

    Every representation leaves through _present(), which applies field redaction.
    """

    def __init__(self, employees: EmployeeRepository, departments: DepartmentRepository, roles: RoleService):
        self._employees = employees
        self._departments = departments
        self._roles = roles

    def _present(self, principal: Principal, employees: Iterable[Employee]) -> list[dict]:
        return redact_all(principal, [to_representation(e) for e in employees])

    def _get_or_404(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError(f"Employee not found with id: {employee_id}")
        return employee

    def list_employees(self, principal: Principal) -> list[dict]:
        restriction = listing_scope(principal, Resource.EMPLOYEE, Action.READ)
        log.info("Listing employees for %s with scope %s", principal.employee_id, restriction.scope.value)

        if restriction.matches_nothing:
            return []
        if restriction.owner_id is not None:
            me = self._employees.get_by_id(restriction.owner_id)
            employees = [me] if me else []
        elif restriction.department_id is not None:
            employees = self._employees.list_by_department(restriction.department_id)
        else:
            employees = self._employees.list_active()

        visible = [e for e in employees if restriction.admits(owner_id=e.employee_id, department_id=e.department_id)]
        return self._present(principal, visible)

    def get_employee(self, principal: Principal, employee_id: int) -> dict:
        require_any(principal, Resource.EMPLOYEE, Action.READ)
        employee = self._get_or_404(employee_id)
        require(principal, Resource.EMPLOYEE, Action.READ, employee_target(employee))
        return self._present(principal, [employee])[0]

    def search_employees(self, principal: Principal, keyword: str) -> list[dict]:
        keyword = require_non_empty(keyword, "Keyword")
        require_any(principal, Resource.EMPLOYEE, Action.READ)

        found = self._employees.search(keyword)
        visible = filter_visible(
            principal,
            Resource.EMPLOYEE,
            Action.READ,
            found,
            owner_of=lambda e: e.employee_id,
            department_of=lambda e: e.department_id,
        )
        return self._present(principal, visible)

    def list_department_employees(self, principal: Principal, department_id: int) -> list[dict]:
        require_any(principal, Resource.EMPLOYEE, Action.READ)
        restriction = listing_scope(
            principal, Resource.EMPLOYEE, Action.READ, requested_department_id=int(department_id)
        )
        if not self._departments.get_by_id(int(department_id)):
            raise NotFoundError(f"Department not found with id: {department_id}")

        employees = self._employees.list_by_department(int(department_id))
        visible = [e for e in employees if restriction.admits(owner_id=e.employee_id, department_id=e.department_id)]
        return self._present(principal, visible)

    def update_employee(
        self,
        principal: Principal,
        employee_id: int,
        *,
        changes: Mapping[str, Any],
        expected_version: Optional[int] = None,
    ) -> dict:
        cleaned = _clean_changes(changes)
        if not cleaned:
            raise ValidationError("Nothing to update")

        require_any(principal, Resource.EMPLOYEE, Action.UPDATE)
        employee = self._get_or_404(employee_id)
        require(principal, Resource.EMPLOYEE, Action.UPDATE, employee_target(employee))

        new_department = cleaned.get("department_id")
        if new_department is not None and new_department != employee.department_id:
            # Moving someone between departments is an organisation-wide change.
            require_scope(principal, Resource.EMPLOYEE, Action.UPDATE, Scope.ALL)
            if not self._departments.get_by_id(new_department):
                raise NotFoundError(f"Department not found with id: {new_department}")

        version = employee.version if expected_version is None else require_int(expected_version, "Version")
        if not self._employees.update_profile(employee_id=employee.employee_id, expected_version=version, changes=cleaned):
            raise ConcurrentModificationError("Employee", employee.employee_id, version)

        log.info("Employee %s updated by %s (%s)", employee.employee_id, principal.employee_id, ", ".join(sorted(cleaned)))
        return self._present(principal, [self._get_or_404(employee.employee_id)])[0]

    def deactivate_employee(self, principal: Principal, employee_id: int) -> None:
        require_any(principal, Resource.EMPLOYEE, Action.DELETE)
        employee = self._get_or_404(employee_id)
        require(principal, Resource.EMPLOYEE, Action.DELETE, employee_target(employee))

        if not employee.is_active:
            return
        if not self._employees.set_active(
            employee_id=employee.employee_id, is_active=False, expected_version=employee.version
        ):
            raise ConcurrentModificationError("Employee", employee.employee_id, employee.version)
        log.info("Employee %s deactivated by %s", employee.employee_id, principal.employee_id)

    def promote_to_manager(self, principal: Principal, employee_id: int, department_id: int) -> dict:
        require_scope(
            principal,
            Resource.EMPLOYEE,
            Action.UPDATE,
            Scope.ALL,
        )
        employee = self._get_or_404(employee_id)
        department = self._departments.get_by_id(int(department_id))
        if not department:
            raise NotFoundError(f"Department not found with id: {department_id}")

        manager_role = self._roles.get_manager_role()
        if employee.role_id != manager_role.role_id:
            if not self._employees.set_role(
                employee_id=employee.employee_id, role_id=manager_role.role_id, expected_version=employee.version
            ):
                raise ConcurrentModificationError("Employee", employee.employee_id, employee.version)

        self._departments.set_manager(department_id=department.department_id, manager_id=employee.employee_id)
        log.info(
            "Employee %s promoted to manager of department %s by %s",
            employee.employee_id,
            department.department_id,
            principal.employee_id,
        )
        return self._present(principal, [self._get_or_404(employee.employee_id)])[0]
