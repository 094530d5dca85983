from __future__ import annotations

import logging

from ..core.exceptions import AuthenticationError, NotFoundError
from ..employees.repository import EmployeeRepository
from ..rbac.cache import RoleCache
from ..rbac.model import Principal

log = logging.getLogger(__name__)


class PrincipalService:
    """Builds the Principal for an employee id issued by the identity provider.

    Called once per request; the returned Principal is immutable.
    """

    def __init__(self, employees: EmployeeRepository, roles: RoleCache):
        self._employees = employees
        self._roles = roles

    def resolve(self, employee_id: int) -> Principal:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError(f"Employee not found with id: {employee_id}")
        if not employee.is_active:
            log.info("Rejected principal for deactivated employee %s", employee.employee_id)
            raise AuthenticationError("Account is deactivated")

        role = self._roles.get(employee.role_id)
        if not role:
            raise NotFoundError(f"Role not found with id: {employee.role_id}")

        return Principal.for_role(employee_id=employee.employee_id, department_id=employee.department_id, role=role)
