from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .absences.mysql_absence_repository import MySQLAbsenceRepository
from .absences.service import AbsenceService
from .core.constants import DEFAULT_ROLE_CACHE_TTL_SECONDS, MANAGER_ROLE_NAME
from .database.connection import DBConfig, DatabaseConnection
from .departments.mysql_department_repository import MySQLDepartmentRepository
from .departments.service import DepartmentService
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .feedback.mysql_feedback_repository import MySQLFeedbackRepository
from .feedback.service import ContentEnhancer, FeedbackService
from .identity.service import PrincipalService
from .rbac.cache import RoleCache
from .rbac.mysql_role_repository import MySQLRoleRepository
from .rbac.service import RoleService


@dataclass(frozen=True)
class Container:
    role_cache: RoleCache

    principal_service: PrincipalService
    role_service: RoleService
    employee_service: EmployeeService
    department_service: DepartmentService
    absence_service: AbsenceService
    feedback_service: FeedbackService


def build_services(
    *,
    roles_repo,
    employees_repo,
    departments_repo,
    absences_repo,
    feedback_repo,
    role_cache_ttl_seconds: float = DEFAULT_ROLE_CACHE_TTL_SECONDS,
    manager_role_name: str = MANAGER_ROLE_NAME,
    enhancer: Optional[ContentEnhancer] = None,
) -> Container:
    """Wire services over any set of repositories (MySQL in production, fakes in tests)."""
    role_cache = RoleCache(roles_repo, ttl_seconds=role_cache_ttl_seconds)
    role_service = RoleService(
        roles_repo,
        role_cache,
        manager_role_name=manager_role_name,
    )

    return Container(
        role_cache=role_cache,
        principal_service=PrincipalService(employees_repo, role_cache),
        role_service=role_service,
        employee_service=EmployeeService(employees_repo, departments_repo, role_service),
        department_service=DepartmentService(departments_repo, employees_repo),
        absence_service=AbsenceService(absences_repo, employees_repo),
        feedback_service=FeedbackService(
            feedback_repo,
            employees_repo,
            enhancer=enhancer,
            manager_role_name=manager_role_name,
        ),
    )


def build_container(
    *,
    db_config: dict,
    role_cache_ttl_seconds: float = DEFAULT_ROLE_CACHE_TTL_SECONDS,
    manager_role_name: str = MANAGER_ROLE_NAME,
    enhancer: Optional[ContentEnhancer] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return build_services(
        roles_repo=MySQLRoleRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        absences_repo=MySQLAbsenceRepository(conn),
        feedback_repo=MySQLFeedbackRepository(conn),
        role_cache_ttl_seconds=role_cache_ttl_seconds,
        manager_role_name=manager_role_name,
        enhancer=enhancer,
    )
