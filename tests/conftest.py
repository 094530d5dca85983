from __future__ import annotations

import os
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

import pytest

os.environ.setdefault("APP_ENV", "testing")

from src.hr_records.hr_records.absences.model import Absence
from src.hr_records.hr_records.container import Container, build_services
from src.hr_records.hr_records.core.enums import AbsenceStatus
from src.hr_records.hr_records.departments.model import Department
from src.hr_records.hr_records.employees.model import Employee
from src.hr_records.hr_records.feedback.model import Feedback
from src.hr_records.hr_records.rbac.catalog import PERMISSION_CATALOG, build_role, default_roles, lookup, permissions_for
from src.hr_records.hr_records.rbac.model import Principal, Role


class FakeRoleRepo:
    def __init__(self, roles=()):
        self._roles: dict[int, Role] = {r.role_id: r for r in roles}
        self.get_by_id_calls = 0

    def get_by_id(self, role_id):
        self.get_by_id_calls += 1
        return self._roles.get(int(role_id))

    def get_by_name(self, name):
        return next((r for r in self._roles.values() if r.name == name), None)

    def list_all(self):
        return sorted(self._roles.values(), key=lambda r: r.name)

    def create_role(self, *, name, description, permission_names):
        role_id = max(self._roles, default=0) + 1
        self._roles[role_id] = build_role(role_id, name, permission_names, description)
        return role_id

    def add_permission(self, *, role_id, permission_name):
        role = self._roles[int(role_id)]
        permission = lookup(permission_name)
        if permission in role.permissions:
            return False
        self._roles[role.role_id] = replace(role, permissions=role.permissions | {permission})
        return True

    def remove_permission(self, *, role_id, permission_name):
        role = self._roles[int(role_id)]
        permission = lookup(permission_name)
        if permission not in role.permissions:
            return False
        self._roles[role.role_id] = replace(role, permissions=role.permissions - {permission})
        return True


class FakeEmployeeRepo:
    def __init__(self, roles: FakeRoleRepo):
        self._roles = roles
        self._rows: dict[int, Employee] = {}
        self.writes = 0

    def add(self, employee: Employee) -> Employee:
        self._rows[employee.employee_id] = employee
        return employee

    def get_by_id(self, employee_id):
        return self._rows.get(int(employee_id))

    def list_active(self):
        return [e for e in self._rows.values() if e.is_active]

    def list_by_department(self, department_id, *, active_only=True):
        return [
            e
            for e in self._rows.values()
            if e.department_id == int(department_id) and (e.is_active or not active_only)
        ]

    def search(self, keyword):
        k = keyword.lower()
        return [
            e
            for e in self._rows.values()
            if e.is_active and (k in e.first_name.lower() or k in e.last_name.lower() or k in e.email.lower())
        ]

    def count_by_department(self, department_id):
        return sum(1 for e in self._rows.values() if e.department_id == int(department_id))

    def _write(self, employee_id, expected_version, **changes) -> bool:
        current = self._rows.get(int(employee_id))
        if not current or current.version != int(expected_version):
            return False
        self._rows[current.employee_id] = replace(current, version=current.version + 1, **changes)
        self.writes += 1
        return True

    def update_profile(self, *, employee_id, expected_version, changes):
        return self._write(employee_id, expected_version, **dict(changes))

    def set_active(self, *, employee_id, is_active, expected_version):
        return self._write(employee_id, expected_version, is_active=bool(is_active))

    def set_role(self, *, employee_id, role_id, expected_version):
        role = self._roles.get_by_id(role_id)
        return self._write(employee_id, expected_version, role_id=int(role_id), role_name=role.name)


class FakeDepartmentRepo:
    def __init__(self, departments=()):
        self._rows: dict[int, Department] = {d.department_id: d for d in departments}

    def get_by_id(self, department_id):
        if department_id is None:
            return None
        return self._rows.get(int(department_id))

    def get_by_name(self, name):
        return next((d for d in self._rows.values() if d.name == name), None)

    def list_all(self):
        return sorted(self._rows.values(), key=lambda d: d.name)

    def list_children(self, parent_id):
        return [d for d in self._rows.values() if d.parent_id == int(parent_id)]

    def create(self, *, name, description, manager_id, parent_id):
        department_id = max(self._rows, default=0) + 1
        self._rows[department_id] = Department(department_id, name, description, manager_id, parent_id)
        return department_id

    def update(self, *, department_id, changes):
        self._rows[int(department_id)] = replace(self._rows[int(department_id)], **dict(changes))
        return True

    def set_manager(self, *, department_id, manager_id):
        return self.update(department_id=department_id, changes={"manager_id": manager_id})

    def delete(self, *, department_id):
        return self._rows.pop(int(department_id), None) is not None


class FakeAbsenceRepo:
    def __init__(self, employees: FakeEmployeeRepo):
        self._employees = employees
        self._rows: dict[int, Absence] = {}
        self._next_id = 1
        self.writes = 0

    def _with_department(self, absence: Absence) -> Absence:
        owner = self._employees.get_by_id(absence.employee_id)
        return replace(absence, owner_department_id=owner.department_id if owner else None)

    def create(self, *, employee_id, absence_type, start_date, end_date, reason):
        absence_id = self._next_id
        self._next_id += 1
        self._rows[absence_id] = Absence(
            absence_id=absence_id,
            employee_id=int(employee_id),
            absence_type=absence_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            created_at=datetime(2026, 3, 1, 9, 0, 0),
        )
        self.writes += 1
        return absence_id

    def get_by_id(self, absence_id):
        absence = self._rows.get(int(absence_id))
        return self._with_department(absence) if absence else None

    def list_for_employee(self, employee_id):
        return [self._with_department(a) for a in self._rows.values() if a.employee_id == int(employee_id)]

    def list_absences(self, *, status=None, department_id=None, employee_id=None):
        out = [self._with_department(a) for a in self._rows.values()]
        if status is not None:
            out = [a for a in out if a.status == status]
        if department_id is not None:
            out = [a for a in out if a.owner_department_id == department_id]
        if employee_id is not None:
            out = [a for a in out if a.employee_id == employee_id]
        return out

    def find_overlapping(self, *, employee_id, start_date, end_date, statuses):
        statuses = set(statuses)
        return [
            a
            for a in self._rows.values()
            if a.employee_id == int(employee_id)
            and a.status in statuses
            and a.start_date <= end_date
            and start_date <= a.end_date
        ]

    def transition(
        self,
        *,
        absence_id,
        expected_version,
        status,
        reviewer_id=None,
        reviewed_at=None,
        review_comment=None,
    ):
        current = self._rows.get(int(absence_id))
        if not current or current.version != int(expected_version) or current.status != AbsenceStatus.PENDING:
            return False
        self._rows[current.absence_id] = replace(
            current,
            status=status,
            reviewer_id=reviewer_id if reviewer_id is not None else current.reviewer_id,
            reviewed_at=reviewed_at if reviewed_at is not None else current.reviewed_at,
            review_comment=review_comment if review_comment is not None else current.review_comment,
            version=current.version + 1,
        )
        self.writes += 1
        return True

    def bump_version(self, absence_id):
        """Simulates another writer touching the row."""
        current = self._rows[int(absence_id)]
        self._rows[current.absence_id] = replace(current, version=current.version + 1)


class FakeFeedbackRepo:
    def __init__(self, employees: FakeEmployeeRepo):
        self._employees = employees
        self._rows: dict[int, Feedback] = {}
        self._next_id = 1
        self.writes = 0

    def create(self, *, employee_id, author_id, content, polished_content, rating, category):
        feedback_id = self._next_id
        self._next_id += 1
        author = self._employees.get_by_id(author_id)
        self._rows[feedback_id] = Feedback(
            feedback_id=feedback_id,
            employee_id=int(employee_id),
            author_id=int(author_id),
            content=content,
            author_name=author.full_name if author else None,
            polished_content=polished_content,
            is_polished=polished_content is not None,
            rating=rating,
            category=category,
            created_at=datetime(2026, 3, 1, 9, 0, 0),
        )
        self.writes += 1
        return feedback_id

    def get_by_id(self, feedback_id):
        return self._rows.get(int(feedback_id))

    def list_for_employee(self, employee_id, *, include_hidden=False):
        return [
            f
            for f in self._rows.values()
            if f.employee_id == int(employee_id) and (include_hidden or f.is_visible)
        ]

    def list_by_author(self, author_id, *, include_hidden=False):
        return [
            f for f in self._rows.values() if f.author_id == int(author_id) and (include_hidden or f.is_visible)
        ]

    def list_all(self, *, include_hidden=False):
        return [f for f in self._rows.values() if include_hidden or f.is_visible]

    def set_visible(self, *, feedback_id, is_visible):
        current = self._rows[int(feedback_id)]
        self._rows[current.feedback_id] = replace(current, is_visible=bool(is_visible))
        self.writes += 1
        return True

    def delete(self, *, feedback_id):
        removed = self._rows.pop(int(feedback_id), None)
        if removed:
            self.writes += 1
        return removed is not None


# Ids used across the suite.
ENGINEERING, SALES, HR = 1, 2, 3
MARA, DARIO, INES, SOFIA, TOMAS, HANA, NOEL = 1, 2, 3, 4, 5, 6, 7
EMPLOYEE_ROLE, MANAGER_ROLE, HR_ADMIN_ROLE = 1, 2, 3


def _employee(employee_id, first, last, role: Role, department_id: Optional[int], **extra) -> Employee:
    return Employee(
        employee_id=employee_id,
        first_name=first,
        last_name=last,
        email=f"{first.lower()}@example.com",
        role_id=role.role_id,
        role_name=role.name,
        department_id=department_id,
        phone=extra.pop("phone", "+4915112345678"),
        date_of_birth=extra.pop("date_of_birth", date(1990, 5, 17)),
        hire_date=extra.pop("hire_date", date(2020, 1, 6)),
        **extra,
    )


@dataclass
class World:
    roles: FakeRoleRepo
    employees: FakeEmployeeRepo
    departments: FakeDepartmentRepo
    absences: FakeAbsenceRepo
    feedback: FakeFeedbackRepo
    container: Container

    def principal(self, employee_id: int) -> Principal:
        return self.container.principal_service.resolve(employee_id)


def build_world(*, enhancer=None, role_cache_ttl_seconds=300) -> World:
    employee_role, manager_role = default_roles()
    hr_admin = build_role(HR_ADMIN_ROLE, "HR_ADMIN", PERMISSION_CATALOG.keys(), "Full access")
    roles = FakeRoleRepo([employee_role, manager_role, hr_admin])

    departments = FakeDepartmentRepo(
        [
            Department(ENGINEERING, "Engineering", manager_id=MARA),
            Department(SALES, "Sales", manager_id=SOFIA),
            Department(HR, "Human Resources", manager_id=HANA),
        ]
    )
    employees = FakeEmployeeRepo(roles)
    employees.add(_employee(MARA, "Mara", "Keller", manager_role, ENGINEERING))
    employees.add(_employee(DARIO, "Dario", "Lind", employee_role, ENGINEERING))
    employees.add(_employee(INES, "Ines", "Park", employee_role, ENGINEERING))
    employees.add(_employee(SOFIA, "Sofia", "Brandt", manager_role, SALES))
    employees.add(_employee(TOMAS, "Tomas", "Ruiz", employee_role, SALES))
    employees.add(_employee(HANA, "Hana", "Sato", hr_admin, HR))
    employees.add(_employee(NOEL, "Noel", "Weber", employee_role, None))

    absences = FakeAbsenceRepo(employees)
    feedback = FakeFeedbackRepo(employees)
    container = build_services(
        roles_repo=roles,
        employees_repo=employees,
        departments_repo=departments,
        absences_repo=absences,
        feedback_repo=feedback,
        role_cache_ttl_seconds=role_cache_ttl_seconds,
        enhancer=enhancer,
    )
    return World(roles, employees, departments, absences, feedback, container)


@pytest.fixture
def world() -> World:
    return build_world()


def make_principal(*permission_names: str, employee_id: int = 100, department_id: Optional[int] = ENGINEERING):
    return Principal(
        employee_id=employee_id,
        department_id=department_id,
        role_name="CUSTOM",
        permissions=permissions_for(permission_names),
    )
