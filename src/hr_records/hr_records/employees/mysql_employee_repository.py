from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_SELECT_EMPLOYEE = """
    SELECT e.id, e.first_name, e.last_name, e.email, e.role_id, r.name AS role_name,
           e.department_id, e.position, e.phone, e.date_of_birth, e.hire_date,
           e.bio, e.skills, e.is_active, e.version
    FROM employees e
    JOIN roles r ON r.id = e.role_id
"""

# Column names the service may change through update_profile().
_PROFILE_COLUMNS = (
    "first_name",
    "last_name",
    "email",
    "position",
    "phone",
    "date_of_birth",
    "bio",
    "skills",
    "department_id",
)


def _row_to_employee(row: dict) -> Employee:
    return Employee(
        employee_id=int(row["id"]),
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        role_id=int(row["role_id"]),
        role_name=row["role_name"],
        department_id=int(row["department_id"]) if row.get("department_id") is not None else None,
        position=row.get("position"),
        phone=row.get("phone"),
        date_of_birth=row.get("date_of_birth"),
        hire_date=row.get("hire_date"),
        bio=row.get("bio"),
        skills=row.get("skills"),
        is_active=bool(row.get("is_active", True)),
        version=int(row.get("version") or 0),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_EMPLOYEE + " WHERE e.id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def list_active(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_EMPLOYEE + " WHERE e.is_active=1 ORDER BY e.last_name, e.first_name")
            return [_row_to_employee(r) for r in fetchall(cur)]

    def list_by_department(self, department_id: int, *, active_only: bool = True) -> Sequence[Employee]:
        where = "e.department_id=%s" + (" AND e.is_active=1" if active_only else "")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_EMPLOYEE + f" WHERE {where} ORDER BY e.last_name, e.first_name",
                (int(department_id),),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]

    def search(self, keyword: str) -> Sequence[Employee]:
        like = f"%{keyword.lower()}%"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_EMPLOYEE
                + """
                WHERE e.is_active=1
                  AND (LOWER(e.first_name) LIKE %s OR LOWER(e.last_name) LIKE %s OR LOWER(e.email) LIKE %s)
                ORDER BY e.last_name, e.first_name
                """,
                (like, like, like),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]

    def count_by_department(self, department_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM employees WHERE department_id=%s", (int(department_id),))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def update_profile(self, *, employee_id: int, expected_version: int, changes: Mapping[str, Any]) -> bool:
        columns = [c for c in _PROFILE_COLUMNS if c in changes]
        if not columns:
            return True
        assignments = ", ".join(f"{c}=%s" for c in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE employees SET {assignments}, version=version+1 WHERE id=%s AND version=%s",
                tuple(changes[c] for c in columns) + (int(employee_id), int(expected_version)),
            )
            return cur.rowcount > 0

    def set_active(self, *, employee_id: int, is_active: bool, expected_version: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET is_active=%s, version=version+1 WHERE id=%s AND version=%s",
                (1 if is_active else 0, int(employee_id), int(expected_version)),
            )
            return cur.rowcount > 0

    def set_role(self, *, employee_id: int, role_id: int, expected_version: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET role_id=%s, version=version+1 WHERE id=%s AND version=%s",
                (int(role_id), int(employee_id), int(expected_version)),
            )
            return cur.rowcount > 0
