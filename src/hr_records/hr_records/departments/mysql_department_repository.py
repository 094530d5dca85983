from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Department
from .repository import DepartmentRepository

_SELECT_DEPARTMENT = "SELECT id, name, description, manager_id, parent_id, is_active FROM departments"

_UPDATABLE_COLUMNS = ("name", "description", "manager_id", "parent_id")


def _row_to_department(row: dict) -> Department:
    return Department(
        department_id=int(row["id"]),
        name=row["name"],
        description=row.get("description"),
        manager_id=row.get("manager_id"),
        parent_id=row.get("parent_id"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, department_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_DEPARTMENT + " WHERE id=%s", (int(department_id),))
            row = fetchone(cur)
            return _row_to_department(row) if row else None

    def get_by_name(self, name: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_DEPARTMENT + " WHERE name=%s", (name,))
            row = fetchone(cur)
            return _row_to_department(row) if row else None

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_DEPARTMENT + " ORDER BY name")
            return [_row_to_department(r) for r in fetchall(cur)]

    def list_children(self, parent_id: int) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_DEPARTMENT + " WHERE parent_id=%s ORDER BY name", (int(parent_id),))
            return [_row_to_department(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        name: str,
        description: Optional[str],
        manager_id: Optional[int],
        parent_id: Optional[int],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO departments(name, description, manager_id, parent_id, is_active)
                VALUES(%s,%s,%s,%s,1)
                """,
                (name, description, manager_id, parent_id),
            )
            return int(cur.lastrowid)

    def update(self, *, department_id: int, changes: Mapping[str, Any]) -> bool:
        columns = [c for c in _UPDATABLE_COLUMNS if c in changes]
        if not columns:
            return True
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE departments SET {', '.join(f'{c}=%s' for c in columns)} WHERE id=%s",
                tuple(changes[c] for c in columns) + (int(department_id),),
            )
            return cur.rowcount > 0

    def set_manager(self, *, department_id: int, manager_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE departments SET manager_id=%s WHERE id=%s", (manager_id, int(department_id)))
            return cur.rowcount > 0

    def delete(self, *, department_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM departments WHERE id=%s", (int(department_id),))
            return cur.rowcount > 0
