from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import Action, Resource, Scope
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Permission, Role
from .repository import RoleRepository

_PERMISSIONS_OF_ROLES_SQL = """
    SELECT rp.role_id, p.resource, p.action, p.scope, p.description
    FROM role_permissions rp
    JOIN permissions p ON p.id = rp.permission_id
    WHERE rp.role_id IN ({placeholders})
"""


class MySQLRoleRepository(RoleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load_roles(self, cur, rows: list[dict]) -> list[Role]:
        if not rows:
            return []
        ids = [int(r["id"]) for r in rows]
        cur.execute(
            _PERMISSIONS_OF_ROLES_SQL.format(placeholders=",".join(["%s"] * len(ids))),
            tuple(ids),
        )
        grants: dict[int, set[Permission]] = {i: set() for i in ids}
        for p in fetchall(cur):
            grants[int(p["role_id"])].add(
                Permission(
                    Resource(p["resource"]),
                    Action(p["action"]),
                    Scope(p["scope"]),
                    p.get("description"),
                )
            )
        return [
            Role(
                role_id=int(r["id"]),
                name=r["name"],
                permissions=frozenset(grants[int(r["id"])]),
                description=r.get("description"),
            )
            for r in rows
        ]

    def get_by_id(self, role_id: int) -> Optional[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, description FROM roles WHERE id=%s", (int(role_id),))
            row = fetchone(cur)
            roles = self._load_roles(cur, [row] if row else [])
            return roles[0] if roles else None

    def get_by_name(self, name: str) -> Optional[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, description FROM roles WHERE name=%s", (name,))
            row = fetchone(cur)
            roles = self._load_roles(cur, [row] if row else [])
            return roles[0] if roles else None

    def list_all(self) -> Sequence[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, description FROM roles ORDER BY name")
            return self._load_roles(cur, fetchall(cur))

    def create_role(self, *, name: str, description: Optional[str], permission_names: Iterable[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO roles(name, description) VALUES(%s,%s)", (name, description))
            role_id = int(cur.lastrowid)
            for permission_name in permission_names:
                cur.execute(
                    """
                    INSERT INTO role_permissions(role_id, permission_id)
                    SELECT %s, id FROM permissions WHERE name=%s
                    """,
                    (role_id, permission_name),
                )
            return role_id

    def add_permission(self, *, role_id: int, permission_name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO role_permissions(role_id, permission_id)
                SELECT %s, id FROM permissions WHERE name=%s
                """,
                (int(role_id), permission_name),
            )
            return cur.rowcount > 0

    def remove_permission(self, *, role_id: int, permission_name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE rp FROM role_permissions rp
                JOIN permissions p ON p.id = rp.permission_id
                WHERE rp.role_id=%s AND p.name=%s
                """,
                (int(role_id), permission_name),
            )
            return cur.rowcount > 0
