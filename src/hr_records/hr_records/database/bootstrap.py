from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

log = logging.getLogger(__name__)

# (email, first name, last name, department, role, password). The identity provider
# authenticates against employees.password_hash; this package only reads the id.
DEMO_EMPLOYEES = (
    ("manager.eng@example.com", "Mara", "Keller", "Engineering", "MANAGER", "manager123"),
    ("dev.eng@example.com", "Dario", "Lind", "Engineering", "EMPLOYEE", "employee123"),
    ("qa.eng@example.com", "Ines", "Park", "Engineering", "EMPLOYEE", "employee123"),
    ("manager.sales@example.com", "Sofia", "Brandt", "Sales", "MANAGER", "manager123"),
    ("rep.sales@example.com", "Tomas", "Ruiz", "Sales", "EMPLOYEE", "employee123"),
)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "hr_records")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # The target database comes from DB_CONFIG, never from the script.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def _iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside of quoted strings."""
    buf: list[str] = []
    quote = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: str | Path) -> int:
    sql = _strip_comments(_strip_create_db_and_use(Path(path).read_text(encoding="utf-8")))
    conn = _connect(_as_target(db_config))
    count = 0
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    finally:
        conn.close()
    return count


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, schema_path)
    log.info("Applied %s (%d statements)", Path(schema_path).name, count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _run_script(db_config, seed_path)
    log.info("Applied %s (%d statements)", Path(seed_path).name, count)


def ensure_demo_employees(db_config: dict) -> None:
    """Upsert the demo employees, keyed by e-mail, with fresh password hashes."""
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor(dictionary=True)

        def get_id(table: str, value: str) -> int:
            cur.execute(f"SELECT id FROM {table} WHERE name=%s", (value,))
            row = cur.fetchone()
            if not row:
                raise RuntimeError(f"Missing {table} row for name={value}")
            return int(row["id"])

        for email, first_name, last_name, department, role, password in DEMO_EMPLOYEES:
            department_id = get_id("departments", department)
            role_id = get_id("roles", role)
            password_hash = generate_password_hash(password)

            cur.execute("SELECT id FROM employees WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    """
                    UPDATE employees
                    SET first_name=%s, last_name=%s, password_hash=%s, role_id=%s, department_id=%s, is_active=1
                    WHERE id=%s
                    """,
                    (first_name, last_name, password_hash, role_id, department_id, int(existing["id"])),
                )
                employee_id = int(existing["id"])
            else:
                cur.execute(
                    """
                    INSERT INTO employees(first_name, last_name, email, password_hash, role_id, department_id, hire_date)
                    VALUES(%s,%s,%s,%s,%s,%s,CURDATE())
                    """,
                    (first_name, last_name, email, password_hash, role_id, department_id),
                )
                employee_id = int(cur.lastrowid)

            if role == "MANAGER":
                cur.execute("UPDATE departments SET manager_id=%s WHERE id=%s", (employee_id, department_id))

        conn.commit()
    finally:
        conn.close()
    log.info("Demo employees ready (%d)", len(DEMO_EMPLOYEES))


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
