from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..core.enums import AbsenceStatus, AbsenceType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Absence
from .repository import AbsenceRepository

_SELECT_ABSENCE = """
    SELECT a.id, a.employee_id, a.type, a.start_date, a.end_date, a.reason, a.status,
           a.reviewer_id, a.reviewed_at, a.review_comment, a.created_at, a.version,
           e.department_id AS owner_department_id
    FROM absences a
    JOIN employees e ON e.id = a.employee_id
"""


def _row_to_absence(row: dict) -> Absence:
    return Absence(
        absence_id=int(row["id"]),
        employee_id=int(row["employee_id"]),
        absence_type=AbsenceType(row["type"]),
        start_date=row["start_date"],
        end_date=row["end_date"],
        status=AbsenceStatus(row["status"]),
        reason=row.get("reason"),
        reviewer_id=row.get("reviewer_id"),
        reviewed_at=row.get("reviewed_at"),
        review_comment=row.get("review_comment"),
        created_at=row.get("created_at"),
        version=int(row.get("version") or 0),
        owner_department_id=row.get("owner_department_id"),
    )


class MySQLAbsenceRepository(AbsenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        absence_type: AbsenceType,
        start_date: date,
        end_date: date,
        reason: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO absences(employee_id, type, start_date, end_date, reason, status, version)
                VALUES(%s,%s,%s,%s,%s,%s,0)
                """,
                (int(employee_id), absence_type.value, start_date, end_date, reason, AbsenceStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get_by_id(self, absence_id: int) -> Optional[Absence]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_ABSENCE + " WHERE a.id=%s", (int(absence_id),))
            row = fetchone(cur)
            return _row_to_absence(row) if row else None

    def list_for_employee(self, employee_id: int) -> Sequence[Absence]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_ABSENCE + " WHERE a.employee_id=%s ORDER BY a.start_date DESC",
                (int(employee_id),),
            )
            return [_row_to_absence(r) for r in fetchall(cur)]

    def list_absences(
        self,
        *,
        status: Optional[AbsenceStatus] = None,
        department_id: Optional[int] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[Absence]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("a.status=%s")
            params.append(status.value)
        if department_id is not None:
            clauses.append("e.department_id=%s")
            params.append(int(department_id))
        if employee_id is not None:
            clauses.append("a.employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_ABSENCE + f" WHERE {where} ORDER BY a.created_at DESC",
                tuple(params),
            )
            return [_row_to_absence(r) for r in fetchall(cur)]

    def find_overlapping(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        statuses: Iterable[AbsenceStatus],
    ) -> Sequence[Absence]:
        status_values = [s.value for s in statuses]
        if not status_values:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_ABSENCE
                + f"""
                WHERE a.employee_id=%s
                  AND a.status IN ({",".join(["%s"] * len(status_values))})
                  AND a.start_date <= %s AND a.end_date >= %s
                """,
                (int(employee_id), *status_values, end_date, start_date),
            )
            return [_row_to_absence(r) for r in fetchall(cur)]

    def transition(
        self,
        *,
        absence_id: int,
        expected_version: int,
        status: AbsenceStatus,
        reviewer_id: Optional[int] = None,
        reviewed_at: Optional[datetime] = None,
        review_comment: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE absences
                SET status=%s,
                    reviewer_id=COALESCE(%s, reviewer_id),
                    reviewed_at=COALESCE(%s, reviewed_at),
                    review_comment=COALESCE(%s, review_comment),
                    version=version+1
                WHERE id=%s AND version=%s AND status=%s
                """,
                (
                    status.value,
                    reviewer_id,
                    reviewed_at,
                    review_comment,
                    int(absence_id),
                    int(expected_version),
                    AbsenceStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
