from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Feedback
from .repository import FeedbackRepository

_SELECT_FEEDBACK = """
    SELECT f.id, f.employee_id, f.author_id,
           CONCAT(a.first_name, ' ', a.last_name) AS author_name,
           f.content, f.polished_content, f.is_polished, f.rating, f.category,
           f.is_visible, f.created_at
    FROM feedback f
    JOIN employees a ON a.id = f.author_id
"""


def _row_to_feedback(row: dict) -> Feedback:
    return Feedback(
        feedback_id=int(row["id"]),
        employee_id=int(row["employee_id"]),
        author_id=int(row["author_id"]),
        content=row["content"],
        author_name=row.get("author_name"),
        polished_content=row.get("polished_content"),
        is_polished=bool(row.get("is_polished", False)),
        rating=row.get("rating"),
        category=row.get("category"),
        is_visible=bool(row.get("is_visible", True)),
        created_at=row.get("created_at"),
    )


class MySQLFeedbackRepository(FeedbackRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        author_id: int,
        content: str,
        polished_content: Optional[str],
        rating: Optional[int],
        category: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO feedback(
                    employee_id, author_id, content, polished_content, is_polished, rating, category, is_visible
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (
                    int(employee_id),
                    int(author_id),
                    content,
                    polished_content,
                    1 if polished_content else 0,
                    rating,
                    category,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, feedback_id: int) -> Optional[Feedback]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_FEEDBACK + " WHERE f.id=%s", (int(feedback_id),))
            row = fetchone(cur)
            return _row_to_feedback(row) if row else None

    def list_for_employee(self, employee_id: int, *, include_hidden: bool = False) -> Sequence[Feedback]:
        visible = "" if include_hidden else " AND f.is_visible=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_FEEDBACK + f" WHERE f.employee_id=%s{visible} ORDER BY f.created_at DESC",
                (int(employee_id),),
            )
            return [_row_to_feedback(r) for r in fetchall(cur)]

    def list_by_author(self, author_id: int, *, include_hidden: bool = False) -> Sequence[Feedback]:
        visible = "" if include_hidden else " AND f.is_visible=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_FEEDBACK + f" WHERE f.author_id=%s{visible} ORDER BY f.created_at DESC",
                (int(author_id),),
            )
            return [_row_to_feedback(r) for r in fetchall(cur)]

    def list_all(self, *, include_hidden: bool = False) -> Sequence[Feedback]:
        where = "1=1" if include_hidden else "f.is_visible=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_FEEDBACK + f" WHERE {where} ORDER BY f.created_at DESC")
            return [_row_to_feedback(r) for r in fetchall(cur)]

    def set_visible(self, *, feedback_id: int, is_visible: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE feedback SET is_visible=%s WHERE id=%s", (1 if is_visible else 0, int(feedback_id)))
            return cur.rowcount > 0

    def delete(self, *, feedback_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM feedback WHERE id=%s", (int(feedback_id),))
            return cur.rowcount > 0
