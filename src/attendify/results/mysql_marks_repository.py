from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import MarkEntry
from .repository import MarksRepository


class MySQLMarksRepository(MarksRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def put_mark(
        self,
        *,
        user_id: int,
        semester: int,
        subject_code: str,
        subject_name: str,
        credits: float,
        marks_obtained: float,
        max_marks: float,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO marks(user_id, semester, subject_code, subject_name, credits, marks_obtained, max_marks)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    mark_id=LAST_INSERT_ID(mark_id),
                    subject_name=VALUES(subject_name),
                    credits=VALUES(credits),
                    marks_obtained=VALUES(marks_obtained),
                    max_marks=VALUES(max_marks)
                """,
                (
                    int(user_id),
                    int(semester),
                    subject_code,
                    subject_name,
                    float(credits),
                    float(marks_obtained),
                    float(max_marks),
                ),
            )
            return int(cur.lastrowid)

    def list_for_user(self, user_id: int) -> Sequence[MarkEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT mark_id, user_id, semester, subject_code, subject_name, credits, marks_obtained, max_marks
                FROM marks
                WHERE user_id=%s
                ORDER BY semester, subject_code
                """,
                (int(user_id),),
            )
            return [
                MarkEntry(
                    mark_id=int(r["mark_id"]),
                    user_id=int(r["user_id"]),
                    semester=int(r["semester"]),
                    subject_code=r["subject_code"],
                    subject_name=r["subject_name"],
                    credits=float(r["credits"]),
                    marks_obtained=float(r["marks_obtained"]),
                    max_marks=float(r["max_marks"]),
                )
                for r in fetchall(cur)
            ]
