from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, MarkedBy
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, optional_float
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, user_id, class_id, work_date, status, marked_by, distance_m, note, updated_at"


def _record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        class_id=int(r["class_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        marked_by=MarkedBy(r["marked_by"]),
        distance_m=optional_float(r.get("distance_m")),
        note=r.get("note"),
        updated_at=r.get("updated_at"),
    )


def upsert_attendance(
    cur,
    *,
    user_id: int,
    class_id: int,
    work_date: date,
    status: AttendanceStatus,
    marked_by: MarkedBy,
    distance_m: Optional[float] = None,
    note: Optional[str] = None,
) -> int:
    """Insert-or-update on (user_id, class_id, work_date) using an open cursor.

    Shared with the request repository so a decision and its record commit together.
    """

    # LAST_INSERT_ID(expr) makes lastrowid point at the existing row on update.
    cur.execute(
        """
        INSERT INTO attendance_records(user_id, class_id, work_date, status, marked_by, distance_m, note)
        VALUES(%s,%s,%s,%s,%s,%s,%s)
        ON DUPLICATE KEY UPDATE
            attendance_id=LAST_INSERT_ID(attendance_id),
            status=VALUES(status),
            marked_by=VALUES(marked_by),
            distance_m=VALUES(distance_m),
            note=VALUES(note)
        """,
        (
            int(user_id),
            int(class_id),
            work_date,
            status.value,
            marked_by.value,
            distance_m,
            note,
        ),
    )
    return int(cur.lastrowid)


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def put(
        self,
        *,
        user_id: int,
        class_id: int,
        work_date: date,
        status: AttendanceStatus,
        marked_by: MarkedBy,
        distance_m: Optional[float] = None,
        note: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            return upsert_attendance(
                cur,
                user_id=user_id,
                class_id=class_id,
                work_date=work_date,
                status=status,
                marked_by=marked_by,
                distance_m=distance_m,
                note=note,
            )

    def get(self, *, user_id: int, class_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND class_id=%s AND work_date=%s
                """,
                (int(user_id), int(class_id), work_date),
            )
            r = fetchone(cur)
            return _record(r) if r else None

    def list_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s
                ORDER BY work_date DESC, class_id
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_record(r) for r in fetchall(cur)]

    def list_for_class_and_date(self, class_id: int, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE class_id=%s AND work_date=%s
                ORDER BY user_id
                """,
                (int(class_id), work_date),
            )
            return [_record(r) for r in fetchall(cur)]

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        class_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["a.work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if class_id is not None:
            clauses.append("a.class_id=%s")
            params.append(int(class_id))
        if user_id is not None:
            clauses.append("a.user_id=%s")
            params.append(int(user_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT a.user_id, u.name, u.roll_number, a.class_id, c.name AS class_name,
                       a.work_date, a.status, a.marked_by
                FROM attendance_records a
                JOIN users u ON u.user_id = a.user_id
                JOIN classes c ON c.class_id = a.class_id
                WHERE {where}
                ORDER BY a.work_date, u.roll_number
                """,
                tuple(params),
            )
            return [
                AttendanceReportRow(
                    user_id=int(r["user_id"]),
                    name=r["name"],
                    roll_number=r["roll_number"],
                    class_id=int(r["class_id"]),
                    class_name=r["class_name"],
                    work_date=r["work_date"],
                    status=AttendanceStatus(r["status"]),
                    marked_by=MarkedBy(r["marked_by"]),
                )
                for r in fetchall(cur)
            ]
