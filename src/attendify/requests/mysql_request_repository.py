from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..attendance.mysql_attendance_repository import upsert_attendance
from ..core.enums import AttendanceStatus, MarkedBy, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, optional_float
from .model import AttendanceRequest
from .repository import RequestRepository

_COLUMNS = (
    "request_id, user_id, class_id, work_date, latitude, longitude, distance_m, face_distance, "
    "status, created_at, decided_by, decided_at, reviewer_note"
)


def _request(r: dict) -> AttendanceRequest:
    return AttendanceRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        class_id=int(r["class_id"]),
        work_date=r["work_date"],
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        distance_m=float(r["distance_m"]),
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        face_distance=optional_float(r.get("face_distance")),
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
        reviewer_note=r.get("reviewer_note"),
    )


def _guarded_decide(
    cur,
    *,
    request_id: int,
    status: RequestStatus,
    decided_by: Optional[int],
    reviewer_note: Optional[str],
) -> bool:
    cur.execute(
        """
        UPDATE attendance_requests
        SET status=%s, decided_by=%s, decided_at=NOW(), reviewer_note=%s
        WHERE request_id=%s AND status=%s
        """,
        (
            status.value,
            None if decided_by is None else int(decided_by),
            reviewer_note,
            int(request_id),
            RequestStatus.PENDING.value,
        ),
    )
    return cur.rowcount > 0


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        class_id: int,
        work_date: date,
        latitude: float,
        longitude: float,
        distance_m: float,
        face_distance: Optional[float] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_requests(
                    user_id, class_id, work_date, latitude, longitude, distance_m, face_distance, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    int(class_id),
                    work_date,
                    float(latitude),
                    float(longitude),
                    float(distance_m),
                    face_distance,
                    RequestStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get(self, request_id: int) -> Optional[AttendanceRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _request(r) if r else None

    def find_pending(self, *, user_id: int, class_id: int, work_date: date) -> Optional[AttendanceRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_requests
                WHERE user_id=%s AND class_id=%s AND work_date=%s AND status=%s
                ORDER BY request_id
                LIMIT 1
                """,
                (int(user_id), int(class_id), work_date, RequestStatus.PENDING.value),
            )
            r = fetchone(cur)
            return _request(r) if r else None

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        user_id: Optional[int] = None,
        class_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)
        if user_id is not None:
            clauses.append("r.user_id=%s")
            params.append(int(user_id))
        if class_id is not None:
            clauses.append("r.class_id=%s")
            params.append(int(class_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT r.request_id, r.user_id, u.name, u.roll_number,
                       r.class_id, c.name AS class_name, r.work_date,
                       r.distance_m, r.face_distance, r.status, r.created_at, r.reviewer_note
                FROM attendance_requests r
                JOIN users u ON u.user_id = r.user_id
                JOIN classes c ON c.class_id = r.class_id
                WHERE {where}
                ORDER BY r.created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [
                {
                    "request_id": int(r["request_id"]),
                    "user_id": int(r["user_id"]),
                    "name": r["name"],
                    "roll_number": r["roll_number"],
                    "class_id": int(r["class_id"]),
                    "class_name": r["class_name"],
                    "date": r["work_date"].strftime("%Y-%m-%d"),
                    "distance_m": round(float(r["distance_m"]), 2),
                    "face_distance": (round(float(r["face_distance"]), 4) if r.get("face_distance") is not None else None),
                    "status": r["status"],
                    "created_at": r["created_at"].strftime("%Y-%m-%d %H:%M"),
                    "reviewer_note": r.get("reviewer_note") or "",
                }
                for r in fetchall(cur)
            ]

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: Optional[int],
        reviewer_note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return _guarded_decide(
                cur, request_id=request_id, status=status, decided_by=decided_by, reviewer_note=reviewer_note
            )

    def decide_and_apply(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        record_status: AttendanceStatus,
        reviewer_note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if not _guarded_decide(
                cur, request_id=request_id, status=status, decided_by=decided_by, reviewer_note=reviewer_note
            ):
                return False

            cur.execute(
                "SELECT user_id, class_id, work_date, distance_m FROM attendance_requests WHERE request_id=%s",
                (int(request_id),),
            )
            r = fetchone(cur)
            upsert_attendance(
                cur,
                user_id=int(r["user_id"]),
                class_id=int(r["class_id"]),
                work_date=r["work_date"],
                status=record_status,
                marked_by=MarkedBy.REQUEST,
                distance_m=optional_float(r.get("distance_m")),
                note=reviewer_note,
            )
            return True
