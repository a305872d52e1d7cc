from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, MarkedBy
from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
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
        """Write the record for (user_id, class_id, work_date); last write wins.

        Must be a single atomic insert-or-update on that key so concurrent
        duplicate submissions converge to one row. Returns attendance_id.
        """

        raise NotImplementedError

    def get(self, *, user_id: int, class_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_class_and_date(self, class_id: int, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        class_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
