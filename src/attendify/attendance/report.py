from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .repository import AttendanceRepository

# On Duty counts towards attendance; Leave and Absent do not.
ATTENDED_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.ON_DUTY})

REPORT_FIELDS = ["date", "user_id", "name", "roll_number", "class_name", "status", "marked_by"]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


def attendance_percentage(attended: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(100.0 * attended / total, 2)


class AttendanceReportService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def build_attendance_report(
        self,
        *,
        start: date,
        end: date,
        class_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> ReportData:
        if end < start:
            raise ValidationError("End date must be on or after start date")

        query_rows = self._attendance.get_report_rows(start_date=start, end_date=end, class_id=class_id, user_id=user_id)

        summary_map: dict[int, dict] = {}
        out_rows: list[dict] = []

        for r in query_rows:
            out_rows.append(
                {
                    "date": r.work_date.strftime("%Y-%m-%d"),
                    "user_id": r.user_id,
                    "name": r.name,
                    "roll_number": r.roll_number,
                    "class_name": r.class_name,
                    "status": r.status.value,
                    "marked_by": r.marked_by.value,
                }
            )

            s = summary_map.get(r.user_id)
            if not s:
                s = {
                    "user_id": r.user_id,
                    "name": r.name,
                    "roll_number": r.roll_number,
                    "attended": 0,
                    "total": 0,
                }
                summary_map[r.user_id] = s
            s["total"] += 1
            if r.status in ATTENDED_STATUSES:
                s["attended"] += 1

        summary = []
        for s in summary_map.values():
            summary.append({**s, "percentage": attendance_percentage(s["attended"], s["total"])})

        summary.sort(key=lambda x: (x["percentage"], x["roll_number"]))
        return ReportData(rows=out_rows, summary=summary)
