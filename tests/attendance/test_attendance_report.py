from __future__ import annotations

from datetime import date

import pytest

from src.attendify.attendance.model import AttendanceReportRow
from src.attendify.attendance.report import REPORT_FIELDS, AttendanceReportService, attendance_percentage
from src.attendify.core.enums import AttendanceStatus, MarkedBy
from src.attendify.core.exceptions import ValidationError


class FakeAttendanceRepo:
    def __init__(self, rows):
        self._rows = rows
        self.last_args = None

    def get_report_rows(self, *, start_date: date, end_date: date, class_id=None, user_id=None):
        self.last_args = {
            "start_date": start_date,
            "end_date": end_date,
            "class_id": class_id,
            "user_id": user_id,
        }
        return self._rows


def _row(user_id, day, status, marked_by=MarkedBy.AUTO):
    return AttendanceReportRow(
        user_id=user_id,
        name=f"Student {user_id}",
        roll_number=f"R{user_id:03d}",
        class_id=1,
        class_name="CSE-A",
        work_date=date(2026, 3, day),
        status=status,
        marked_by=marked_by,
    )


def test_percentage_counts_present_and_on_duty():
    rows = [
        _row(1, 2, AttendanceStatus.PRESENT),
        _row(1, 3, AttendanceStatus.ON_DUTY, MarkedBy.MANUAL),
        _row(1, 4, AttendanceStatus.LEAVE, MarkedBy.MANUAL),
        _row(1, 5, AttendanceStatus.ABSENT, MarkedBy.REQUEST),
        _row(2, 2, AttendanceStatus.PRESENT),
    ]

    report = AttendanceReportService(FakeAttendanceRepo(rows)).build_attendance_report(
        start=date(2026, 3, 1), end=date(2026, 3, 31)
    )

    by_user = {s["user_id"]: s for s in report.summary}
    assert by_user[1]["attended"] == 2
    assert by_user[1]["total"] == 4
    assert by_user[1]["percentage"] == 50.0
    assert by_user[2]["percentage"] == 100.0
    # lowest attendance first
    assert [s["user_id"] for s in report.summary] == [1, 2]


def test_rows_match_export_columns():
    report = AttendanceReportService(FakeAttendanceRepo([_row(1, 2, AttendanceStatus.PRESENT)])).build_attendance_report(
        start=date(2026, 3, 1), end=date(2026, 3, 31)
    )

    row = report.rows[0]
    assert list(row) == REPORT_FIELDS
    assert row["date"] == "2026-03-02"
    assert row["status"] == "Present"
    assert row["marked_by"] == "auto"


def test_report_forwards_filters():
    repo = FakeAttendanceRepo([])
    svc = AttendanceReportService(repo)

    report = svc.build_attendance_report(start=date(2026, 3, 1), end=date(2026, 3, 31), class_id=4, user_id=123)

    assert repo.last_args["class_id"] == 4
    assert repo.last_args["user_id"] == 123
    assert report.rows == []
    assert report.summary == []


def test_end_before_start():
    svc = AttendanceReportService(FakeAttendanceRepo([]))
    with pytest.raises(ValidationError):
        svc.build_attendance_report(start=date(2026, 3, 31), end=date(2026, 3, 1))


@pytest.mark.parametrize("attended, total, expected", [(0, 0, 0.0), (1, 3, 33.33), (2, 3, 66.67), (5, 5, 100.0)])
def test_attendance_percentage(attended, total, expected):
    assert attendance_percentage(attended, total) == expected
