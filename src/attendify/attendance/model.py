from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, MarkedBy, ResolutionOutcome
from ..faces.model import FaceMatch
from ..geo.model import GeofenceResult


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one row per (student, class, date)."""

    attendance_id: int
    user_id: int
    class_id: int
    work_date: date
    status: AttendanceStatus
    marked_by: MarkedBy
    distance_m: Optional[float] = None
    note: Optional[str] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "user_id": self.user_id,
            "class_id": self.class_id,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "status": self.status.value,
            "marked_by": self.marked_by.value,
            "distance_m": None if self.distance_m is None else round(self.distance_m, 2),
            "note": self.note or "",
        }


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports/exports (joined with user and class)."""

    user_id: int
    name: str
    roll_number: str
    class_id: int
    class_name: str
    work_date: date
    status: AttendanceStatus
    marked_by: MarkedBy


@dataclass(frozen=True)
class Resolution:
    """What an automatic (face and/or geo) submission resolved to."""

    outcome: ResolutionOutcome
    user_id: int
    class_id: int
    work_date: date
    geofence: GeofenceResult
    face: Optional[FaceMatch] = None
    record_id: Optional[int] = None
    request_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "outcome": self.outcome.value,
            "user_id": self.user_id,
            "class_id": self.class_id,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "geofence": self.geofence.to_dict(),
            "face": self.face.to_dict() if self.face else None,
            "record_id": self.record_id,
            "request_id": self.request_id,
        }
