from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class AttendanceRequest:
    """A submission that failed automatic acceptance and awaits a reviewer."""

    request_id: int
    user_id: int
    class_id: int
    work_date: date
    latitude: float
    longitude: float
    distance_m: float
    status: RequestStatus
    created_at: datetime
    face_distance: Optional[float] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    reviewer_note: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "user_id": self.user_id,
            "class_id": self.class_id,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "latitude": self.latitude,
            "longitude": self.longitude,
            "distance_m": round(self.distance_m, 2),
            "face_distance": None if self.face_distance is None else round(self.face_distance, 4),
            "status": self.status.value,
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M"),
            "decided_by": self.decided_by,
            "reviewer_note": self.reviewer_note or "",
        }
