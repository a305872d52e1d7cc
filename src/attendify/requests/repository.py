from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, RequestStatus
from .model import AttendanceRequest


class RequestRepository(Protocol):
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
        raise NotImplementedError

    def get(self, request_id: int) -> Optional[AttendanceRequest]:
        raise NotImplementedError

    def find_pending(self, *, user_id: int, class_id: int, work_date: date) -> Optional[AttendanceRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        user_id: Optional[int] = None,
        class_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        """Return UI rows (joined with user and class)."""

        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: Optional[int],
        reviewer_note: Optional[str] = None,
    ) -> bool:
        """pending -> status, only if still pending. False when nothing changed.

        ``decided_by`` is None when the system closes the request itself.
        """

        raise NotImplementedError

    def decide_and_apply(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        record_status: AttendanceStatus,
        reviewer_note: Optional[str] = None,
    ) -> bool:
        """Guarded decide plus the attendance upsert (marked_by=request) in one transaction.

        Either both are written or neither is. False when the request was no longer pending.
        """

        raise NotImplementedError
