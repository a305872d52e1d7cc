from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, RequestStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import AttendanceRequest
from .repository import RequestRepository

logger = logging.getLogger(__name__)

_REVIEWERS = {Role.OWNER, Role.STAFF}

_DECISION_TO_STATUS = {
    RequestStatus.APPROVED: AttendanceStatus.PRESENT,
    RequestStatus.REJECTED: AttendanceStatus.ABSENT,
}


class RequestService:
    """Use case: review pending attendance requests.

    A request is decided exactly once. Repeating the same decision returns
    the stored request without writing anything; the opposite decision on a
    decided request is refused. The decision and its attendance record are
    committed together by the repository.
    """

    def __init__(self, requests: RequestRepository):
        self._requests = requests

    def approve(
        self,
        *,
        current_role: Role,
        reviewer_id: int,
        request_id: int,
        note: str = "",
    ) -> AttendanceRequest:
        return self._decide(
            current_role=current_role,
            reviewer_id=reviewer_id,
            request_id=request_id,
            decision=RequestStatus.APPROVED,
            note=note,
        )

    def reject(
        self,
        *,
        current_role: Role,
        reviewer_id: int,
        request_id: int,
        note: str = "",
    ) -> AttendanceRequest:
        return self._decide(
            current_role=current_role,
            reviewer_id=reviewer_id,
            request_id=request_id,
            decision=RequestStatus.REJECTED,
            note=note,
        )

    def _decide(
        self,
        *,
        current_role: Role,
        reviewer_id: int,
        request_id: int,
        decision: RequestStatus,
        note: str,
    ) -> AttendanceRequest:
        if current_role not in _REVIEWERS:
            raise AuthorizationError("Only owner or staff can review requests")

        req = self._requests.get(int(request_id))
        if not req:
            raise NotFoundError("Request not found")
        if req.status == decision:
            return req
        if req.status != RequestStatus.PENDING:
            raise ValidationError(f"Request was already {req.status.value}")

        reviewer_note = (note or "").strip() or None
        decided = self._requests.decide_and_apply(
            request_id=req.request_id,
            status=decision,
            decided_by=int(reviewer_id),
            record_status=_DECISION_TO_STATUS[decision],
            reviewer_note=reviewer_note,
        )
        if not decided:
            # another reviewer got there first
            current = self._requests.get(req.request_id)
            if current and current.status == decision:
                return current
            raise ValidationError("Request was already decided")

        logger.info("Request %s %s by user %s", req.request_id, decision.value, reviewer_id)

        return self._requests.get(req.request_id) or req

    def list_pending(self, *, current_role: Role, class_id: Optional[int] = None) -> Sequence[dict]:
        if current_role not in _REVIEWERS:
            raise AuthorizationError("Only owner or staff can review requests")
        return self._requests.list_requests(status=RequestStatus.PENDING, class_id=class_id, limit=500)

    def list_mine(self, *, user_id: int) -> Sequence[dict]:
        return self._requests.list_requests(user_id=int(user_id), limit=200)
