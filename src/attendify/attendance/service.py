from __future__ import annotations

import logging
from datetime import date

from ..classes.repository import ClassRepository
from ..common.validators import require_int
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, MarkedBy, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_MARKERS = {Role.OWNER, Role.STAFF}


class AttendanceService:
    """Use case: manual marking and attendance views."""

    def __init__(self, attendance: AttendanceRepository, users: UserRepository, classes: ClassRepository):
        self._attendance = attendance
        self._users = users
        self._classes = classes

    def mark_manual(
        self,
        *,
        current_role: Role,
        user_id: int,
        class_id: int,
        work_date: date,
        status: str,
        note: str = "",
    ) -> int:
        if current_role not in _MARKERS:
            raise AuthorizationError("Only owner or staff can mark attendance")

        try:
            parsed = AttendanceStatus(status)
        except ValueError:
            allowed = ", ".join(s.value for s in AttendanceStatus)
            raise ValidationError(f"Status must be one of: {allowed}")

        user = self._users.get_by_id(require_int(user_id, "Student", minimum=1))
        if not user:
            raise NotFoundError("Student not found")
        cls = self._classes.get_by_id(require_int(class_id, "Class", minimum=1))
        if not cls:
            raise NotFoundError("Class not found")

        record_id = self._attendance.put(
            user_id=user.user_id,
            class_id=cls.class_id,
            work_date=work_date,
            status=parsed,
            marked_by=MarkedBy.MANUAL,
            note=(note or "").strip() or None,
        )
        logger.info("Marked %s %s for class %s on %s", user.roll_number, parsed.value, cls.class_id, work_date)
        return record_id

    def history(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> list[dict]:
        return [r.to_dict() for r in self._attendance.list_for_user(int(user_id), int(limit))]

    def class_sheet(self, *, current_role: Role, class_id: int, work_date: date) -> list[dict]:
        """Every student enrolled in the class with that day's status (or 'Unmarked')."""

        if current_role not in _MARKERS:
            raise AuthorizationError("You do not have permission")
        if not self._classes.get_by_id(int(class_id)):
            raise NotFoundError("Class not found")

        by_user = {r.user_id: r for r in self._attendance.list_for_class_and_date(int(class_id), work_date)}
        sheet: list[dict] = []
        for u in self._users.list_users(class_id=int(class_id)):
            if u.role != Role.STUDENT:
                continue
            rec = by_user.get(u.user_id)
            sheet.append(
                {
                    "user_id": u.user_id,
                    "name": u.name,
                    "roll_number": u.roll_number,
                    "status": rec.status.value if rec else "Unmarked",
                    "marked_by": rec.marked_by.value if rec else None,
                }
            )
        return sheet
