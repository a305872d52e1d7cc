from __future__ import annotations

import logging
from typing import Any, Optional

from ..common.validators import require_float, require_int, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .calculator.base import GradeCalculator
from .calculator.ten_point_calculator import TenPointGradeCalculator
from .model import MarkEntry, ResultSheet, SemesterResult
from .repository import MarksRepository

logger = logging.getLogger(__name__)


def _weighted_average(pairs: list[tuple[float, float]]) -> float:
    """Credit-weighted mean of (grade_point, credits); 0.0 when there are no credits."""

    credits = sum(c for _, c in pairs)
    if credits <= 0:
        return 0.0
    return round(sum(gp * c for gp, c in pairs) / credits, 2)


class ResultService:
    def __init__(
        self,
        marks: MarksRepository,
        users: UserRepository,
        *,
        calculator: Optional[GradeCalculator] = None,
    ):
        self._marks = marks
        self._users = users
        self._calculator = calculator or TenPointGradeCalculator()

    def enter_marks(
        self,
        *,
        current_role: Role,
        user_id: Any,
        semester: Any,
        subject_code: str,
        subject_name: str,
        credits: Any,
        marks_obtained: Any,
        max_marks: Any = 100,
    ) -> int:
        if current_role not in {Role.OWNER, Role.STAFF}:
            raise AuthorizationError("Only owner or staff can enter marks")

        user = self._users.get_by_id(require_int(user_id, "Student", minimum=1))
        if not user:
            raise NotFoundError("Student not found")

        semester = require_int(semester, "Semester", minimum=1)
        subject_code = require_non_empty(subject_code, "Subject code").upper()
        subject_name = require_non_empty(subject_name, "Subject name")
        credits = require_float(credits, "Credits")
        marks_obtained = require_float(marks_obtained, "Marks")
        max_marks = require_float(max_marks, "Max marks")

        if credits <= 0:
            raise ValidationError("Credits must be greater than 0")
        if max_marks <= 0:
            raise ValidationError("Max marks must be greater than 0")
        if marks_obtained < 0 or marks_obtained > max_marks:
            raise ValidationError("Marks must be between 0 and max marks")

        mark_id = self._marks.put_mark(
            user_id=user.user_id,
            semester=semester,
            subject_code=subject_code,
            subject_name=subject_name,
            credits=credits,
            marks_obtained=marks_obtained,
            max_marks=max_marks,
        )
        logger.info("Marks for %s sem %s %s saved", user.roll_number, semester, subject_code)
        return mark_id

    def _subject_row(self, m: MarkEntry) -> dict:
        return {
            "subject_code": m.subject_code,
            "subject_name": m.subject_name,
            "credits": m.credits,
            "marks_obtained": m.marks_obtained,
            "max_marks": m.max_marks,
            "grade": self._calculator.letter(m),
            "grade_point": self._calculator.grade_point(m),
        }

    def results_for(self, user_id: int) -> ResultSheet:
        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError("Student not found")

        by_semester: dict[int, list[MarkEntry]] = {}
        for m in self._marks.list_for_user(int(user_id)):
            by_semester.setdefault(m.semester, []).append(m)

        semesters: list[SemesterResult] = []
        all_pairs: list[tuple[float, float]] = []
        for sem in sorted(by_semester):
            entries = by_semester[sem]
            pairs = [(self._calculator.grade_point(m), m.credits) for m in entries]
            all_pairs.extend(pairs)
            semesters.append(
                SemesterResult(
                    semester=sem,
                    subjects=[self._subject_row(m) for m in entries],
                    credits=sum(c for _, c in pairs),
                    sgpa=_weighted_average(pairs),
                )
            )

        return ResultSheet(
            user_id=int(user_id),
            semesters=semesters,
            total_credits=sum(c for _, c in all_pairs),
            cgpa=_weighted_average(all_pairs),
        )
