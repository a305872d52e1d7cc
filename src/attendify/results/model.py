from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MarkEntry:
    """Marks for one subject in one semester; key (user_id, semester, subject_code)."""

    mark_id: int
    user_id: int
    semester: int
    subject_code: str
    subject_name: str
    credits: float
    marks_obtained: float
    max_marks: float

    @property
    def percentage(self) -> float:
        return 100.0 * self.marks_obtained / self.max_marks


@dataclass(frozen=True)
class SemesterResult:
    semester: int
    subjects: list[dict]
    credits: float
    sgpa: float


@dataclass(frozen=True)
class ResultSheet:
    user_id: int
    semesters: list[SemesterResult]
    total_credits: float
    cgpa: float

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "semesters": [
                {"semester": s.semester, "subjects": s.subjects, "credits": s.credits, "sgpa": s.sgpa}
                for s in self.semesters
            ],
            "total_credits": self.total_credits,
            "cgpa": self.cgpa,
        }
