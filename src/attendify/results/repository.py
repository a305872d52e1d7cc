from __future__ import annotations

from typing import Protocol, Sequence

from .model import MarkEntry


class MarksRepository(Protocol):
    def put_mark(
        self,
        *,
        user_id: int,
        semester: int,
        subject_code: str,
        subject_name: str,
        credits: float,
        marks_obtained: float,
        max_marks: float,
    ) -> int:
        """Upsert on (user_id, semester, subject_code); returns mark_id."""

        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[MarkEntry]:
        raise NotImplementedError
