from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import MarkEntry


class GradeCalculator(ABC):
    """Calculator interface (Strategy Pattern for grading)."""

    @abstractmethod
    def grade_point(self, entry: MarkEntry) -> float:
        raise NotImplementedError

    @abstractmethod
    def letter(self, entry: MarkEntry) -> str:
        raise NotImplementedError
