from __future__ import annotations

from .base import GradeCalculator
from ..model import MarkEntry

# (minimum percentage, grade point, letter), highest band first
TEN_POINT_BANDS = (
    (90.0, 10.0, "O"),
    (80.0, 9.0, "A+"),
    (70.0, 8.0, "A"),
    (60.0, 7.0, "B+"),
    (50.0, 6.0, "B"),
    (45.0, 5.0, "C"),
    (40.0, 4.0, "P"),
)


class TenPointGradeCalculator(GradeCalculator):
    """10-point scale on the subject percentage; below 40% is F (0 points)."""

    def _band(self, entry: MarkEntry) -> tuple[float, str]:
        pct = entry.percentage
        for minimum, points, letter in TEN_POINT_BANDS:
            if pct >= minimum:
                return points, letter
        return 0.0, "F"

    def grade_point(self, entry: MarkEntry) -> float:
        return self._band(entry)[0]

    def letter(self, entry: MarkEntry) -> str:
        return self._band(entry)[1]
