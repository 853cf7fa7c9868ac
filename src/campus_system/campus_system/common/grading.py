"""Percentage and grade formulas shared by attendance, marks and reports.

Every endpoint that reports an attendance percentage or a letter grade goes
through this module, so there is exactly one formula for each.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

from ..core.constants import LATE_WEIGHT


@dataclass(frozen=True)
class GradeBand:
    grade: str
    gpa: float


# (lower bound inclusive, grade, gpa), highest first
GRADE_TABLE: Sequence[Tuple[float, str, float]] = (
    (90.0, "A+", 4.0),
    (85.0, "A", 4.0),
    (80.0, "A-", 3.7),
    (75.0, "B+", 3.3),
    (70.0, "B", 3.0),
    (65.0, "B-", 2.7),
    (60.0, "C+", 2.3),
    (55.0, "C", 2.0),
    (50.0, "C-", 1.7),
    (45.0, "D", 1.0),
)
FAILING_BAND = GradeBand(grade="F", gpa=0.0)
GRADE_LETTERS = tuple(g for _, g, _ in GRADE_TABLE) + (FAILING_BAND.grade,)


def attendance_percentage(*, present: int, late: int, total: int) -> float:
    """(present + 0.5 * late) / total * 100, rounded to 2 decimals; 0 for no records."""
    if total <= 0:
        return 0.0
    return round((present + late * LATE_WEIGHT) / total * 100, 2)


def score_percentage(obtained: float, maximum: float) -> float:
    if maximum <= 0:
        return 0.0
    return round(float(obtained) / float(maximum) * 100, 2)


def grade_for_percentage(percentage: float) -> GradeBand:
    p = float(percentage)
    for floor, grade, gpa in GRADE_TABLE:
        if p >= floor:
            return GradeBand(grade=grade, gpa=gpa)
    return FAILING_BAND


def weighted_cgpa(items: Iterable[Tuple[float, float]]) -> float:
    """Credit-weighted GPA from (gpa, credit_hours) pairs."""
    points = 0.0
    credits = 0.0
    for gpa, credit_hours in items:
        points += gpa * credit_hours
        credits += credit_hours
    if credits <= 0:
        return 0.0
    return round(points / credits, 2)
