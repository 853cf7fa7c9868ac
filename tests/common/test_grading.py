import pytest

from src.campus_system.campus_system.common.grading import (
    attendance_percentage,
    grade_for_percentage,
    score_percentage,
    weighted_cgpa,
)


@pytest.mark.parametrize(
    "percentage,grade,gpa",
    [
        (100, "A+", 4.0),
        (90, "A+", 4.0),
        (89.99, "A", 4.0),
        (80, "A-", 3.7),
        (75, "B+", 3.3),
        (70, "B", 3.0),
        (65, "B-", 2.7),
        (60, "C+", 2.3),
        (55, "C", 2.0),
        (50, "C-", 1.7),
        (45, "D", 1.0),
        (44.99, "F", 0.0),
        (0, "F", 0.0),
    ],
)
def test_grade_bands(percentage, grade, gpa):
    band = grade_for_percentage(percentage)
    assert (band.grade, band.gpa) == (grade, gpa)


def test_attendance_percentage_weights_late_days():
    assert attendance_percentage(present=3, late=2, total=5) == 80.0
    assert attendance_percentage(present=1, late=0, total=3) == 33.33
    assert attendance_percentage(present=0, late=0, total=0) == 0.0


def test_score_percentage_guards_zero_maximum():
    assert score_percentage(45, 50) == 90.0
    assert score_percentage(1, 0) == 0.0


def test_cgpa_is_weighted_by_credit_hours():
    assert weighted_cgpa([(4.0, 4), (2.0, 2)]) == 3.33
    assert weighted_cgpa([]) == 0.0
