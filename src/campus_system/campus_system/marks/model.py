from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional


@dataclass(frozen=True)
class MarkRecord:
    """One student's result for one exam of one subject.

    Unique per (student_id, subject_id, exam_type); re-entering marks rewrites
    the record and keeps its id.
    """

    mark_id: str
    student_id: str
    subject_id: str
    exam_type: str
    max_marks: float
    obtained_marks: float
    percentage: float
    grade: str
    semester_id: str
    added_at: datetime
    remarks: str = ""
    added_by: Optional[str] = None


@dataclass(frozen=True)
class ExamType:
    value: str
    label: str
    max_marks: int


@dataclass(frozen=True)
class BulkMarkError:
    student_id: Optional[str]
    error: str


@dataclass(frozen=True)
class BulkMarkResult:
    results: List[MarkRecord] = field(default_factory=list)
    errors: List[BulkMarkError] = field(default_factory=list)


@dataclass(frozen=True)
class SubjectResult:
    subject_id: str
    subject_name: str
    subject_code: str
    credit_hours: int
    exams: List[MarkRecord]
    total_obtained: float
    total_max: float
    percentage: float
    grade: str
    gpa: float


@dataclass(frozen=True)
class StudentResults:
    student_id: str
    subjects: List[SubjectResult]
    total_exams: int
    total_marks: float
    obtained_marks: float
    percentage: float
    cgpa: float
    total_credits: int


@dataclass(frozen=True)
class SubjectPerformance:
    subject_id: str
    subject_name: Optional[str]
    subject_code: Optional[str]
    total_students: int
    average: float
    highest: float
    lowest: float
    pass_rate: float
    grade_distribution: Dict[str, int] = field(default_factory=dict)
