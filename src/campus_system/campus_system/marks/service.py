from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..academics.repository import AcademicsRepository
from ..common.grading import GRADE_LETTERS, grade_for_percentage, score_percentage, weighted_cgpa
from ..common.ids import new_id
from ..common.validators import require_non_empty, to_decimal
from ..core.constants import DEFAULT_CREDIT_HOURS, DEFAULT_MARKS_ADDED_BY, DEFAULT_SEMESTER_ID, EXAM_TYPES
from ..core.exceptions import NotFoundError, ValidationError
from ..students.repository import StudentRepository
from .model import (
    BulkMarkError,
    BulkMarkResult,
    ExamType,
    MarkRecord,
    StudentResults,
    SubjectPerformance,
    SubjectResult,
)
from .repository import MarksRepository

logger = logging.getLogger(__name__)


def _score(value, field_name: str) -> float:
    return float(to_decimal(value, field_name))


def exam_types() -> List[ExamType]:
    return [ExamType(value=v, label=label, max_marks=m) for v, label, m in EXAM_TYPES]


class MarksService:
    def __init__(self, marks: MarksRepository, students: StudentRepository, academics: AcademicsRepository):
        self._marks = marks
        self._students = students
        self._academics = academics

    def _build(
        self,
        *,
        student_id: str,
        subject_id: str,
        exam_type: str,
        max_marks,
        obtained_marks,
        semester_id: Optional[str],
        remarks: Optional[str],
        added_by: Optional[str],
        now: datetime,
    ) -> MarkRecord:
        maximum = _score(max_marks, "maxMarks")
        obtained = _score(obtained_marks, "obtainedMarks")
        if maximum <= 0:
            raise ValidationError("maxMarks must be greater than 0")
        if obtained < 0 or obtained > maximum:
            raise ValidationError("obtainedMarks must be between 0 and maxMarks")

        percentage = score_percentage(obtained, maximum)
        return MarkRecord(
            mark_id=new_id(),
            student_id=student_id,
            subject_id=subject_id,
            exam_type=exam_type,
            max_marks=maximum,
            obtained_marks=obtained,
            percentage=percentage,
            grade=grade_for_percentage(percentage).grade,
            semester_id=(semester_id or "").strip() or DEFAULT_SEMESTER_ID,
            added_at=now,
            remarks=(remarks or "").strip(),
            added_by=(added_by or "").strip() or DEFAULT_MARKS_ADDED_BY,
        )

    def add_mark(
        self,
        *,
        student_id: str,
        subject_id: str,
        exam_type: str,
        max_marks,
        obtained_marks,
        semester_id: Optional[str] = None,
        remarks: Optional[str] = None,
        added_by: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Tuple[MarkRecord, bool]:
        """Insert or overwrite one exam result. Returns (record, created)."""
        student_id = require_non_empty(student_id, "studentId")
        subject_id = require_non_empty(subject_id, "subjectId")
        exam_type = require_non_empty(exam_type, "examType")
        record = self._build(
            student_id=student_id,
            subject_id=subject_id,
            exam_type=exam_type,
            max_marks=max_marks,
            obtained_marks=obtained_marks,
            semester_id=semester_id,
            remarks=remarks,
            added_by=added_by,
            now=now or datetime.now(),
        )
        if not self._students.get_by_id(student_id):
            raise NotFoundError("Student not found")

        stored, created = self._marks.upsert(record)
        logger.info(
            "Marks %s for %s/%s/%s: %s/%s",
            "added" if created else "updated",
            student_id,
            subject_id,
            exam_type,
            stored.obtained_marks,
            stored.max_marks,
        )
        return stored, created

    def add_bulk(
        self,
        *,
        subject_id: str,
        exam_type: str,
        max_marks,
        entries: Sequence[Mapping],
        semester_id: Optional[str] = None,
        added_by: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> BulkMarkResult:
        subject_id = require_non_empty(subject_id, "subjectId")
        exam_type = require_non_empty(exam_type, "examType")
        if not entries or isinstance(entries, (str, bytes, Mapping)):
            raise ValidationError("records must be a non-empty list")
        now = now or datetime.now()

        result = BulkMarkResult()
        for entry in entries:
            if not isinstance(entry, Mapping):
                result.errors.append(BulkMarkError(student_id=None, error="Invalid entry"))
                continue
            student_id = str(entry.get("studentId") or "").strip() or None
            if not student_id or not self._students.get_by_id(student_id):
                result.errors.append(BulkMarkError(student_id=student_id, error="Student not found"))
                continue
            try:
                record = self._build(
                    student_id=student_id,
                    subject_id=subject_id,
                    exam_type=exam_type,
                    max_marks=max_marks,
                    obtained_marks=entry.get("obtainedMarks"),
                    semester_id=semester_id,
                    remarks=entry.get("remarks"),
                    added_by=added_by,
                    now=now,
                )
            except ValidationError as e:
                result.errors.append(BulkMarkError(student_id=student_id, error=str(e)))
                continue
            stored, _ = self._marks.upsert(record)
            result.results.append(stored)

        logger.info(
            "Bulk marks for %s/%s: %d written, %d rejected",
            subject_id,
            exam_type,
            len(result.results),
            len(result.errors),
        )
        return result

    def delete_mark(self, mark_id: str) -> None:
        if not self._marks.delete(str(mark_id)):
            raise NotFoundError("Record not found")

    def list_marks(
        self,
        *,
        student_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        exam_type: Optional[str] = None,
        semester_id: Optional[str] = None,
    ) -> List[MarkRecord]:
        return list(
            self._marks.list(
                student_id=student_id,
                subject_id=subject_id,
                exam_type=exam_type,
                semester_id=semester_id,
            )
        )

    def student_results(
        self,
        student_id: str,
        *,
        semester_id: Optional[str] = None,
        exam_type: Optional[str] = None,
    ) -> StudentResults:
        """Per-subject totals and grades, plus a CGPA weighted by credit hours."""
        records = self.list_marks(student_id=str(student_id), semester_id=semester_id, exam_type=exam_type)

        by_subject: Dict[str, List[MarkRecord]] = {}
        for r in records:
            by_subject.setdefault(r.subject_id, []).append(r)

        subjects: List[SubjectResult] = []
        for subject_id, exams in by_subject.items():
            subject = self._academics.get_subject(subject_id)
            total_obtained = sum(e.obtained_marks for e in exams)
            total_max = sum(e.max_marks for e in exams)
            percentage = score_percentage(total_obtained, total_max)
            band = grade_for_percentage(percentage)
            subjects.append(
                SubjectResult(
                    subject_id=subject_id,
                    subject_name=subject.name if subject else "Unknown",
                    subject_code=subject.code if subject else "",
                    credit_hours=subject.credit_hours if subject else DEFAULT_CREDIT_HOURS,
                    exams=exams,
                    total_obtained=total_obtained,
                    total_max=total_max,
                    percentage=percentage,
                    grade=band.grade,
                    gpa=band.gpa,
                )
            )

        total_marks = sum(r.max_marks for r in records)
        obtained = sum(r.obtained_marks for r in records)
        return StudentResults(
            student_id=str(student_id),
            subjects=subjects,
            total_exams=len(records),
            total_marks=total_marks,
            obtained_marks=obtained,
            percentage=score_percentage(obtained, total_marks),
            cgpa=weighted_cgpa((s.gpa, s.credit_hours) for s in subjects),
            total_credits=sum(s.credit_hours for s in subjects),
        )

    def subject_performance(self, subject_id: str, *, exam_type: Optional[str] = None) -> Optional[SubjectPerformance]:
        """Class statistics for a subject; None when nothing has been recorded."""
        records = self.list_marks(subject_id=str(subject_id), exam_type=exam_type)
        if not records:
            return None

        percentages = [r.percentage for r in records]
        distribution = {g: 0 for g in GRADE_LETTERS}
        for r in records:
            if r.grade in distribution:
                distribution[r.grade] += 1
        passed = sum(1 for r in records if r.grade != "F")

        subject = self._academics.get_subject(str(subject_id))
        return SubjectPerformance(
            subject_id=str(subject_id),
            subject_name=subject.name if subject else None,
            subject_code=subject.code if subject else None,
            total_students=len(records),
            average=round(sum(percentages) / len(percentages), 2),
            highest=max(percentages),
            lowest=min(percentages),
            pass_rate=round(passed / len(records) * 100, 1),
            grade_distribution=distribution,
        )

    def exam_types(self) -> List[ExamType]:
        return exam_types()
