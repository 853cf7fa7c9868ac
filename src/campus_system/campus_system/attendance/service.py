from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Mapping, Optional, Sequence

from ..common.datetime_utils import coerce_date, iter_days
from ..common.grading import attendance_percentage
from ..common.validators import require_enum
from ..core.constants import DEFAULT_LOW_ATTENDANCE_THRESHOLD
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import AttendanceRecord, AttendanceSummary, MarkError, MarkResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

LEAVE_MARKER = "leave-approval"


@dataclass(frozen=True)
class StudentAttendanceReport:
    student_id: str
    records: List[AttendanceRecord]
    summary: AttendanceSummary


@dataclass(frozen=True)
class StudentSummaryRow:
    student: Student
    summary: AttendanceSummary


def summarize(records: Iterable[AttendanceRecord]) -> AttendanceSummary:
    counts = {s: 0 for s in AttendanceStatus}
    total = 0
    for r in records:
        counts[r.status] += 1
        total += 1

    present = counts[AttendanceStatus.PRESENT]
    late = counts[AttendanceStatus.LATE]
    return AttendanceSummary(
        total_days=total,
        present_days=present,
        absent_days=counts[AttendanceStatus.ABSENT],
        late_days=late,
        leave_days=counts[AttendanceStatus.LEAVE],
        percentage=attendance_percentage(present=present, late=late, total=total),
    )


class AttendanceService:
    """Attendance ledger: idempotent (student, day) upserts plus read-side summaries."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        *,
        low_threshold: float = DEFAULT_LOW_ATTENDANCE_THRESHOLD,
    ):
        self._attendance = attendance
        self._students = students
        self._low_threshold = float(low_threshold)

    def mark_attendance(
        self,
        *,
        on,
        entries: Sequence[Mapping],
        marked_by: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> MarkResult:
        now = now or datetime.now()
        day = coerce_date(on, "date")
        if entries is None or isinstance(entries, (str, bytes, Mapping)):
            raise ValidationError("attendanceRecords must be a list")

        result = MarkResult(date=day)
        for entry in entries:
            if not isinstance(entry, Mapping):
                result.errors.append(MarkError(student_id=None, error="Invalid entry"))
                continue
            student_id = str(entry.get("studentId") or "").strip() or None
            if not student_id or not self._students.get_by_id(student_id):
                result.errors.append(MarkError(student_id=student_id, error="Student not found"))
                continue

            try:
                status = require_enum(entry.get("status") or AttendanceStatus.ABSENT, AttendanceStatus, "status")
            except ValidationError as e:
                result.errors.append(MarkError(student_id=student_id, error=str(e)))
                continue

            record, _ = self._attendance.upsert(
                student_id=student_id,
                day=day,
                status=status,
                marked_at=now,
                marked_by=marked_by,
            )
            result.results.append(record)

        if result.errors:
            logger.warning("Attendance for %s: %d written, %d rejected", day, len(result.results), len(result.errors))
        else:
            logger.info("Attendance for %s: %d written", day, len(result.results))
        return result

    def update_attendance(self, record_id: str, status, *, now: Optional[datetime] = None) -> AttendanceRecord:
        status = require_enum(status, AttendanceStatus, "status")
        updated = self._attendance.update_status(str(record_id), status=status, updated_at=now or datetime.now())
        if not updated:
            raise NotFoundError("Attendance record not found")
        return updated

    def delete_attendance(self, record_id: str) -> None:
        if not self._attendance.delete(str(record_id)):
            raise NotFoundError("Attendance record not found")

    def get_record(self, record_id: str) -> AttendanceRecord:
        record = self._attendance.get_by_id(str(record_id))
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def list_records(
        self,
        *,
        student_id: Optional[str] = None,
        on: Optional[date] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[AttendanceRecord]:
        rows = list(self._attendance.list(student_id=student_id, on=on, start=start, end=end))
        rows.sort(key=lambda r: (r.date, r.student_id))
        return rows

    def student_report(
        self,
        student_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> StudentAttendanceReport:
        if not self._students.get_by_id(str(student_id)):
            raise NotFoundError("Student not found")

        rows = list(self._attendance.list(student_id=str(student_id), start=start, end=end))
        rows.sort(key=lambda r: r.date, reverse=True)
        return StudentAttendanceReport(student_id=str(student_id), records=rows, summary=summarize(rows))

    def summary_all(self, *, start: Optional[date] = None, end: Optional[date] = None) -> List[StudentSummaryRow]:
        rows = self._attendance.list(start=start, end=end)
        by_student: dict[str, list[AttendanceRecord]] = {}
        for r in rows:
            by_student.setdefault(r.student_id, []).append(r)

        return [
            StudentSummaryRow(student=s, summary=summarize(by_student.get(s.student_id, [])))
            for s in self._students.list_all()
        ]

    def low_attendance(self, *, threshold: Optional[float] = None) -> List[StudentSummaryRow]:
        """Students with at least one record whose percentage is below threshold, lowest first."""
        limit = self._low_threshold if threshold is None else float(threshold)
        rows = [
            row
            for row in self.summary_all()
            if row.summary.total_days > 0 and row.summary.percentage < limit
        ]
        rows.sort(key=lambda row: row.summary.percentage)
        return rows

    def record_presence(
        self,
        *,
        student_id: str,
        on: date,
        session_id: str,
        subject_id: Optional[str],
        marked_by: str,
        location: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Mark a student present for a day through a QR session."""
        now = now or datetime.now()
        record, _ = self._attendance.upsert(
            student_id=student_id,
            day=on,
            status=AttendanceStatus.PRESENT,
            marked_at=now,
            session_id=session_id,
            subject_id=subject_id,
            check_in_time=now.strftime("%H:%M:%S"),
            marked_by=marked_by,
            location=location,
        )
        return record

    def mark_leave_range(
        self,
        *,
        student_id: str,
        start: date,
        end: date,
        now: Optional[datetime] = None,
    ) -> List[AttendanceRecord]:
        """Write status=leave for every day in [start, end], overwriting what was there."""
        now = now or datetime.now()
        written: List[AttendanceRecord] = []
        for day in iter_days(start, end):
            previous = self._attendance.get_for_student_and_date(student_id, day)
            if previous and previous.status != AttendanceStatus.LEAVE:
                logger.info(
                    "Leave overwrites %s attendance for student %s on %s",
                    previous.status.value,
                    student_id,
                    day,
                )
            record, _ = self._attendance.upsert(
                student_id=student_id,
                day=day,
                status=AttendanceStatus.LEAVE,
                marked_at=now,
                marked_by=LEAVE_MARKER,
            )
            written.append(record)
        return written
