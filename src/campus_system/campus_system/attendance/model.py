from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's attendance for one calendar day.

    At most one record exists per (student_id, date); re-marking a day rewrites
    the record in place and keeps its id.
    """

    record_id: str
    student_id: str
    date: date
    status: AttendanceStatus
    marked_at: datetime
    session_id: Optional[str] = None
    subject_id: Optional[str] = None
    check_in_time: Optional[str] = None
    marked_by: Optional[str] = None
    location: Optional[str] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceSummary:
    total_days: int
    present_days: int
    absent_days: int
    late_days: int
    leave_days: int
    percentage: float


@dataclass(frozen=True)
class MarkError:
    student_id: Optional[str]
    error: str


@dataclass(frozen=True)
class MarkResult:
    """Outcome of a bulk mark: what was written and which entries were skipped."""

    date: date
    results: List[AttendanceRecord] = field(default_factory=list)
    errors: List[MarkError] = field(default_factory=list)
