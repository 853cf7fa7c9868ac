from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, Optional

from ..academics.repository import AcademicsRepository
from ..attendance.repository import AttendanceRepository
from ..attendance.service import summarize
from ..core.constants import DASHBOARD_RECENT_DAYS
from ..core.enums import AttendanceStatus, LeaveStatus
from ..fees.service import FeeService
from ..leaves.repository import LeaveRepository
from ..marks.repository import MarksRepository
from ..marks.service import MarksService
from ..students.repository import StudentRepository
from .model import DashboardStats, QuickStats


class DashboardService:
    """Read-only aggregates over the other ledgers."""

    def __init__(
        self,
        students: StudentRepository,
        academics: AcademicsRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        marks: MarksRepository,
        fee_service: FeeService,
        marks_service: MarksService,
    ):
        self._students = students
        self._academics = academics
        self._attendance = attendance
        self._leaves = leaves
        self._marks = marks
        self._fee_service = fee_service
        self._marks_service = marks_service

    def _average_cgpa(self) -> float:
        graded = sorted({m.student_id for m in self._marks.list()})
        if not graded:
            return 0.0
        total = sum(self._marks_service.student_results(sid).cgpa for sid in graded)
        return round(total / len(graded), 2)

    def stats(self, *, now: Optional[datetime] = None) -> DashboardStats:
        now = now or datetime.now()
        today = now.date()
        students = list(self._students.list_all())

        by_department: Dict[str, int] = {}
        for s in students:
            key = s.department or "Unassigned"
            by_department[key] = by_department.get(key, 0) + 1

        return DashboardStats(
            total_students=len(students),
            active_students=sum(1 for s in students if s.is_active),
            total_teachers=len(self._academics.list_teachers()),
            total_subjects=len(self._academics.list_subjects()),
            average_cgpa=self._average_cgpa(),
            attendance_today=summarize(self._attendance.list(on=today)),
            attendance_recent=summarize(
                self._attendance.list(start=today - timedelta(days=DASHBOARD_RECENT_DAYS), end=today)
            ),
            fees=self._fee_service.collection_summary(),
            fee_defaulters=len(self._fee_service.defaulters(now=now)),
            pending_leaves=len(self._leaves.list(status=LeaveStatus.PENDING)),
            students_by_department=dict(sorted(by_department.items())),
        )

    def quick_stats(self, *, now: Optional[datetime] = None) -> QuickStats:
        today = (now or datetime.now()).date()
        return QuickStats(
            students=self._students.count(),
            teachers=len(self._academics.list_teachers()),
            present_today=sum(1 for r in self._attendance.list(on=today) if r.status == AttendanceStatus.PRESENT),
            pending_leaves=len(self._leaves.list(status=LeaveStatus.PENDING)),
        )
