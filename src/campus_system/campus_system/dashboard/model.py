from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from ..attendance.model import AttendanceSummary
from ..fees.model import CollectionSummary


@dataclass(frozen=True)
class DashboardStats:
    """Institution-wide snapshot for the admin dashboard."""

    total_students: int
    active_students: int
    total_teachers: int
    total_subjects: int
    average_cgpa: float
    attendance_today: AttendanceSummary
    attendance_recent: AttendanceSummary
    fees: CollectionSummary
    fee_defaulters: int
    pending_leaves: int
    students_by_department: Dict[str, int]


@dataclass(frozen=True)
class QuickStats:
    students: int
    teachers: int
    present_today: int
    pending_leaves: int
