from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for access decisions and notification fan-out."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Attendance status stored per (student, day)."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    LEAVE = "leave"


class FeeStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class LeaveStatus(str, Enum):
    """Leave approval workflow state."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveType(str, Enum):
    SICK = "sick"
    CASUAL = "casual"
    EMERGENCY = "emergency"
    ACADEMIC = "academic"
