from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Tuple

from ..attendance.model import AttendanceRecord
from ..students.model import Student


@dataclass(frozen=True)
class QRSession:
    """A time-boxed token that lets students self-mark attendance once.

    ``scanned_by`` keeps scan order and never holds the same student twice.
    """

    session_id: str
    code: str
    teacher_id: str
    subject_id: str
    date: date
    created_at: datetime
    expires_at: datetime
    valid_minutes: int
    is_active: bool = True
    class_id: Optional[str] = None
    ended_at: Optional[datetime] = None
    scanned_by: Tuple[str, ...] = ()

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


@dataclass(frozen=True)
class QRSessionStatus:
    session: QRSession
    scanned_students: List[Student] = field(default_factory=list)
    total_students: int = 0
    is_expired: bool = False
    remaining_seconds: int = 0


@dataclass(frozen=True)
class ScanResult:
    record: AttendanceRecord
    session: QRSession
    student: Student
