from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence, Tuple

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_student_and_date(self, student_id: str, day: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        student_id: str,
        day: date,
        status: AttendanceStatus,
        marked_at: datetime,
        session_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        check_in_time: Optional[str] = None,
        marked_by: Optional[str] = None,
        location: Optional[str] = None,
    ) -> Tuple[AttendanceRecord, bool]:
        """Write the (student_id, day) record atomically.

        Returns the stored record and True when a new row was inserted.
        """

        raise NotImplementedError

    def update_status(self, record_id: str, *, status: AttendanceStatus, updated_at: datetime) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def delete(self, record_id: str) -> bool:
        raise NotImplementedError

    def list(
        self,
        *,
        student_id: Optional[str] = None,
        on: Optional[date] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def delete_for_student(self, student_id: str) -> int:
        raise NotImplementedError
