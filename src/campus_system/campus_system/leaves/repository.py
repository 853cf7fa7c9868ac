from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveApplication


class LeaveRepository(Protocol):
    def add(self, application: LeaveApplication) -> LeaveApplication:
        raise NotImplementedError

    def get_by_id(self, leave_id: str) -> Optional[LeaveApplication]:
        raise NotImplementedError

    def list(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        student_id: Optional[str] = None,
        starts_on_or_after: Optional[date] = None,
        ends_on_or_before: Optional[date] = None,
    ) -> Sequence[LeaveApplication]:
        """Newest first."""

        raise NotImplementedError

    def decide(
        self,
        leave_id: str,
        *,
        status: LeaveStatus,
        approved_by: Optional[str],
        approved_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> Optional[LeaveApplication]:
        raise NotImplementedError

    def delete(self, leave_id: str) -> bool:
        raise NotImplementedError

    def delete_for_student(self, student_id: str) -> int:
        raise NotImplementedError
