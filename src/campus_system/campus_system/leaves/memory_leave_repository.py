from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveStatus
from ..database.memory_store import InMemoryStore, db_tables
from .model import LeaveApplication
from .repository import LeaveRepository


class InMemoryLeaveRepository(LeaveRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def add(self, application: LeaveApplication) -> LeaveApplication:
        with db_tables(self._store) as db:
            db["leave_applications"][application.leave_id] = application
        return application

    def get_by_id(self, leave_id: str) -> Optional[LeaveApplication]:
        with db_tables(self._store) as db:
            return db["leave_applications"].get(leave_id)

    def list(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        student_id: Optional[str] = None,
        starts_on_or_after: Optional[date] = None,
        ends_on_or_before: Optional[date] = None,
    ) -> Sequence[LeaveApplication]:
        with db_tables(self._store) as db:
            rows = list(db["leave_applications"].values())

        if status:
            rows = [a for a in rows if a.status == status]
        if student_id:
            rows = [a for a in rows if a.student_id == student_id]
        if starts_on_or_after:
            rows = [a for a in rows if a.start_date >= starts_on_or_after]
        if ends_on_or_before:
            rows = [a for a in rows if a.end_date <= ends_on_or_before]
        rows.sort(key=lambda a: a.created_at, reverse=True)
        return rows

    def decide(
        self,
        leave_id: str,
        *,
        status: LeaveStatus,
        approved_by: Optional[str],
        approved_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> Optional[LeaveApplication]:
        with db_tables(self._store) as db:
            current = db["leave_applications"].get(leave_id)
            if not current:
                return None
            updated = replace(
                current,
                status=status,
                approved_by=approved_by,
                approved_at=approved_at,
                rejection_reason=rejection_reason if status == LeaveStatus.REJECTED else None,
            )
            db["leave_applications"][leave_id] = updated
            return updated

    def delete(self, leave_id: str) -> bool:
        with db_tables(self._store) as db:
            return db["leave_applications"].pop(leave_id, None) is not None

    def delete_for_student(self, student_id: str) -> int:
        with db_tables(self._store) as db:
            doomed = [k for k, row in db["leave_applications"].items() if row.student_id == student_id]
            for k in doomed:
                del db["leave_applications"][k]
        return len(doomed)
