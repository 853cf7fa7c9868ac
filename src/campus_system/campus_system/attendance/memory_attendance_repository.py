from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence, Tuple

from ..common.ids import new_id
from ..core.enums import AttendanceStatus
from ..database.memory_store import InMemoryStore, db_tables
from .model import AttendanceRecord
from .repository import AttendanceRepository


class InMemoryAttendanceRepository(AttendanceRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        with db_tables(self._store) as db:
            return db["attendance"].get(record_id)

    def get_for_student_and_date(self, student_id: str, day: date) -> Optional[AttendanceRecord]:
        with db_tables(self._store) as db:
            return self._find(db["attendance"], student_id, day)

    @staticmethod
    def _find(rows, student_id: str, day: date) -> Optional[AttendanceRecord]:
        for r in rows.values():
            if r.student_id == student_id and r.date == day:
                return r
        return None

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
        with db_tables(self._store) as db:
            rows = db["attendance"]
            existing = self._find(rows, student_id, day)
            record = AttendanceRecord(
                record_id=existing.record_id if existing else new_id(),
                student_id=student_id,
                date=day,
                status=status,
                marked_at=marked_at,
                session_id=session_id,
                subject_id=subject_id,
                check_in_time=check_in_time,
                marked_by=marked_by,
                location=location,
            )
            rows[record.record_id] = record
            return record, existing is None

    def update_status(self, record_id: str, *, status: AttendanceStatus, updated_at: datetime) -> Optional[AttendanceRecord]:
        with db_tables(self._store) as db:
            current = db["attendance"].get(record_id)
            if not current:
                return None
            updated = replace(current, status=status, updated_at=updated_at)
            db["attendance"][record_id] = updated
            return updated

    def delete(self, record_id: str) -> bool:
        with db_tables(self._store) as db:
            return db["attendance"].pop(record_id, None) is not None

    def list(
        self,
        *,
        student_id: Optional[str] = None,
        on: Optional[date] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        with db_tables(self._store) as db:
            rows = list(db["attendance"].values())

        if student_id:
            rows = [r for r in rows if r.student_id == student_id]
        if on:
            rows = [r for r in rows if r.date == on]
        if start:
            rows = [r for r in rows if r.date >= start]
        if end:
            rows = [r for r in rows if r.date <= end]
        return rows

    def delete_for_student(self, student_id: str) -> int:
        with db_tables(self._store) as db:
            doomed = [k for k, row in db["attendance"].items() if row.student_id == student_id]
            for k in doomed:
                del db["attendance"][k]
        return len(doomed)
