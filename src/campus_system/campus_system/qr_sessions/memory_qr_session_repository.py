from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..database.memory_store import InMemoryStore, db_tables
from .model import QRSession
from .repository import QRSessionRepository


class InMemoryQRSessionRepository(QRSessionRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def add(self, session: QRSession) -> QRSession:
        with db_tables(self._store) as db:
            db["qr_sessions"][session.session_id] = session
        return session

    def get_by_id(self, session_id: str) -> Optional[QRSession]:
        with db_tables(self._store) as db:
            return db["qr_sessions"].get(session_id)

    def find_active(self, *, session_id: Optional[str] = None, code: Optional[str] = None) -> Optional[QRSession]:
        with db_tables(self._store) as db:
            if session_id:
                s = db["qr_sessions"].get(session_id)
                return s if s and s.is_active else None
            if code:
                for s in db["qr_sessions"].values():
                    if s.is_active and s.code == code:
                        return s
        return None

    def is_code_active(self, code: str) -> bool:
        return self.find_active(code=code) is not None

    def list_for_teacher_on(self, teacher_id: str, day: date) -> Sequence[QRSession]:
        with db_tables(self._store) as db:
            rows = [s for s in db["qr_sessions"].values() if s.teacher_id == teacher_id and s.date == day]
        rows.sort(key=lambda s: s.created_at)
        return rows

    def deactivate_pair(self, *, teacher_id: str, subject_id: str, ended_at: datetime) -> int:
        closed = 0
        with db_tables(self._store) as db:
            rows = db["qr_sessions"]
            for sid, s in list(rows.items()):
                if s.is_active and s.teacher_id == teacher_id and s.subject_id == subject_id:
                    rows[sid] = replace(s, is_active=False, ended_at=s.ended_at or ended_at)
                    closed += 1
        return closed

    def set_inactive(self, session_id: str, *, ended_at: Optional[datetime] = None) -> Optional[QRSession]:
        with db_tables(self._store) as db:
            current = db["qr_sessions"].get(session_id)
            if not current:
                return None
            updated = replace(current, is_active=False, ended_at=current.ended_at or ended_at)
            db["qr_sessions"][session_id] = updated
            return updated

    def add_scan(self, session_id: str, student_id: str) -> Optional[QRSession]:
        with db_tables(self._store) as db:
            current = db["qr_sessions"].get(session_id)
            if not current:
                return None
            if student_id in current.scanned_by:
                return current
            updated = replace(current, scanned_by=current.scanned_by + (student_id,))
            db["qr_sessions"][session_id] = updated
            return updated

    def extend(self, session_id: str, *, expires_at: datetime) -> Optional[QRSession]:
        with db_tables(self._store) as db:
            current = db["qr_sessions"].get(session_id)
            if not current:
                return None
            updated = replace(current, expires_at=expires_at, is_active=True, ended_at=None)
            db["qr_sessions"][session_id] = updated
            return updated
