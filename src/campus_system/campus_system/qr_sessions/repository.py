from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import QRSession


class QRSessionRepository(Protocol):
    """Storage for QR sessions.

    Every mutator changes only the fields it names and is atomic, so a
    deactivation never races a concurrent scan into a lost update.
    """

    def add(self, session: QRSession) -> QRSession:
        raise NotImplementedError

    def get_by_id(self, session_id: str) -> Optional[QRSession]:
        raise NotImplementedError

    def find_active(self, *, session_id: Optional[str] = None, code: Optional[str] = None) -> Optional[QRSession]:
        raise NotImplementedError

    def is_code_active(self, code: str) -> bool:
        raise NotImplementedError

    def list_for_teacher_on(self, teacher_id: str, day: date) -> Sequence[QRSession]:
        raise NotImplementedError

    def deactivate_pair(self, *, teacher_id: str, subject_id: str, ended_at: datetime) -> int:
        """Deactivate every active session of the pair; returns how many were closed."""

        raise NotImplementedError

    def set_inactive(self, session_id: str, *, ended_at: Optional[datetime] = None) -> Optional[QRSession]:
        raise NotImplementedError

    def add_scan(self, session_id: str, student_id: str) -> Optional[QRSession]:
        raise NotImplementedError

    def extend(self, session_id: str, *, expires_at: datetime) -> Optional[QRSession]:
        """Set a new expiry and reactivate the session."""

        raise NotImplementedError
