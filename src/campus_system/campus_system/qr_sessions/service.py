from __future__ import annotations

import json
import logging
import math
import secrets
from datetime import datetime, timedelta
from typing import List, Optional

from ..academics.repository import AcademicsRepository
from ..attendance.service import AttendanceService
from ..common.ids import new_id
from ..common.validators import require_non_empty, require_positive_int
from ..core.constants import (
    DEFAULT_QR_EXTEND_MINUTES,
    DEFAULT_QR_VALID_MINUTES,
    QR_CODE_ALPHABET,
    QR_CODE_LENGTH,
    QR_MARKED_BY,
)
from ..core.exceptions import AlreadyDoneError, ExpiredError, NotFoundError, ValidationError
from ..database.locks import EntityLocks
from ..students.repository import StudentRepository
from .model import QRSession, QRSessionStatus, ScanResult
from .repository import QRSessionRepository

logger = logging.getLogger(__name__)

_MAX_CODE_ATTEMPTS = 20


def generate_attendance_code() -> str:
    return "".join(secrets.choice(QR_CODE_ALPHABET) for _ in range(QR_CODE_LENGTH))


class QRAttendanceService:
    """QR attendance sessions.

    A session is created active by a teacher, collects at most one scan per
    student, and goes inactive when ended or when a scan finds it past
    ``expires_at``. Extending a session always reactivates it, including one
    that was ended or expired.
    """

    def __init__(
        self,
        sessions: QRSessionRepository,
        attendance: AttendanceService,
        students: StudentRepository,
        academics: AcademicsRepository,
        *,
        locks: Optional[EntityLocks] = None,
        valid_minutes: int = DEFAULT_QR_VALID_MINUTES,
        extend_minutes: int = DEFAULT_QR_EXTEND_MINUTES,
    ):
        self._sessions = sessions
        self._attendance = attendance
        self._students = students
        self._academics = academics
        self._locks = locks or EntityLocks()
        self._valid_minutes = int(valid_minutes)
        self._extend_minutes = int(extend_minutes)

    def _new_code(self) -> str:
        for _ in range(_MAX_CODE_ATTEMPTS):
            code = generate_attendance_code()
            if not self._sessions.is_code_active(code):
                return code
        raise RuntimeError("Could not allocate a unique attendance code")

    def generate(
        self,
        *,
        teacher_id: str,
        subject_id: str,
        class_id: Optional[str] = None,
        valid_minutes=None,
        now: Optional[datetime] = None,
    ) -> QRSession:
        teacher_id = require_non_empty(teacher_id, "teacherId")
        subject_id = require_non_empty(subject_id, "subjectId")
        minutes = self._valid_minutes if valid_minutes in (None, "") else require_positive_int(valid_minutes, "validMinutes")
        now = now or datetime.now()

        with self._locks.hold("qr_pair", teacher_id, subject_id):
            closed = self._sessions.deactivate_pair(teacher_id=teacher_id, subject_id=subject_id, ended_at=now)
            session = self._sessions.add(
                QRSession(
                    session_id=new_id(),
                    code=self._new_code(),
                    teacher_id=teacher_id,
                    subject_id=subject_id,
                    class_id=(class_id or None),
                    date=now.date(),
                    created_at=now,
                    expires_at=now + timedelta(minutes=minutes),
                    valid_minutes=minutes,
                )
            )

        logger.info(
            "QR session %s opened by teacher %s for subject %s (%d min, %d superseded)",
            session.session_id,
            teacher_id,
            subject_id,
            minutes,
            closed,
        )
        return session

    def scan(
        self,
        *,
        student_id: str,
        code: Optional[str] = None,
        session_id: Optional[str] = None,
        location: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ScanResult:
        student_id = require_non_empty(student_id, "studentId")
        code = (code or "").strip().upper() or None
        session_id = (session_id or "").strip() or None
        if not code and not session_id:
            raise ValidationError("A QR code or session id is required")
        now = now or datetime.now()

        found = self._sessions.find_active(session_id=session_id, code=code)
        if not found:
            raise NotFoundError("Invalid or expired QR code")

        with self._locks.hold("qr_session", found.session_id):
            session = self._sessions.get_by_id(found.session_id)
            if not session or not session.is_active:
                raise NotFoundError("Invalid or expired QR code")

            if session.is_expired(now):
                self._sessions.set_inactive(session.session_id)
                logger.info("QR session %s expired at %s", session.session_id, session.expires_at.isoformat())
                raise ExpiredError("QR code has expired")

            if student_id in session.scanned_by:
                raise AlreadyDoneError("You have already marked your attendance")

            student = self._students.get_by_id(student_id)
            if not student:
                raise NotFoundError("Student not found")

            record = self._attendance.record_presence(
                student_id=student_id,
                on=session.date,
                session_id=session.session_id,
                subject_id=session.subject_id,
                marked_by=QR_MARKED_BY,
                location=location,
                now=now,
            )
            session = self._sessions.add_scan(session.session_id, student_id) or session

        return ScanResult(record=record, session=session, student=student)

    def end(self, session_id: str, *, now: Optional[datetime] = None) -> QRSession:
        now = now or datetime.now()
        with self._locks.hold("qr_session", str(session_id)):
            session = self._sessions.set_inactive(str(session_id), ended_at=now)
        if not session:
            raise NotFoundError("Session not found")
        logger.info("QR session %s ended with %d scans", session.session_id, len(session.scanned_by))
        return session

    def extend(self, session_id: str, *, additional_minutes=None) -> QRSession:
        minutes = (
            self._extend_minutes
            if additional_minutes in (None, "")
            else require_positive_int(additional_minutes, "additionalMinutes")
        )
        with self._locks.hold("qr_session", str(session_id)):
            current = self._sessions.get_by_id(str(session_id))
            if not current:
                raise NotFoundError("Session not found")
            session = self._sessions.extend(
                current.session_id,
                expires_at=current.expires_at + timedelta(minutes=minutes),
            )

        logger.info("QR session %s extended by %d min (reactivated=%s)", session_id, minutes, not current.is_active)
        return session

    def get_session(self, session_id: str) -> QRSession:
        session = self._sessions.get_by_id(str(session_id))
        if not session:
            raise NotFoundError("Session not found")
        return session

    def status(self, session_id: str, *, now: Optional[datetime] = None) -> QRSessionStatus:
        return self._status_for(self.get_session(session_id), now or datetime.now())

    def today_for_teacher(self, teacher_id: str, *, now: Optional[datetime] = None) -> List[QRSessionStatus]:
        now = now or datetime.now()
        return [self._status_for(s, now) for s in self._sessions.list_for_teacher_on(str(teacher_id), now.date())]

    def _status_for(self, session: QRSession, now: datetime) -> QRSessionStatus:
        expired = session.is_expired(now)
        remaining = 0 if expired else math.ceil((session.expires_at - now).total_seconds())
        scanned = [s for s in (self._students.get_by_id(sid) for sid in session.scanned_by) if s]
        return QRSessionStatus(
            session=session,
            scanned_students=scanned,
            total_students=self._students.count(),
            is_expired=expired,
            remaining_seconds=remaining,
        )

    def payload(self, session: QRSession) -> str:
        """Text encoded into the QR image: enough for a client to scan by code or id."""
        subject = self._academics.get_subject(session.subject_id)
        return json.dumps(
            {
                "code": session.code,
                "sessionId": session.session_id,
                "subject": subject.code if subject else None,
                "date": session.date.isoformat(),
            }
        )
