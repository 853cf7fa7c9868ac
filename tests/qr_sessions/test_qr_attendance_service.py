from __future__ import annotations

import json
import threading
from datetime import datetime, timedelta

import pytest

from src.campus_system.campus_system.academics.memory_academics_repository import InMemoryAcademicsRepository
from src.campus_system.campus_system.academics.model import Subject
from src.campus_system.campus_system.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from src.campus_system.campus_system.attendance.service import AttendanceService
from src.campus_system.campus_system.core.constants import QR_CODE_ALPHABET, QR_CODE_LENGTH, QR_MARKED_BY
from src.campus_system.campus_system.core.enums import AttendanceStatus
from src.campus_system.campus_system.core.exceptions import AlreadyDoneError, ExpiredError, NotFoundError, ValidationError
from src.campus_system.campus_system.database.locks import EntityLocks
from src.campus_system.campus_system.database.memory_store import InMemoryStore
from src.campus_system.campus_system.qr_sessions.memory_qr_session_repository import InMemoryQRSessionRepository
from src.campus_system.campus_system.qr_sessions.service import QRAttendanceService, generate_attendance_code
from src.campus_system.campus_system.students.memory_student_repository import InMemoryStudentRepository
from src.campus_system.campus_system.students.model import Student

T0 = datetime(2025, 3, 10, 9, 0, 0)


class Env:
    def __init__(self):
        store = InMemoryStore()
        self.students = InMemoryStudentRepository(store)
        self.students.add(Student(student_id="s1", name="Ahmad", roll_number="R-001"))
        self.students.add(Student(student_id="s2", name="Fatima", roll_number="R-002"))
        academics = InMemoryAcademicsRepository(store)
        academics.add_subject(Subject(subject_id="sub-1", name="Databases", code="CS301"))
        self.attendance_repo = InMemoryAttendanceRepository(store)
        self.sessions = InMemoryQRSessionRepository(store)
        self.svc = QRAttendanceService(
            self.sessions,
            AttendanceService(self.attendance_repo, self.students),
            self.students,
            academics,
            locks=EntityLocks(),
        )

    def generate(self, **kwargs):
        kwargs.setdefault("teacher_id", "t1")
        kwargs.setdefault("subject_id", "sub-1")
        kwargs.setdefault("now", T0)
        return self.svc.generate(**kwargs)


def test_code_is_six_chars_from_alphabet():
    code = generate_attendance_code()
    assert len(code) == QR_CODE_LENGTH
    assert set(code) <= set(QR_CODE_ALPHABET)


def test_generate_creates_active_session_without_writing_attendance():
    env = Env()
    session = env.generate(valid_minutes=20)

    assert session.is_active
    assert session.expires_at == T0 + timedelta(minutes=20)
    assert session.date == T0.date()
    assert session.scanned_by == ()
    assert env.attendance_repo.list() == []


def test_generate_supersedes_active_session_for_same_pair():
    env = Env()
    first = env.generate()
    other_subject = env.generate(subject_id="sub-2")
    second = env.generate(now=T0 + timedelta(minutes=1))

    old = env.sessions.get_by_id(first.session_id)
    assert not old.is_active
    assert old.ended_at == T0 + timedelta(minutes=1)
    assert env.sessions.get_by_id(second.session_id).is_active
    assert env.sessions.get_by_id(other_subject.session_id).is_active


def test_generate_rejects_bad_valid_minutes():
    env = Env()
    with pytest.raises(ValidationError):
        env.generate(valid_minutes=0)


def test_scan_marks_present_once_per_student():
    env = Env()
    session = env.generate()

    result = env.svc.scan(student_id="s1", code=session.code.lower(), now=T0 + timedelta(minutes=2))

    assert result.record.status == AttendanceStatus.PRESENT
    assert result.record.session_id == session.session_id
    assert result.record.marked_by == QR_MARKED_BY
    assert result.record.check_in_time == "09:02:00"
    assert result.session.scanned_by == ("s1",)

    with pytest.raises(AlreadyDoneError):
        env.svc.scan(student_id="s1", session_id=session.session_id, now=T0 + timedelta(minutes=3))

    assert env.sessions.get_by_id(session.session_id).scanned_by == ("s1",)
    assert len(env.attendance_repo.list(student_id="s1")) == 1


def test_scan_after_expiry_fails_and_deactivates():
    env = Env()
    session = env.generate(valid_minutes=1)

    with pytest.raises(ExpiredError):
        env.svc.scan(student_id="s1", code=session.code, now=T0 + timedelta(minutes=1, seconds=1))

    assert not env.sessions.get_by_id(session.session_id).is_active
    assert env.attendance_repo.list() == []


def test_scan_exactly_at_expiry_is_still_accepted():
    env = Env()
    session = env.generate(valid_minutes=1)
    result = env.svc.scan(student_id="s1", code=session.code, now=session.expires_at)
    assert result.session.scanned_by == ("s1",)


def test_scan_unknown_code_or_student():
    env = Env()
    session = env.generate()

    with pytest.raises(NotFoundError):
        env.svc.scan(student_id="s1", code="ZZZZZZ" if session.code != "ZZZZZZ" else "YYYYYY", now=T0)
    with pytest.raises(NotFoundError):
        env.svc.scan(student_id="ghost", code=session.code, now=T0)
    with pytest.raises(ValidationError):
        env.svc.scan(student_id="s1", now=T0)


def test_ended_session_rejects_scans_and_keeps_first_end_time():
    env = Env()
    session = env.generate()

    ended = env.svc.end(session.session_id, now=T0 + timedelta(minutes=5))
    again = env.svc.end(session.session_id, now=T0 + timedelta(minutes=9))

    assert not ended.is_active
    assert again.ended_at == T0 + timedelta(minutes=5)
    with pytest.raises(NotFoundError):
        env.svc.scan(student_id="s1", code=session.code, now=T0 + timedelta(minutes=6))


def test_extend_reactivates_expired_session():
    env = Env()
    session = env.generate(valid_minutes=1)
    with pytest.raises(ExpiredError):
        env.svc.scan(student_id="s1", code=session.code, now=T0 + timedelta(minutes=2))

    extended = env.svc.extend(session.session_id, additional_minutes=10)

    assert extended.is_active
    assert extended.ended_at is None
    assert extended.expires_at == session.expires_at + timedelta(minutes=10)
    result = env.svc.scan(student_id="s2", code=session.code, now=T0 + timedelta(minutes=5))
    assert result.session.scanned_by == ("s2",)


def test_extending_a_superseded_session_reactivates_it_beside_the_new_one():
    env = Env()
    first = env.generate()
    second = env.generate(now=T0 + timedelta(minutes=1))
    assert not env.sessions.get_by_id(first.session_id).is_active

    env.svc.extend(first.session_id, additional_minutes=5)

    assert env.sessions.get_by_id(first.session_id).is_active
    assert env.sessions.get_by_id(second.session_id).is_active
    env.svc.scan(student_id="s1", session_id=first.session_id, now=T0 + timedelta(minutes=2))
    env.svc.scan(student_id="s2", session_id=second.session_id, now=T0 + timedelta(minutes=2))
    assert env.sessions.get_by_id(first.session_id).scanned_by == ("s1",)
    assert env.sessions.get_by_id(second.session_id).scanned_by == ("s2",)


def test_end_and_extend_unknown_session():
    env = Env()
    with pytest.raises(NotFoundError):
        env.svc.end("missing", now=T0)
    with pytest.raises(NotFoundError):
        env.svc.extend("missing")


def test_status_reports_remaining_time_and_scans():
    env = Env()
    session = env.generate(valid_minutes=10)
    env.svc.scan(student_id="s2", code=session.code, now=T0 + timedelta(minutes=1))

    status = env.svc.status(session.session_id, now=T0 + timedelta(minutes=4))

    assert status.remaining_seconds == 6 * 60
    assert not status.is_expired
    assert [s.student_id for s in status.scanned_students] == ["s2"]
    assert status.total_students == 2

    late = env.svc.status(session.session_id, now=T0 + timedelta(minutes=11))
    assert late.is_expired and late.remaining_seconds == 0


def test_today_for_teacher_and_payload():
    env = Env()
    session = env.generate()
    env.generate(teacher_id="t2")

    today = env.svc.today_for_teacher("t1", now=T0 + timedelta(hours=1))
    assert [st.session.session_id for st in today] == [session.session_id]

    payload = json.loads(env.svc.payload(session))
    assert payload == {
        "code": session.code,
        "sessionId": session.session_id,
        "subject": "CS301",
        "date": "2025-03-10",
    }


def test_concurrent_scans_by_same_student_record_once():
    env = Env()
    session = env.generate()
    outcomes = []

    def scan():
        try:
            env.svc.scan(student_id="s1", code=session.code, now=T0 + timedelta(minutes=1))
            outcomes.append("ok")
        except AlreadyDoneError:
            outcomes.append("dup")

    threads = [threading.Thread(target=scan) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["dup"] * 7 + ["ok"]
    assert env.sessions.get_by_id(session.session_id).scanned_by == ("s1",)
    assert len(env.attendance_repo.list()) == 1
