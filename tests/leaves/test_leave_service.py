from __future__ import annotations

from datetime import date, datetime

import pytest
from werkzeug.security import generate_password_hash

from src.campus_system.campus_system.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from src.campus_system.campus_system.attendance.service import AttendanceService
from src.campus_system.campus_system.core.enums import AttendanceStatus, LeaveStatus, LeaveType, Role
from src.campus_system.campus_system.core.exceptions import NotFoundError, ValidationError
from src.campus_system.campus_system.database.memory_store import InMemoryStore
from src.campus_system.campus_system.leaves.memory_leave_repository import InMemoryLeaveRepository
from src.campus_system.campus_system.leaves.service import LeaveService
from src.campus_system.campus_system.notifications.memory_notification_repository import InMemoryNotificationRepository
from src.campus_system.campus_system.notifications.service import NotificationService
from src.campus_system.campus_system.students.memory_student_repository import InMemoryStudentRepository
from src.campus_system.campus_system.students.model import Student
from src.campus_system.campus_system.users.memory_user_repository import InMemoryUserRepository
from src.campus_system.campus_system.users.model import User

NOW = datetime(2024, 1, 1, 8, 0, 0)


class Env:
    def __init__(self):
        store = InMemoryStore()
        students = InMemoryStudentRepository(store)
        students.add(Student(student_id="s1", name="Ahmad Raza", roll_number="R-001"))
        users = InMemoryUserRepository(store)
        pw = generate_password_hash("pw")
        users.add(User(user_id="admin-1", email="a@x", name="Admin", password_hash=pw, role=Role.ADMIN))
        users.add(User(user_id="u-s1", email="s1@x", name="Ahmad Raza", password_hash=pw, role=Role.STUDENT, linked_id="s1"))

        self.attendance_repo = InMemoryAttendanceRepository(store)
        self.attendance = AttendanceService(self.attendance_repo, students)
        self.notifications = NotificationService(InMemoryNotificationRepository(store), users)
        self.svc = LeaveService(InMemoryLeaveRepository(store), self.attendance, students, self.notifications)

    def submit(self, start="2024-01-01", end="2024-01-03", **kwargs):
        kwargs.setdefault("student_id", "s1")
        kwargs.setdefault("reason", "Fever")
        kwargs.setdefault("leave_type", "sick")
        kwargs.setdefault("now", NOW)
        return self.svc.submit(start_date=start, end_date=end, **kwargs)


def test_submit_counts_days_inclusively_and_notifies_admins():
    env = Env()
    app = env.submit()

    assert app.days == 3
    assert app.status == LeaveStatus.PENDING
    assert app.leave_type == LeaveType.SICK
    inbox = env.notifications.list_for_user("admin-1")
    assert len(inbox) == 1
    assert "Ahmad Raza" in inbox[0].message


def test_single_day_leave_is_one_day():
    assert Env().submit(start="2024-02-05", end="2024-02-05").days == 1


@pytest.mark.parametrize(
    "overrides",
    [
        {"start": "2024-01-05", "end": "2024-01-03"},
        {"reason": "  "},
        {"leave_type": "vacation"},
        {"leave_type": None},
        {"start": "not-a-date"},
        {"start": "0001-01-01", "end": "9999-12-31"},
        {"start": "2024-01-01", "end": "2024-12-31"},
    ],
)
def test_submit_rejects_invalid_input(overrides):
    with pytest.raises(ValidationError):
        Env().submit(**overrides)


def test_leave_of_exactly_one_year_is_accepted():
    assert Env().submit(start="2025-01-01", end="2025-12-31").days == 365


def test_submit_unknown_student():
    with pytest.raises(NotFoundError):
        Env().submit(student_id="ghost")


def test_approval_overwrites_existing_attendance_in_range():
    env = Env()
    env.attendance.mark_attendance(on=date(2024, 1, 2), entries=[{"studentId": "s1", "status": "present"}])
    app = env.submit(start="2024-01-02", end="2024-01-03")

    decided = env.svc.set_status(app.leave_id, status="approved", approver_id="admin-1", now=NOW)

    assert decided.status == LeaveStatus.APPROVED
    assert decided.approved_by == "admin-1"
    rows = env.attendance_repo.list(student_id="s1")
    assert sorted(r.date for r in rows) == [date(2024, 1, 2), date(2024, 1, 3)]
    assert all(r.status == AttendanceStatus.LEAVE for r in rows)

    inbox = env.notifications.list_for_user("u-s1")
    assert inbox[0].title == "Leave Approved"


def test_rejection_writes_no_attendance_and_keeps_reason():
    env = Env()
    app = env.submit()

    decided = env.svc.set_status(app.leave_id, status="rejected", rejection_reason="No proof", now=NOW)

    assert decided.rejection_reason == "No proof"
    assert env.attendance_repo.list() == []
    assert "No proof" in env.notifications.list_for_user("u-s1")[0].message


def test_reapproval_reruns_backfill_idempotently():
    env = Env()
    app = env.submit()
    env.svc.set_status(app.leave_id, status="approved", now=NOW)
    env.attendance.mark_attendance(on=date(2024, 1, 2), entries=[{"studentId": "s1", "status": "present"}])

    env.svc.set_status(app.leave_id, status="rejected", now=NOW)
    env.svc.set_status(app.leave_id, status="approved", now=NOW)

    rows = env.attendance_repo.list(student_id="s1")
    assert len(rows) == 3
    assert all(r.status == AttendanceStatus.LEAVE for r in rows)


def test_set_status_validation():
    env = Env()
    app = env.submit()
    with pytest.raises(ValidationError):
        env.svc.set_status(app.leave_id, status="pending")
    with pytest.raises(NotFoundError):
        env.svc.set_status("missing", status="approved")


def test_only_pending_applications_can_be_deleted():
    env = Env()
    pending = env.submit()
    decided = env.submit(start="2024-02-01", end="2024-02-01")
    env.svc.set_status(decided.leave_id, status="rejected", now=NOW)

    env.svc.delete_pending(pending.leave_id)
    with pytest.raises(NotFoundError):
        env.svc.get(pending.leave_id)
    with pytest.raises(ValidationError):
        env.svc.delete_pending(decided.leave_id)


def test_history_and_stats():
    env = Env()
    a = env.submit()
    b = env.submit(start="2024-02-01", end="2024-02-02", leave_type="casual")
    env.submit(start="2024-02-10", end="2024-02-10")
    env.svc.set_status(a.leave_id, status="approved", now=NOW)
    env.svc.set_status(b.leave_id, status="approved", now=NOW)

    history = env.svc.student_history("s1")
    assert (history.total, history.approved, history.pending) == (3, 2, 1)
    assert history.total_days_approved == 5

    stats = env.svc.stats_overview()
    assert stats.approved_by_type["sick"] == 1
    assert stats.approved_by_type["casual"] == 1
    assert stats.monthly["2024-02"] == {"pending": 1, "approved": 1, "rejected": 0}

    assert len(env.svc.list(status="pending")) == 1
