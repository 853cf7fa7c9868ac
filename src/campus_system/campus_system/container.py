from __future__ import annotations

from dataclasses import dataclass

from .academics.memory_academics_repository import InMemoryAcademicsRepository
from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import (
    DEFAULT_FEE_DUE_DAYS,
    DEFAULT_LOW_ATTENDANCE_THRESHOLD,
    DEFAULT_QR_EXTEND_MINUTES,
    DEFAULT_QR_VALID_MINUTES,
)
from .database.locks import EntityLocks
from .database.memory_store import InMemoryStore
from .database.seed import seed_demo_data
from .dashboard.service import DashboardService
from .fees.memory_fee_repository import InMemoryFeeRepository
from .fees.service import FeeService
from .leaves.memory_leave_repository import InMemoryLeaveRepository
from .leaves.service import LeaveService
from .marks.memory_marks_repository import InMemoryMarksRepository
from .marks.service import MarksService
from .notifications.memory_notification_repository import InMemoryNotificationRepository
from .notifications.service import NotificationService
from .qr_sessions.memory_qr_session_repository import InMemoryQRSessionRepository
from .qr_sessions.service import QRAttendanceService
from .students.memory_student_repository import InMemoryStudentRepository
from .students.service import StudentService
from .users.memory_user_repository import InMemoryUserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    store: InMemoryStore
    locks: EntityLocks

    users_repo: InMemoryUserRepository
    students_repo: InMemoryStudentRepository
    academics_repo: InMemoryAcademicsRepository
    attendance_repo: InMemoryAttendanceRepository
    qr_sessions_repo: InMemoryQRSessionRepository
    fees_repo: InMemoryFeeRepository
    leaves_repo: InMemoryLeaveRepository
    marks_repo: InMemoryMarksRepository
    notifications_repo: InMemoryNotificationRepository

    auth_service: AuthService
    student_service: StudentService
    notification_service: NotificationService
    attendance_service: AttendanceService
    qr_service: QRAttendanceService
    fee_service: FeeService
    leave_service: LeaveService
    marks_service: MarksService
    dashboard_service: DashboardService


def build_container(
    *,
    qr_valid_minutes: int = DEFAULT_QR_VALID_MINUTES,
    qr_extend_minutes: int = DEFAULT_QR_EXTEND_MINUTES,
    fee_due_days: int = DEFAULT_FEE_DUE_DAYS,
    low_attendance_threshold: float = DEFAULT_LOW_ATTENDANCE_THRESHOLD,
    seed: bool = False,
) -> Container:
    store = InMemoryStore()
    locks = EntityLocks()

    users_repo = InMemoryUserRepository(store)
    students_repo = InMemoryStudentRepository(store)
    academics_repo = InMemoryAcademicsRepository(store)
    attendance_repo = InMemoryAttendanceRepository(store)
    qr_sessions_repo = InMemoryQRSessionRepository(store)
    fees_repo = InMemoryFeeRepository(store)
    leaves_repo = InMemoryLeaveRepository(store)
    marks_repo = InMemoryMarksRepository(store)
    notifications_repo = InMemoryNotificationRepository(store)

    auth_service = AuthService(users_repo)
    student_service = StudentService(
        students_repo,
        users=users_repo,
        notifications=notifications_repo,
        owned=(attendance_repo, marks_repo, fees_repo, leaves_repo),
    )
    notification_service = NotificationService(notifications_repo, users_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        students_repo,
        low_threshold=low_attendance_threshold,
    )
    qr_service = QRAttendanceService(
        qr_sessions_repo,
        attendance_service,
        students_repo,
        academics_repo,
        locks=locks,
        valid_minutes=qr_valid_minutes,
        extend_minutes=qr_extend_minutes,
    )
    fee_service = FeeService(fees_repo, students_repo, locks=locks, due_days=fee_due_days)
    leave_service = LeaveService(
        leaves_repo,
        attendance_service,
        students_repo,
        notification_service,
        locks=locks,
    )
    marks_service = MarksService(marks_repo, students_repo, academics_repo)
    dashboard_service = DashboardService(
        students_repo,
        academics_repo,
        attendance_repo,
        leaves_repo,
        marks_repo,
        fee_service,
        marks_service,
    )

    if seed:
        seed_demo_data(
            users=users_repo,
            students=students_repo,
            academics=academics_repo,
            fees=fee_service,
        )

    return Container(
        store=store,
        locks=locks,
        users_repo=users_repo,
        students_repo=students_repo,
        academics_repo=academics_repo,
        attendance_repo=attendance_repo,
        qr_sessions_repo=qr_sessions_repo,
        fees_repo=fees_repo,
        leaves_repo=leaves_repo,
        marks_repo=marks_repo,
        notifications_repo=notifications_repo,
        auth_service=auth_service,
        student_service=student_service,
        notification_service=notification_service,
        attendance_service=attendance_service,
        qr_service=qr_service,
        fee_service=fee_service,
        leave_service=leave_service,
        marks_service=marks_service,
        dashboard_service=dashboard_service,
    )
