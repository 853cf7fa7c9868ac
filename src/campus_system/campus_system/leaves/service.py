from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional, Sequence

from ..attendance.service import AttendanceService
from ..common.datetime_utils import coerce_date, inclusive_days
from ..common.ids import new_id
from ..common.validators import require_enum, require_non_empty
from ..core.constants import MAX_LEAVE_DAYS
from ..core.enums import LeaveStatus, LeaveType, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..database.locks import EntityLocks
from ..notifications.service import NotificationService
from ..students.repository import StudentRepository
from .model import LeaveApplication, LeaveHistory, LeaveStats
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

DECISIONS = (LeaveStatus.APPROVED, LeaveStatus.REJECTED)


class LeaveService:
    def __init__(
        self,
        leaves: LeaveRepository,
        attendance: AttendanceService,
        students: StudentRepository,
        notifications: NotificationService,
        *,
        locks: Optional[EntityLocks] = None,
    ):
        self._leaves = leaves
        self._attendance = attendance
        self._students = students
        self._notifications = notifications
        self._locks = locks or EntityLocks()

    def submit(
        self,
        *,
        student_id: str,
        start_date,
        end_date,
        reason: str,
        leave_type,
        attachments: Optional[Sequence[str]] = None,
        now: Optional[datetime] = None,
    ) -> LeaveApplication:
        student_id = require_non_empty(student_id, "studentId")
        start = coerce_date(start_date, "startDate")
        end = coerce_date(end_date, "endDate")
        reason = require_non_empty(reason, "reason")
        if leave_type in (None, ""):
            raise ValidationError("leaveType is required")
        kind = require_enum(leave_type, LeaveType, "leaveType")

        if start > end:
            raise ValidationError("End date must be on or after start date")
        if inclusive_days(start, end) > MAX_LEAVE_DAYS:
            raise ValidationError(f"Leave cannot span more than {MAX_LEAVE_DAYS} days")

        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")

        now = now or datetime.now()
        application = self._leaves.add(
            LeaveApplication(
                leave_id=new_id(),
                student_id=student_id,
                start_date=start,
                end_date=end,
                days=inclusive_days(start, end),
                reason=reason,
                leave_type=kind,
                status=LeaveStatus.PENDING,
                created_at=now,
                attachments=tuple(attachments or ()),
            )
        )

        self._notifications.notify_role(
            role=Role.ADMIN,
            title="New Leave Application",
            message=f"{student.name} has applied for {kind.value} leave",
            type="leave",
            now=now,
        )
        logger.info("Leave %s submitted by %s for %d day(s)", application.leave_id, student_id, application.days)
        return application

    def set_status(
        self,
        leave_id: str,
        *,
        status,
        approver_id: Optional[str] = None,
        rejection_reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> LeaveApplication:
        """Approve or reject an application.

        Approval writes status=leave for every day in the range, replacing any
        attendance already recorded for those days. Deciding an application
        again is allowed and re-runs the backfill.
        """
        decision = require_enum(status, LeaveStatus, "status")
        if decision not in DECISIONS:
            raise ValidationError("Invalid status")
        now = now or datetime.now()

        with self._locks.hold("leave", str(leave_id)):
            current = self.get(leave_id)
            if current.status != LeaveStatus.PENDING:
                logger.warning(
                    "Leave %s re-decided: %s -> %s",
                    current.leave_id,
                    current.status.value,
                    decision.value,
                )

            application = self._leaves.decide(
                current.leave_id,
                status=decision,
                approved_by=(approver_id or None),
                approved_at=now,
                rejection_reason=(rejection_reason or "").strip() or None,
            )

            if decision == LeaveStatus.APPROVED:
                self._attendance.mark_leave_range(
                    student_id=application.student_id,
                    start=application.start_date,
                    end=application.end_date,
                    now=now,
                )

        if decision == LeaveStatus.APPROVED:
            message = "Your leave application has been approved"
        else:
            message = f"Your leave application was rejected: {application.rejection_reason or 'No reason provided'}"
        self._notifications.notify_linked(
            linked_id=application.student_id,
            title=f"Leave {decision.value.capitalize()}",
            message=message,
            type="leave",
            now=now,
        )
        logger.info("Leave %s %s by %s", application.leave_id, decision.value, approver_id)
        return application

    def get(self, leave_id: str) -> LeaveApplication:
        application = self._leaves.get_by_id(str(leave_id))
        if not application:
            raise NotFoundError("Leave application not found")
        return application

    def list(
        self,
        *,
        status=None,
        student_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[LeaveApplication]:
        status = require_enum(status, LeaveStatus, "status") if status else None
        return list(
            self._leaves.list(
                status=status,
                student_id=student_id,
                starts_on_or_after=start_date,
                ends_on_or_before=end_date,
            )
        )

    def student_history(self, student_id: str) -> LeaveHistory:
        apps = list(self._leaves.list(student_id=str(student_id)))
        approved = [a for a in apps if a.status == LeaveStatus.APPROVED]
        return LeaveHistory(
            student_id=str(student_id),
            applications=apps,
            total=len(apps),
            approved=len(approved),
            rejected=sum(1 for a in apps if a.status == LeaveStatus.REJECTED),
            pending=sum(1 for a in apps if a.status == LeaveStatus.PENDING),
            total_days_approved=sum(a.days for a in approved),
        )

    def delete_pending(self, leave_id: str) -> None:
        with self._locks.hold("leave", str(leave_id)):
            application = self.get(leave_id)
            if application.status != LeaveStatus.PENDING:
                raise ValidationError("Can only delete pending applications")
            self._leaves.delete(application.leave_id)

    def stats_overview(self) -> LeaveStats:
        apps = self._leaves.list()
        by_type = {t.value: 0 for t in LeaveType}
        monthly: dict = {}
        for a in apps:
            if a.status == LeaveStatus.APPROVED:
                by_type[a.leave_type.value] += 1
            month = monthly.setdefault(a.start_date.strftime("%Y-%m"), {s.value: 0 for s in LeaveStatus})
            month[a.status.value] += 1

        return LeaveStats(
            total=len(apps),
            pending=sum(1 for a in apps if a.status == LeaveStatus.PENDING),
            approved=sum(1 for a in apps if a.status == LeaveStatus.APPROVED),
            rejected=sum(1 for a in apps if a.status == LeaveStatus.REJECTED),
            approved_by_type=by_type,
            monthly=monthly,
        )
