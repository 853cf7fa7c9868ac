from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Protocol, Sequence

from ..common.ids import new_id
from ..common.validators import require_non_empty, require_positive_int
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..notifications.repository import NotificationRepository
from ..users.repository import UserRepository
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentOwnedRepository(Protocol):
    """Any repository holding rows keyed by a student id."""

    def delete_for_student(self, student_id: str) -> int:
        raise NotImplementedError


def _optional_semester(value) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("semester must be an integer")


class StudentService:
    def __init__(
        self,
        students: StudentRepository,
        *,
        users: Optional[UserRepository] = None,
        notifications: Optional[NotificationRepository] = None,
        owned: Sequence[StudentOwnedRepository] = (),
    ):
        self._students = students
        self._users = users
        self._notifications = notifications
        self._owned = tuple(owned)

    def get_student(self, student_id: str) -> Student:
        student = self._students.get_by_id(str(student_id or ""))
        if not student:
            raise NotFoundError("Student not found")
        return student

    def list_students(self, *, search: Optional[str] = None, semester: Optional[int] = None) -> List[Student]:
        rows = list(self._students.list_all())
        if semester is not None:
            rows = [s for s in rows if s.semester == int(semester)]
        if search:
            needle = search.strip().lower()
            rows = [
                s
                for s in rows
                if needle in s.name.lower() or needle in s.roll_number.lower() or needle in (s.email or "").lower()
            ]
        return rows

    def create_student(
        self,
        *,
        name: str,
        roll_number: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        semester: Optional[int] = None,
        department: Optional[str] = None,
    ) -> Student:
        name = require_non_empty(name, "name")
        roll_number = require_non_empty(roll_number, "rollNumber")
        semester = _optional_semester(semester)

        if self._students.get_by_roll_number(roll_number):
            raise ConflictError(f"Roll number {roll_number} is already registered")

        student = self._students.add(
            Student(
                student_id=new_id(),
                name=name,
                roll_number=roll_number,
                email=(email or "").strip() or None,
                phone=(phone or "").strip() or None,
                semester=semester,
                department=(department or "").strip() or None,
            )
        )
        logger.info("Registered student %s (%s)", student.student_id, student.roll_number)
        return student

    def update_student(self, student_id: str, changes: Dict) -> Student:
        """Apply a partial update; keys left out keep their current value.

        A linked login account follows name and email changes.
        """
        current = self.get_student(student_id)
        fields = {}

        if "name" in changes:
            fields["name"] = require_non_empty(changes["name"], "name")
        if "rollNumber" in changes:
            roll_number = require_non_empty(changes["rollNumber"], "rollNumber")
            holder = self._students.get_by_roll_number(roll_number)
            if holder and holder.student_id != current.student_id:
                raise ConflictError(f"Roll number {roll_number} is already registered")
            fields["roll_number"] = roll_number
        if "email" in changes:
            email = (changes["email"] or "").strip() or None
            if email and any(
                (s.email or "").lower() == email.lower() and s.student_id != current.student_id
                for s in self._students.list_all()
            ):
                raise ConflictError(f"Email {email} is already registered")
            fields["email"] = email
        for key, attr in (("phone", "phone"), ("department", "department")):
            if key in changes:
                fields[attr] = (changes[key] or "").strip() or None
        if "semester" in changes:
            fields["semester"] = _optional_semester(changes["semester"])
        if "isActive" in changes:
            fields["is_active"] = bool(changes["isActive"])

        updated = self._students.update(replace(current, **fields))

        if self._users and ("name" in fields or fields.get("email")):
            account = self._users.get_by_linked_id(current.student_id)
            if account:
                self._users.update(
                    replace(account, name=updated.name, email=updated.email or account.email)
                )

        logger.info("Updated student %s (%s)", updated.student_id, ", ".join(sorted(fields)) or "no changes")
        return updated

    def delete_student(self, student_id: str) -> Student:
        """Remove the student with their login account and every row they own."""
        student = self.get_student(student_id)
        self._students.delete(student.student_id)

        removed = sum(repo.delete_for_student(student.student_id) for repo in self._owned)
        if self._users:
            account = self._users.get_by_linked_id(student.student_id)
            if account:
                self._users.delete(account.user_id)
                if self._notifications:
                    removed += self._notifications.delete_for_user(account.user_id)

        logger.info("Deleted student %s with %d related row(s)", student.student_id, removed)
        return student

    def promote(self, student_ids, new_semester) -> List[Student]:
        """Move the given students to ``new_semester``; unknown ids are skipped."""
        if not isinstance(student_ids, (list, tuple)):
            raise ValidationError("studentIds array and newSemester are required")
        semester = require_positive_int(new_semester, "newSemester")

        promoted = []
        for sid in student_ids:
            student = self._students.get_by_id(str(sid))
            if student:
                promoted.append(self._students.update(replace(student, semester=semester)))

        logger.info("Promoted %d of %d student(s) to semester %d", len(promoted), len(student_ids), semester)
        return promoted
