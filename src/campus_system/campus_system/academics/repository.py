from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Semester, Subject, Teacher


class AcademicsRepository(Protocol):
    """Read access to reference data (teachers, subjects, semesters)."""

    def get_teacher(self, teacher_id: str) -> Optional[Teacher]:
        raise NotImplementedError

    def get_subject(self, subject_id: str) -> Optional[Subject]:
        raise NotImplementedError

    def get_semester(self, semester_id: str) -> Optional[Semester]:
        raise NotImplementedError

    def list_subjects(self) -> Sequence[Subject]:
        raise NotImplementedError

    def add_teacher(self, teacher: Teacher) -> Teacher:
        raise NotImplementedError

    def add_subject(self, subject: Subject) -> Subject:
        raise NotImplementedError

    def add_semester(self, semester: Semester) -> Semester:
        raise NotImplementedError

    def list_teachers(self) -> Sequence[Teacher]:
        raise NotImplementedError
