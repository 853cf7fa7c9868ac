from __future__ import annotations

from typing import Optional, Sequence

from ..database.memory_store import InMemoryStore, db_tables
from .model import Semester, Subject, Teacher
from .repository import AcademicsRepository


class InMemoryAcademicsRepository(AcademicsRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_teacher(self, teacher_id: str) -> Optional[Teacher]:
        with db_tables(self._store) as db:
            return db["teachers"].get(teacher_id)

    def get_subject(self, subject_id: str) -> Optional[Subject]:
        with db_tables(self._store) as db:
            return db["subjects"].get(subject_id)

    def get_semester(self, semester_id: str) -> Optional[Semester]:
        with db_tables(self._store) as db:
            return db["semesters"].get(semester_id)

    def list_subjects(self) -> Sequence[Subject]:
        with db_tables(self._store) as db:
            return sorted(db["subjects"].values(), key=lambda s: s.code)

    def add_teacher(self, teacher: Teacher) -> Teacher:
        with db_tables(self._store) as db:
            db["teachers"][teacher.teacher_id] = teacher
        return teacher

    def add_subject(self, subject: Subject) -> Subject:
        with db_tables(self._store) as db:
            db["subjects"][subject.subject_id] = subject
        return subject

    def add_semester(self, semester: Semester) -> Semester:
        with db_tables(self._store) as db:
            db["semesters"][semester.semester_id] = semester
        return semester

    def list_teachers(self) -> Sequence[Teacher]:
        with db_tables(self._store) as db:
            return sorted(db["teachers"].values(), key=lambda t: t.name)
