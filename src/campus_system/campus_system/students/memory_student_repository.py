from __future__ import annotations

from typing import Optional, Sequence

from ..database.memory_store import InMemoryStore, db_tables
from .model import Student
from .repository import StudentRepository


class InMemoryStudentRepository(StudentRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, student_id: str) -> Optional[Student]:
        with db_tables(self._store) as db:
            return db["students"].get(student_id)

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        wanted = roll_number.strip().lower()
        with db_tables(self._store) as db:
            for s in db["students"].values():
                if s.roll_number.lower() == wanted:
                    return s
        return None

    def list_all(self) -> Sequence[Student]:
        with db_tables(self._store) as db:
            return sorted(db["students"].values(), key=lambda s: s.roll_number)

    def add(self, student: Student) -> Student:
        with db_tables(self._store) as db:
            db["students"][student.student_id] = student
        return student

    def update(self, student: Student) -> Student:
        with db_tables(self._store) as db:
            db["students"][student.student_id] = student
        return student

    def delete(self, student_id: str) -> bool:
        with db_tables(self._store) as db:
            return db["students"].pop(student_id, None) is not None

    def count(self) -> int:
        with db_tables(self._store) as db:
            return len(db["students"])
