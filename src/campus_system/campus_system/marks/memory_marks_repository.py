from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence, Tuple

from ..database.memory_store import InMemoryStore, db_tables
from .model import MarkRecord
from .repository import MarksRepository


class InMemoryMarksRepository(MarksRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, mark_id: str) -> Optional[MarkRecord]:
        with db_tables(self._store) as db:
            return db["marks"].get(mark_id)

    def upsert(self, record: MarkRecord) -> Tuple[MarkRecord, bool]:
        with db_tables(self._store) as db:
            rows = db["marks"]
            existing = next(
                (
                    m
                    for m in rows.values()
                    if m.student_id == record.student_id
                    and m.subject_id == record.subject_id
                    and m.exam_type == record.exam_type
                ),
                None,
            )
            if existing:
                record = replace(record, mark_id=existing.mark_id)
            rows[record.mark_id] = record
            return record, existing is None

    def delete(self, mark_id: str) -> bool:
        with db_tables(self._store) as db:
            return db["marks"].pop(mark_id, None) is not None

    def list(
        self,
        *,
        student_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        exam_type: Optional[str] = None,
        semester_id: Optional[str] = None,
    ) -> Sequence[MarkRecord]:
        with db_tables(self._store) as db:
            rows = list(db["marks"].values())

        if student_id:
            rows = [m for m in rows if m.student_id == student_id]
        if subject_id:
            rows = [m for m in rows if m.subject_id == subject_id]
        if exam_type:
            rows = [m for m in rows if m.exam_type == exam_type]
        if semester_id:
            rows = [m for m in rows if m.semester_id == semester_id]
        return rows

    def delete_for_student(self, student_id: str) -> int:
        with db_tables(self._store) as db:
            doomed = [k for k, row in db["marks"].items() if row.student_id == student_id]
            for k in doomed:
                del db["marks"][k]
        return len(doomed)
