from __future__ import annotations

from typing import Optional, Protocol, Sequence, Tuple

from .model import MarkRecord


class MarksRepository(Protocol):
    def get_by_id(self, mark_id: str) -> Optional[MarkRecord]:
        raise NotImplementedError

    def upsert(self, record: MarkRecord) -> Tuple[MarkRecord, bool]:
        """Store by (student, subject, exam type), reusing an existing id.

        Returns the stored record and True when a new row was inserted.
        """

        raise NotImplementedError

    def delete(self, mark_id: str) -> bool:
        raise NotImplementedError

    def list(
        self,
        *,
        student_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        exam_type: Optional[str] = None,
        semester_id: Optional[str] = None,
    ) -> Sequence[MarkRecord]:
        raise NotImplementedError

    def delete_for_student(self, student_id: str) -> int:
        raise NotImplementedError
