from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import FeeStatus
from .model import FeePayment, FeeRecord, FeeType


class FeeRepository(Protocol):
    def add_record(self, record: FeeRecord) -> FeeRecord:
        raise NotImplementedError

    def get_record(self, record_id: str) -> Optional[FeeRecord]:
        raise NotImplementedError

    def get_for_student_and_semester(self, student_id: str, semester_id: str) -> Optional[FeeRecord]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        status: Optional[FeeStatus] = None,
        semester_id: Optional[str] = None,
        student_id: Optional[str] = None,
    ) -> Sequence[FeeRecord]:
        raise NotImplementedError

    def append_payment(self, record_id: str, payment: FeePayment) -> Optional[FeeRecord]:
        """Append a payment, bump paid_amount and recompute status in one step."""

        raise NotImplementedError

    def add_fee_type(self, fee_type: FeeType) -> FeeType:
        raise NotImplementedError

    def list_fee_types(self) -> Sequence[FeeType]:
        raise NotImplementedError

    def delete_for_student(self, student_id: str) -> int:
        raise NotImplementedError
