from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..core.enums import FeeStatus
from ..database.memory_store import InMemoryStore, db_tables
from .model import FeePayment, FeeRecord, FeeType, fee_status_for
from .repository import FeeRepository


class InMemoryFeeRepository(FeeRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def add_record(self, record: FeeRecord) -> FeeRecord:
        with db_tables(self._store) as db:
            db["fee_records"][record.record_id] = record
        return record

    def get_record(self, record_id: str) -> Optional[FeeRecord]:
        with db_tables(self._store) as db:
            return db["fee_records"].get(record_id)

    def get_for_student_and_semester(self, student_id: str, semester_id: str) -> Optional[FeeRecord]:
        with db_tables(self._store) as db:
            for r in db["fee_records"].values():
                if r.student_id == student_id and r.semester_id == semester_id:
                    return r
        return None

    def list_records(
        self,
        *,
        status: Optional[FeeStatus] = None,
        semester_id: Optional[str] = None,
        student_id: Optional[str] = None,
    ) -> Sequence[FeeRecord]:
        with db_tables(self._store) as db:
            rows = list(db["fee_records"].values())

        if status:
            rows = [r for r in rows if r.status == status]
        if semester_id:
            rows = [r for r in rows if r.semester_id == semester_id]
        if student_id:
            rows = [r for r in rows if r.student_id == student_id]
        rows.sort(key=lambda r: r.created_at)
        return rows

    def append_payment(self, record_id: str, payment: FeePayment) -> Optional[FeeRecord]:
        with db_tables(self._store) as db:
            current = db["fee_records"].get(record_id)
            if not current:
                return None
            paid = current.paid_amount + payment.amount
            updated = replace(
                current,
                paid_amount=paid,
                status=fee_status_for(paid, current.total_amount),
                payments=current.payments + (payment,),
                updated_at=payment.date,
            )
            db["fee_records"][record_id] = updated
            return updated

    def add_fee_type(self, fee_type: FeeType) -> FeeType:
        with db_tables(self._store) as db:
            db["fee_types"][fee_type.fee_type_id] = fee_type
        return fee_type

    def list_fee_types(self) -> Sequence[FeeType]:
        with db_tables(self._store) as db:
            return sorted(db["fee_types"].values(), key=lambda f: f.name)

    def delete_for_student(self, student_id: str) -> int:
        with db_tables(self._store) as db:
            doomed = [k for k, row in db["fee_records"].items() if row.student_id == student_id]
            for k in doomed:
                del db["fee_records"][k]
        return len(doomed)
