from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import List, Optional

from ..common.datetime_utils import optional_date
from ..common.ids import new_id
from ..common.validators import require_enum, require_non_empty, require_positive_int, to_decimal
from ..core.constants import DEFAULT_FEE_DUE_DAYS, DEFAULT_PAYMENT_METHOD
from ..core.enums import FeeStatus
from ..core.exceptions import (
    ConflictError,
    ExceedsBalanceError,
    InvalidAmountError,
    NotFoundError,
    ValidationError,
)
from ..database.locks import EntityLocks
from ..students.repository import StudentRepository
from .model import CollectionSummary, Defaulter, FeePayment, FeeRecord, FeeStatement, FeeType
from .repository import FeeRepository

logger = logging.getLogger(__name__)


def _receipt_number(now: datetime) -> str:
    return f"RCP-{now:%Y%m%d%H%M%S}-{uuid.uuid4().hex[:6].upper()}"


class FeeService:
    """Fee ledger: one record per (student, semester), mutated only by payments."""

    def __init__(
        self,
        fees: FeeRepository,
        students: StudentRepository,
        *,
        locks: Optional[EntityLocks] = None,
        due_days: int = DEFAULT_FEE_DUE_DAYS,
    ):
        self._fees = fees
        self._students = students
        self._locks = locks or EntityLocks()
        self._due_days = int(due_days)

    def create_record(
        self,
        *,
        student_id: str,
        semester_id: str,
        total_amount,
        due_date=None,
        now: Optional[datetime] = None,
    ) -> FeeRecord:
        student_id = require_non_empty(student_id, "studentId")
        semester_id = require_non_empty(semester_id, "semesterId")
        total = to_decimal(total_amount, "totalAmount")
        if total <= 0:
            raise ValidationError("totalAmount must be greater than 0")
        now = now or datetime.now()
        due = optional_date(due_date, "dueDate") or (now.date() + timedelta(days=self._due_days))

        if not self._students.get_by_id(student_id):
            raise NotFoundError("Student not found")

        with self._locks.hold("fee_semester", student_id, semester_id):
            if self._fees.get_for_student_and_semester(student_id, semester_id):
                raise ConflictError("Fee record already exists for this semester")
            record = self._fees.add_record(
                FeeRecord(
                    record_id=new_id(),
                    student_id=student_id,
                    semester_id=semester_id,
                    total_amount=total,
                    due_date=due,
                    created_at=now,
                )
            )

        logger.info("Fee record %s created: student=%s semester=%s total=%s", record.record_id, student_id, semester_id, total)
        return record

    def get_record(self, record_id: str) -> FeeRecord:
        record = self._fees.get_record(str(record_id))
        if not record:
            raise NotFoundError("Fee record not found")
        return record

    def record_payment(
        self,
        record_id: str,
        *,
        amount,
        method: Optional[str] = None,
        remarks: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> tuple[FeePayment, FeeRecord]:
        try:
            value = to_decimal(amount, "amount")
        except ValidationError:
            raise InvalidAmountError("Valid amount is required")
        if value <= 0:
            raise InvalidAmountError("Valid amount is required")
        now = now or datetime.now()

        with self._locks.hold("fee_record", str(record_id)):
            record = self.get_record(record_id)
            balance = record.balance
            if value > balance:
                logger.warning("Payment of %s rejected on %s: balance is %s", value, record.record_id, balance)
                raise ExceedsBalanceError(f"Amount exceeds balance. Maximum payable: {balance}")

            payment = FeePayment(
                payment_id=new_id(),
                amount=value,
                date=now,
                method=(method or "").strip() or DEFAULT_PAYMENT_METHOD,
                receipt_no=_receipt_number(now),
                remarks=(remarks or "").strip(),
            )
            updated = self._fees.append_payment(record.record_id, payment)

        logger.info(
            "Payment %s of %s on fee record %s (%s, balance %s)",
            payment.receipt_no,
            value,
            updated.record_id,
            updated.status.value,
            updated.balance,
        )
        return payment, updated

    def list_records(
        self,
        *,
        status=None,
        semester_id: Optional[str] = None,
        student_id: Optional[str] = None,
    ) -> List[FeeRecord]:
        status = require_enum(status, FeeStatus, "status") if status else None
        return list(self._fees.list_records(status=status, semester_id=semester_id, student_id=student_id))

    def student_statement(self, student_id: str) -> FeeStatement:
        records = tuple(self._fees.list_records(student_id=str(student_id)))
        return FeeStatement(
            student_id=str(student_id),
            records=records,
            total_due=sum((r.total_amount for r in records), Decimal("0")),
            total_paid=sum((r.paid_amount for r in records), Decimal("0")),
        )

    def collection_summary(self, *, semester_id: Optional[str] = None) -> CollectionSummary:
        records = self._fees.list_records(semester_id=semester_id)
        total_due = sum((r.total_amount for r in records), Decimal("0"))
        collected = sum((r.paid_amount for r in records), Decimal("0"))
        rate = round(float(collected / total_due * 100), 2) if total_due > 0 else 0.0
        return CollectionSummary(
            total_students=len(records),
            total_due=total_due,
            total_collected=collected,
            collection_rate=rate,
            paid_count=sum(1 for r in records if r.status == FeeStatus.PAID),
            partial_count=sum(1 for r in records if r.status == FeeStatus.PARTIAL),
            pending_count=sum(1 for r in records if r.status == FeeStatus.PENDING),
        )

    def defaulters(self, *, now: Optional[datetime] = None) -> List[Defaulter]:
        """Unpaid records past their due date, largest balance first."""
        now = now or datetime.now()
        today: date = now.date()
        rows = [
            Defaulter(record=r, overdue_days=(now - datetime.combine(r.due_date, time.min)).days)
            for r in self._fees.list_records()
            if r.status != FeeStatus.PAID and r.due_date < today
        ]
        rows.sort(key=lambda d: d.record.balance, reverse=True)
        return rows

    def add_fee_type(self, *, name: str, amount, type: Optional[str] = None, due_day=None) -> FeeType:
        name = require_non_empty(name, "name")
        value = to_decimal(amount, "amount")
        if value <= 0:
            raise ValidationError("amount must be greater than 0")
        return self._fees.add_fee_type(
            FeeType(
                fee_type_id=new_id(),
                name=name,
                amount=value,
                type=(type or "").strip() or "semester",
                due_day=15 if due_day in (None, "") else require_positive_int(due_day, "dueDay"),
            )
        )

    def list_fee_types(self) -> List[FeeType]:
        return list(self._fees.list_fee_types())
