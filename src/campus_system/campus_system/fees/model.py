from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Tuple

from ..core.enums import FeeStatus


def fee_status_for(paid_amount: Decimal, total_amount: Decimal) -> FeeStatus:
    """paid iff paid >= total, partial iff 0 < paid < total, else pending."""
    if paid_amount >= total_amount:
        return FeeStatus.PAID
    if paid_amount > 0:
        return FeeStatus.PARTIAL
    return FeeStatus.PENDING


@dataclass(frozen=True)
class FeePayment:
    payment_id: str
    amount: Decimal
    date: datetime
    method: str
    receipt_no: str
    remarks: str = ""


@dataclass(frozen=True)
class FeeRecord:
    """Domain entity: what one student owes for one semester.

    Invariant: 0 <= paid_amount <= total_amount and status == fee_status_for(paid, total).
    """

    record_id: str
    student_id: str
    semester_id: str
    total_amount: Decimal
    due_date: date
    created_at: datetime
    paid_amount: Decimal = Decimal("0")
    status: FeeStatus = FeeStatus.PENDING
    payments: Tuple[FeePayment, ...] = ()
    updated_at: Optional[datetime] = None

    @property
    def balance(self) -> Decimal:
        return self.total_amount - self.paid_amount


@dataclass(frozen=True)
class FeeType:
    """Fee structure catalogue entry."""

    fee_type_id: str
    name: str
    amount: Decimal
    type: str = "semester"
    due_day: int = 15


@dataclass(frozen=True)
class FeeStatement:
    student_id: str
    records: Tuple[FeeRecord, ...]
    total_due: Decimal
    total_paid: Decimal

    @property
    def balance(self) -> Decimal:
        return self.total_due - self.total_paid


@dataclass(frozen=True)
class CollectionSummary:
    total_students: int
    total_due: Decimal
    total_collected: Decimal
    collection_rate: float
    paid_count: int
    partial_count: int
    pending_count: int

    @property
    def total_pending(self) -> Decimal:
        return self.total_due - self.total_collected


@dataclass(frozen=True)
class Defaulter:
    record: FeeRecord
    overdue_days: int
