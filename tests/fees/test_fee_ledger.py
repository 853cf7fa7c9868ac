from __future__ import annotations

import threading
from datetime import date, datetime
from decimal import Decimal

import pytest

from src.campus_system.campus_system.core.enums import FeeStatus
from src.campus_system.campus_system.core.exceptions import (
    ConflictError,
    ExceedsBalanceError,
    InvalidAmountError,
    NotFoundError,
    ValidationError,
)
from src.campus_system.campus_system.database.memory_store import InMemoryStore
from src.campus_system.campus_system.fees.memory_fee_repository import InMemoryFeeRepository
from src.campus_system.campus_system.fees.model import fee_status_for
from src.campus_system.campus_system.fees.service import FeeService
from src.campus_system.campus_system.students.memory_student_repository import InMemoryStudentRepository
from src.campus_system.campus_system.students.model import Student

NOW = datetime(2025, 10, 1, 12, 0, 0)


def _service():
    store = InMemoryStore()
    students = InMemoryStudentRepository(store)
    for sid in ("s1", "s2", "s3"):
        students.add(Student(student_id=sid, name=sid.upper(), roll_number=f"R-{sid}"))
    return FeeService(InMemoryFeeRepository(store), students, due_days=30)


@pytest.mark.parametrize(
    "paid,total,expected",
    [
        ("0", "1000", FeeStatus.PENDING),
        ("0.01", "1000", FeeStatus.PARTIAL),
        ("999.99", "1000", FeeStatus.PARTIAL),
        ("1000", "1000", FeeStatus.PAID),
    ],
)
def test_status_is_a_function_of_paid_and_total(paid, total, expected):
    assert fee_status_for(Decimal(paid), Decimal(total)) == expected


def test_partial_then_full_payment_then_overpay_rejected():
    svc = _service()
    record = svc.create_record(student_id="s1", semester_id="sem-1", total_amount=1000, now=NOW)
    assert record.status == FeeStatus.PENDING
    assert record.due_date == date(2025, 10, 31)

    _, record = svc.record_payment(record.record_id, amount=400, now=NOW)
    assert record.status == FeeStatus.PARTIAL
    assert record.balance == Decimal("600")

    payment, record = svc.record_payment(record.record_id, amount="600", method="Bank Transfer", now=NOW)
    assert record.status == FeeStatus.PAID
    assert record.balance == Decimal("0")
    assert payment.method == "Bank Transfer"
    assert payment.receipt_no.startswith("RCP-20251001120000-")
    assert len(record.payments) == 2

    with pytest.raises(ExceedsBalanceError):
        svc.record_payment(record.record_id, amount=1, now=NOW)
    assert svc.get_record(record.record_id).paid_amount == Decimal("1000")


@pytest.mark.parametrize("amount", [0, -5, None, "abc"])
def test_non_positive_or_invalid_amount(amount):
    svc = _service()
    record = svc.create_record(student_id="s1", semester_id="sem-1", total_amount=1000, now=NOW)
    with pytest.raises(InvalidAmountError):
        svc.record_payment(record.record_id, amount=amount, now=NOW)


def test_payment_defaults_method_to_cash():
    svc = _service()
    record = svc.create_record(student_id="s1", semester_id="sem-1", total_amount=50, now=NOW)
    payment, _ = svc.record_payment(record.record_id, amount=10, now=NOW)
    assert payment.method == "Cash"


def test_one_record_per_student_and_semester():
    svc = _service()
    svc.create_record(student_id="s1", semester_id="sem-1", total_amount=1000, now=NOW)
    with pytest.raises(ConflictError):
        svc.create_record(student_id="s1", semester_id="sem-1", total_amount=500, now=NOW)
    svc.create_record(student_id="s1", semester_id="sem-2", total_amount=500, now=NOW)


def test_create_record_validation():
    svc = _service()
    with pytest.raises(NotFoundError):
        svc.create_record(student_id="ghost", semester_id="sem-1", total_amount=1000, now=NOW)
    with pytest.raises(ValidationError):
        svc.create_record(student_id="s1", semester_id="sem-1", total_amount=0, now=NOW)
    with pytest.raises(ValidationError):
        svc.create_record(student_id="s1", semester_id="", total_amount=10, now=NOW)


def test_payment_on_missing_record():
    with pytest.raises(NotFoundError):
        _service().record_payment("missing", amount=10, now=NOW)


def test_defaulters_sorted_by_balance_with_overdue_days():
    svc = _service()
    small = svc.create_record(student_id="s1", semester_id="sem-1", total_amount=100, due_date="2025-09-21", now=NOW)
    big = svc.create_record(student_id="s2", semester_id="sem-1", total_amount=900, due_date="2025-09-01", now=NOW)
    paid = svc.create_record(student_id="s3", semester_id="sem-1", total_amount=100, due_date="2025-09-01", now=NOW)
    svc.record_payment(paid.record_id, amount=100, now=NOW)
    svc.create_record(student_id="s3", semester_id="sem-2", total_amount=100, due_date="2025-12-01", now=NOW)

    rows = svc.defaulters(now=NOW)

    assert [d.record.record_id for d in rows] == [big.record_id, small.record_id]
    assert rows[0].overdue_days == 30
    assert rows[1].overdue_days == 10


def test_collection_summary_and_statement():
    svc = _service()
    a = svc.create_record(student_id="s1", semester_id="sem-1", total_amount=1000, now=NOW)
    svc.create_record(student_id="s2", semester_id="sem-1", total_amount=1000, now=NOW)
    svc.record_payment(a.record_id, amount=500, now=NOW)

    summary = svc.collection_summary(semester_id="sem-1")
    assert summary.total_due == Decimal("2000")
    assert summary.total_collected == Decimal("500")
    assert summary.total_pending == Decimal("1500")
    assert summary.collection_rate == 25.0
    assert (summary.paid_count, summary.partial_count, summary.pending_count) == (0, 1, 1)

    statement = svc.student_statement("s1")
    assert statement.balance == Decimal("500")
    assert [r.status for r in svc.list_records(status="partial")] == [FeeStatus.PARTIAL]


def test_fee_structure_catalogue():
    svc = _service()
    svc.add_fee_type(name="Tuition Fee", amount=45000)
    svc.add_fee_type(name="Lab Fee", amount=5000, type="semester", due_day=10)

    names = [t.name for t in svc.list_fee_types()]
    assert names == ["Lab Fee", "Tuition Fee"]
    with pytest.raises(ValidationError):
        svc.add_fee_type(name="Bad", amount=-1)


def test_concurrent_payments_never_exceed_total():
    svc = _service()
    record = svc.create_record(student_id="s1", semester_id="sem-1", total_amount=1000, now=NOW)
    rejected = []

    def pay():
        try:
            svc.record_payment(record.record_id, amount=300, now=NOW)
        except ExceedsBalanceError:
            rejected.append(1)

    threads = [threading.Thread(target=pay) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    final = svc.get_record(record.record_id)
    assert final.paid_amount == Decimal("900")
    assert final.status == FeeStatus.PARTIAL
    assert len(rejected) == 3
