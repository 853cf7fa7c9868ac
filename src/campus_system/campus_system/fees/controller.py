from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body, json_value, query_str
from ..container import Container
from .model import FeePayment, FeeRecord, FeeType


def payment_json(p: FeePayment) -> dict:
    return {
        "id": p.payment_id,
        "amount": json_value(p.amount),
        "date": json_value(p.date),
        "method": p.method,
        "receiptNo": p.receipt_no,
        "remarks": p.remarks,
    }


def fee_record_json(r: FeeRecord) -> dict:
    return {
        "id": r.record_id,
        "studentId": r.student_id,
        "semesterId": r.semester_id,
        "totalAmount": json_value(r.total_amount),
        "paidAmount": json_value(r.paid_amount),
        "balance": json_value(r.balance),
        "dueDate": r.due_date.isoformat(),
        "status": r.status.value,
        "payments": [payment_json(p) for p in r.payments],
        "createdAt": json_value(r.created_at),
        "updatedAt": json_value(r.updated_at),
    }


def fee_type_json(t: FeeType) -> dict:
    return {
        "id": t.fee_type_id,
        "name": t.name,
        "amount": json_value(t.amount),
        "type": t.type,
        "dueDay": t.due_day,
    }


def register(app: Flask, container: Container) -> None:
    def _enriched(r: FeeRecord) -> dict:
        body = fee_record_json(r)
        student = container.students_repo.get_by_id(r.student_id)
        semester = container.academics_repo.get_semester(r.semester_id)
        body["studentName"] = student.name if student else "Unknown"
        body["rollNumber"] = student.roll_number if student else "Unknown"
        body["semesterName"] = semester.name if semester else "Unknown"
        return body

    @app.route("/api/fees", methods=["GET"], endpoint="api_list_fees")
    def list_fees():
        rows = container.fee_service.list_records(
            status=query_str("status"),
            semester_id=query_str("semesterId"),
            student_id=query_str("studentId"),
        )
        return jsonify([_enriched(r) for r in rows])

    @app.route("/api/fees", methods=["POST"], endpoint="api_create_fee")
    def create_fee():
        data = json_body()
        record = container.fee_service.create_record(
            student_id=data.get("studentId"),
            semester_id=data.get("semesterId"),
            total_amount=data.get("totalAmount"),
            due_date=data.get("dueDate"),
        )
        return jsonify({"success": True, "record": fee_record_json(record)}), 201

    @app.route("/api/fees/student/<student_id>", methods=["GET"], endpoint="api_student_fees")
    def student_fees(student_id: str):
        statement = container.fee_service.student_statement(student_id)
        return jsonify(
            {
                "studentId": statement.student_id,
                "records": [_enriched(r) for r in statement.records],
                "summary": {
                    "totalDue": json_value(statement.total_due),
                    "totalPaid": json_value(statement.total_paid),
                    "balance": json_value(statement.balance),
                },
            }
        )

    @app.route("/api/fees/<record_id>/pay", methods=["POST"], endpoint="api_pay_fee")
    def pay_fee(record_id: str):
        data = json_body()
        payment, record = container.fee_service.record_payment(
            record_id,
            amount=data.get("amount"),
            method=data.get("method"),
            remarks=data.get("remarks"),
        )
        return jsonify(
            {
                "success": True,
                "message": "Payment recorded successfully",
                "payment": payment_json(payment),
                "record": fee_record_json(record),
            }
        )

    @app.route("/api/fees/summary", methods=["GET"], endpoint="api_fee_summary")
    def fee_summary():
        s = container.fee_service.collection_summary(semester_id=query_str("semesterId"))
        return jsonify(
            {
                "totalStudents": s.total_students,
                "totalDue": json_value(s.total_due),
                "totalCollected": json_value(s.total_collected),
                "totalPending": json_value(s.total_pending),
                "collectionRate": s.collection_rate,
                "statusBreakdown": {
                    "paid": s.paid_count,
                    "partial": s.partial_count,
                    "pending": s.pending_count,
                },
            }
        )

    @app.route("/api/fees/defaulters", methods=["GET"], endpoint="api_fee_defaulters")
    def defaulters():
        rows = container.fee_service.defaulters()
        return jsonify([{**_enriched(d.record), "overdueDays": d.overdue_days} for d in rows])

    @app.route("/api/fees/structure", methods=["GET"], endpoint="api_fee_structure")
    def fee_structure():
        return jsonify([fee_type_json(t) for t in container.fee_service.list_fee_types()])

    @app.route("/api/fees/structure", methods=["POST"], endpoint="api_add_fee_type")
    def add_fee_type():
        data = json_body()
        fee_type = container.fee_service.add_fee_type(
            name=data.get("name"),
            amount=data.get("amount"),
            type=data.get("type"),
            due_day=data.get("dueDay"),
        )
        return jsonify({"success": True, "feeType": fee_type_json(fee_type)}), 201
