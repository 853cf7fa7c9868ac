from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.http import json_body, json_value, query_date, query_str
from ..container import Container
from .model import LeaveApplication


def leave_json(a: LeaveApplication) -> dict:
    return {
        "id": a.leave_id,
        "studentId": a.student_id,
        "startDate": a.start_date.isoformat(),
        "endDate": a.end_date.isoformat(),
        "days": a.days,
        "reason": a.reason,
        "leaveType": a.leave_type.value,
        "attachments": list(a.attachments),
        "status": a.status.value,
        "approvedBy": a.approved_by,
        "approvedAt": json_value(a.approved_at),
        "rejectionReason": a.rejection_reason,
        "createdAt": json_value(a.created_at),
    }


def register(app: Flask, container: Container) -> None:
    def _enriched(a: LeaveApplication) -> dict:
        body = leave_json(a)
        student = container.students_repo.get_by_id(a.student_id)
        body["studentName"] = student.name if student else "Unknown"
        body["rollNumber"] = student.roll_number if student else "Unknown"
        return body

    @app.route("/api/leave", methods=["GET"], endpoint="api_list_leaves")
    def list_leaves():
        rows = container.leave_service.list(
            status=query_str("status"),
            student_id=query_str("studentId"),
            start_date=query_date("startDate"),
            end_date=query_date("endDate"),
        )
        return jsonify([_enriched(a) for a in rows])

    @app.route("/api/leave", methods=["POST"], endpoint="api_submit_leave")
    def submit_leave():
        data = json_body()
        application = container.leave_service.submit(
            student_id=data.get("studentId"),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            reason=data.get("reason"),
            leave_type=data.get("leaveType"),
            attachments=data.get("attachments"),
        )
        return (
            jsonify(
                {
                    "success": True,
                    "message": "Leave application submitted successfully",
                    "application": leave_json(application),
                }
            ),
            201,
        )

    @app.route("/api/leave/<leave_id>", methods=["GET"], endpoint="api_get_leave")
    def get_leave(leave_id: str):
        return jsonify(_enriched(container.leave_service.get(leave_id)))

    @app.route("/api/leave/<leave_id>", methods=["DELETE"], endpoint="api_delete_leave")
    def delete_leave(leave_id: str):
        container.leave_service.delete_pending(leave_id)
        return jsonify({"success": True, "message": "Leave application deleted"})

    @app.route("/api/leave/<leave_id>/status", methods=["PUT"], endpoint="api_leave_status")
    def set_leave_status(leave_id: str):
        data = json_body()
        application = container.leave_service.set_status(
            leave_id,
            status=data.get("status"),
            approver_id=data.get("approvedBy") or session.get("user_id"),
            rejection_reason=data.get("rejectionReason"),
        )
        return jsonify(
            {
                "success": True,
                "message": f"Leave application {application.status.value}",
                "application": leave_json(application),
            }
        )

    @app.route("/api/leave/student/<student_id>", methods=["GET"], endpoint="api_student_leaves")
    def student_leaves(student_id: str):
        history = container.leave_service.student_history(student_id)
        return jsonify(
            {
                "applications": [leave_json(a) for a in history.applications],
                "summary": {
                    "total": history.total,
                    "approved": history.approved,
                    "rejected": history.rejected,
                    "pending": history.pending,
                    "totalDaysApproved": history.total_days_approved,
                },
            }
        )

    @app.route("/api/leave/stats/overview", methods=["GET"], endpoint="api_leave_stats")
    def leave_stats():
        stats = container.leave_service.stats_overview()
        return jsonify(
            {
                "total": stats.total,
                "pending": stats.pending,
                "approved": stats.approved,
                "rejected": stats.rejected,
                "byType": stats.approved_by_type,
                "monthly": stats.monthly,
            }
        )
