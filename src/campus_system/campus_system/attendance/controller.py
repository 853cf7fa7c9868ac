from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body, json_value, query_date, query_str
from ..container import Container
from .model import AttendanceRecord, AttendanceSummary


def record_json(r: AttendanceRecord) -> dict:
    return {
        "id": r.record_id,
        "studentId": r.student_id,
        "date": r.date.isoformat(),
        "status": r.status.value,
        "markedAt": json_value(r.marked_at),
        "sessionId": r.session_id,
        "subjectId": r.subject_id,
        "checkInTime": r.check_in_time,
        "markedBy": r.marked_by,
        "location": r.location,
        "updatedAt": json_value(r.updated_at),
    }


def summary_json(s: AttendanceSummary) -> dict:
    return {
        "totalDays": s.total_days,
        "presentDays": s.present_days,
        "absentDays": s.absent_days,
        "lateDays": s.late_days,
        "leaveDays": s.leave_days,
        "percentage": s.percentage,
    }


def register(app: Flask, container: Container) -> None:
    def _with_student(r: AttendanceRecord) -> dict:
        body = record_json(r)
        student = container.students_repo.get_by_id(r.student_id)
        body["studentName"] = student.name if student else "Unknown"
        body["rollNumber"] = student.roll_number if student else "Unknown"
        return body

    @app.route("/api/attendance", methods=["GET"], endpoint="api_list_attendance")
    def list_attendance():
        rows = container.attendance_service.list_records(
            student_id=query_str("studentId"),
            on=query_date("date"),
            start=query_date("startDate"),
            end=query_date("endDate"),
        )
        return jsonify([_with_student(r) for r in rows])

    @app.route("/api/attendance/student/<student_id>", methods=["GET"], endpoint="api_student_attendance")
    def student_attendance(student_id: str):
        report = container.attendance_service.student_report(
            student_id,
            start=query_date("startDate"),
            end=query_date("endDate"),
        )
        return jsonify(
            {
                "studentId": report.student_id,
                "records": [record_json(r) for r in report.records],
                "summary": summary_json(report.summary),
            }
        )

    @app.route("/api/attendance", methods=["POST"], endpoint="api_mark_attendance")
    def mark_attendance():
        data = json_body()
        result = container.attendance_service.mark_attendance(
            on=data.get("date"),
            entries=data.get("attendanceRecords") or data.get("records"),
            marked_by=data.get("markedBy"),
        )
        body = {
            "success": True,
            "message": f"Attendance marked for {len(result.results)} students",
            "date": result.date.isoformat(),
            "results": [record_json(r) for r in result.results],
        }
        if result.errors:
            body["errors"] = [{"studentId": e.student_id, "error": e.error} for e in result.errors]
        return jsonify(body)

    @app.route("/api/attendance/<record_id>", methods=["PUT"], endpoint="api_update_attendance")
    def update_attendance(record_id: str):
        data = json_body()
        record = container.attendance_service.update_attendance(record_id, data.get("status"))
        return jsonify({"success": True, "record": record_json(record)})

    @app.route("/api/attendance/<record_id>", methods=["DELETE"], endpoint="api_delete_attendance")
    def delete_attendance(record_id: str):
        container.attendance_service.delete_attendance(record_id)
        return jsonify({"success": True, "message": "Attendance record deleted"})

    @app.route("/api/attendance/summary/all", methods=["GET"], endpoint="api_attendance_summary")
    def summary_all():
        rows = container.attendance_service.summary_all(start=query_date("startDate"), end=query_date("endDate"))
        return jsonify(
            [
                {
                    "studentId": row.student.student_id,
                    "name": row.student.name,
                    "rollNumber": row.student.roll_number,
                    **summary_json(row.summary),
                }
                for row in rows
            ]
        )

    @app.route("/api/attendance/low", methods=["GET"], endpoint="api_low_attendance")
    def low_attendance():
        rows = container.attendance_service.low_attendance(threshold=request.args.get("threshold", type=float))
        return jsonify(
            [
                {
                    "studentId": row.student.student_id,
                    "name": row.student.name,
                    "rollNumber": row.student.roll_number,
                    **summary_json(row.summary),
                }
                for row in rows
            ]
        )
