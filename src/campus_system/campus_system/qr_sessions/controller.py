from __future__ import annotations

import io

from flask import Flask, jsonify, send_file

from ..attendance.controller import record_json
from ..common.http import json_body, json_value
from ..container import Container
from ..students.controller import student_json
from .image import render_qr_png
from .model import QRSession, QRSessionStatus


def session_json(s: QRSession) -> dict:
    return {
        "id": s.session_id,
        "code": s.code,
        "teacherId": s.teacher_id,
        "subjectId": s.subject_id,
        "classId": s.class_id,
        "date": s.date.isoformat(),
        "createdAt": json_value(s.created_at),
        "expiresAt": json_value(s.expires_at),
        "validMinutes": s.valid_minutes,
        "isActive": s.is_active,
        "endedAt": json_value(s.ended_at),
        "scannedBy": list(s.scanned_by),
    }


def status_json(st: QRSessionStatus) -> dict:
    return {
        "session": session_json(st.session),
        "scannedStudents": [student_json(s) for s in st.scanned_students],
        "totalScanned": len(st.scanned_students),
        "totalStudents": st.total_students,
        "isExpired": st.is_expired,
        "remainingTime": st.remaining_seconds,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/qr-attendance/generate", methods=["POST"], endpoint="api_qr_generate")
    def generate():
        data = json_body()
        session = container.qr_service.generate(
            teacher_id=data.get("teacherId"),
            subject_id=data.get("subjectId"),
            class_id=data.get("classId"),
            valid_minutes=data.get("validMinutes"),
        )
        teacher = container.academics_repo.get_teacher(session.teacher_id)
        return (
            jsonify(
                {
                    "success": True,
                    "session": session_json(session),
                    "teacherName": teacher.name if teacher else None,
                    "qrData": container.qr_service.payload(session),
                    "qrImageUrl": f"/api/qr-attendance/session/{session.session_id}/qr.png",
                }
            ),
            201,
        )

    @app.route("/api/qr-attendance/scan", methods=["POST"], endpoint="api_qr_scan")
    def scan():
        data = json_body()
        result = container.qr_service.scan(
            student_id=data.get("studentId"),
            code=data.get("code"),
            session_id=data.get("sessionId"),
            location=data.get("location"),
        )
        subject = container.academics_repo.get_subject(result.session.subject_id)
        return jsonify(
            {
                "success": True,
                "message": "Attendance marked successfully",
                "record": record_json(result.record),
                "student": student_json(result.student),
                "subject": subject.name if subject else None,
            }
        )

    @app.route("/api/qr-attendance/session/<session_id>", methods=["GET"], endpoint="api_qr_status")
    def session_status(session_id: str):
        return jsonify(status_json(container.qr_service.status(session_id)))

    @app.route("/api/qr-attendance/session/<session_id>/qr.png", methods=["GET"], endpoint="api_qr_image")
    def session_image(session_id: str):
        session = container.qr_service.get_session(session_id)
        png = render_qr_png(container.qr_service.payload(session))
        return send_file(io.BytesIO(png), mimetype="image/png")

    @app.route("/api/qr-attendance/session/<session_id>/end", methods=["PUT"], endpoint="api_qr_end")
    def end_session(session_id: str):
        session = container.qr_service.end(session_id)
        return jsonify(
            {
                "success": True,
                "message": "Session ended",
                "totalScanned": len(session.scanned_by),
                "session": session_json(session),
            }
        )

    @app.route("/api/qr-attendance/session/<session_id>/extend", methods=["PUT"], endpoint="api_qr_extend")
    def extend_session(session_id: str):
        data = json_body()
        session = container.qr_service.extend(session_id, additional_minutes=data.get("additionalMinutes"))
        return jsonify(
            {
                "success": True,
                "message": "Session extended",
                "newExpiresAt": json_value(session.expires_at),
                "session": session_json(session),
            }
        )

    @app.route("/api/qr-attendance/teacher/<teacher_id>/today", methods=["GET"], endpoint="api_qr_teacher_today")
    def teacher_today(teacher_id: str):
        return jsonify([status_json(st) for st in container.qr_service.today_for_teacher(teacher_id)])
