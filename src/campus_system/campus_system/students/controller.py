from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body, query_str
from ..container import Container
from .model import Student


def student_json(s: Student) -> dict:
    return {
        "id": s.student_id,
        "name": s.name,
        "rollNumber": s.roll_number,
        "email": s.email,
        "phone": s.phone,
        "semester": s.semester,
        "department": s.department,
        "isActive": s.is_active,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["GET"], endpoint="api_list_students")
    def list_students():
        semester = request.args.get("semester", type=int)
        rows = container.student_service.list_students(search=query_str("search"), semester=semester)
        return jsonify([student_json(s) for s in rows])

    @app.route("/api/students/<student_id>", methods=["GET"], endpoint="api_get_student")
    def get_student(student_id: str):
        return jsonify(student_json(container.student_service.get_student(student_id)))

    @app.route("/api/students", methods=["POST"], endpoint="api_create_student")
    def create_student():
        data = json_body()
        student = container.student_service.create_student(
            name=data.get("name"),
            roll_number=data.get("rollNumber"),
            email=data.get("email"),
            phone=data.get("phone"),
            semester=data.get("semester"),
            department=data.get("department"),
        )
        return jsonify({"success": True, "student": student_json(student)}), 201

    @app.route("/api/students/<student_id>", methods=["PUT"], endpoint="api_update_student")
    def update_student(student_id: str):
        student = container.student_service.update_student(student_id, json_body())
        return jsonify({"success": True, "message": "Student updated successfully", "student": student_json(student)})

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="api_delete_student")
    def delete_student(student_id: str):
        student = container.student_service.delete_student(student_id)
        return jsonify(
            {
                "success": True,
                "message": "Student deleted successfully",
                "student": {"id": student.student_id, "name": student.name},
            }
        )

    @app.route("/api/students/promote", methods=["POST"], endpoint="api_promote_students")
    def promote_students():
        data = json_body()
        promoted = container.student_service.promote(data.get("studentIds"), data.get("newSemester"))
        return jsonify(
            {
                "success": True,
                "message": f"{len(promoted)} students promoted",
                "promoted": [student_json(s) for s in promoted],
            }
        )
