from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body, json_value, query_str
from ..container import Container
from .model import MarkRecord


def mark_json(m: MarkRecord) -> dict:
    return {
        "id": m.mark_id,
        "studentId": m.student_id,
        "subjectId": m.subject_id,
        "examType": m.exam_type,
        "maxMarks": m.max_marks,
        "obtainedMarks": m.obtained_marks,
        "percentage": m.percentage,
        "grade": m.grade,
        "semesterId": m.semester_id,
        "remarks": m.remarks,
        "addedBy": m.added_by,
        "addedAt": json_value(m.added_at),
    }


def register(app: Flask, container: Container) -> None:
    def _enriched(m: MarkRecord) -> dict:
        body = mark_json(m)
        student = container.students_repo.get_by_id(m.student_id)
        subject = container.academics_repo.get_subject(m.subject_id)
        body["studentName"] = student.name if student else "Unknown"
        body["studentRollNumber"] = student.roll_number if student else "Unknown"
        body["subjectName"] = subject.name if subject else "Unknown"
        body["subjectCode"] = subject.code if subject else ""
        return body

    @app.route("/api/marks", methods=["GET"], endpoint="api_list_marks")
    def list_marks():
        rows = container.marks_service.list_marks(
            student_id=query_str("studentId"),
            subject_id=query_str("subjectId"),
            exam_type=query_str("examType"),
            semester_id=query_str("semesterId"),
        )
        return jsonify([_enriched(m) for m in rows])

    @app.route("/api/marks", methods=["POST"], endpoint="api_add_mark")
    def add_mark():
        data = json_body()
        record, created = container.marks_service.add_mark(
            student_id=data.get("studentId"),
            subject_id=data.get("subjectId"),
            exam_type=data.get("examType"),
            max_marks=data.get("maxMarks"),
            obtained_marks=data.get("obtainedMarks"),
            semester_id=data.get("semesterId"),
            remarks=data.get("remarks"),
            added_by=data.get("addedBy"),
        )
        return (
            jsonify(
                {
                    "success": True,
                    "message": "Marks added successfully" if created else "Marks updated successfully",
                    "record": mark_json(record),
                }
            ),
            201 if created else 200,
        )

    @app.route("/api/marks/bulk", methods=["POST"], endpoint="api_add_marks_bulk")
    def add_marks_bulk():
        data = json_body()
        entries = data.get("records") or data.get("marks") or []
        first = entries[0] if entries and isinstance(entries[0], dict) else {}
        result = container.marks_service.add_bulk(
            subject_id=data.get("subjectId") or first.get("subjectId"),
            exam_type=data.get("examType") or first.get("examType"),
            max_marks=data.get("maxMarks") if data.get("maxMarks") is not None else first.get("maxMarks"),
            entries=entries,
            semester_id=data.get("semesterId"),
            added_by=data.get("addedBy"),
        )
        body = {
            "success": True,
            "message": f"Marks added for {len(result.results)} students",
            "results": [_enriched(m) for m in result.results],
        }
        if result.errors:
            body["errors"] = [{"studentId": e.student_id, "error": e.error} for e in result.errors]
        return jsonify(body)

    @app.route("/api/marks/<mark_id>", methods=["DELETE"], endpoint="api_delete_mark")
    def delete_mark(mark_id: str):
        container.marks_service.delete_mark(mark_id)
        return jsonify({"success": True, "message": "Record deleted"})

    @app.route("/api/marks/student/<student_id>", methods=["GET"], endpoint="api_student_marks")
    def student_marks(student_id: str):
        results = container.marks_service.student_results(
            student_id,
            semester_id=query_str("semesterId"),
            exam_type=query_str("examType"),
        )
        return jsonify(
            {
                "subjects": [
                    {
                        "subjectId": s.subject_id,
                        "subjectName": s.subject_name,
                        "subjectCode": s.subject_code,
                        "creditHours": s.credit_hours,
                        "exams": [
                            {
                                "examType": e.exam_type,
                                "maxMarks": e.max_marks,
                                "obtainedMarks": e.obtained_marks,
                                "percentage": e.percentage,
                                "grade": e.grade,
                            }
                            for e in s.exams
                        ],
                        "totalObtained": s.total_obtained,
                        "totalMax": s.total_max,
                        "percentage": s.percentage,
                        "grade": s.grade,
                        "gpa": s.gpa,
                    }
                    for s in results.subjects
                ],
                "summary": {
                    "totalSubjects": len(results.subjects),
                    "totalExams": results.total_exams,
                    "totalMarks": results.total_marks,
                    "obtainedMarks": results.obtained_marks,
                    "percentage": results.percentage,
                    "cgpa": results.cgpa,
                    "totalCredits": results.total_credits,
                },
            }
        )

    @app.route("/api/marks/performance/<subject_id>", methods=["GET"], endpoint="api_subject_performance")
    def subject_performance(subject_id: str):
        perf = container.marks_service.subject_performance(subject_id, exam_type=query_str("examType"))
        if perf is None:
            return jsonify({"message": "No records found", "stats": None})
        return jsonify(
            {
                "subject": {"name": perf.subject_name, "code": perf.subject_code},
                "stats": {
                    "totalStudents": perf.total_students,
                    "average": perf.average,
                    "highest": perf.highest,
                    "lowest": perf.lowest,
                    "passRate": perf.pass_rate,
                },
                "gradeDistribution": perf.grade_distribution,
            }
        )

    @app.route("/api/marks/subjects/all", methods=["GET"], endpoint="api_subjects")
    def subjects():
        return jsonify(
            [
                {
                    "id": s.subject_id,
                    "name": s.name,
                    "code": s.code,
                    "creditHours": s.credit_hours,
                    "teacherId": s.teacher_id,
                }
                for s in container.academics_repo.list_subjects()
            ]
        )

    @app.route("/api/marks/exam-types", methods=["GET"], endpoint="api_exam_types")
    def exam_types():
        return jsonify(
            [{"value": t.value, "label": t.label, "maxMarks": t.max_marks} for t in container.marks_service.exam_types()]
        )
