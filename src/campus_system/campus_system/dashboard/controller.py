from __future__ import annotations

from flask import Flask, jsonify

from ..attendance.controller import summary_json
from ..common.http import json_value
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard/stats", methods=["GET"], endpoint="api_dashboard_stats")
    def dashboard_stats():
        st = container.dashboard_service.stats()
        return jsonify(
            {
                "overview": {
                    "totalStudents": st.total_students,
                    "activeStudents": st.active_students,
                    "totalTeachers": st.total_teachers,
                    "totalSubjects": st.total_subjects,
                    "avgCGPA": st.average_cgpa,
                },
                "attendance": {
                    "today": summary_json(st.attendance_today),
                    "recent": summary_json(st.attendance_recent),
                },
                "fees": {
                    "totalDue": json_value(st.fees.total_due),
                    "totalCollected": json_value(st.fees.total_collected),
                    "pendingAmount": json_value(st.fees.total_pending),
                    "collectionRate": st.fees.collection_rate,
                    "defaulters": st.fee_defaulters,
                },
                "leaves": {"pending": st.pending_leaves},
                "studentsByDepartment": [
                    {"department": name, "count": count} for name, count in st.students_by_department.items()
                ],
            }
        )

    @app.route("/api/dashboard/quick-stats", methods=["GET"], endpoint="api_dashboard_quick_stats")
    def dashboard_quick_stats():
        q = container.dashboard_service.quick_stats()
        return jsonify(
            {
                "students": q.students,
                "teachers": q.teachers,
                "presentToday": q.present_today,
                "pendingLeaves": q.pending_leaves,
            }
        )
