from __future__ import annotations

import pytest

from src.campus_system.campus_system.main import create_app


@pytest.fixture()
def client():
    app = create_app("config.testing")
    return app.test_client()


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"


def test_login_with_seeded_admin(client):
    resp = client.post("/api/auth/login", json={"email": "admin@iub.edu.pk", "password": "admin123"})
    assert resp.status_code == 200
    assert resp.get_json()["user"]["role"] == "admin"

    bad = client.post("/api/auth/login", json={"email": "admin@iub.edu.pk", "password": "nope"})
    assert bad.status_code == 401
    assert bad.get_json() == {
        "success": False,
        "error": "AUTHENTICATION_FAILED",
        "message": "Invalid email or password",
    }


def test_mark_attendance_and_read_summary(client):
    resp = client.post(
        "/api/attendance",
        json={
            "date": "2025-10-06",
            "attendanceRecords": [
                {"studentId": "student-001", "status": "present"},
                {"studentId": "student-002", "status": "late"},
                {"studentId": "nobody", "status": "present"},
            ],
        },
    )
    body = resp.get_json()
    assert resp.status_code == 200
    assert len(body["results"]) == 2
    assert body["errors"] == [{"studentId": "nobody", "error": "Student not found"}]

    report = client.get("/api/attendance/student/student-002").get_json()
    assert report["summary"]["percentage"] == 50.0

    low = client.get("/api/attendance/low").get_json()
    assert [row["studentId"] for row in low] == ["student-002"]


def test_mark_attendance_with_junk_entry_keeps_valid_ones(client):
    resp = client.post(
        "/api/attendance",
        json={"date": "2025-10-07", "attendanceRecords": [{"studentId": "student-001", "status": "present"}, "junk"]},
    )
    body = resp.get_json()
    assert resp.status_code == 200
    assert [r["studentId"] for r in body["results"]] == ["student-001"]
    assert body["errors"] == [{"studentId": None, "error": "Invalid entry"}]


def test_qr_generate_scan_and_duplicate(client):
    gen = client.post("/api/qr-attendance/generate", json={"teacherId": "teacher-001", "subjectId": "sub-001"})
    assert gen.status_code == 201
    session = gen.get_json()["session"]
    assert len(session["code"]) == 6

    ok = client.post("/api/qr-attendance/scan", json={"studentId": "student-001", "code": session["code"]})
    assert ok.status_code == 200
    assert ok.get_json()["record"]["status"] == "present"

    dup = client.post("/api/qr-attendance/scan", json={"studentId": "student-001", "code": session["code"]})
    assert dup.status_code == 400
    assert dup.get_json()["error"] == "ALREADY_DONE"

    status = client.get(f"/api/qr-attendance/session/{session['id']}").get_json()
    assert status["session"]["scannedBy"] == ["student-001"]

    png = client.get(f"/api/qr-attendance/session/{session['id']}/qr.png")
    assert png.status_code == 200
    assert png.mimetype == "image/png"
    assert png.data.startswith(b"\x89PNG")

    ended = client.put(f"/api/qr-attendance/session/{session['id']}/end")
    assert ended.get_json()["totalScanned"] == 1


def test_fee_payment_flow(client):
    created = client.post(
        "/api/fees",
        json={"studentId": "student-001", "semesterId": "sem-002", "totalAmount": 1000},
    )
    assert created.status_code == 201
    record_id = created.get_json()["record"]["id"]

    first = client.post(f"/api/fees/{record_id}/pay", json={"amount": 400}).get_json()
    assert first["record"]["status"] == "partial"
    assert first["record"]["balance"] == 600.0

    second = client.post(f"/api/fees/{record_id}/pay", json={"amount": 600}).get_json()
    assert second["record"]["status"] == "paid"

    over = client.post(f"/api/fees/{record_id}/pay", json={"amount": 1})
    assert over.status_code == 400
    assert over.get_json()["error"] == "EXCEEDS_BALANCE"

    dup = client.post(
        "/api/fees",
        json={"studentId": "student-001", "semesterId": "sem-002", "totalAmount": 1000},
    )
    assert dup.status_code == 409


def test_leave_approval_backfills_attendance(client):
    client.post(
        "/api/attendance",
        json={"date": "2025-11-03", "attendanceRecords": [{"studentId": "student-003", "status": "present"}]},
    )
    submitted = client.post(
        "/api/leave",
        json={
            "studentId": "student-003",
            "startDate": "2025-11-03",
            "endDate": "2025-11-04",
            "reason": "Family emergency",
            "leaveType": "emergency",
        },
    )
    assert submitted.status_code == 201
    leave = submitted.get_json()["application"]
    assert leave["days"] == 2

    approved = client.put(f"/api/leave/{leave['id']}/status", json={"status": "approved", "approvedBy": "admin-001"})
    assert approved.get_json()["application"]["status"] == "approved"

    rows = client.get("/api/attendance?studentId=student-003").get_json()
    assert [(r["date"], r["status"]) for r in rows] == [("2025-11-03", "leave"), ("2025-11-04", "leave")]

    inbox = client.get("/api/notifications/user-student-003").get_json()
    assert inbox[0]["title"] == "Leave Approved"


def test_invalid_leave_range_is_rejected(client):
    resp = client.post(
        "/api/leave",
        json={
            "studentId": "student-001",
            "startDate": "2025-11-05",
            "endDate": "2025-11-04",
            "reason": "x",
            "leaveType": "sick",
        },
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "INVALID_INPUT"


def test_marks_and_not_found(client):
    added = client.post(
        "/api/marks",
        json={
            "studentId": "student-001",
            "subjectId": "sub-001",
            "examType": "midterm",
            "maxMarks": 30,
            "obtainedMarks": 24,
        },
    )
    assert added.status_code == 201
    assert added.get_json()["record"]["grade"] == "A-"

    results = client.get("/api/marks/student/student-001").get_json()
    assert results["summary"]["cgpa"] == 3.7

    missing = client.get("/api/students/ghost")
    assert missing.status_code == 404
    assert missing.get_json()["error"] == "NOT_FOUND"


def test_reference_endpoints(client):
    subjects = client.get("/api/marks/subjects/all").get_json()
    assert {s["code"] for s in subjects} >= {"CS101", "ISL101"}

    types = client.get("/api/marks/exam-types").get_json()
    assert {"value": "final", "label": "Final Exam", "maxMarks": 50} in types

    structure = client.get("/api/fees/structure").get_json()
    assert len(structure) == 5


def test_update_promote_and_delete_student(client):
    resp = client.put("/api/students/student-008", json={"department": "Statistics", "semester": 2})
    assert resp.status_code == 200
    assert resp.get_json()["student"]["department"] == "Statistics"

    clash = client.put("/api/students/student-008", json={"rollNumber": "IUB-2025-001"})
    assert clash.status_code == 409

    promoted = client.post("/api/students/promote", json={"studentIds": ["student-008", "ghost"], "newSemester": 3})
    assert [s["id"] for s in promoted.get_json()["promoted"]] == ["student-008"]

    client.post("/api/attendance", json={"date": "2025-10-08", "attendanceRecords": [{"studentId": "student-008"}]})
    gone = client.delete("/api/students/student-008")
    assert gone.status_code == 200
    assert client.get("/api/students/student-008").status_code == 404
    assert client.get("/api/attendance", query_string={"studentId": "student-008"}).get_json() == []
    assert client.get("/api/fees/student/student-008").get_json()["records"] == []

    login = client.post(
        "/api/auth/login", json={"email": "maryam.hassan@student.iub.edu.pk", "password": "student123"}
    )
    assert login.status_code == 401


def test_dashboard_endpoints(client):
    stats = client.get("/api/dashboard/stats").get_json()
    assert stats["overview"]["totalStudents"] == 8
    assert stats["overview"]["totalTeachers"] == 2
    assert stats["fees"]["totalDue"] == 8 * 56500

    quick = client.get("/api/dashboard/quick-stats").get_json()
    assert quick["students"] == 8
    assert quick["pendingLeaves"] == 0


def test_change_password_and_mark_all_notifications_read(client):
    resp = client.post(
        "/api/auth/change-password",
        json={"userId": "user-student-001", "currentPassword": "student123", "newPassword": "newpass1"},
    )
    assert resp.status_code == 200
    login = client.post("/api/auth/login", json={"email": "ahmad.raza@student.iub.edu.pk", "password": "newpass1"})
    assert login.status_code == 200

    for day in ("2025-11-03", "2025-11-10"):
        client.post(
            "/api/leave",
            json={
                "studentId": "student-001",
                "startDate": day,
                "endDate": day,
                "reason": "Appointment",
                "leaveType": "casual",
            },
        )
    assert len(client.get("/api/notifications/admin-001?unreadOnly=true").get_json()) == 2

    done = client.put("/api/notifications/read-all/admin-001")
    assert done.get_json()["updated"] == 2
    assert client.get("/api/notifications/admin-001?unreadOnly=true").get_json() == []
