"""Demo data loaded when AUTO_SEED_DB is on.

Everything lives in memory, so a restart always comes back to this state.
"""

from __future__ import annotations

import logging
from datetime import date

from werkzeug.security import generate_password_hash

from ..academics.model import Semester, Subject, Teacher
from ..academics.repository import AcademicsRepository
from ..core.enums import Role
from ..fees.service import FeeService
from ..students.model import Student
from ..students.repository import StudentRepository
from ..users.model import User
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)

DEMO_ADMIN_PASSWORD = "admin123"
DEMO_TEACHER_PASSWORD = "teacher123"
DEMO_STUDENT_PASSWORD = "student123"

SEMESTERS = [
    ("sem-001", "Fall 2025", date(2025, 9, 1), date(2025, 12, 31)),
    ("sem-002", "Spring 2026", date(2026, 2, 1), date(2026, 5, 31)),
    ("sem-003", "Summer 2026", date(2026, 6, 15), date(2026, 8, 15)),
]

TEACHERS = [
    ("teacher-001", "Prof. Hassan Ahmed", "teacher@iub.edu.pk", "Computer Science"),
    ("teacher-002", "Dr. Fatima Khan", "fatima.khan@iub.edu.pk", "Computer Science"),
]

# id, name, code, credit hours, teacher
SUBJECTS = [
    ("sub-001", "Programming Fundamentals", "CS101", 4, "teacher-001"),
    ("sub-002", "Data Structures", "CS201", 4, "teacher-001"),
    ("sub-003", "Database Systems", "CS301", 3, "teacher-002"),
    ("sub-004", "Web Development", "CS302", 3, "teacher-002"),
    ("sub-005", "Mobile App Development", "CS401", 3, "teacher-002"),
    ("sub-006", "Artificial Intelligence", "CS402", 3, "teacher-001"),
    ("sub-007", "Calculus I", "MATH101", 3, None),
    ("sub-008", "Physics I", "PHY101", 4, None),
    ("sub-009", "English Communication", "ENG101", 3, None),
    ("sub-010", "Islamic Studies", "ISL101", 2, None),
]

# name, roll number, department, semester
STUDENTS = [
    ("Ahmad Raza", "IUB-2025-001", "Computer Science", 3),
    ("Fatima Zahra", "IUB-2025-002", "Computer Science", 3),
    ("Muhammad Ali", "IUB-2025-003", "Computer Science", 5),
    ("Ayesha Siddiqui", "IUB-2025-004", "Electrical Engineering", 1),
    ("Usman Khan", "IUB-2025-005", "Computer Science", 7),
    ("Zainab Malik", "IUB-2025-006", "Business Administration", 3),
    ("Bilal Ahmed", "IUB-2025-007", "Computer Science", 5),
    ("Maryam Hassan", "IUB-2025-008", "Mathematics", 1),
]

# name, amount, type, due day
FEE_TYPES = [
    ("Tuition Fee", 45000, "semester", 15),
    ("Lab Fee", 5000, "semester", 15),
    ("Library Fee", 2000, "annual", 1),
    ("Sports Fee", 1500, "annual", 1),
    ("Examination Fee", 3000, "semester", 30),
]
SEMESTER_FEE_DUE = date(2025, 9, 15)


def seed_demo_data(
    *,
    users: UserRepository,
    students: StudentRepository,
    academics: AcademicsRepository,
    fees: FeeService,
) -> None:
    users.add(
        User(
            user_id="admin-001",
            email="admin@iub.edu.pk",
            name="Dr. Muhammad Ali",
            password_hash=generate_password_hash(DEMO_ADMIN_PASSWORD),
            role=Role.ADMIN,
            phone="+92-300-1234567",
        )
    )

    for semester_id, name, start, end in SEMESTERS:
        academics.add_semester(Semester(semester_id=semester_id, name=name, start_date=start, end_date=end))

    teacher_hash = generate_password_hash(DEMO_TEACHER_PASSWORD)
    for teacher_id, name, email, department in TEACHERS:
        academics.add_teacher(Teacher(teacher_id=teacher_id, name=name, email=email, department=department))
        users.add(
            User(
                user_id=f"user-{teacher_id}",
                email=email,
                name=name,
                password_hash=teacher_hash,
                role=Role.TEACHER,
                linked_id=teacher_id,
            )
        )

    for subject_id, name, code, credit_hours, teacher_id in SUBJECTS:
        academics.add_subject(
            Subject(subject_id=subject_id, name=name, code=code, credit_hours=credit_hours, teacher_id=teacher_id)
        )

    student_hash = generate_password_hash(DEMO_STUDENT_PASSWORD)
    for i, (name, roll_number, department, semester) in enumerate(STUDENTS, start=1):
        student_id = f"student-{i:03d}"
        email = name.lower().replace(" ", ".") + "@student.iub.edu.pk"
        students.add(
            Student(
                student_id=student_id,
                name=name,
                roll_number=roll_number,
                email=email,
                phone=f"+92-30{i - 1}-1234567",
                semester=semester,
                department=department,
            )
        )
        users.add(
            User(
                user_id=f"user-{student_id}",
                email=email,
                name=name,
                password_hash=student_hash,
                role=Role.STUDENT,
                linked_id=student_id,
            )
        )

    for name, amount, kind, due_day in FEE_TYPES:
        fees.add_fee_type(name=name, amount=amount, type=kind, due_day=due_day)

    semester_total = sum(amount for _, amount, _, _ in FEE_TYPES)
    for i in range(1, len(STUDENTS) + 1):
        fees.create_record(
            student_id=f"student-{i:03d}",
            semester_id="sem-001",
            total_amount=semester_total,
            due_date=SEMESTER_FEE_DUE,
        )

    logger.info(
        "Seeded %d students, %d teachers, %d subjects, %d fee types",
        len(STUDENTS),
        len(TEACHERS),
        len(SUBJECTS),
        len(FEE_TYPES),
    )
