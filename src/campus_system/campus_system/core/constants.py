"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_QR_VALID_MINUTES = 15
DEFAULT_QR_EXTEND_MINUTES = 10
QR_CODE_LENGTH = 6
QR_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
QR_MARKED_BY = "qr-system"

DEFAULT_FEE_DUE_DAYS = 30
DEFAULT_PAYMENT_METHOD = "Cash"

MAX_LEAVE_DAYS = 365

# Late days count as half a present day in attendance percentages.
LATE_WEIGHT = 0.5
DEFAULT_LOW_ATTENDANCE_THRESHOLD = 75.0
DASHBOARD_RECENT_DAYS = 30

DEFAULT_CREDIT_HOURS = 3
DEFAULT_SEMESTER_ID = "sem-001"
DEFAULT_MARKS_ADDED_BY = "admin-001"
MIN_PASSWORD_LENGTH = 6

# (value, label, default max marks)
EXAM_TYPES = (
    ("quiz1", "Quiz 1", 10),
    ("quiz2", "Quiz 2", 10),
    ("quiz3", "Quiz 3", 10),
    ("assignment1", "Assignment 1", 10),
    ("assignment2", "Assignment 2", 10),
    ("midterm", "Mid Term", 30),
    ("final", "Final Exam", 50),
    ("project", "Project", 20),
    ("lab", "Lab Exam", 20),
    ("presentation", "Presentation", 10),
)
