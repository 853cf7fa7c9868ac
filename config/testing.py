import os

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))

QR_VALID_MINUTES = 15
QR_EXTEND_MINUTES = 10
FEE_DUE_DAYS = 30
LOW_ATTENDANCE_THRESHOLD = 75.0
