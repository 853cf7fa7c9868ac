import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Load the demo students, teachers and fee structure on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))

QR_VALID_MINUTES = int(os.getenv("QR_VALID_MINUTES", "15"))
QR_EXTEND_MINUTES = int(os.getenv("QR_EXTEND_MINUTES", "10"))
FEE_DUE_DAYS = int(os.getenv("FEE_DUE_DAYS", "30"))
LOW_ATTENDANCE_THRESHOLD = float(os.getenv("LOW_ATTENDANCE_THRESHOLD", "75"))
