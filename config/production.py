import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

QR_VALID_MINUTES = int(os.getenv("QR_VALID_MINUTES", "15"))
QR_EXTEND_MINUTES = int(os.getenv("QR_EXTEND_MINUTES", "10"))
FEE_DUE_DAYS = int(os.getenv("FEE_DUE_DAYS", "30"))
LOW_ATTENDANCE_THRESHOLD = float(os.getenv("LOW_ATTENDANCE_THRESHOLD", "75"))
