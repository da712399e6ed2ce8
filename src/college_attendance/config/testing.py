import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "college_attendance_test"),
}

ATTENDANCE_TIMEZONE = "Asia/Almaty"
TOKEN_TTL_HOURS = 8
QR_TOKEN_TTL_MINUTES = 10

CORS_ORIGINS = "*"
LOG_LEVEL = "WARNING"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
