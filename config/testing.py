import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "office_attendance_test"),
}

OFFICE_LOCATION = {
    "latitude": 47.916646,
    "longitude": 106.908877,
    "allowed_radius_m": 3000.0,
}

STATUS_POLICY = {
    "workday_start": "09:00",
    "late_grace_minutes": 0,
    "half_day_max_hours": 4.0,
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
