import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "office_attendance"),
}

# Default office point; a location saved by an admin takes precedence.
OFFICE_LOCATION = {
    "latitude": float(os.getenv("OFFICE_LAT", "47.916646")),
    "longitude": float(os.getenv("OFFICE_LNG", "106.908877")),
    "allowed_radius_m": float(os.getenv("ALLOWED_RADIUS", "3000")),
}

STATUS_POLICY = {
    "workday_start": os.getenv("WORKDAY_START", "09:00"),
    "late_grace_minutes": int(os.getenv("LATE_GRACE_MINUTES", "0")),
    "half_day_max_hours": float(os.getenv("HALF_DAY_MAX_HOURS", "4")),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also insert demo users on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
