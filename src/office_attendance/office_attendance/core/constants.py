"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_M = 6_371_000.0

MIN_ALLOWED_RADIUS_M = 10.0
MAX_ALLOWED_RADIUS_M = 5000.0

DEFAULT_WORKDAY_START = "09:00"
DEFAULT_LATE_GRACE_MINUTES = 0
DEFAULT_HALF_DAY_MAX_HOURS = 4.0

DEFAULT_HISTORY_LIMIT = 30
DEFAULT_PENDING_LIMIT = 500

LATE_DAY_WEIGHT = 0.8
HALF_DAY_WEIGHT = 0.5
