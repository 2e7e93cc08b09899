"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_M = 6_371_000

DEFAULT_OFFICE_RADIUS_M = 200
DEFAULT_TASK_RADIUS_M = 100

DEFAULT_TRACKING_LIMIT = 500
MAX_TRACKING_LIMIT = 2000

DEFAULT_LATE_GRACE_MINUTES = 5
DEFAULT_EVENT_QUEUE_SIZE = 100
DEFAULT_EVENT_KEEPALIVE_SECONDS = 25

LIVE_SESSIONS_LINK = "/lms/employee/live-sessions"
