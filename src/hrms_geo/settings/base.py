"""Settings shared by every environment, read from the process environment."""

import os

from ..core.constants import DEFAULT_EVENT_KEEPALIVE_SECONDS, DEFAULT_LATE_GRACE_MINUTES


def env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hrms_geo"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Reverse geocoding (Nominatim-compatible). Disabled unless switched on.
GEOCODER_ENABLED = env_flag("GEOCODER_ENABLED")
GEOCODER_URL = os.getenv("GEOCODER_URL", "https://nominatim.openstreetmap.org")
GEOCODER_TIMEOUT = float(os.getenv("GEOCODER_TIMEOUT", "5"))
GEOCODER_USER_AGENT = os.getenv("GEOCODER_USER_AGENT", "hrms-geo/1.0")

EVENT_KEEPALIVE_SECONDS = int(os.getenv("EVENT_KEEPALIVE_SECONDS", str(DEFAULT_EVENT_KEEPALIVE_SECONDS)))
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", str(DEFAULT_LATE_GRACE_MINUTES)))
