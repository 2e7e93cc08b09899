import os

from .base import *  # noqa: F401,F403
from .base import env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True

# Apply schema.sql on startup (idempotent: CREATE TABLE IF NOT EXISTS).
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
# Also create the demo company with admin/employee logins.
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")
