from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
GEOCODER_ENABLED = False
EVENT_KEEPALIVE_SECONDS = 1
