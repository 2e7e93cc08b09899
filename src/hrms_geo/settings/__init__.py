import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module; anything unknown means development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "hrms_geo.settings.production"

    if env in {"test", "testing"}:
        return "hrms_geo.settings.testing"

    return "hrms_geo.settings.development"
