from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_EVENT_KEEPALIVE_SECONDS
from .core.logging import configure_logging, install_request_logging
from .database.bootstrap import apply_schema, ensure_demo_accounts, list_tables
from .lms.controller import register as register_lms
from .presence.controller import register as register_tracking
from .realtime.controller import register as register_events
from .roles.controller import register as register_roles
from .settings import get_settings_module
from .staff.controller import register as register_auth
from .web import register_error_handlers

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Passing a ``container`` skips all database work (used by tests).
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["EVENT_KEEPALIVE_SECONDS"] = int(
        getattr(settings, "EVENT_KEEPALIVE_SECONDS", DEFAULT_EVENT_KEEPALIVE_SECONDS)
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "starting settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_accounts(db_config)
            logger.info("demo accounts ready")

        container = build_container(db_config=db_config, settings=settings)

    install_request_logging(app)
    register_error_handlers(app)

    register_auth(app, container)
    register_attendance(app, container)
    register_tracking(app, container)
    register_roles(app, container)
    register_lms(app, container)
    register_events(app, container)

    return app
