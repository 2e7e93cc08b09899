from __future__ import annotations

import json
import logging
import sys
import time
import uuid
from datetime import datetime, timezone
from typing import Any

from flask import Flask, g, request, session


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in (
            "request_id",
            "staff_id",
            "path",
            "method",
            "status_code",
            "latency_ms",
        ):
            if hasattr(record, key):
                payload[key] = getattr(record, key)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(
        level=level,
        handlers=[handler],
        force=True,
    )


def install_request_logging(app: Flask, logger_name: str = "request") -> None:
    """One structured log line per request, plus an X-Request-Id echo."""

    logger = logging.getLogger(logger_name)

    @app.before_request
    def _start_timer():
        g.request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_request(response):
        started = getattr(g, "request_started", None)
        latency_ms = (time.perf_counter() - started) * 1000 if started is not None else 0.0
        logger.info(
            "request",
            extra={
                "request_id": g.get("request_id"),
                "path": request.path,
                "method": request.method,
                "status_code": response.status_code,
                "latency_ms": round(latency_ms, 2),
                "staff_id": session.get("staff_id"),
            },
        )
        response.headers["X-Request-Id"] = g.get("request_id", "")
        return response
