"""Shared JSON plumbing for controllers: envelopes, auth decorators, error mapping."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from .common.datetime_utils import parse_iso_date, parse_optional_timestamp
from .core.exceptions import AuthenticationError, AuthorizationError, DomainError, TrackingNotAllowedError, ValidationError
from .staff.model import ADMIN_ROLES
from .staff.service import SessionStaff

logger = logging.getLogger(__name__)


def ok(data: Any = None, status: int = 200):
    return jsonify({"success": True, "data": data}), status


def fail(message: str, status: int, **extra: Any):
    body = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def json_body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def store_session(s_staff: SessionStaff) -> None:
    session.clear()
    session["staff_id"] = s_staff.staff_id
    session["company_id"] = s_staff.company_id
    session["name"] = s_staff.full_name
    session["role"] = s_staff.role_name
    session["role_id"] = s_staff.role_id
    session["branch_id"] = s_staff.branch_id


def current_staff_id() -> int:
    if "staff_id" not in session:
        raise AuthenticationError("Unauthorized")
    return int(session["staff_id"])


def current_company_id() -> int:
    if "company_id" not in session:
        raise AuthenticationError("Unauthorized")
    return int(session["company_id"])


def is_admin() -> bool:
    return session.get("role") in ADMIN_ROLES


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "staff_id" not in session:
            return fail("Unauthorized", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "staff_id" not in session:
            return fail("Unauthorized", 401)
        if not is_admin():
            return fail("Forbidden", 403)
        return view(*args, **kwargs)

    return wrapper


def query_int(name: str) -> Optional[int]:
    raw = request.args.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def query_timestamp(name: str):
    return parse_optional_timestamp(request.args.get(name))


def query_date(name: str):
    raw = request.args.get(name)
    return parse_iso_date(raw) if raw else None


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError):
        if isinstance(e, TrackingNotAllowedError):
            return fail(str(e), e.status_code, reason=e.reason)
        if isinstance(e, (AuthenticationError, AuthorizationError)):
            logger.info("access denied: %s", e, extra={"path": request.path})
        return fail(str(e), e.status_code)

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        logger.exception("unhandled error", extra={"path": request.path, "method": request.method})
        if app.config.get("DEBUG"):
            return fail(f"Server Error: {e}", 500)
        return fail("Server Error", 500)
