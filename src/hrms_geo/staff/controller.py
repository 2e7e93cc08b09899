from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, session

from ..container import Container
from ..roles.routing import profile_route, role_dashboard
from ..web import admin_required, current_company_id, current_staff_id, json_body, login_required, ok, store_session

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        body = json_body()
        s_staff = container.auth_service.authenticate(body.get("username", ""), body.get("password", ""))

        store_session(s_staff)
        session.permanent = bool(body.get("rememberMe"))
        app.permanent_session_lifetime = timedelta(days=7)

        logger.info("login", extra={"staff_id": s_staff.staff_id})
        return ok(
            {
                "staffId": s_staff.staff_id,
                "name": s_staff.full_name,
                "role": s_staff.role_name,
                "dashboard": role_dashboard(s_staff.role_name),
            }
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        staff_id = session.get("staff_id")
        session.clear()
        if staff_id is not None:
            container.events.close_staff(staff_id)
            logger.info("logout", extra={"staff_id": staff_id})
        return ok({"loggedOut": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @login_required
    def me():
        staff = container.auth_service.current(current_staff_id())
        permissions = container.role_service.permissions_for(staff.company_id, staff.role_name, staff.role_id)
        return ok(
            {
                "staffId": staff.staff_id,
                "companyId": staff.company_id,
                "branchId": staff.branch_id,
                "name": staff.full_name,
                "username": staff.username,
                "role": staff.role_name,
                "isAdmin": staff.is_admin,
                "dashboard": role_dashboard(staff.role_name),
                "profile": profile_route(staff.role_name),
                "permissions": list(permissions),
            }
        )

    @app.route("/api/staff", methods=["GET"], endpoint="staff_list")
    @admin_required
    def staff_list():
        staff = container.staff_service.list_company_staff(current_company_id())
        return ok(
            [
                {
                    "staffId": s.staff_id,
                    "name": s.full_name,
                    "username": s.username,
                    "role": s.role_name,
                    "branchId": s.branch_id,
                    "shiftId": s.shift_id,
                }
                for s in staff
            ]
        )
