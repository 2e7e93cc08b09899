from __future__ import annotations

from flask import Flask

from ..container import Container
from ..web import admin_required, current_company_id, current_staff_id, json_body, login_required, ok


def register(app: Flask, container: Container) -> None:
    @app.route("/api/lms/live-sessions", methods=["GET"], endpoint="live_sessions_list")
    @login_required
    def live_sessions_list():
        sessions = container.live_session_service.upcoming_sessions(current_company_id())
        return ok([s.to_dict() for s in sessions])

    @app.route("/api/lms/live-sessions", methods=["POST"], endpoint="live_sessions_create")
    @admin_required
    def live_sessions_create():
        body = json_body()
        live = container.live_session_service.schedule_live_session(
            current_company_id(),
            title=body.get("title", ""),
            date_time=body.get("dateTime"),
            description=body.get("description"),
            link=body.get("meetingLink"),
            created_by=current_staff_id(),
        )
        return ok(live.to_dict(), 201)
