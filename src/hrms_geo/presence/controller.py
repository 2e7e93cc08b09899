from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_utc
from ..common.validators import require_int
from ..container import Container
from ..core.exceptions import AuthorizationError
from ..web import (
    admin_required,
    current_company_id,
    current_staff_id,
    is_admin,
    json_body,
    login_required,
    ok,
    query_date,
    query_int,
    query_timestamp,
)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/tracking/presence/store", methods=["POST"], endpoint="presence_store")
    @login_required
    def presence_store():
        body = json_body()
        record = container.presence_service.store_presence(
            current_staff_id(),
            lat=body.get("lat"),
            lng=body.get("lng"),
            timestamp=body.get("timestamp"),
            battery_percent=body.get("batteryPercent"),
            movement_type=body.get("movementType"),
            accuracy=body.get("accuracy"),
            presence_status=body.get("presenceStatus"),
        )
        return ok({"id": record.presence_id, "presenceStatus": record.presence_status.value}, 201)

    @app.route("/api/tracking/presence/status", methods=["GET"], endpoint="presence_status")
    @login_required
    def presence_status():
        return ok(container.presence_service.tracking_status(current_staff_id()))

    @app.route("/api/tracking/presence", methods=["GET"], endpoint="presence_list")
    @admin_required
    def presence_list():
        records = container.presence_service.list_presence(
            current_company_id(),
            staff_id=query_int("staffId"),
            start=query_timestamp("from"),
            end=query_timestamp("to"),
            limit=request.args.get("limit"),
        )
        return ok([r.to_dict() for r in records])

    @app.route("/api/tracking/live", methods=["GET"], endpoint="tracking_live")
    @admin_required
    def tracking_live():
        records = container.presence_service.live_positions(current_company_id())
        return ok([r.to_dict() for r in records])

    @app.route("/api/tracking/timeline", methods=["GET"], endpoint="tracking_timeline")
    @login_required
    def tracking_timeline():
        staff_id = query_int("staffId") or current_staff_id()
        if staff_id != current_staff_id():
            if not is_admin():
                raise AuthorizationError("You can only view your own timeline")
            if container.staff_service.get(staff_id).company_id != current_company_id():
                raise AuthorizationError("Staff belongs to another company")
        day = query_date("date") or now_utc().date()
        return ok(container.presence_service.timeline(staff_id, day))

    @app.route("/api/tracking/start", methods=["POST"], endpoint="tracking_start")
    @admin_required
    def tracking_start():
        staff_id = require_int(json_body().get("staffId"), "staffId")
        return ok(container.presence_service.start_tracking(current_company_id(), staff_id))

    @app.route("/api/tracking/store", methods=["POST"], endpoint="tracking_store")
    @login_required
    def tracking_store():
        body = json_body()
        ping = container.task_tracking_service.store_task_ping(
            current_staff_id(),
            current_company_id(),
            task_id=body.get("taskId"),
            lat=body.get("lat"),
            lng=body.get("lng"),
            timestamp=body.get("timestamp"),
            battery_percent=body.get("batteryPercent"),
            movement_type=body.get("movementType"),
            destination_lat=body.get("destinationLat"),
            destination_lng=body.get("destinationLng"),
        )
        return ok({"id": ping.ping_id, "presenceStatus": ping.presence_status.value}, 201)

    @app.route("/api/tracking", methods=["GET"], endpoint="tracking_list")
    @admin_required
    def tracking_list():
        pings = container.task_tracking_service.list_task_pings(
            current_company_id(),
            task_id=request.args.get("taskId"),
            staff_id=query_int("staffId"),
            start=query_timestamp("from"),
            end=query_timestamp("to"),
            limit=request.args.get("limit"),
        )
        return ok([p.to_dict() for p in pings])
