from __future__ import annotations

import logging

from flask import Flask, Response, request, stream_with_context

from ..common.validators import require_int
from ..container import Container
from ..core.exceptions import AuthorizationError
from ..web import current_company_id, current_staff_id, is_admin, login_required
from .hub import company_channel, staff_channel, tracking_channel

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def tracked_channels() -> list[str]:
        """Admins may follow the live location of staff in their own company."""
        channels = []
        for raw in request.args.getlist("track"):
            staff_id = require_int(raw, "track")
            if not is_admin():
                raise AuthorizationError("Only admins can follow live locations")
            if container.staff_service.get(staff_id).company_id != current_company_id():
                raise AuthorizationError("Staff belongs to another company")
            channels.append(tracking_channel(staff_id))
        return channels

    @app.route("/api/events/stream", methods=["GET"], endpoint="events_stream")
    @login_required
    def events_stream():
        staff_id = current_staff_id()
        channels = [company_channel(current_company_id()), staff_channel(staff_id)] + tracked_channels()
        subscription = container.events.subscribe(channels, owner=staff_id)
        keepalive = float(app.config.get("EVENT_KEEPALIVE_SECONDS", 25))
        logger.info("event stream opened", extra={"staff_id": staff_id})

        def generate():
            # Ends on client disconnect (generator closed) or logout (subscription closed).
            with subscription:
                try:
                    yield ": connected\n\n"
                    while not subscription.closed:
                        event = subscription.get(timeout=keepalive)
                        if subscription.closed:
                            break
                        if event is None:
                            yield ": keep-alive\n\n"
                            continue
                        yield event.to_sse()
                finally:
                    logger.info("event stream closed", extra={"staff_id": staff_id})

        return Response(
            stream_with_context(generate()),
            mimetype="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )
