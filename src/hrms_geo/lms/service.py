from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import now_utc, parse_timestamp
from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from ..realtime.events import NEW_LIVE_SESSION, new_live_session_payload
from ..realtime.hub import EventHub, company_channel
from .model import LiveSession
from .repository import LiveSessionRepository

logger = logging.getLogger(__name__)


class LiveSessionService:
    def __init__(self, sessions: LiveSessionRepository, *, events: Optional[EventHub] = None):
        self._sessions = sessions
        self._events = events

    def schedule_live_session(
        self,
        company_id: int,
        *,
        title: str,
        date_time: Any,
        description: Optional[str] = None,
        link: Optional[str] = None,
        created_by: Optional[int] = None,
    ) -> LiveSession:
        title = require_non_empty(title, "Title")
        if date_time is None or (isinstance(date_time, str) and not date_time.strip()):
            raise ValidationError("dateTime is required")
        starts_at = parse_timestamp(date_time)

        session_id = self._sessions.create(
            company_id=company_id,
            title=title,
            starts_at=starts_at,
            description=(description or "").strip() or None,
            meeting_link=(link or "").strip() or None,
            created_by=created_by,
        )
        session = self._sessions.get_by_id(session_id)

        if self._events is not None:
            delivered = self._events.publish(
                company_channel(company_id),
                NEW_LIVE_SESSION,
                new_live_session_payload(session.title, session.starts_at),
            )
            logger.info("live session scheduled, notified %d subscribers", delivered, extra={"staff_id": created_by})
        return session

    def upcoming_sessions(self, company_id: int, *, now: Optional[datetime] = None, limit: int = 50):
        return self._sessions.list_upcoming(company_id, since=now or now_utc(), limit=limit)
