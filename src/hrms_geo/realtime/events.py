"""Named events pushed to browsers and their payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import isoformat_utc
from ..core.constants import LIVE_SESSIONS_LINK

NEW_LIVE_SESSION = "new-live-session"
TRACKING_LOCATION = "tracking:location"


def new_live_session_payload(title: str, date_time: datetime, link: Optional[str] = None) -> dict[str, Any]:
    return {
        "title": title,
        "dateTime": isoformat_utc(date_time),
        "message": f"New live session scheduled: {title}",
        "link": link or LIVE_SESSIONS_LINK,
    }


def tracking_location_payload(record) -> dict[str, Any]:
    return {
        "staffId": record.staff_id,
        "staffName": record.staff_name,
        "latitude": record.latitude,
        "longitude": record.longitude,
        "presenceStatus": record.presence_status.value,
        "batteryPercent": record.battery_percent,
        "address": record.address,
        "timestamp": isoformat_utc(record.timestamp),
    }
