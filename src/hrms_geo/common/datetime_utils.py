from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

from ..core.exceptions import ValidationError

TimestampInput = Union[None, str, int, float, datetime]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def parse_timestamp(value: TimestampInput = None) -> datetime:
    """Normalize any client timestamp into an aware UTC datetime.

    - ``None`` means "now".
    - Numbers are epoch milliseconds, as sent by mobile clients.
    - ISO strings without an offset (``2025-01-01T09:30:00``) are UTC,
      exactly as if a trailing ``Z`` had been sent.
    - Naive datetimes are UTC as well; aware ones are converted.
    """

    if value is None:
        return now_utc()

    if isinstance(value, bool):
        raise ValidationError(f"Invalid timestamp: {value!r}")

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise ValidationError(f"Invalid timestamp: {value!r}")

    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            raise ValidationError("Invalid timestamp: empty string")
        if raw[-1] in "zZ":
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            raise ValidationError(f"Invalid timestamp: {value!r}")
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)

    raise ValidationError(f"Unsupported timestamp type: {type(value).__name__}")


def parse_optional_timestamp(value: TimestampInput) -> Optional[datetime]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_timestamp(value)


def utc_day_bounds(day: date) -> tuple[datetime, datetime]:
    """[start, end) of a calendar day in UTC."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def to_db_utc(value: Optional[datetime]) -> Optional[datetime]:
    """MySQL DATETIME has no zone: store naive UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_db_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def isoformat_utc(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return parse_timestamp(value).isoformat().replace("+00:00", "Z")
