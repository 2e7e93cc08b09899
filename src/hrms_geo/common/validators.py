from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def optional_float(value: Any, field_name: str) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def require_int(value: Any, field_name: str) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} required")
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def require_coordinates(lat: Any, lng: Any) -> tuple[float, float]:
    """Validate a lat/lng pair sent by a device."""

    if lat is None or lng is None:
        raise ValidationError("lat, lng required")

    latitude = optional_float(lat, "lat")
    longitude = optional_float(lng, "lng")
    if latitude is None or longitude is None:
        raise ValidationError("lat, lng required")
    if not -90.0 <= latitude <= 90.0:
        raise ValidationError("lat must be between -90 and 90")
    if not -180.0 <= longitude <= 180.0:
        raise ValidationError("lng must be between -180 and 180")
    return latitude, longitude


def clamp_limit(value: Any, *, default: int, maximum: int) -> int:
    try:
        limit = int(value)
    except (TypeError, ValueError):
        return default
    if limit <= 0:
        return default
    return min(limit, maximum)
