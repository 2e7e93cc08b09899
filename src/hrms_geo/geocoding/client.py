from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedAddress:
    address: Optional[str] = None
    full_address: Optional[str] = None
    city: Optional[str] = None
    area: Optional[str] = None
    pincode: Optional[str] = None


class ReverseGeocoder:
    """Nominatim-compatible reverse geocoding client (``/reverse?format=jsonv2``)."""

    def __init__(self, base_url: str, *, user_agent: str = "hrms-geo", timeout: float = 5):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent, "Accept": "application/json"})

    def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        response = self.session.get(f"{self.base_url}/{path.lstrip('/')}", params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json() if response.content else {}

    def reverse(self, lat: float, lng: float) -> ResolvedAddress:
        data = self._get("reverse", {"lat": lat, "lon": lng, "format": "jsonv2", "addressdetails": 1})
        return parse_reverse_response(data)


def parse_reverse_response(data: dict[str, Any]) -> ResolvedAddress:
    parts = data.get("address") or {}
    city = parts.get("city") or parts.get("town") or parts.get("village") or parts.get("county")
    area = parts.get("suburb") or parts.get("neighbourhood") or parts.get("city_district")
    street = " ".join(p for p in (parts.get("house_number"), parts.get("road")) if p)
    short = ", ".join(p for p in (street, area, city) if p) or None
    return ResolvedAddress(
        address=short,
        full_address=data.get("display_name"),
        city=city,
        area=area,
        pincode=parts.get("postcode"),
    )


def safe_reverse(geocoder: Optional[ReverseGeocoder], lat: float, lng: float) -> ResolvedAddress:
    """Best-effort lookup: any failure yields an empty address."""

    if geocoder is None:
        return ResolvedAddress()
    try:
        return geocoder.reverse(lat, lng)
    except (requests.RequestException, ValueError) as exc:
        logger.warning("reverse geocoding failed for %.5f,%.5f: %s", lat, lng, exc)
        return ResolvedAddress()
