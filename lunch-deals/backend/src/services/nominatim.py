from __future__ import annotations

from typing import Optional

import requests

from config import Configuration
from models import Coordinates


class GeocodeError(RuntimeError):
    pass


LOCALITY_KEYS = ("city", "town", "village", "county")


class NominatimClient:
    """Reverse geocoding against an OpenStreetMap Nominatim instance."""

    def __init__(self, cfg: Configuration, session: Optional[requests.Session] = None) -> None:
        self.cfg = cfg
        self.base = cfg.nominatim_base_url.rstrip("/")
        self.session = session or requests.Session()

    def reverse(self, origin: Coordinates) -> str:
        url = f"{self.base}/reverse"
        params = {"format": "json", "lat": origin.lat, "lon": origin.lng}
        headers = {"Accept": "application/json", "User-Agent": self.cfg.user_agent}
        try:
            resp = self.session.get(url, headers=headers, params=params, timeout=self.cfg.nominatim_timeout)
        except requests.RequestException as exc:
            raise GeocodeError(f"request error: {exc}")

        if not resp.ok:
            raise GeocodeError(f"upstream {resp.status_code}: {resp.text[:300]}")

        try:
            payload = resp.json()
        except ValueError:
            raise GeocodeError("invalid json response")

        address = payload.get("address") if isinstance(payload, dict) else None
        if not isinstance(address, dict):
            raise GeocodeError("no address object in reverse geocode result")
        for key in LOCALITY_KEYS:
            value = address.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
        raise GeocodeError("no locality in reverse geocode result")
