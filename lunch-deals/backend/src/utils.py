"""Utility helpers for the lunch deals backend."""

from __future__ import annotations

import math
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from models import Coordinates


EARTH_RADIUS_MILES = 3959.0


def mask_secret(value: Optional[str], visible: int = 4) -> str:
    if not value:
        return "unset"
    if len(value) <= visible * 2:
        return "*" * len(value)
    return f"{value[:visible]}...{value[-visible:]}"


def _clamp_lat(lat: float) -> float:
    return max(-90.0, min(90.0, lat))


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in miles.

    Latitudes beyond the poles are clamped to +/-90 before use.
    """
    lat1 = _clamp_lat(lat1)
    lat2 = _clamp_lat(lat2)
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    # rounding can push a a hair outside [0, 1] for antipodal points
    a = min(max(a, 0.0), 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def distance_miles(a: "Coordinates", b: "Coordinates") -> float:
    return haversine_miles(a.lat, a.lng, b.lat, b.lng)
