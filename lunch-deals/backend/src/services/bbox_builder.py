from __future__ import annotations

import math
import random
from typing import Tuple

from models import Coordinates


MILES_PER_DEG_LAT = 69.0


def expand_bbox_from_center(center: Coordinates, miles: float) -> Tuple[float, float, float, float]:
    """Create a rectangular bbox around center by ±miles in both axes.

    Returns (min_lng, min_lat, max_lng, max_lat)
    """
    dlat = miles / MILES_PER_DEG_LAT
    cos_lat = math.cos(math.radians(center.lat))
    dlng = miles / (MILES_PER_DEG_LAT * cos_lat if cos_lat > 1e-6 else 1e-6)
    min_lng = center.lng - dlng
    max_lng = center.lng + dlng
    min_lat = max(center.lat - dlat, -90.0)
    max_lat = min(center.lat + dlat, 90.0)
    return (min_lng, min_lat, max_lng, max_lat)


def jitter_within(center: Coordinates, miles: float, rng: random.Random) -> Coordinates:
    """Draw a point uniformly from the bbox of half-width `miles` around center."""
    min_lng, min_lat, max_lng, max_lat = expand_bbox_from_center(center, miles)
    lat = rng.uniform(min_lat, max_lat)
    lng = rng.uniform(min_lng, max_lng)
    # wrap across the antimeridian
    lng = ((lng + 180.0) % 360.0) - 180.0
    return Coordinates(lat=lat, lng=lng)
