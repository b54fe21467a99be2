"""Data models for the lunch deals backend."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple, Union


class InvalidCoordinatesError(ValueError):
    pass


def _as_coordinate(value: Any, name: str) -> float:
    # bool is an int subclass; "true" is not a latitude
    if value is None or isinstance(value, bool):
        raise InvalidCoordinatesError(f"Missing required parameter: {name}")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise InvalidCoordinatesError(f"{name} must be numeric, got {value!r}")
    if not isinstance(value, (int, float)):
        raise InvalidCoordinatesError(f"{name} must be numeric, got {type(value).__name__}")
    number = float(value)
    if not math.isfinite(number):
        raise InvalidCoordinatesError(f"{name} must be finite")
    return number


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float

    @classmethod
    def from_raw(cls, lat: Any, lng: Any) -> "Coordinates":
        """Build validated coordinates from untrusted input (request bodies, env)."""
        lat_f = _as_coordinate(lat, "lat")
        lng_f = _as_coordinate(lng, "lng")
        if not -90.0 <= lat_f <= 90.0:
            raise InvalidCoordinatesError(f"lat must be within [-90, 90], got {lat_f}")
        if not -180.0 <= lng_f <= 180.0:
            raise InvalidCoordinatesError(f"lng must be within [-180, 180], got {lng_f}")
        return cls(lat=lat_f, lng=lng_f)


Cuisine = Union[str, List[str]]


@dataclass
class Deal:
    id: str
    title: str
    restaurant_name: str
    original_price: float
    discounted_price: float
    discount_percentage: int
    description: str
    cuisine: Cuisine
    coordinates: Coordinates
    address: str
    source: str
    dietary_tags: list[str] = field(default_factory=list)
    rating: float = 0.0
    review_count: int = 0
    image_url: str = ""
    distance: float = 0.0  # miles from the origin, set by annotate()

    def cuisines(self) -> list[str]:
        if isinstance(self.cuisine, str):
            return [self.cuisine] if self.cuisine else []
        return [c for c in self.cuisine if c]


@dataclass
class FilterSpec:
    cuisine: Optional[str] = "All"
    price_range: Optional[str] = "All"
    dietary_tags: list[str] = field(default_factory=list)
    min_rating: float = 0.0


@dataclass(frozen=True)
class Hotspot:
    name: str
    lat: float
    lng: float


@dataclass(frozen=True)
class RestaurantArchetype:
    name: str
    cuisine: str
    image: str
    dietary: Tuple[str, ...] = ()
    neighborhood: Optional[str] = None
    price_range: Tuple[float, float] = (8.0, 35.0)
