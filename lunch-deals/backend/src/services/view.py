from __future__ import annotations

import math
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from loguru import logger

from models import Deal, FilterSpec
from services.catalog import DIETARY_TAGS


ALL = "All"

# label -> (lower bound, upper bound, lower inclusive, upper inclusive) on discounted price
PRICE_RANGES: Dict[str, Tuple[float, float, bool, bool]] = {
    "<$10": (-math.inf, 10.0, False, False),
    "$10-$15": (10.0, 15.0, True, True),
    "$15+": (15.0, math.inf, False, False),
}

SORT_KEYS: Tuple[str, ...] = ("distance", "discount", "rating", "price")

# sort key -> (key function, descending)
_SORTERS: Dict[str, Tuple[Callable[[Deal], float], bool]] = {
    "distance": (lambda d: d.distance or 0.0, False),
    "discount": (lambda d: d.discount_percentage or 0, True),
    "rating": (lambda d: d.rating or 0.0, True),
    "price": (lambda d: d.discounted_price or 0.0, False),
}


def _normalize_cuisine(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        return ALL
    return value.strip()


def _normalize_price_range(value: Any) -> str:
    if isinstance(value, str) and value.strip() in PRICE_RANGES:
        return value.strip()
    return ALL


def _normalize_dietary(value: Any) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        return []
    tags: list[str] = []
    for raw in value:
        if not isinstance(raw, str):
            continue
        tag = raw.strip().lower()
        if tag not in DIETARY_TAGS:
            logger.debug("ignoring unknown dietary tag {!r}", raw)
            continue
        if tag not in tags:
            tags.append(tag)
    return tags


def _normalize_rating(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        rating = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(rating) or rating < 0:
        return 0.0
    return rating


def normalize_filters(filters: Optional[FilterSpec]) -> FilterSpec:
    """Coerce every malformed selection to its no-op value."""
    if filters is None:
        return FilterSpec()
    return FilterSpec(
        cuisine=_normalize_cuisine(filters.cuisine),
        price_range=_normalize_price_range(filters.price_range),
        dietary_tags=_normalize_dietary(filters.dietary_tags),
        min_rating=_normalize_rating(filters.min_rating),
    )


def matches_cuisine(deal: Deal, cuisine: str) -> bool:
    if cuisine == ALL:
        return True
    if isinstance(deal.cuisine, str):
        return deal.cuisine == cuisine
    return cuisine in deal.cuisine


def matches_price(deal: Deal, price_range: str) -> bool:
    bounds = PRICE_RANGES.get(price_range)
    if bounds is None:
        return True
    low, high, low_inc, high_inc = bounds
    price = deal.discounted_price
    above = price >= low if low_inc else price > low
    below = price <= high if high_inc else price < high
    return above and below


def matches_dietary(deal: Deal, required: Iterable[str]) -> bool:
    have = set(deal.dietary_tags or [])
    return all(tag in have for tag in required)


def matches_rating(deal: Deal, min_rating: float) -> bool:
    if min_rating <= 0:
        return True
    return (deal.rating or 0.0) >= min_rating


def matches(deal: Deal, spec: FilterSpec) -> bool:
    return (
        matches_cuisine(deal, spec.cuisine or ALL)
        and matches_price(deal, spec.price_range or ALL)
        and matches_dietary(deal, spec.dietary_tags)
        and matches_rating(deal, spec.min_rating)
    )


def sort_deals(deals: List[Deal], sort: Optional[str]) -> List[Deal]:
    """Stable sort by one of SORT_KEYS; an unknown key keeps input order."""
    sorter = _SORTERS.get((sort or "").strip().lower()) if isinstance(sort, str) else None
    if sorter is None:
        return list(deals)
    key, descending = sorter
    # sorted() stays stable with reverse=True
    return sorted(deals, key=key, reverse=descending)


def view(deals: Iterable[Deal], filters: Optional[FilterSpec] = None, sort: Optional[str] = "distance") -> List[Deal]:
    spec = normalize_filters(filters)
    kept = [d for d in deals if matches(d, spec)]
    return sort_deals(kept, sort)


def cuisine_options(deals: Iterable[Deal]) -> List[str]:
    """Distinct cuisines across the unfiltered catalog, sorted."""
    seen: set[str] = set()
    for deal in deals:
        seen.update(deal.cuisines())
    return sorted(seen)
