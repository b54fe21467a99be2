import random

from config import Configuration
from models import Coordinates
from services.catalog import (
    DIETARY_TAGS,
    LA_DEMO_DEAL_COUNT,
    LA_HOTSPOTS,
    LA_RESTAURANTS,
    NATIONAL_RESTAURANTS,
    DealCatalog,
    price_pair,
)
from utils import distance_miles


ORIGIN = Coordinates(lat=37.7749, lng=-122.4194)


def _catalog(seed: int = 7) -> DealCatalog:
    return DealCatalog(Configuration(), random.Random(seed))


def test_same_seed_same_catalog():
    first = _catalog(42).generate(ORIGIN, "San Francisco", batch=1)
    second = _catalog(42).generate(ORIGIN, "San Francisco", batch=1)
    assert first == second


def test_seeded_catalog_ids_repeat_without_batch():
    first = _catalog(42).generate(ORIGIN)
    second = _catalog(42).generate(ORIGIN)
    assert [d.id for d in first] == [d.id for d in second]
    assert len({d.id for d in first}) == len(first)


def test_different_seed_different_catalog():
    first = _catalog(1).generate(ORIGIN, batch=1)
    second = _catalog(2).generate(ORIGIN, batch=1)
    assert [d.original_price for d in first] != [d.original_price for d in second]


def test_national_catalog_ranges():
    deals = _catalog().generate(ORIGIN, "San Francisco", batch=99)
    assert len(deals) == len(NATIONAL_RESTAURANTS) == 51
    assert len({d.id for d in deals}) == len(deals)
    for d in deals:
        assert d.id.startswith("mock-99-")
        assert 8.0 <= d.original_price <= 35.0
        assert 15 <= d.discount_percentage <= 70
        assert d.discounted_price <= d.original_price
        assert d.discounted_price == round(d.original_price * (1 - d.discount_percentage / 100.0), 2)
        assert 3.5 <= d.rating <= 5.0
        assert round(d.rating, 1) == d.rating
        assert 50 <= d.review_count <= 999
        assert d.distance == 0.0
        assert d.source == "demo"
        assert d.address.endswith("Main St, San Francisco")
        assert set(d.dietary_tags) <= set(DIETARY_TAGS)
        # jitter box half-width 6.9 miles; the corner is ~9.8 miles out
        assert distance_miles(ORIGIN, d.coordinates) < 10.0


def test_national_catalog_defaults_city():
    cfg = Configuration(default_city="Springfield")
    deals = DealCatalog(cfg, random.Random(3)).generate(ORIGIN)
    assert all(d.address.endswith("Springfield") for d in deals)


def test_la_demo_catalog():
    deals = _catalog().generate_la_demo()
    assert len(deals) == LA_DEMO_DEAL_COUNT
    assert [d.id for d in deals[:3]] == ["la-poc-0", "la-poc-1", "la-poc-2"]
    archetypes = {r.name: r for r in LA_RESTAURANTS}
    for i, d in enumerate(deals):
        base = LA_RESTAURANTS[i % len(LA_RESTAURANTS)]
        assert d.restaurant_name == base.name
        low, high = archetypes[d.restaurant_name].price_range
        assert low <= d.original_price <= high
        assert 15 <= d.discount_percentage <= 64
        assert d.discounted_price <= d.original_price
        assert 4.0 <= d.rating <= 5.0
        assert 100 <= d.review_count <= 2099
        assert d.source == "PoC Mockup"
        nearest = min(distance_miles(d.coordinates, Coordinates(h.lat, h.lng)) for h in LA_HOTSPOTS)
        assert nearest < 2.5


def test_la_demo_anchors_known_neighborhood():
    deals = _catalog().generate_la_demo()
    santa_monica = next(h for h in LA_HOTSPOTS if h.name == "Santa Monica")
    bay_cities = [d for d in deals if d.restaurant_name == "Bay Cities Italian Deli"]
    assert bay_cities
    for d in bay_cities:
        assert distance_miles(d.coordinates, Coordinates(santa_monica.lat, santa_monica.lng)) < 2.5


def test_placeholders():
    deals = _catalog().placeholders(ORIGIN, "Oakland", 3, source="groupon", batch=5)
    assert [d.id for d in deals] == ["groupon-5-0", "groupon-5-1", "groupon-5-2"]
    for d in deals:
        assert 20.0 <= d.original_price <= 50.0
        assert 30 <= d.discount_percentage <= 69
        assert d.discounted_price <= d.original_price
        assert d.cuisine in ("American", "Italian", "Mexican", "Asian")
        assert d.title == "Oakland Restaurant Deal"
        assert d.source == "groupon"
    assert _catalog().placeholders(ORIGIN, "Oakland", 0, source="groupon") == []


def test_price_pair_never_exceeds_original():
    rng = random.Random(11)
    for _ in range(500):
        original, discounted = price_pair(rng.uniform(0.01, 100.0), rng.randint(0, 100))
        assert 0.0 <= discounted <= original
    assert price_pair(19.999, 0) == (20.0, 20.0)
    assert price_pair(20.0, 100) == (20.0, 0.0)
