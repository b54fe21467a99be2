import random

from models import Coordinates
from services.bbox_builder import expand_bbox_from_center, jitter_within


def test_expand_bbox_basic():
    center = Coordinates(lat=34.0522, lng=-118.2437)  # Los Angeles
    min_lng, min_lat, max_lng, max_lat = expand_bbox_from_center(center, 3.0)
    assert min_lng < max_lng
    assert min_lat < max_lat
    # center must lie within bbox
    assert min_lng < center.lng < max_lng
    assert min_lat < center.lat < max_lat
    # longitude degrees are shorter away from the equator
    assert (max_lng - min_lng) > (max_lat - min_lat)


def test_bbox_clamps_at_pole():
    _, min_lat, _, max_lat = expand_bbox_from_center(Coordinates(lat=89.99, lng=0.0), 50.0)
    assert max_lat == 90.0
    assert min_lat < 89.99


def test_jitter_stays_in_box():
    center = Coordinates(lat=40.7580, lng=-73.9855)
    rng = random.Random(5)
    min_lng, min_lat, max_lng, max_lat = expand_bbox_from_center(center, 1.4)
    for _ in range(200):
        p = jitter_within(center, 1.4, rng)
        assert min_lat <= p.lat <= max_lat
        assert min_lng <= p.lng <= max_lng


def test_jitter_wraps_antimeridian():
    rng = random.Random(9)
    for _ in range(50):
        p = jitter_within(Coordinates(lat=0.0, lng=179.99), 10.0, rng)
        assert -180.0 <= p.lng < 180.0
