from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from config import Configuration
from main import create_app


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(Configuration(deal_source="mock", mock_seed=7)))


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "message": "LunchDeals API is running"}


def test_public_config(client):
    body = client.get("/api/config").json()
    assert body["deal_source"] == "mock"
    assert body["default_location"] == {"lat": 34.0522, "lng": -118.2437}
    assert body["price_ranges"] == ["All", "<$10", "$10-$15", "$15+"]
    assert body["sort_keys"] == ["distance", "discount", "rating", "price"]


def test_deals_sorted_by_distance(client):
    resp = client.post("/api/deals", json={"lat": 34.05, "lng": -118.24})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["count"] == len(body["deals"]) == 51
    assert body["source"] == "mock"
    distances = [d["distance"] for d in body["deals"]]
    assert distances == sorted(distances)
    first = body["deals"][0]
    assert set(first["coordinates"]) == {"lat", "lng"}
    assert first["discounted_price"] <= first["original_price"]


def test_zero_is_a_valid_coordinate(client):
    resp = client.post("/api/deals", json={"lat": 0, "lng": 0})
    assert resp.status_code == 200


@pytest.mark.parametrize(
    "payload",
    [{}, {"lat": 34.05}, {"lng": -118.24}, {"lat": "north", "lng": 1}, {"lat": 120, "lng": 0}, {"lat": True, "lng": 1}],
)
def test_invalid_origin_rejected(client, payload):
    resp = client.post("/api/deals", json=payload)
    assert resp.status_code == 400
    assert "lat" in resp.json()["detail"]


def test_fetch_failure_returns_error_body(client):
    with patch("services.deals.annotate", side_effect=RuntimeError("kaboom")):
        resp = client.post("/api/deals", json={"lat": 34.05, "lng": -118.24})
    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Failed to fetch deals"


def test_view_filters_and_sorts(client):
    resp = client.post(
        "/api/deals/view",
        json={
            "lat": 34.05,
            "lng": -118.24,
            "filters": {"cuisine": "Italian", "dietary_tags": ["vegetarian"], "min_rating": 3.5},
            "sort": "discount",
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 51
    assert body["cuisines"] == sorted(set(body["cuisines"]))
    assert "Italian" in body["cuisines"]
    assert body["count"] == len(body["deals"])
    assert 0 < body["count"] <= 5
    for d in body["deals"]:
        assert d["cuisine"] == "Italian"
        assert "vegetarian" in d["dietary_tags"]
    discounts = [d["discount_percentage"] for d in body["deals"]]
    assert discounts == sorted(discounts, reverse=True)


def test_view_ignores_malformed_filters(client):
    resp = client.post(
        "/api/deals/view",
        json={"lat": 34.05, "lng": -118.24, "filters": {"price_range": "free", "min_rating": "lots"}, "sort": "??"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == body["total"]


def test_live_without_key_fails_at_startup():
    with pytest.raises(ValueError):
        create_app(Configuration(deal_source="live"))


@pytest.mark.parametrize("filters", [None, "Italian", ["vegan"], 3])
def test_view_treats_non_object_filters_as_unfiltered(client, filters):
    resp = client.post("/api/deals/view", json={"lat": 34.05, "lng": -118.24, "filters": filters})
    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == body["total"] > 0
    distances = [d["distance"] for d in body["deals"]]
    assert distances == sorted(distances)
