from __future__ import annotations

import os
from typing import Any, Optional

from pydantic import BaseModel, Field

from utils import mask_secret


DEAL_SOURCES = ("live", "mock", "demo")


class Configuration(BaseModel):
    # Deal source: live scrape with fallback, national mock catalog, or LA demo
    deal_source: str = Field(default="mock")

    # Firecrawl
    firecrawl_api_key: Optional[str] = Field(default=None)
    firecrawl_base_url: str = Field(default="https://api.firecrawl.dev")
    firecrawl_timeout: int = Field(default=20)

    # Nominatim reverse geocoding
    nominatim_base_url: str = Field(default="https://nominatim.openstreetmap.org")
    nominatim_timeout: int = Field(default=10)
    user_agent: str = Field(default="LunchDeals/1.0")

    http_retries: int = Field(default=1)

    # Defaults
    default_city: str = Field(default="San Francisco")
    default_lat: float = Field(default=34.0522)
    default_lng: float = Field(default=-118.2437)

    # Synthetic catalogs
    mock_seed: Optional[int] = Field(default=None)
    mock_jitter_miles: float = Field(default=6.9)
    demo_jitter_miles: float = Field(default=1.4)
    max_scraped_deals: int = Field(default=5)

    port: int = Field(default=3001)

    @classmethod
    def from_env(cls, overrides: Optional[dict[str, Any]] = None) -> "Configuration":
        raw: dict[str, Any] = {}

        env_map = {
            "deal_source": os.getenv("DEAL_SOURCE"),
            "firecrawl_api_key": os.getenv("FIRECRAWL_API_KEY"),
            "firecrawl_base_url": os.getenv("FIRECRAWL_BASE_URL"),
            "firecrawl_timeout": os.getenv("FIRECRAWL_TIMEOUT"),
            "nominatim_base_url": os.getenv("NOMINATIM_BASE_URL"),
            "nominatim_timeout": os.getenv("NOMINATIM_TIMEOUT"),
            "user_agent": os.getenv("USER_AGENT"),
            "http_retries": os.getenv("HTTP_RETRIES"),
            "default_city": os.getenv("DEFAULT_CITY"),
            "default_lat": os.getenv("DEFAULT_LAT"),
            "default_lng": os.getenv("DEFAULT_LNG"),
            "mock_seed": os.getenv("MOCK_SEED"),
            "mock_jitter_miles": os.getenv("MOCK_JITTER_MILES"),
            "demo_jitter_miles": os.getenv("DEMO_JITTER_MILES"),
            "max_scraped_deals": os.getenv("MAX_SCRAPED_DEALS"),
            "port": os.getenv("PORT"),
        }

        for k, v in env_map.items():
            if v is None or v == "":
                continue
            raw[k] = v

        if "deal_source" in raw:
            raw["deal_source"] = str(raw["deal_source"]).strip().lower()

        if overrides:
            raw.update({k: v for k, v in overrides.items() if v is not None})

        return cls(**raw)

    def require_firecrawl(self) -> None:
        if not self.firecrawl_api_key:
            raise ValueError("FIRECRAWL_API_KEY is required")

    def require_live_source(self) -> None:
        """Validate the settings the selected deal source depends on."""
        if self.deal_source not in DEAL_SOURCES:
            raise ValueError(
                "DEAL_SOURCE must be one of %s, got %r" % (", ".join(DEAL_SOURCES), self.deal_source)
            )
        if self.deal_source == "live":
            self.require_firecrawl()

    def log_summary(self) -> str:
        return (
            "source=%s firecrawl=%s base=%s timeout=%s retries=%s default_city=%s seed=%s api_key=%s"
            % (
                self.deal_source,
                bool(self.firecrawl_api_key),
                self.firecrawl_base_url,
                self.firecrawl_timeout,
                self.http_retries,
                self.default_city,
                self.mock_seed,
                mask_secret(self.firecrawl_api_key),
            )
        )
