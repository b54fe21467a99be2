from __future__ import annotations

import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional

from loguru import logger

from config import Configuration
from models import Coordinates, Deal
from services.catalog import DealCatalog
from services.distance import annotate
from services.firecrawl import FirecrawlClient
from services.nominatim import NominatimClient
from services.scrapers import scrape_groupon_deals, scrape_yelp_deals


class DealFetchError(RuntimeError):
    pass


@dataclass
class FetchResult:
    deals: List[Deal]
    city: str
    source: str  # "scrape", "fallback", "mock" or "demo"

    @property
    def count(self) -> int:
        return len(self.deals)


def resolve_city(cfg: Configuration, geocoder: NominatimClient, origin: Coordinates) -> str:
    try:
        city = geocoder.reverse(origin)
    except Exception as exc:
        logger.warning("reverse geocode failed, using {}: {}", cfg.default_city, exc)
        return cfg.default_city
    logger.info("location resolved city={}", city)
    return city


def scrape_all(
    client: FirecrawlClient,
    catalog: DealCatalog,
    city: str,
    origin: Coordinates,
) -> List[Deal]:
    """Run every scrape adapter concurrently; Groupon results first."""
    with ThreadPoolExecutor(max_workers=2) as pool:
        groupon = pool.submit(scrape_groupon_deals, client, catalog, city, origin)
        yelp = pool.submit(scrape_yelp_deals, client, city)
        return [*groupon.result(), *yelp.result()]


def fetch_deals(
    cfg: Configuration,
    origin: Coordinates,
    *,
    rng: Optional[random.Random] = None,
    scraper: Optional[FirecrawlClient] = None,
    geocoder: Optional[NominatimClient] = None,
) -> FetchResult:
    """Produce the annotated deal list for one origin.

    Collaborator failures fall back to the synthetic catalog. Anything else
    that goes wrong surfaces as DealFetchError with the cause chained.
    """
    logger.info("fetching deals source={} origin=({:.4f}, {:.4f})", cfg.deal_source, origin.lat, origin.lng)
    try:
        catalog = DealCatalog(cfg, rng)
        source = cfg.deal_source
        city = cfg.default_city

        if source == "demo":
            raw = catalog.generate_la_demo()
            city = "Los Angeles"
        elif source == "live":
            city = resolve_city(cfg, geocoder or NominatimClient(cfg), origin)
            raw = scrape_all(scraper or FirecrawlClient(cfg), catalog, city, origin)
            source = "scrape"
            if not raw:
                logger.warning("no deals from scraping, generating mock deals city={}", city)
                raw = catalog.generate(origin, city)
                source = "fallback"
        else:
            raw = catalog.generate(origin, city)
            source = "mock"

        deals = annotate(raw, origin)
    except Exception as exc:
        raise DealFetchError("failed to fetch deals") from exc

    logger.info("deals fetched count={} city={} source={}", len(deals), city, source)
    return FetchResult(deals=deals, city=city, source=source)
