from __future__ import annotations

import re
import urllib.parse
from typing import List

from loguru import logger

from models import Coordinates, Deal
from services.catalog import DealCatalog
from services.firecrawl import FirecrawlClient


PRICE_RE = re.compile(r"\$\d+(?:\.\d{2})?")


def city_slug(city: str) -> str:
    return re.sub(r"\s+", "-", city.strip().lower())


def groupon_url(city: str) -> str:
    return f"https://www.groupon.com/browse/{city_slug(city)}?category=food-and-drink"


def yelp_url(city: str) -> str:
    return f"https://www.yelp.com/search?find_desc=Restaurants&find_loc={urllib.parse.quote(city)}"


def count_price_tokens(markdown: str) -> int:
    return len(PRICE_RE.findall(markdown or ""))


def scrape_groupon_deals(
    client: FirecrawlClient,
    catalog: DealCatalog,
    city: str,
    origin: Coordinates,
) -> List[Deal]:
    """Scrape the Groupon food listing for a city.

    Listings are not extracted; the number of price tokens on the page decides
    how many placeholder deals are produced. Any failure yields an empty list.
    """
    url = groupon_url(city)
    logger.info("scraping groupon url={}", url)
    try:
        data = client.scrape(url, formats=["markdown", "html"])
        found = count_price_tokens(data.get("markdown") or "")
        count = min(found, catalog.cfg.max_scraped_deals)
        deals = catalog.placeholders(origin, city, count, source="groupon")
    except Exception as exc:
        logger.warning("groupon scrape failed city={}: {}", city, exc)
        return []
    logger.info("groupon price_tokens={} deals={}", found, len(deals))
    return deals


def scrape_yelp_deals(client: FirecrawlClient, city: str) -> List[Deal]:
    url = yelp_url(city)
    logger.info("scraping yelp url={}", url)
    try:
        data = client.scrape(url, formats=["markdown"])
    except Exception as exc:
        logger.warning("yelp scrape failed city={}: {}", city, exc)
        return []
    # TODO: extract listings from the Yelp search markdown; the page is fetched but not parsed yet.
    logger.debug("yelp markdown chars={}", len(data.get("markdown") or ""))
    return []
