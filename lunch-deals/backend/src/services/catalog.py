from __future__ import annotations

import random
import time
from typing import Dict, List, Optional, Tuple

from config import Configuration
from models import Coordinates, Deal, Hotspot, RestaurantArchetype
from services.bbox_builder import jitter_within


IMAGE_URL = "https://images.unsplash.com/{image}?w=400&h=300&fit=crop"

DIETARY_TAGS: Tuple[str, ...] = ("vegetarian", "vegan", "gluten-free")

V = ("vegetarian",)
VV = ("vegetarian", "vegan")


def _a(name: str, cuisine: str, image: str, dietary: Tuple[str, ...] = ()) -> RestaurantArchetype:
    return RestaurantArchetype(name=name, cuisine=cuisine, image=image, dietary=dietary)


NATIONAL_RESTAURANTS: Tuple[RestaurantArchetype, ...] = (
    _a("The Burger Joint", "American", "photo-1568901346375-23c9450c58cd"),
    _a("BBQ Heaven", "American", "photo-1555939594-58d7cb561ad1"),
    _a("Classic Diner", "American", "photo-1504674900247-0877df9cc836", V),
    _a("Smokehouse Grill", "American", "photo-1529692236671-f1f6cf9683ba"),
    _a("The Steakhouse", "American", "photo-1544025162-d76694265947"),
    _a("Pasta Paradise", "Italian", "photo-1621996346565-e3dbc646d9a9", V),
    _a("Pizza Palace", "Italian", "photo-1513104890138-7c749659a591", V),
    _a("Trattoria Roma", "Italian", "photo-1595295333158-4742f28fbd85", V),
    _a("Bella Italia", "Italian", "photo-1551183053-bf91a1d81141", V),
    _a("Nonna's Kitchen", "Italian", "photo-1563379926898-05f4575a45d8", V),
    _a("Taco Fiesta", "Mexican", "photo-1565299585323-38d6b0865b47", VV),
    _a("El Mariachi", "Mexican", "photo-1599974579688-8dbdd335c77f", V),
    _a("Burrito Express", "Mexican", "photo-1626700051175-6818013e1d4f", VV),
    _a("Casa Mexico", "Mexican", "photo-1552332386-f8dd00dc2f85", V),
    _a("Taqueria La Plaza", "Mexican", "photo-1551504734-5ee1c4a1479b", VV),
    _a("Sushi Express", "Japanese", "photo-1579584425555-c3ce17fd4351"),
    _a("Tokyo Ramen", "Japanese", "photo-1557872943-16a5ac26437e"),
    _a("Sakura Sushi Bar", "Japanese", "photo-1580822184713-fc5400e7fe10"),
    _a("Bento Box", "Japanese", "photo-1617093727343-374698b1b08d", V),
    _a("Izakaya Nights", "Japanese", "photo-1555126634-323283e090fa"),
    _a("Thai Spice", "Thai", "photo-1559314809-0d155014e29e", VV),
    _a("Bangkok Street Food", "Thai", "photo-1562565652-a0d8f0c59eb4", VV),
    _a("Pad Thai Palace", "Thai", "photo-1569562211093-4ed0d0758f12", VV),
    _a("Thai Basil", "Thai", "photo-1455619452474-d2be8b1e70cd", VV),
    _a("Pho House", "Vietnamese", "photo-1582878826629-29b7ad1cdc43"),
    _a("Saigon Kitchen", "Vietnamese", "photo-1604908176997-125f25cc6f3d", V),
    _a("Banh Mi Express", "Vietnamese", "photo-1591814468924-caf88d1232e1"),
    _a("Hanoi Street Eats", "Vietnamese", "photo-1585032226651-759b368d7246", V),
    _a("Golden Dragon", "Chinese", "photo-1525755662778-989d0524087e", V),
    _a("Szechuan Palace", "Chinese", "photo-1596040033229-a0b3b83a7f87", V),
    _a("Dim Sum House", "Chinese", "photo-1563245372-f21724e3856d", V),
    _a("Wok & Roll", "Chinese", "photo-1512058564366-18510be2db19", VV),
    _a("Beijing Bistro", "Chinese", "photo-1552566626-52f8b828add9", V),
    _a("Curry Palace", "Indian", "photo-1585937421612-70a008356fbe", VV),
    _a("Tandoori Nights", "Indian", "photo-1567188040759-fb8a883dc6d8", VV),
    _a("Masala Kitchen", "Indian", "photo-1574484284002-952d92456975", VV),
    _a("Bombay Spice", "Indian", "photo-1565557623262-b51c2513a641", VV),
    _a("Seoul Kitchen", "Korean", "photo-1498654896293-37aacf113fd9"),
    _a("K-BBQ House", "Korean", "photo-1590301157890-4810ed352733"),
    _a("Bibimbap Bowl", "Korean", "photo-1553163147-622ab57be1c7", V),
    _a("Kimchi Express", "Korean", "photo-1582254465498-fe5e5e5e5e5e", VV),
    _a("Mediterranean Grill", "Mediterranean", "photo-1540189549336-e6e99c3679fe", VV),
    _a("Olive Garden Cafe", "Mediterranean", "photo-1547592180-85f173990554", VV),
    _a("Falafel King", "Mediterranean", "photo-1529006557810-274b9b2fc783", VV),
    _a("Hummus House", "Mediterranean", "photo-1571997478779-2adcbbe9ab2f", ("vegetarian", "vegan", "gluten-free")),
    _a("Gyro Palace", "Greek", "photo-1562158147-f9bc90c0f1e6"),
    _a("Athens Kitchen", "Greek", "photo-1544025162-d76694265947", V),
    _a("Santorini Grill", "Greek", "photo-1601050690597-df0568f70950", V),
    _a("Shawarma Station", "Middle Eastern", "photo-1603360946369-dc9bb6258143"),
    _a("Kebab Corner", "Middle Eastern", "photo-1529042410759-befb1204b468"),
    _a("Persian Delights", "Middle Eastern", "photo-1599487488170-d11ec9c172f0", V),
)

LA_HOTSPOTS: Tuple[Hotspot, ...] = (
    Hotspot("Santa Monica", 34.0195, -118.4912),
    Hotspot("DTLA", 34.0407, -118.2468),
    Hotspot("Hollywood", 34.0928, -118.3287),
    Hotspot("Westwood/UCLA", 34.0689, -118.4452),
    Hotspot("Silver Lake", 34.0869, -118.2702),
    Hotspot("Venice", 33.9850, -118.4695),
    Hotspot("Beverly Hills", 34.0736, -118.4004),
    Hotspot("Koreatown", 34.0618, -118.2995),
)


def _la(
    name: str,
    neighborhood: str,
    cuisine: str,
    image: str,
    dietary: Tuple[str, ...],
    low: float,
    high: float,
) -> RestaurantArchetype:
    return RestaurantArchetype(
        name=name,
        cuisine=cuisine,
        image=image,
        dietary=dietary,
        neighborhood=neighborhood,
        price_range=(low, high),
    )


LA_RESTAURANTS: Tuple[RestaurantArchetype, ...] = (
    _la("Bay Cities Italian Deli", "Santa Monica", "Italian", "photo-1550507992-eb63ffee0847", (), 12, 18),
    _la("The Misfit Bar", "Santa Monica", "American", "photo-1514362545857-3bc16c4c7d1b", V, 15, 25),
    _la("Gjusta", "Venice", "Bakery/Cafe", "photo-1509440159596-0249088772ff", VV, 14, 22),
    _la("Night + Market Sahm", "Venice", "Thai", "photo-1559314809-0d155014e29e", ("vegan",), 16, 28),
    _la("Grand Central Market", "DTLA", "Various", "photo-1555396273-367ea4eb4db5", VV, 10, 15),
    _la("Bestia", "DTLA", "Italian", "photo-1551183053-bf91a1d81141", (), 25, 45),
    _la("Daikokuya Ramen", "Little Tokyo", "Japanese", "photo-1569718212165-3a8278d5f624", (), 13, 19),
    _la("Badmaash", "DTLA", "Indian", "photo-1585937421612-70a008356fbe", V, 15, 25),
    _la("Musso & Frank Grill", "Hollywood", "American", "photo-1544025162-d76694265947", (), 30, 60),
    _la("Luv2Eat Thai", "Hollywood", "Thai", "photo-1562565652-a0d8f0c59eb4", V, 12, 20),
    _la("Silver Lake Ramen", "Silver Lake", "Japanese", "photo-1557872943-16a5ac26437e", V, 14, 18),
    _la("Pine & Crane", "Silver Lake", "Taiwanese", "photo-1512058564366-18510be2db19", VV, 12, 18),
    _la("Tito's Tacos", "Culver City", "Mexican", "photo-1565299585323-38d6b0865b47", (), 8, 14),
    _la("Spago", "Beverly Hills", "California", "photo-1504674900247-0877df9cc836", V, 40, 100),
    _la("Sugarfish", "Beverly Hills", "Japanese", "photo-1579584425555-c3ce17fd4351", (), 30, 55),
    _la("Fundamental LA", "Westwood", "Sandwiches", "photo-1521390188846-e2a39973e5bf", V, 14, 20),
    _la("Park's BBQ", "Koreatown", "Korean", "photo-1590301157890-4810ed352733", (), 35, 70),
    _la("Sun Nong Dan", "Koreatown", "Korean", "photo-1547592166-73f8451f2c28", (), 18, 28),
)

LA_DEMO_DEAL_COUNT = 50

SCRAPED_CUISINES: Tuple[str, ...] = ("American", "Italian", "Mexican", "Asian")


def price_pair(original: float, discount_pct: int) -> Tuple[float, float]:
    """Round the original price, then derive the discounted price from it.

    Deriving from the rounded original keeps discounted <= original after rounding.
    """
    original = round(original, 2)
    discounted = round(original * (1 - discount_pct / 100.0), 2)
    return original, min(discounted, original)


class DealCatalog:
    """Synthetic deal generator.

    All randomness flows through the injected `rng`, so a seeded source makes
    every catalog reproducible.
    """

    def __init__(self, cfg: Configuration, rng: Optional[random.Random] = None) -> None:
        self.cfg = cfg
        self.rng = rng if rng is not None else random.Random(cfg.mock_seed)
        self.seeded = rng is not None or cfg.mock_seed is not None

    def _batch_id(self, batch: Optional[int]) -> int:
        if batch is not None:
            return batch
        if self.seeded:
            return self.rng.randrange(10**12)
        return int(time.time() * 1000)

    def generate(self, origin: Coordinates, city: Optional[str] = None, *, batch: Optional[int] = None) -> List[Deal]:
        """National mock catalog jittered around the origin."""
        rng = self.rng
        batch_id = self._batch_id(batch)
        city = city or self.cfg.default_city
        deals: list[Deal] = []
        for i, r in enumerate(NATIONAL_RESTAURANTS):
            low, high = r.price_range
            discount = rng.randint(15, 70)
            original, discounted = price_pair(rng.uniform(low, high), discount)
            deals.append(
                Deal(
                    id=f"mock-{batch_id}-{i}",
                    title=f"Lunch Special at {r.name}",
                    restaurant_name=r.name,
                    original_price=original,
                    discounted_price=discounted,
                    discount_percentage=discount,
                    description=f"Delicious {r.cuisine} cuisine with amazing lunch deals",
                    cuisine=r.cuisine,
                    dietary_tags=list(r.dietary),
                    rating=round(rng.uniform(3.5, 5.0), 1),
                    review_count=rng.randint(50, 999),
                    image_url=IMAGE_URL.format(image=r.image),
                    coordinates=jitter_within(origin, self.cfg.mock_jitter_miles, rng),
                    address=f"{rng.randint(1000, 9999)} Main St, {city}",
                    source="demo",
                )
            )
        return deals

    def generate_la_demo(self, count: int = LA_DEMO_DEAL_COUNT) -> List[Deal]:
        """Los Angeles proof-of-concept catalog anchored on fixed hotspots."""
        rng = self.rng
        hotspots: Dict[str, Hotspot] = {h.name: h for h in LA_HOTSPOTS}
        deals: list[Deal] = []
        for i in range(count):
            base = LA_RESTAURANTS[i % len(LA_RESTAURANTS)]
            hotspot = hotspots.get(base.neighborhood or "")
            if hotspot is None:
                hotspot = rng.choice(LA_HOTSPOTS)
            coords = jitter_within(
                Coordinates(lat=hotspot.lat, lng=hotspot.lng), self.cfg.demo_jitter_miles, rng
            )
            low, high = base.price_range
            discount = rng.randint(15, 64)
            original, discounted = price_pair(rng.uniform(low, high), discount)
            deals.append(
                Deal(
                    id=f"la-poc-{i}",
                    title=f"Exclusive Lunch Deal: {base.name}",
                    restaurant_name=base.name,
                    original_price=original,
                    discounted_price=discounted,
                    discount_percentage=discount,
                    description=(
                        f"Enjoy a special lunch at {base.name} in {base.neighborhood}. "
                        f"Famous for their authentic {base.cuisine} flavors."
                    ),
                    cuisine=base.cuisine,
                    dietary_tags=list(base.dietary),
                    rating=round(rng.uniform(4.0, 5.0), 1),
                    review_count=rng.randint(100, 2099),
                    image_url=IMAGE_URL.format(image=base.image),
                    coordinates=coords,
                    address=f"{rng.randint(1, 5000)} Main St, Los Angeles, CA",
                    source="PoC Mockup",
                )
            )
        return deals

    def placeholders(
        self,
        origin: Coordinates,
        city: str,
        count: int,
        *,
        source: str,
        batch: Optional[int] = None,
    ) -> List[Deal]:
        """Placeholder records standing in for listings found on a scraped page."""
        rng = self.rng
        batch_id = self._batch_id(batch)
        deals: list[Deal] = []
        for i in range(count):
            discount = rng.randint(30, 69)
            original, discounted = price_pair(rng.uniform(20.0, 50.0), discount)
            deals.append(
                Deal(
                    id=f"{source}-{batch_id}-{i}",
                    title=f"{city} Restaurant Deal",
                    restaurant_name=f"Restaurant {i + 1}",
                    original_price=original,
                    discounted_price=discounted,
                    discount_percentage=discount,
                    description=f"Delicious food deal from {source.capitalize()}",
                    cuisine=rng.choice(SCRAPED_CUISINES),
                    dietary_tags=[],
                    rating=round(rng.uniform(3.5, 5.0), 1),
                    review_count=rng.randint(50, 549),
                    image_url=f"https://images.unsplash.com/photo-{1555939594 + i}?w=400&h=300&fit=crop",
                    coordinates=jitter_within(origin, self.cfg.mock_jitter_miles, rng),
                    address=city,
                    source=source,
                )
            )
        return deals
