from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Union

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, Field, field_validator

from config import Configuration
from models import Coordinates, Deal, FilterSpec, InvalidCoordinatesError
from services.catalog import DIETARY_TAGS
from services.deals import DealFetchError, FetchResult, fetch_deals
from services.view import PRICE_RANGES, SORT_KEYS, cuisine_options, view


class LocationRequest(BaseModel):
    # left untyped so bad input reaches Coordinates.from_raw and becomes a 400
    lat: Any = Field(None, description="Origin latitude in decimal degrees")
    lng: Any = Field(None, description="Origin longitude in decimal degrees")


class FilterPayload(BaseModel):
    cuisine: Any = "All"
    price_range: Any = "All"
    dietary_tags: Any = Field(default_factory=list)
    min_rating: Any = 0


class ViewRequest(LocationRequest):
    filters: Optional[Any] = Field(default_factory=FilterPayload)
    sort: Any = "distance"

    @field_validator("filters", mode="before")
    @classmethod
    def _coerce_filters(cls, value: Any) -> FilterPayload:
        # null or non-object filters mean "no filter"
        if isinstance(value, FilterPayload):
            return value
        if not isinstance(value, dict):
            return FilterPayload()
        return FilterPayload.model_validate(value)


class CoordinatesPayload(BaseModel):
    lat: float
    lng: float


class DealPayload(BaseModel):
    id: str
    title: str
    restaurant_name: str
    original_price: float
    discounted_price: float
    discount_percentage: int
    description: str
    cuisine: Union[str, List[str]]
    dietary_tags: List[str] = []
    rating: float
    review_count: int
    image_url: str
    coordinates: CoordinatesPayload
    address: str
    distance: float
    source: str


class DealsResponse(BaseModel):
    success: bool = True
    count: int
    deals: List[DealPayload]
    city: str
    source: str


class ViewResponse(BaseModel):
    success: bool = True
    count: int
    total: int
    cuisines: List[str]
    deals: List[DealPayload]


def to_payload(d: Deal) -> DealPayload:
    return DealPayload(
        id=d.id,
        title=d.title,
        restaurant_name=d.restaurant_name,
        original_price=d.original_price,
        discounted_price=d.discounted_price,
        discount_percentage=d.discount_percentage,
        description=d.description,
        cuisine=d.cuisine,
        dietary_tags=list(d.dietary_tags),
        rating=d.rating,
        review_count=d.review_count,
        image_url=d.image_url,
        coordinates=CoordinatesPayload(lat=d.coordinates.lat, lng=d.coordinates.lng),
        address=d.address,
        distance=d.distance,
        source=d.source,
    )


def _fetch_failed(exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Failed to fetch deals", "message": str(exc)},
    )


def create_app(cfg: Optional[Configuration] = None) -> FastAPI:
    if cfg is None:
        load_dotenv()
        cfg = Configuration.from_env()
    cfg.require_live_source()
    logger.info("cfg: {}", cfg.log_summary())

    app = FastAPI(title="LunchDeals API")
    app.state.cfg = cfg
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    async def _run_fetch(lat: Any, lng: Any) -> FetchResult:
        try:
            origin = Coordinates.from_raw(lat, lng)
        except InvalidCoordinatesError as exc:
            raise HTTPException(status_code=400, detail=f"Missing or invalid parameters lat and lng: {exc}")
        logger.debug("deals request origin=({}, {})", origin.lat, origin.lng)
        return await asyncio.to_thread(fetch_deals, cfg, origin)

    @app.get("/api/health")
    def health() -> dict:
        return {"status": "ok", "message": "LunchDeals API is running"}

    @app.get("/api/config")
    def public_config() -> Dict[str, Any]:
        return {
            "deal_source": cfg.deal_source,
            "default_location": {"lat": cfg.default_lat, "lng": cfg.default_lng},
            "price_ranges": ["All", *PRICE_RANGES.keys()],
            "dietary_tags": list(DIETARY_TAGS),
            "sort_keys": list(SORT_KEYS),
        }

    @app.post("/api/deals", response_model=DealsResponse)
    async def deals(req: LocationRequest):
        try:
            result = await _run_fetch(req.lat, req.lng)
        except DealFetchError as exc:
            logger.exception("deal fetch failed: {}", exc)
            return _fetch_failed(exc)

        return DealsResponse(
            count=result.count,
            deals=[to_payload(d) for d in result.deals],
            city=result.city,
            source=result.source,
        )

    @app.post("/api/deals/view", response_model=ViewResponse)
    async def deals_view(req: ViewRequest):
        try:
            result = await _run_fetch(req.lat, req.lng)
        except DealFetchError as exc:
            logger.exception("deal fetch failed: {}", exc)
            return _fetch_failed(exc)

        filters = FilterSpec(
            cuisine=req.filters.cuisine,
            price_range=req.filters.price_range,
            dietary_tags=req.filters.dietary_tags,
            min_rating=req.filters.min_rating,
        )
        visible = view(result.deals, filters, req.sort)
        return ViewResponse(
            count=len(visible),
            total=result.count,
            cuisines=cuisine_options(result.deals),
            deals=[to_payload(d) for d in visible],
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=app.state.cfg.port, reload=True)
