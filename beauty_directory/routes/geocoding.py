"""
Nominatim (OpenStreetMap) location search.

Used by onboarding, profile editing and the admin dashboard to turn a typed
suburb or address into coordinates for the map. No API key required, just a
user agent string per the Nominatim usage policy. Lookups are best-effort: an
upstream failure returns an empty result list.
"""

import json
import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..config import (
    GEOCODING_CACHE_SECONDS,
    GEOCODING_SEARCH_RPM,
    NOMINATIM_BASE_URL,
    NOMINATIM_COUNTRY_CODES,
    NOMINATIM_USER_AGENT,
)
from ..rate_limiter import create_rate_limiter, get_redis_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/geocoding", tags=["Geocoding"])

# Be respectful - max 1 request per second per their usage policy
rate_limit_geocoding = create_rate_limiter(
    limit=GEOCODING_SEARCH_RPM,
    window_seconds=60,
    key_prefix="geocoding_search",
    use_ip=True,
)

MIN_QUERY_LENGTH = 3
MAX_RESULTS = 10


class LocationResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    label: str
    display_name: str
    latitude: float
    longitude: float
    suburb: Optional[str] = None
    state: Optional[str] = None
    postcode: Optional[str] = None


class LocationSearchResponse(BaseModel):
    results: list[LocationResult]


def format_location(item: dict) -> str:
    """Short "Suburb, State, Postcode" label, falling back to the full display name"""
    address = item.get("address") or {}
    suburb = (
        address.get("suburb")
        or address.get("town")
        or address.get("village")
        or address.get("city")
    )
    parts = [part for part in (suburb, address.get("state"), address.get("postcode")) if part]
    return ", ".join(parts) if parts else item.get("display_name", "")


def parse_nominatim_results(raw_data: list) -> list[LocationResult]:
    """Convert Nominatim search JSON into results, dropping duplicate labels"""
    results = []
    seen = set()

    for item in raw_data:
        label = format_location(item)
        if not label or label in seen:
            continue

        try:
            latitude = float(item["lat"])
            longitude = float(item["lon"])
        except (KeyError, TypeError, ValueError):
            logger.debug(f"Skipping Nominatim result without coordinates: {label}")
            continue

        seen.add(label)
        address = item.get("address") or {}
        results.append(
            LocationResult(
                label=label,
                display_name=item.get("display_name", label),
                latitude=latitude,
                longitude=longitude,
                suburb=address.get("suburb")
                or address.get("town")
                or address.get("village")
                or address.get("city"),
                state=address.get("state"),
                postcode=address.get("postcode"),
            )
        )

    return results


async def fetch_nominatim(query: str, limit: int) -> list:
    """Raw Nominatim /search call, raises on transport or HTTP errors"""
    params = {
        "q": query,
        "format": "json",
        "addressdetails": "1",
        "limit": str(limit),
        "countrycodes": NOMINATIM_COUNTRY_CODES,
    }
    headers = {
        "User-Agent": NOMINATIM_USER_AGENT,
        "Accept": "application/json",
    }

    async with httpx.AsyncClient() as client:
        resp = await client.get(
            f"{NOMINATIM_BASE_URL}/search", params=params, headers=headers, timeout=10.0
        )
        resp.raise_for_status()
        return resp.json()


@router.get("/search", response_model=LocationSearchResponse)
async def search_locations(
    q: str = Query(""),
    limit: int = Query(5),
    _: None = Depends(rate_limit_geocoding),
):
    """
    Location search endpoint.

    Args:
        q: Suburb, postcode or address being typed
        limit: Maximum number of results (1-10)
    """
    query = (q or "").strip()
    if len(query) < MIN_QUERY_LENGTH:
        return LocationSearchResponse(results=[])

    limit = max(1, min(limit, MAX_RESULTS))
    cache_key = f"nominatim:search:{NOMINATIM_COUNTRY_CODES}:{limit}:{query.lower()}"

    # Try Redis cache first
    redis = get_redis_client()
    if redis:
        try:
            cached = redis.get(cache_key)
            if cached:
                return LocationSearchResponse(
                    results=[LocationResult(**x) for x in json.loads(cached)]
                )
        except Exception as e:
            logger.warning(f"⚠️ Redis cache read error: {e}")

    try:
        raw_data = await fetch_nominatim(query, limit)
    except Exception as e:
        logger.warning(f"⚠️ Nominatim search failed for '{query}': {e}")
        return LocationSearchResponse(results=[])

    results = parse_nominatim_results(raw_data if isinstance(raw_data, list) else [])

    if redis:
        try:
            redis.setex(
                cache_key,
                GEOCODING_CACHE_SECONDS,
                json.dumps([r.model_dump() for r in results]),
            )
        except Exception as e:
            logger.warning(f"⚠️ Redis cache write error: {e}")

    return LocationSearchResponse(results=results)
