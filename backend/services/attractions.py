"""
Nearby attractions / points of interest.

Two upstreams feed the same CanonicalPlace contract:
- SerpAPI google_maps search for "tourist attractions" around a coordinate
- OpenTripMap radius search plus per-xid detail lookups (photos, address)
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from domain.errors import ConfigurationError, UpstreamError
from domain.models import CanonicalPlace, RequestDescriptor
from services.http_executor import execute
from services.place_normalizer import normalize
from settings import settings

logger = logging.getLogger(__name__)

SERPAPI_PLACEHOLDER_KEY = "MY_SERPAPI_KEY_HERE"
ATTRACTIONS_QUERY = "tourist attractions"
SERP_TEST_QUERY = "tourist attractions in New York"
SERP_RESULT_KEYS = ("local_results", "organic_results", "places_results")

OTM_KINDS = "tourist_facilities,interesting_places"
OTM_DEFAULT_RADIUS_M = 2000
OTM_DEFAULT_LIMIT = 5


def serpapi_key() -> str:
    key = settings.SERPAPI_KEY
    logger.info("[ATTRACTIONS] Checking SERPAPI_KEY... Loaded: %s, Length: %d", bool(key), len(key or ""))
    if not key or key == SERPAPI_PLACEHOLDER_KEY:
        raise ConfigurationError("SERPAPI_KEY not configured in backend .env file")
    return key


def build_attractions_request(lat: float, lon: float, api_key: str) -> RequestDescriptor:
    return RequestDescriptor.get(
        settings.SERPAPI_BASE_URL,
        params={
            "engine": "google_maps",
            "q": ATTRACTIONS_QUERY,
            "ll": f"@{lat},{lon},14z",
            "api_key": api_key,
            "type": "search",
            "num": 10,
        },
    )


async def fetch_attractions(lat: float, lon: float) -> List[CanonicalPlace]:
    """Tourist attractions near (lat, lon) from SerpAPI, normalized."""
    descriptor = build_attractions_request(lat, lon, serpapi_key())
    logger.info("[ATTRACTIONS] Fetching attractions for coordinates: %s, %s", lat, lon)
    response = await execute(descriptor, settings.retry_policy())
    places = normalize(response.body, provider_hint="serpapi")
    if places:
        logger.info("[ATTRACTIONS] Found %d attractions", len(places))
    else:
        logger.info("[ATTRACTIONS] No attractions found for coordinates: %s, %s", lat, lon)
    return places


def _otm_key() -> str:
    if not settings.OPENTRIPMAP_API_KEY:
        raise ConfigurationError("OPENTRIPMAP_API_KEY not configured in backend .env file")
    return settings.OPENTRIPMAP_API_KEY


async def _otm_details(xid: str, api_key: str) -> Optional[Dict[str, Any]]:
    descriptor = RequestDescriptor.get(
        f"{settings.OPENTRIPMAP_BASE_URL.rstrip('/')}/xid/{xid}",
        params={"apikey": api_key},
    )
    try:
        response = await execute(descriptor, settings.retry_policy())
    except UpstreamError as exc:
        logger.warning("[POI] Detail lookup failed for xid=%s: %s", xid, exc.message)
        return None
    return response.body if isinstance(response.body, dict) else None


async def fetch_nearby_pois(
    lat: float,
    lon: float,
    radius_m: int = OTM_DEFAULT_RADIUS_M,
    limit: int = OTM_DEFAULT_LIMIT,
) -> List[CanonicalPlace]:
    """
    Popular places around (lat, lon) from OpenTripMap.

    The radius search only gives names and points; each hit is enriched with
    its /xid details. Detail lookups run concurrently and a failed one leaves
    the radius item untouched.
    """
    api_key = _otm_key()
    descriptor = RequestDescriptor.get(
        f"{settings.OPENTRIPMAP_BASE_URL.rstrip('/')}/radius",
        params={
            "radius": radius_m,
            "lon": lon,
            "lat": lat,
            "kinds": OTM_KINDS,
            "rate": 2,
            "format": "json",
            "limit": limit,
            "apikey": api_key,
        },
    )
    logger.info("[POI] Fetching OpenTripMap places for coordinates: %s, %s", lat, lon)
    response = await execute(descriptor, settings.retry_policy())
    body = response.body if isinstance(response.body, list) else []
    items = [item for item in body if isinstance(item, dict)]
    if not items:
        return []

    details = await asyncio.gather(
        *(_otm_details(str(item["xid"]), api_key) for item in items if item.get("xid"))
    )
    details_by_xid = {d.get("xid"): d for d in details if d}
    merged = [{**item, **details_by_xid.get(item.get("xid"), {})} for item in items]
    return normalize(merged, provider_hint="opentripmap")


async def check_serpapi_connection() -> Dict[str, Any]:
    """
    Check SerpAPI with a one-result query.

    Returns a SUCCESS/FAILED report for a reachable API. A missing key raises
    ConfigurationError and upstream failures propagate as UpstreamError.
    """
    descriptor = RequestDescriptor.get(
        settings.SERPAPI_BASE_URL,
        params={"engine": "google", "q": SERP_TEST_QUERY, "api_key": serpapi_key(), "num": 1},
    )
    logger.info("[TEST-SERP] Testing SerpAPI connection...")
    response = await execute(descriptor, settings.retry_policy())

    body = response.body if isinstance(response.body, dict) else {}
    if not any(body.get(key) for key in SERP_RESULT_KEYS):
        logger.warning("SERPAPI FAILED - Invalid response structure")
        return {
            "status": "FAILED",
            "message": "SERPAPI FAILED - Invalid response structure",
            "response": response.body,
        }
    logger.info("SERPAPI CONNECTED SUCCESSFULLY")
    return {
        "status": "SUCCESS",
        "message": "SERPAPI CONNECTED SUCCESSFULLY",
        "testQuery": SERP_TEST_QUERY,
        "hasResults": True,
    }
