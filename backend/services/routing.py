"""
Driving routes from OSRM.

Internal coordinates are (lat, lon); OSRM wants "lon,lat;lon,lat" in the URL
and answers with GeoJSON [lon, lat] pairs, so both directions are flipped here
and nowhere else.
"""
from __future__ import annotations

import logging
from typing import Any, List, Tuple

from domain.errors import CallerInputError, RouteNotFoundError, UpstreamClientError
from domain.models import RequestDescriptor, RouteResult
from services.http_executor import execute
from settings import settings

logger = logging.getLogger(__name__)

LatLon = Tuple[float, float]
PROFILES = ("driving", "walking", "cycling")


def format_coordinates(coords: List[LatLon]) -> str:
    """Convert list of (lat, lon) to OSRM format 'lon,lat;lon,lat;...'"""
    return ";".join(f"{lon},{lat}" for lat, lon in coords)


def build_route_request(start: LatLon, end: LatLon, profile: str = "driving") -> RequestDescriptor:
    if profile not in PROFILES:
        raise CallerInputError(f"Unknown routing profile {profile!r}")
    path = format_coordinates([start, end])
    return RequestDescriptor.get(
        f"{settings.OSRM_BASE_URL.rstrip('/')}/route/v1/{profile}/{path}",
        params={"overview": "full", "geometries": "geojson"},
    )


def parse_route(data: Any, profile: str = "driving") -> RouteResult:
    """Take the first route of an OSRM /route answer."""
    if not isinstance(data, dict) or data.get("code") != "Ok":
        message = data.get("message") if isinstance(data, dict) else None
        raise RouteNotFoundError(f"OSRM error: {message or 'Unknown error'}")
    routes = data.get("routes") or []
    if not routes:
        raise RouteNotFoundError("OSRM returned no routes")

    route = routes[0] if isinstance(routes, list) else None
    if not isinstance(route, dict):
        raise RouteNotFoundError("OSRM returned a malformed route")
    geometry = route.get("geometry")
    coordinates = geometry.get("coordinates") if isinstance(geometry, dict) else None
    try:
        points = [(float(c[1]), float(c[0])) for c in coordinates or [] if isinstance(c, (list, tuple)) and len(c) >= 2]
        distance_m = float(route.get("distance") or 0.0)
        duration_s = float(route.get("duration") or 0.0)
    except (TypeError, ValueError) as exc:
        raise RouteNotFoundError(f"OSRM returned a malformed route: {exc}") from exc
    return RouteResult(distance_m=distance_m, duration_s=duration_s, geometry=points, profile=profile)


async def fetch_route(start: LatLon, end: LatLon, profile: str = "driving") -> RouteResult:
    descriptor = build_route_request(start, end, profile)
    logger.info("[ROUTE] Requesting %s route %s -> %s", profile, start, end)
    try:
        response = await execute(descriptor, settings.retry_policy())
    except UpstreamClientError as exc:
        # OSRM reports NoRoute/InvalidQuery as 400 with a JSON code
        if isinstance(exc.body, dict) and exc.body.get("code"):
            raise RouteNotFoundError(f"OSRM error: {exc.body.get('message') or exc.body['code']}") from exc
        raise
    result = parse_route(response.body, profile)
    logger.info(
        "[ROUTE] Route found: %.1f km, %d min, %d points",
        result.distance_km,
        result.duration_min,
        len(result.geometry),
    )
    return result
