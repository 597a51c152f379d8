"""
Attractions API routes.

GET /api/attractions?lat=...&lon=...[&provider=serpapi|opentripmap]
"""
import logging
from typing import Optional

from fastapi import APIRouter

from api.errors import failure_response, parse_coordinate_pair
from domain.errors import CallerInputError
from services.attractions import fetch_attractions, fetch_nearby_pois

router = APIRouter()
logger = logging.getLogger(__name__)

PROVIDER_LABELS = {"serpapi": "SERPAPI", "opentripmap": "OPENTRIPMAP"}


@router.get("")
async def get_attractions(
    lat: Optional[str] = None,
    lon: Optional[str] = None,
    provider: str = "serpapi",
):
    """Attractions near a coordinate, normalized to one schema whatever the upstream."""
    service = PROVIDER_LABELS.get(provider, provider.upper())
    try:
        if provider not in PROVIDER_LABELS:
            raise CallerInputError(f"Unknown attractions provider {provider!r}")
        latitude, longitude = parse_coordinate_pair(lat, lon)
        if provider == "opentripmap":
            places = await fetch_nearby_pois(latitude, longitude)
        else:
            places = await fetch_attractions(latitude, longitude)
    except Exception as exc:
        return failure_response(exc, service=service, action="fetch attractions")

    if not places:
        return {
            "status": "ok",
            "attractions": [],
            "message": "No attractions found for this location",
        }
    return {
        "status": "ok",
        "attractions": [p.to_dict() for p in places],
        "count": len(places),
    }
