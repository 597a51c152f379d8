"""
End-to-end trip lookup: geocode both ends, route between them, and list
attractions around the destination.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from domain.errors import CallerInputError, ConfigurationError
from domain.models import CanonicalPlace, GeocodeResult, RouteResult
from services.attractions import fetch_attractions, fetch_nearby_pois
from services.geocoding import geocode
from services.routing import fetch_route

logger = logging.getLogger(__name__)

POI_PROVIDERS = ("serpapi", "opentripmap")


@dataclass
class TripPlan:
    origin: GeocodeResult
    destination: GeocodeResult
    route: RouteResult
    attractions: List[CanonicalPlace] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "origin": self.origin.to_dict(),
            "destination": self.destination.to_dict(),
            "route": self.route.to_dict(),
            "attractions": [p.to_dict() for p in self.attractions],
            "warnings": list(self.warnings),
        }


async def _attractions_near(place: GeocodeResult, provider: str) -> List[CanonicalPlace]:
    if provider == "opentripmap":
        return await fetch_nearby_pois(place.lat, place.lon)
    return await fetch_attractions(place.lat, place.lon)


async def plan_trip(
    origin: str,
    destination: str,
    geocoder: str = "nominatim",
    poi_provider: Optional[str] = "serpapi",
) -> TripPlan:
    """
    Resolve ``origin``/``destination``, fetch the driving route and, unless
    ``poi_provider`` is None, attractions near the destination.

    A missing POI credential is reported as a warning instead of failing the
    whole plan; upstream errors propagate.
    """
    if poi_provider is not None and poi_provider not in POI_PROVIDERS:
        raise CallerInputError(f"Unknown attractions provider {poi_provider!r}")

    start, end = await asyncio.gather(geocode(origin, geocoder), geocode(destination, geocoder))
    if start is None:
        raise CallerInputError(f"Could not find location: {origin}")
    if end is None:
        raise CallerInputError(f"Could not find location: {destination}")

    route = await fetch_route((start.lat, start.lon), (end.lat, end.lon))
    plan = TripPlan(origin=start, destination=end, route=route)

    if poi_provider is not None:
        try:
            plan.attractions = await _attractions_near(end, poi_provider)
        except ConfigurationError as exc:
            logger.warning("[TRIP] Skipping attractions: %s", exc)
            plan.warnings.append(str(exc))
    return plan
