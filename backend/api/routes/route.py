"""
Route API routes.

Driving directions between two coordinates, a full trip lookup by place
names, the RapidAPI review passthrough, and a connectivity check.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from api.errors import failure_response, parse_coordinate_pair
from services.reviews import fetch_review
from services.routing import fetch_route
from services.trip import plan_trip

router = APIRouter()
logger = logging.getLogger(__name__)


class RouteResponse(BaseModel):
    status: str
    profile: str
    distance_m: float
    duration_s: float
    distance_km: float
    duration_min: int
    geometry: List[List[float]]


class TripRequest(BaseModel):
    origin: str
    destination: str
    geocoder: str = "nominatim"
    attractions_provider: Optional[str] = "serpapi"


@router.get("", response_model=RouteResponse)
async def get_route(
    start_lat: Optional[str] = None,
    start_lon: Optional[str] = None,
    end_lat: Optional[str] = None,
    end_lon: Optional[str] = None,
    profile: str = "driving",
):
    """Route between two coordinates via OSRM."""
    try:
        start = parse_coordinate_pair(start_lat, start_lon, names=("start_lat", "start_lon"))
        end = parse_coordinate_pair(end_lat, end_lon, names=("end_lat", "end_lon"))
        result = await fetch_route(start, end, profile)
    except Exception as exc:
        return failure_response(exc, service="OSRM", action="fetch route")
    return RouteResponse(status="ok", **result.to_dict())


@router.post("/plan")
async def post_trip_plan(payload: TripRequest):
    """Geocode origin and destination, route between them, list attractions at the destination."""
    try:
        plan = await plan_trip(
            payload.origin,
            payload.destination,
            geocoder=payload.geocoder,
            poi_provider=payload.attractions_provider,
        )
    except Exception as exc:
        return failure_response(exc, service="TRIP", action="plan trip")
    return {"status": "ok", **plan.to_dict()}


@router.get("/review")
async def get_review(review_id: Optional[str] = None):
    """Pass a single review through from RapidAPI."""
    try:
        data = await fetch_review(review_id)
    except Exception as exc:
        return failure_response(exc, service="RapidAPI", action="fetch review")
    return {"status": "ok", "data": data}


@router.post("/get")
async def backend_connected():
    """Connectivity check used by the frontend."""
    return {"status": "ok", "message": "Backend Connected Successfully"}
