"""
Geocoding API routes.
"""
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from api.errors import failure_response
from services.geocoding import geocode

router = APIRouter()


class GeocodeResponse(BaseModel):
    status: str
    query: str
    lat: Optional[float] = None
    lon: Optional[float] = None
    display_name: Optional[str] = None
    provider: str
    found: bool


@router.get("", response_model=GeocodeResponse)
async def get_geocode(q: Optional[str] = None, provider: str = "nominatim"):
    """Resolve a place name to coordinates; found=false when nothing matched."""
    try:
        result = await geocode(q, provider)
    except Exception as exc:
        return failure_response(exc, service=provider.upper(), action="geocode location")

    if result is None:
        return GeocodeResponse(status="ok", query=q.strip(), provider=provider, found=False)
    return GeocodeResponse(
        status="ok",
        query=q.strip(),
        lat=result.lat,
        lon=result.lon,
        display_name=result.display_name,
        provider=result.provider,
        found=True,
    )
