"""
Request validation and error-to-response mapping shared by the routers.
"""
import logging
from typing import Optional, Tuple

from fastapi.responses import JSONResponse

from domain.errors import (
    CallerInputError,
    ConfigurationError,
    RouteNotFoundError,
    UpstreamAuthError,
    UpstreamError,
    UpstreamRateLimited,
)

logger = logging.getLogger(__name__)


def parse_coordinate_pair(
    lat: Optional[str],
    lon: Optional[str],
    names: Tuple[str, str] = ("lat", "lon"),
) -> Tuple[float, float]:
    """Validate raw query strings into a (lat, lon) pair within range."""
    lat_name, lon_name = names
    if lat is None or lon is None or not lat.strip() or not lon.strip():
        raise CallerInputError(f"{lat_name} and {lon_name} query parameters are required")
    try:
        latitude = float(lat)
        longitude = float(lon)
    except ValueError:
        raise CallerInputError(f"{lat_name} and {lon_name} must be valid numbers") from None
    if latitude != latitude or longitude != longitude:
        raise CallerInputError(f"{lat_name} and {lon_name} must be valid numbers")
    if not (-90 <= latitude <= 90) or not (-180 <= longitude <= 180):
        raise CallerInputError("Invalid coordinate range")
    return latitude, longitude


def caller_error_response(exc: CallerInputError) -> JSONResponse:
    status = 404 if isinstance(exc, RouteNotFoundError) else 400
    return JSONResponse(status_code=status, content={"error": str(exc)})


def failure_response(exc: Exception, service: str, action: str) -> JSONResponse:
    """
    Translate a service failure into the client-facing 4xx/500 payload.

    ``service`` names the upstream in messages (e.g. "SERPAPI"), ``action``
    completes "Failed to ..." for generic failures.
    """
    if isinstance(exc, CallerInputError):
        return caller_error_response(exc)
    if isinstance(exc, ConfigurationError):
        logger.error("[%s] %s", service, exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})
    if isinstance(exc, UpstreamAuthError):
        return JSONResponse(
            status_code=500,
            content={"error": f"{service} authentication failed. Check your API key."},
        )
    if isinstance(exc, UpstreamRateLimited):
        return JSONResponse(
            status_code=500,
            content={"error": f"{service} rate limit exceeded. Please try again later."},
        )
    if isinstance(exc, UpstreamError):
        logger.error("[%s] Error: %s (status=%s)", service, exc.message, exc.status_code)
        return JSONResponse(
            status_code=500,
            content={"error": f"Failed to {action}", "details": exc.message, "apiError": exc.body},
        )
    logger.exception("[%s] Unexpected error", service)
    return JSONResponse(status_code=500, content={"error": f"Failed to {action}", "details": str(exc)})
