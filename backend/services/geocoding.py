"""Forward geocoding helpers: free-text place name to coordinates.

Nominatim (OSM) is the default and needs no key, only an identifying
User-Agent. OpenCage is used when asked for and a key is configured.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

from domain.errors import CallerInputError, ConfigurationError
from domain.models import GeocodeResult, RequestDescriptor
from services.http_executor import execute
from settings import settings

logger = logging.getLogger(__name__)

PROVIDERS = ("nominatim", "opencage")
_logged_ua = False


def _redact_email(ua: str) -> str:
    if "@" not in ua:
        return ua
    return re.sub(r"\S+@\S+", "<redacted>", ua)


def nominatim_headers() -> Dict[str, str]:
    headers = {"User-Agent": settings.NOMINATIM_USER_AGENT}
    if settings.NOMINATIM_REFERER:
        headers["Referer"] = settings.NOMINATIM_REFERER
    return headers


def _clean_query(query: Optional[str]) -> str:
    if query is None or not query.strip():
        raise CallerInputError("q query parameter is required")
    return query.strip()


def parse_nominatim(data: Any) -> Optional[GeocodeResult]:
    """First hit of a Nominatim /search?format=json answer."""
    if not isinstance(data, list) or not data:
        return None
    first = data[0]
    try:
        return GeocodeResult(
            lat=float(first["lat"]),
            lon=float(first["lon"]),
            display_name=first.get("display_name"),
            provider="nominatim",
        )
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("[GEOCODE] Unexpected Nominatim result shape: %s", exc)
        return None


def parse_opencage(data: Any) -> Optional[GeocodeResult]:
    """First hit of an OpenCage answer, or None on an API-level error."""
    if not isinstance(data, dict):
        return None
    status = data.get("status") or {}
    if status.get("code") not in (None, 200):
        logger.warning("[GEOCODE] OpenCage API error: %s", status.get("message"))
        return None
    results = data.get("results") or []
    if not results:
        return None
    first = results[0]
    geometry = first.get("geometry") or {}
    try:
        return GeocodeResult(
            lat=float(geometry["lat"]),
            lon=float(geometry["lng"]),
            display_name=first.get("formatted"),
            provider="opencage",
        )
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("[GEOCODE] Unexpected OpenCage result shape: %s", exc)
        return None


def build_geocode_request(query: str, provider: str = "nominatim") -> RequestDescriptor:
    if provider == "nominatim":
        global _logged_ua
        if not _logged_ua:
            logger.debug("Nominatim User-Agent: %s", _redact_email(settings.NOMINATIM_USER_AGENT))
            _logged_ua = True
        return RequestDescriptor.get(
            f"{settings.NOMINATIM_BASE_URL.rstrip('/')}/search",
            params={"q": query, "format": "json", "limit": "1"},
            headers=nominatim_headers(),
        )
    if provider == "opencage":
        if not settings.OPENCAGE_API_KEY:
            raise ConfigurationError("OPENCAGE_API_KEY not configured in backend .env file")
        return RequestDescriptor.get(
            settings.OPENCAGE_BASE_URL,
            params={"q": query, "key": settings.OPENCAGE_API_KEY, "limit": "1"},
        )
    raise CallerInputError(f"Unknown geocoding provider {provider!r}; expected one of {', '.join(PROVIDERS)}")


async def geocode(query: Optional[str], provider: str = "nominatim") -> Optional[GeocodeResult]:
    """Resolve a place name to its best-matching coordinate, or None if nothing matched."""
    cleaned = _clean_query(query)
    provider = (provider or "nominatim").strip().lower()
    descriptor = build_geocode_request(cleaned, provider)
    logger.info("[GEOCODE] Geocoding %r via %s", cleaned, provider)
    response = await execute(descriptor, settings.retry_policy())

    if provider == "opencage":
        result = parse_opencage(response.body)
    else:
        result = parse_nominatim(response.body)
    if result is None:
        logger.info("[GEOCODE] No results found for query: %r", cleaned)
    return result
