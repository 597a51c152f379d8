"""Single-review lookup through the RapidAPI maps-data service."""
from __future__ import annotations

import logging
from typing import Any, Optional

from domain.errors import CallerInputError, ConfigurationError
from domain.models import RequestDescriptor
from services.http_executor import execute
from settings import settings

logger = logging.getLogger(__name__)


def build_review_request(review_id: str) -> RequestDescriptor:
    if not settings.RAPIDAPI_KEY:
        raise ConfigurationError("RAPIDAPI_KEY not configured in backend .env file")
    return RequestDescriptor.get(
        f"https://{settings.RAPIDAPI_HOST}/review.php",
        params={"review_id": review_id},
        headers={
            "x-rapidapi-key": settings.RAPIDAPI_KEY,
            "x-rapidapi-host": settings.RAPIDAPI_HOST,
        },
    )


async def fetch_review(review_id: Optional[str]) -> Any:
    """Raw review payload for ``review_id``; the body is passed through untouched."""
    if review_id is None or not review_id.strip():
        raise CallerInputError("review_id is required")
    descriptor = build_review_request(review_id.strip())
    logger.info("[REVIEW] Fetching review %s", review_id)
    response = await execute(descriptor, settings.retry_policy())
    return response.body
