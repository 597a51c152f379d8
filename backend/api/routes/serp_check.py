"""
SerpAPI connectivity check.
"""
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from domain.errors import ConfigurationError, UpstreamAuthError, UpstreamError, UpstreamRateLimited
from services.attractions import check_serpapi_connection

router = APIRouter()
logger = logging.getLogger(__name__)


def _failed(message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=500, content={"status": "FAILED", "message": message, **extra})


@router.get("")
async def test_serp():
    """Report whether SerpAPI answers with a usable result structure."""
    try:
        report = await check_serpapi_connection()
    except ConfigurationError as exc:
        return _failed(str(exc), error="Please set SERPAPI_KEY=your_actual_key in backend/.env")
    except UpstreamAuthError as exc:
        logger.warning("SERPAPI FAILED - Authentication error")
        return _failed("SERPAPI FAILED - Authentication error. Check your API key.", error=exc.message)
    except UpstreamRateLimited as exc:
        logger.warning("SERPAPI FAILED - Rate limit exceeded")
        return _failed("SERPAPI FAILED - Rate limit exceeded", error=exc.message)
    except UpstreamError as exc:
        logger.warning("SERPAPI FAILED - %s", exc.message)
        return _failed("SERPAPI FAILED", error=exc.message, details=exc.body)

    if report["status"] != "SUCCESS":
        return JSONResponse(status_code=500, content=report)
    return report
