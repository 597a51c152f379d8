import os

from domain.models import RetryPolicy

# Basic settings helper to read environment configuration.


def _as_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


def _as_int(val: str | None, default: int) -> int:
    if val is None or not val.strip():
        return default
    return int(val)


def _as_float(val: str | None, default: float) -> float:
    if val is None or not val.strip():
        return default
    return float(val)


def _as_list(val: str | None, default: list[str]) -> list[str]:
    if val is None or not val.strip():
        return default
    return [item.strip() for item in val.split(",") if item.strip()]


class Settings:
    def __init__(self) -> None:
        # Upstream credentials
        self.SERPAPI_KEY: str | None = os.getenv("SERPAPI_KEY")
        self.OPENCAGE_API_KEY: str | None = os.getenv("OPENCAGE_API_KEY")
        self.OPENTRIPMAP_API_KEY: str | None = os.getenv("OPENTRIPMAP_API_KEY")
        self.RAPIDAPI_KEY: str | None = os.getenv("RAPIDAPI_KEY")
        self.RAPIDAPI_HOST: str = os.getenv("RAPIDAPI_HOST", "maps-data.p.rapidapi.com")

        # Upstream endpoints
        self.SERPAPI_BASE_URL: str = os.getenv("SERPAPI_BASE_URL", "https://serpapi.com/search.json")
        self.NOMINATIM_BASE_URL: str = os.getenv("NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org")
        self.NOMINATIM_USER_AGENT: str = os.getenv(
            "NOMINATIM_USER_AGENT", "route-attractions-gateway/0.1 (contact: example@example.com)"
        )
        self.NOMINATIM_REFERER: str | None = os.getenv("NOMINATIM_REFERER")
        self.OPENCAGE_BASE_URL: str = os.getenv("OPENCAGE_BASE_URL", "https://api.opencagedata.com/geocode/v1/json")
        self.OSRM_BASE_URL: str = os.getenv("OSRM_BASE_URL", "https://router.project-osrm.org")
        self.OPENTRIPMAP_BASE_URL: str = os.getenv(
            "OPENTRIPMAP_BASE_URL", "https://api.opentripmap.com/0.1/en/places"
        )

        # Outbound request behaviour
        self.RETRY_MAX_ATTEMPTS: int = _as_int(os.getenv("RETRY_MAX_ATTEMPTS"), 3)
        self.RETRY_BASE_DELAY_MS: int = _as_int(os.getenv("RETRY_BASE_DELAY_MS"), 500)
        self.HTTP_TIMEOUT_SECONDS: float = _as_float(os.getenv("HTTP_TIMEOUT_SECONDS"), 10.0)

        # Server
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.CORS_ALLOW_ORIGINS: list[str] = _as_list(os.getenv("CORS_ALLOW_ORIGINS"), ["*"])
        self.CORS_ALLOW_CREDENTIALS: bool = _as_bool(os.getenv("CORS_ALLOW_CREDENTIALS"), False)

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.RETRY_MAX_ATTEMPTS,
            base_delay_ms=self.RETRY_BASE_DELAY_MS,
        )


settings = Settings()
