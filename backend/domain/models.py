"""
Core domain models for the route & attractions gateway.
These are framework-agnostic and can be used across all services.
"""
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union


class HttpMethod(str, Enum):
    """HTTP verbs the executor issues upstream."""
    GET = "GET"
    POST = "POST"


@dataclass(frozen=True)
class RequestDescriptor:
    """
    Immutable description of one outbound HTTP call.

    The params/headers mappings are frozen into read-only views on creation,
    so a descriptor can be shared between concurrent executions.
    """
    method: str
    url: str
    params: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", str(self.method).upper())
        object.__setattr__(self, "params", MappingProxyType(dict(self.params or {})))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers or {})))

    @classmethod
    def get(
        cls,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> "RequestDescriptor":
        return cls(method=HttpMethod.GET.value, url=url, params=params or {}, headers=headers or {})

    def redacted_params(self, secret_keys: Tuple[str, ...] = ("api_key", "key", "apikey")) -> Dict[str, Any]:
        """Params safe for logging: secret values replaced by a marker."""
        return {k: ("<redacted>" if k in secret_keys else v) for k, v in self.params.items()}


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff: attempt k waits base_delay_ms * 2**(k-1)."""
    max_attempts: int = 3
    base_delay_ms: int = 500

    def __post_init__(self) -> None:
        if self.max_attempts < 0:
            raise ValueError(f"max_attempts must be >= 0, got {self.max_attempts}")
        if self.base_delay_ms <= 0:
            raise ValueError(f"base_delay_ms must be > 0, got {self.base_delay_ms}")

    def delay_ms(self, attempt: int) -> int:
        """Backoff to wait after the given (1-based) failed attempt."""
        return self.base_delay_ms * (2 ** (attempt - 1))

    @property
    def total_attempts(self) -> int:
        return self.max_attempts + 1


DEFAULT_RETRY_POLICY = RetryPolicy()


@dataclass(frozen=True)
class UpstreamResponse:
    """What the executor hands back: status code plus parsed body."""
    status_code: int
    body: Any
    url: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status_code < 400


@dataclass(frozen=True)
class Success:
    response: UpstreamResponse


@dataclass(frozen=True)
class RetryableFailure:
    error: Exception


@dataclass(frozen=True)
class FatalFailure:
    error: Exception


AttemptOutcome = Union[Success, RetryableFailure, FatalFailure]


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lon": self.lon}


PLACEHOLDER_NAME = "Unknown"
PLACEHOLDER_ADDRESS = "Address not available"


@dataclass(frozen=True)
class CanonicalPlace:
    """Provider-agnostic point of interest / attraction."""
    name: str = PLACEHOLDER_NAME
    address: str = PLACEHOLDER_ADDRESS
    rating: Optional[float] = None
    review_count: Optional[int] = None
    coordinates: Optional[Coordinates] = None
    photos: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "address": self.address,
            "rating": self.rating,
            "reviews": self.review_count,
            "coordinates": self.coordinates.to_dict() if self.coordinates else None,
            "photos": list(self.photos),
        }


@dataclass(frozen=True)
class GeocodeResult:
    """A place name resolved to a coordinate."""
    lat: float
    lon: float
    display_name: Optional[str] = None
    provider: str = "nominatim"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lat": self.lat,
            "lon": self.lon,
            "display_name": self.display_name,
            "provider": self.provider,
        }


@dataclass(frozen=True)
class RouteResult:
    """
    Driving route between two points.

    geometry holds the polyline as (lat, lon) pairs, already flipped from the
    GeoJSON [lon, lat] order upstream routers return.
    """
    distance_m: float
    duration_s: float
    geometry: List[Tuple[float, float]] = field(default_factory=list)
    profile: str = "driving"

    @property
    def distance_km(self) -> float:
        return round(self.distance_m / 1000.0, 1)

    @property
    def duration_min(self) -> int:
        return int(round(self.duration_s / 60.0))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profile": self.profile,
            "distance_m": self.distance_m,
            "duration_s": self.duration_s,
            "distance_km": self.distance_km,
            "duration_min": self.duration_min,
            "geometry": [[lat, lon] for lat, lon in self.geometry],
        }
