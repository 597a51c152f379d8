"""
Normalize third-party place payloads into CanonicalPlace records.

SerpAPI answers a maps/search query with one of several result collections
depending on the engine and the query. They are tried in a fixed order and
the first populated one wins:

1. ``local_results``   - richest: structured address, GPS, rating, thumbnail
2. ``organic_results`` - web results; only titled entries, capped at 10
3. ``places_results``  - same shape as local results

OpenTripMap radius/detail items are accepted as a last resort shape.

Every field is read through a small fallback chain over a plain mapping, so
no provider's exact payload shape is assumed. Normalization never raises:
an unrecognised payload gives an empty list.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from domain.models import (
    PLACEHOLDER_ADDRESS,
    PLACEHOLDER_NAME,
    CanonicalPlace,
    Coordinates,
)

logger = logging.getLogger(__name__)

Record = Mapping[str, Any]

ORGANIC_RESULTS_LIMIT = 10
OTM_LOCALITY_KEYS = ("city", "town", "village", "state", "country")


# --- field fallback chains -------------------------------------------------


def _text(value: Any) -> Optional[str]:
    """Non-empty stripped string for scalars, None for anything else."""
    if value is None or isinstance(value, (Mapping, list, tuple, bool)):
        return None
    text = str(value).strip()
    return text or None


def _number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value) if isinstance(value, (int, float)) else float(str(value).strip())
    except (ValueError, OverflowError):
        return None
    # json.loads yields inf for 1e400 and nan for a bare NaN
    return result if math.isfinite(result) else None


def _first_text(record: Record, *keys: str) -> Optional[str]:
    for key in keys:
        text = _text(record.get(key))
        if text:
            return text
    return None


def _joined_lines(lines: Any) -> Optional[str]:
    if not isinstance(lines, (list, tuple)):
        return None
    parts = [t for t in (_text(line) for line in lines) if t]
    return ", ".join(parts) or None


def place_name(record: Record) -> str:
    return _first_text(record, "title", "name") or PLACEHOLDER_NAME


def place_address(record: Record, allow_snippet: bool = False) -> str:
    address = _text(record.get("address")) or _joined_lines(record.get("address_lines"))
    if not address and allow_snippet:
        address = _text(record.get("snippet"))
    return address or PLACEHOLDER_ADDRESS


def place_rating(record: Record) -> Optional[float]:
    return _number(record.get("rating"))


def place_review_count(record: Record) -> Optional[int]:
    reviews = _number(record.get("reviews"))
    return int(reviews) if reviews is not None else None


def _coordinates(lat: Any, lon: Any) -> Optional[Coordinates]:
    lat_n, lon_n = _number(lat), _number(lon)
    if lat_n is None or lon_n is None:
        return None
    return Coordinates(lat=lat_n, lon=lon_n)


def place_coordinates(record: Record) -> Optional[Coordinates]:
    gps = record.get("gps_coordinates")
    if not isinstance(gps, Mapping):
        return None
    return _coordinates(gps.get("latitude"), gps.get("longitude"))


def place_photos(record: Record) -> Tuple[str, ...]:
    thumbnail = _text(record.get("thumbnail"))
    return (thumbnail,) if thumbnail else ()


# --- per-shape mappers -----------------------------------------------------


def _as_record(entry: Any) -> Record:
    return entry if isinstance(entry, Mapping) else {}


def _structured_place(record: Record) -> CanonicalPlace:
    """local_results / places_results entry."""
    return CanonicalPlace(
        name=place_name(record),
        address=place_address(record),
        rating=place_rating(record),
        review_count=place_review_count(record),
        coordinates=place_coordinates(record),
        photos=place_photos(record),
    )


def _organic_place(record: Record) -> CanonicalPlace:
    return CanonicalPlace(
        name=place_name(record),
        address=place_address(record, allow_snippet=True),
        rating=place_rating(record),
        review_count=place_review_count(record),
        coordinates=None,
        photos=place_photos(record),
    )


def _otm_address(record: Record) -> str:
    address = record.get("address")
    if isinstance(address, Mapping):
        street = " ".join(t for t in (_text(address.get("house_number")), _text(address.get("road"))) if t)
        parts = [street] if street else []
        parts.extend(t for t in (_text(address.get(k)) for k in OTM_LOCALITY_KEYS) if t)
        if parts:
            return ", ".join(parts)
    return _text(address) or PLACEHOLDER_ADDRESS


def _otm_rate(value: Any) -> Optional[float]:
    # detail lookups report heritage sites as "3h"
    if isinstance(value, str):
        value = value.strip().rstrip("h")
    return _number(value)


def _otm_place(record: Record) -> CanonicalPlace:
    point = record.get("point")
    preview = record.get("preview")
    photo = _text(preview.get("source")) if isinstance(preview, Mapping) else None
    return CanonicalPlace(
        name=_first_text(record, "name") or PLACEHOLDER_NAME,
        address=_otm_address(record),
        rating=_otm_rate(record.get("rate")),
        review_count=None,
        coordinates=_coordinates(point.get("lat"), point.get("lon")) if isinstance(point, Mapping) else None,
        photos=(photo,) if photo else (),
    )


# --- payload shapes --------------------------------------------------------


def _collection(payload: Any, key: str) -> Optional[Sequence[Any]]:
    if not isinstance(payload, Mapping):
        return None
    items = payload.get(key)
    if isinstance(items, list) and items:
        return items
    return None


def _keyed_shape(key: str) -> Callable[[Any], bool]:
    return lambda payload: _collection(payload, key) is not None


def _map_local(payload: Any) -> List[CanonicalPlace]:
    return [_structured_place(_as_record(e)) for e in _collection(payload, "local_results")]


def _map_organic(payload: Any) -> List[CanonicalPlace]:
    titled = [e for e in _collection(payload, "organic_results") if _text(_as_record(e).get("title"))]
    return [_organic_place(e) for e in titled[:ORGANIC_RESULTS_LIMIT]]


def _map_places(payload: Any) -> List[CanonicalPlace]:
    return [_structured_place(_as_record(e)) for e in _collection(payload, "places_results")]


def _is_otm(payload: Any) -> bool:
    return isinstance(payload, list) and bool(payload)


def _map_otm(payload: Any) -> List[CanonicalPlace]:
    return [_otm_place(_as_record(e)) for e in payload]


@dataclass(frozen=True)
class PayloadShape:
    name: str
    matches: Callable[[Any], bool]
    to_places: Callable[[Any], List[CanonicalPlace]]


LOCAL_RESULTS = PayloadShape("local_results", _keyed_shape("local_results"), _map_local)
ORGANIC_RESULTS = PayloadShape("organic_results", _keyed_shape("organic_results"), _map_organic)
PLACES_RESULTS = PayloadShape("places_results", _keyed_shape("places_results"), _map_places)
OPENTRIPMAP = PayloadShape("opentripmap", _is_otm, _map_otm)

SERPAPI_SHAPES: Tuple[PayloadShape, ...] = (LOCAL_RESULTS, ORGANIC_RESULTS, PLACES_RESULTS)
DEFAULT_SHAPES: Tuple[PayloadShape, ...] = SERPAPI_SHAPES + (OPENTRIPMAP,)

_HINTED_SHAPES = {
    "serpapi": SERPAPI_SHAPES,
    **{shape.name: (shape,) for shape in DEFAULT_SHAPES},
}


def shapes_for_hint(provider_hint: Optional[str]) -> Tuple[PayloadShape, ...]:
    if provider_hint is None:
        return DEFAULT_SHAPES
    shapes = _HINTED_SHAPES.get(provider_hint.strip().lower())
    if shapes is None:
        logger.debug("Unknown provider hint %r; using default precedence", provider_hint)
        return DEFAULT_SHAPES
    return shapes


def detect_shape(raw_payload: Any, shapes: Iterable[PayloadShape] = DEFAULT_SHAPES) -> Optional[PayloadShape]:
    """First shape whose predicate accepts the payload, or None."""
    for shape in shapes:
        if shape.matches(raw_payload):
            return shape
    return None


def normalize(raw_payload: Any, provider_hint: Optional[str] = None) -> List[CanonicalPlace]:
    """
    Turn a raw upstream body into an ordered list of CanonicalPlace.

    Only the first matching collection is used; collections are never merged.
    Returns [] when nothing recognisable is present.
    """
    shape = detect_shape(raw_payload, shapes_for_hint(provider_hint))
    if shape is None:
        return []
    places = shape.to_places(raw_payload)
    logger.debug("normalize: shape=%s places=%d", shape.name, len(places))
    return places
