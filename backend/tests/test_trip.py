import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from domain.errors import CallerInputError, ConfigurationError
from domain.models import CanonicalPlace, GeocodeResult, RouteResult
from services import trip
from services.trip import plan_trip

CHENNAI = GeocodeResult(lat=13.0827, lon=80.2707, display_name="Chennai")
GUINDY = GeocodeResult(lat=13.0067, lon=80.2206, display_name="Guindy")
ROUTE = RouteResult(distance_m=12000.0, duration_s=1500.0, geometry=[(13.0827, 80.2707), (13.0067, 80.2206)])


def _geocoder(mapping):
    async def fake(query, provider="nominatim"):
        return mapping.get(query)

    return fake


@patch.object(trip, "fetch_attractions", new_callable=AsyncMock)
@patch.object(trip, "fetch_route", new_callable=AsyncMock)
@patch.object(trip, "geocode")
def test_plan_trip_routes_and_lists_destination_attractions(mock_geocode, mock_route, mock_attractions):
    mock_geocode.side_effect = _geocoder({"Chennai": CHENNAI, "Guindy": GUINDY})
    mock_route.return_value = ROUTE
    mock_attractions.return_value = [CanonicalPlace(name="Guindy National Park")]

    plan = asyncio.run(plan_trip("Chennai", "Guindy"))

    mock_route.assert_awaited_once_with((13.0827, 80.2707), (13.0067, 80.2206))
    mock_attractions.assert_awaited_once_with(13.0067, 80.2206)
    data = plan.to_dict()
    assert data["route"]["distance_km"] == 12.0
    assert data["attractions"][0]["name"] == "Guindy National Park"
    assert data["warnings"] == []


@patch.object(trip, "fetch_route", new_callable=AsyncMock)
@patch.object(trip, "geocode")
def test_plan_trip_unknown_destination(mock_geocode, mock_route):
    mock_geocode.side_effect = _geocoder({"Chennai": CHENNAI})

    with pytest.raises(CallerInputError, match="Atlantis"):
        asyncio.run(plan_trip("Chennai", "Atlantis"))
    mock_route.assert_not_called()


@patch.object(trip, "fetch_attractions", new_callable=AsyncMock)
@patch.object(trip, "fetch_route", new_callable=AsyncMock)
@patch.object(trip, "geocode")
def test_plan_trip_missing_poi_key_becomes_warning(mock_geocode, mock_route, mock_attractions):
    mock_geocode.side_effect = _geocoder({"Chennai": CHENNAI, "Guindy": GUINDY})
    mock_route.return_value = ROUTE
    mock_attractions.side_effect = ConfigurationError("SERPAPI_KEY not configured in backend .env file")

    plan = asyncio.run(plan_trip("Chennai", "Guindy"))

    assert plan.attractions == []
    assert plan.warnings == ["SERPAPI_KEY not configured in backend .env file"]


def test_plan_trip_rejects_unknown_poi_provider():
    with pytest.raises(CallerInputError):
        asyncio.run(plan_trip("a", "b", poi_provider="yelp"))
