"""
Tests for turning SerpAPI / OpenTripMap payloads into canonical places.
"""
import copy
import json

from domain.models import CanonicalPlace, Coordinates
from services.place_normalizer import (
    DEFAULT_SHAPES,
    detect_shape,
    normalize,
    place_address,
    place_name,
)


def _local(title, **extra):
    return {"title": title, **extra}


MARINA = {
    "title": "Marina Beach",
    "address": "Kamarajar Salai, Chennai",
    "rating": 4.5,
    "reviews": 120345,
    "gps_coordinates": {"latitude": 13.08, "longitude": 80.27},
    "thumbnail": "https://img.test/marina.jpg",
}


def test_local_result_maps_every_field():
    (place,) = normalize({"local_results": [MARINA]})

    assert place == CanonicalPlace(
        name="Marina Beach",
        address="Kamarajar Salai, Chennai",
        rating=4.5,
        review_count=120345,
        coordinates=Coordinates(lat=13.08, lon=80.27),
        photos=("https://img.test/marina.jpg",),
    )
    assert place.to_dict()["coordinates"] == {"lat": 13.08, "lon": 80.27}
    assert place.to_dict()["reviews"] == 120345


def test_empty_entry_gets_placeholders():
    (place,) = normalize({"local_results": [{}]})

    assert place.to_dict() == {
        "name": "Unknown",
        "address": "Address not available",
        "rating": None,
        "reviews": None,
        "coordinates": None,
        "photos": [],
    }


def test_non_mapping_entry_still_produces_a_place():
    places = normalize({"places_results": ["garbage", None]})

    assert [p.name for p in places] == ["Unknown", "Unknown"]
    assert all(p.address == "Address not available" for p in places)


def test_local_results_win_over_organic_results():
    payload = {
        "organic_results": [_local("Organic hit", snippet="web")],
        "local_results": [_local("Local hit")],
        "places_results": [_local("Places hit")],
    }

    assert [p.name for p in normalize(payload)] == ["Local hit"]


def test_organic_results_filtered_capped_and_ordered():
    entries = []
    for i in range(15):
        if i in (2, 7, 11):
            entries.append({"snippet": f"untitled {i}"})
        else:
            entries.append({"title": f"Result {i}", "snippet": f"snippet {i}"})

    places = normalize({"organic_results": entries})

    expected = [f"Result {i}" for i in range(15) if i not in (2, 7, 11)][:10]
    assert [p.name for p in places] == expected
    assert all(p.coordinates is None for p in places)
    assert places[0].address == "snippet 0"


def test_organic_results_never_carry_coordinates():
    entry = {"title": "Fort", "gps_coordinates": {"latitude": 1.0, "longitude": 2.0}}

    (place,) = normalize({"organic_results": [entry]})

    assert place.coordinates is None


def test_places_results_used_when_nothing_else():
    (place,) = normalize({"places_results": [{"name": "Kapaleeshwarar Temple", "rating": 4.7}]})

    assert place.name == "Kapaleeshwarar Temple"
    assert place.rating == 4.7


def test_falls_through_empty_or_mistyped_collections():
    payload = {
        "local_results": [],
        "organic_results": {"title": "not a list"},
        "places_results": [{"title": "Fallback"}],
    }

    assert [p.name for p in normalize(payload)] == ["Fallback"]


def test_unrecognised_payloads_give_empty_list():
    assert normalize({}) == []
    assert normalize(None) == []
    assert normalize("error page") == []
    assert normalize({"search_metadata": {"status": "Success"}}) == []


def test_address_fallback_chain():
    assert place_address({"address": "1 Main St", "address_lines": ["x"]}) == "1 Main St"
    assert place_address({"address_lines": ["Anna Salai", "", "Chennai"]}) == "Anna Salai, Chennai"
    assert place_address({"snippet": "A nice place"}) == "Address not available"
    assert place_address({"snippet": "A nice place"}, allow_snippet=True) == "A nice place"
    assert place_address({"address": "   "}) == "Address not available"


def test_name_fallback_chain():
    assert place_name({"title": "T", "name": "N"}) == "T"
    assert place_name({"title": "", "name": "N"}) == "N"
    assert place_name({}) == "Unknown"


def test_partial_coordinates_are_dropped():
    (place,) = normalize({"local_results": [{"gps_coordinates": {"latitude": 13.0}}]})

    assert place.coordinates is None


def test_normalize_is_idempotent_and_does_not_mutate_input():
    payload = {"local_results": [MARINA, {"title": "Other"}]}
    snapshot = copy.deepcopy(payload)

    first = normalize(payload)
    second = normalize(payload)

    assert first == second
    assert payload == snapshot


def test_output_is_json_serialisable():
    places = normalize({"local_results": [MARINA, {}]})

    encoded = json.dumps([p.to_dict() for p in places])

    assert '"photos": ["https://img.test/marina.jpg"]' in encoded


def test_provider_hint_restricts_to_one_collection():
    payload = {"local_results": [_local("Local")], "places_results": [_local("Places")]}

    assert [p.name for p in normalize(payload, provider_hint="places_results")] == ["Places"]
    assert normalize({"local_results": [_local("Local")]}, provider_hint="organic_results") == []


def test_unknown_hint_uses_default_precedence():
    payload = {"organic_results": [_local("Organic")]}

    assert [p.name for p in normalize(payload, provider_hint="bing")] == ["Organic"]


OTM_ITEM = {
    "xid": "N123",
    "name": "Fort St. George",
    "rate": 3,
    "point": {"lon": 80.2875, "lat": 13.0797},
    "kinds": "historic,fortifications,interesting_places",
}


def test_opentripmap_items_normalized():
    detailed = {
        **OTM_ITEM,
        "rate": "3h",
        "address": {"road": "Rajaji Salai", "city": "Chennai", "country": "India"},
        "preview": {"source": "https://img.test/fort.jpg"},
    }

    first, second = normalize([detailed, OTM_ITEM], provider_hint="opentripmap")

    assert first.name == "Fort St. George"
    assert first.address == "Rajaji Salai, Chennai, India"
    assert first.rating == 3.0
    assert first.coordinates == Coordinates(lat=13.0797, lon=80.2875)
    assert first.photos == ("https://img.test/fort.jpg",)
    assert second.address == "Address not available"
    assert second.photos == ()


def test_bare_list_detected_without_hint():
    assert detect_shape([OTM_ITEM], DEFAULT_SHAPES).name == "opentripmap"
    assert [p.name for p in normalize([OTM_ITEM])] == ["Fort St. George"]


def test_opentripmap_unnamed_item():
    (place,) = normalize([{"name": "", "point": {"lat": 1, "lon": 2}}], provider_hint="opentripmap")

    assert place.name == "Unknown"


def test_non_finite_numbers_are_treated_as_absent():
    raw = (
        '{"local_results": ['
        '{"title": "A", "reviews": 1e400, "rating": NaN,'
        ' "gps_coordinates": {"latitude": 1e400, "longitude": 80.2}},'
        '{"title": "B", "reviews": "NaN", "rating": "nan",'
        ' "gps_coordinates": {"latitude": "NaN", "longitude": 80.2}},'
        '{"title": "C", "reviews": "-inf", "rating": "1e400"}'
        "]}"
    )

    places = normalize(json.loads(raw))

    assert [p.name for p in places] == ["A", "B", "C"]
    for place in places:
        assert place.rating is None
        assert place.review_count is None
        assert place.coordinates is None
        json.dumps(place.to_dict(), allow_nan=False)


def test_huge_integer_review_count_is_dropped():
    (place,) = normalize({"local_results": [{"title": "A", "reviews": 10**400, "rating": 4}]})

    assert place.review_count is None
    assert place.rating == 4.0


def test_blank_organic_titles_are_filtered():
    entries = [{"title": "   ", "snippet": "blank"}, {"title": "Kept", "snippet": "ok"}]

    assert [p.name for p in normalize({"organic_results": entries})] == ["Kept"]
