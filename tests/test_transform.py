from places_worker.etl import transform
from places_worker.models import UNAVAILABLE, RawResult


def _place(place_id="p1", **overrides):
    place = {
        "place_id": place_id,
        "name": "Acme",
        "formatted_address": "Main St",
        "rating": 4.5,
        "user_ratings_total": 10,
        "types": ["store"],
        "geometry": {"location": {"lat": 20, "lng": 10}},
        "photos": [{"photo_reference": "ref"}],
    }
    place.update(overrides)
    return place


def test_to_raw_result():
    raw = transform.to_raw_result(_place())
    assert raw.place_id == "p1"
    assert raw.address == "Main St"
    assert raw.review_count == 10
    assert (raw.lat, raw.lng) == (20, 10)
    assert raw.photo_reference == "ref"


def test_to_raw_result_without_optional_fields():
    raw = transform.to_raw_result({"place_id": "p2", "name": "Bare", "formatted_address": "X", "geometry": {}})
    assert raw.rating is None
    assert raw.review_count is None
    assert raw.types == []
    assert raw.photo_reference is None


def test_to_enriched_result_with_all_fields_has_no_sentinels():
    raw = transform.to_raw_result(_place())
    detail = _place(
        name="Acme Corp",
        formatted_phone_number="021 555",
        website="https://acme.example",
    )
    detail.pop("place_id")

    enriched = transform.to_enriched_result(detail, raw)

    assert enriched.place_id == "p1"
    assert enriched.name == "Acme Corp"
    assert enriched.phone_number == "021 555"
    assert enriched.website == "https://acme.example"
    assert UNAVAILABLE not in enriched.to_dict().values()


def test_to_enriched_result_missing_contact_fields():
    raw = transform.to_raw_result(_place())
    enriched = transform.to_enriched_result(_place(), raw)

    assert enriched.phone_number == UNAVAILABLE
    assert enriched.website == UNAVAILABLE
    assert enriched.rating == 4.5
    assert enriched.user_ratings_total == 10


def test_detail_response_is_authoritative():
    raw = transform.to_raw_result(_place(rating=3.0, name="Old"))
    enriched = transform.to_enriched_result(_place(rating=4.9, name="New"), raw)
    assert enriched.rating == 4.9
    assert enriched.name == "New"


def test_fallback_result_keeps_raw_fields():
    raw = RawResult(place_id="p3", name="Shop", address="Road 1", types=["cafe"], lat=1.0, lng=2.0)
    enriched = transform.fallback_result(raw)

    assert enriched.place_id == "p3"
    assert enriched.rating == UNAVAILABLE
    assert enriched.user_ratings_total == 0
    assert enriched.types == ["cafe"]
    assert enriched.phone_number == UNAVAILABLE
    assert enriched.website == UNAVAILABLE


def test_parse_rating():
    assert transform.parse_rating("4.5 stars ") == 4.5
    assert transform.parse_rating("4,2 bintang") == 4.2
    assert transform.parse_rating("5 stars") == 5.0
    assert transform.parse_rating("No reviews") == UNAVAILABLE
    assert transform.parse_rating(None) == UNAVAILABLE


def test_to_scraped_result():
    result = transform.to_scraped_result(
        {"name": " Kopi Kenangan ", "address": "Jl. Sudirman", "rating_label": "4.6 stars", "review_count": "(1,234)"}
    )
    assert result.name == "Kopi Kenangan"
    assert result.address == "Jl. Sudirman"
    assert result.rating == 4.6
    assert result.review_count == "1,234"


def test_to_scraped_result_missing_fields():
    result = transform.to_scraped_result({"name": "Warung", "address": None, "rating_label": None, "review_count": ""})
    assert result.address == UNAVAILABLE
    assert result.rating == UNAVAILABLE
    assert result.review_count == UNAVAILABLE


def test_to_scraped_result_without_name():
    assert transform.to_scraped_result({"name": "  ", "address": "Somewhere"}) is None
    assert transform.to_scraped_result({"name": None}) is None
