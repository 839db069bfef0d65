import pytest
import requests

from places_worker.models import SearchQuery
from places_worker.vendors import google_places


class DummyResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload or {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError("http error")

    def json(self):
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        return self.response


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(google_places, "_SESSION", session)
    return session


def test_text_search_success(patch_session):
    patch_session.response = DummyResponse(payload={"status": "OK", "results": []})
    query = SearchQuery("pizza", place_type="restaurant", radius=1000, location="1.0,2.0")
    payload = google_places.text_search(query, "key")
    assert payload["status"] == "OK"
    url, params, timeout = patch_session.calls[0]
    assert "textsearch" in url
    assert params["query"] == "pizza"
    assert params["type"] == "restaurant"
    assert params["radius"] == 1000
    assert params["location"] == "1.0,2.0"
    assert "pagetoken" not in params
    assert timeout == 10


def test_text_search_sends_pagetoken(patch_session):
    patch_session.response = DummyResponse(payload={"status": "ZERO_RESULTS", "results": []})
    google_places.text_search(SearchQuery("pizza"), "key", pagetoken="tok")
    _, params, _ = patch_session.calls[0]
    assert params["pagetoken"] == "tok"


def test_text_search_error_status(patch_session):
    patch_session.response = DummyResponse(payload={"status": "REQUEST_DENIED", "error_message": "bad key"})
    with pytest.raises(google_places.GooglePlacesError) as excinfo:
        google_places.text_search(SearchQuery("pizza"), "key")
    assert excinfo.value.status == "REQUEST_DENIED"
    assert excinfo.value.message == "bad key"


def test_text_search_http_error(patch_session):
    patch_session.response = DummyResponse(status_code=502)
    with pytest.raises(requests.HTTPError):
        google_places.text_search(SearchQuery("pizza"), "key")


def test_place_details_success(patch_session):
    patch_session.response = DummyResponse(payload={"status": "OK", "result": {"name": "Acme"}})
    result = google_places.place_details("pid", "key")
    assert result["name"] == "Acme"
    _, params, _ = patch_session.calls[0]
    assert params["place_id"] == "pid"
    assert "formatted_phone_number" in params["fields"]
    assert "website" in params["fields"]


def test_place_details_error(patch_session):
    patch_session.response = DummyResponse(payload={"status": "NOT_FOUND"})
    with pytest.raises(google_places.GooglePlacesError) as excinfo:
        google_places.place_details("pid", "key")
    assert excinfo.value.status == "NOT_FOUND"


def test_photo_url():
    url = google_places.photo_url("ref123", "key", max_width=200)
    assert url.startswith("https://maps.googleapis.com/maps/api/place/photo?")
    assert "photo_reference=ref123" in url
    assert "maxwidth=200" in url
    assert google_places.photo_url(None, "key") is None


def test_place_details_missing_result(patch_session):
    patch_session.response = DummyResponse(payload={"status": "OK"})
    with pytest.raises(google_places.GooglePlacesError):
        google_places.place_details("pid", "key")

    patch_session.response = DummyResponse(payload={"status": "OK", "result": {}})
    with pytest.raises(google_places.GooglePlacesError):
        google_places.place_details("pid", "key")


def test_text_search_rejection_is_not_logged_as_error(patch_session, caplog):
    patch_session.response = DummyResponse(payload={"status": "INVALID_REQUEST"})
    with caplog.at_level("DEBUG"):
        with pytest.raises(google_places.GooglePlacesError):
            google_places.text_search(SearchQuery("pizza"), "key", pagetoken="stale")
    assert not [record for record in caplog.records if record.levelname == "ERROR"]
