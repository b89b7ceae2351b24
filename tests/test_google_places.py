import pytest
import requests

from listings_worker.models import Municipality
from listings_worker.vendors import google_places

FAIR_LAWN = Municipality(name="Fair Lawn", state="NJ")


class DummyResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload if payload is not None else {}
        self.content = b"{}"

    def json(self):
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []
        self.response = DummyResponse()
        self.error = None

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append((url, json, headers, timeout))
        if self.error:
            raise self.error
        return self.response


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(google_places, "_SESSION", session)
    return session


def test_search_text_success(patch_session):
    patch_session.response = DummyResponse(payload={"places": [{"id": "p1"}]})
    places = google_places.search_text("plumber in Fair Lawn, NJ", "key", max_results=5)

    assert places == [{"id": "p1"}]
    url, body, headers, timeout = patch_session.calls[0]
    assert url.endswith("places:searchText")
    assert body == {"textQuery": "plumber in Fair Lawn, NJ", "maxResultCount": 5}
    assert headers["X-Goog-Api-Key"] == "key"
    assert timeout == 10


def test_search_text_requests_only_consumed_fields(patch_session):
    google_places.search_text("plumber", "key")
    headers = patch_session.calls[0][2]
    fields = set(headers["X-Goog-FieldMask"].split(","))
    assert fields == {
        "places.id",
        "places.displayName",
        "places.formattedAddress",
        "places.location",
        "places.rating",
        "places.userRatingCount",
        "places.priceLevel",
        "places.regularOpeningHours",
        "places.websiteUri",
        "places.nationalPhoneNumber",
        "places.googleMapsUri",
        "places.primaryType",
    }


def test_search_text_clamps_result_count(patch_session):
    google_places.search_text("plumber", "key", max_results=100)
    assert patch_session.calls[0][1]["maxResultCount"] == google_places.MAX_RESULT_COUNT


def test_search_text_no_results(patch_session):
    patch_session.response = DummyResponse(payload={})
    assert google_places.search_text("plumber", "key") == []


def test_search_text_error_payload(patch_session):
    patch_session.response = DummyResponse(
        status_code=403,
        payload={"error": {"status": "PERMISSION_DENIED", "message": "API key invalid"}},
    )
    with pytest.raises(google_places.GooglePlacesError):
        google_places.search_text("plumber", "key")


def test_client_builds_scoped_query_and_parses(patch_session):
    patch_session.response = DummyResponse(
        payload={
            "places": [
                {"id": "p1", "displayName": {"text": "Acme Plumbing"}, "primaryType": "plumber"},
                {"displayName": {"text": "No id"}},
            ]
        }
    )
    client = google_places.PlaceSearchClient("key", FAIR_LAWN)

    candidates = client.search("plumber", 3)

    assert patch_session.calls[0][1]["textQuery"] == "plumber in Fair Lawn, NJ"
    assert [c.place_id for c in candidates] == ["p1"]
    assert candidates[0].name == "Acme Plumbing"
    assert candidates[0].primary_type == "plumber"


def test_client_returns_empty_on_api_error(patch_session):
    patch_session.response = DummyResponse(status_code=500, payload={"error": {"message": "boom"}})
    client = google_places.PlaceSearchClient("key", FAIR_LAWN)
    assert client.search("plumber") == []


def test_client_returns_empty_on_transport_error(patch_session):
    patch_session.error = requests.ConnectionError("offline")
    client = google_places.PlaceSearchClient("key", FAIR_LAWN)
    assert client.search("plumber") == []
