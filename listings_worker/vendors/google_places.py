"""Client utilities for the Google Places API (New) text search."""

import logging
from typing import Any, Dict, List

import requests

from listings_worker.models import Municipality, PlaceCandidate

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_SEARCH_TEXT_URL = "https://places.googleapis.com/v1/places:searchText"

# Only the fields the pipeline reads; the field mask drives Places billing tier.
FIELD_MASK = ",".join(
    [
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
    ]
)
MAX_RESULT_COUNT = 20


class GooglePlacesError(RuntimeError):
    """Raised when the Places API returns a non-successful response."""


def search_text(text_query: str, api_key: str, max_results: int = MAX_RESULT_COUNT) -> List[Dict[str, Any]]:
    body = {
        "textQuery": text_query,
        "maxResultCount": max(1, min(int(max_results), MAX_RESULT_COUNT)),
    }
    headers = {
        "Content-Type": "application/json",
        "X-Goog-Api-Key": api_key,
        "X-Goog-FieldMask": FIELD_MASK,
    }
    response = _SESSION.post(_SEARCH_TEXT_URL, json=body, headers=headers, timeout=10)
    payload = response.json() if response.content else {}
    if not isinstance(payload, dict):
        raise GooglePlacesError("unexpected response payload")
    error = payload.get("error")
    if response.status_code >= 400 or error:
        error = error if isinstance(error, dict) else {"message": error}
        logger.error(
            "search_text failed: status=%s, error_message=%s",
            error.get("status") or response.status_code,
            error.get("message"),
        )
        raise GooglePlacesError(error.get("message") or f"HTTP {response.status_code}")
    places = payload.get("places") or []
    if not isinstance(places, list):
        raise GooglePlacesError("places field is not a list")
    return places


class PlaceSearchClient:
    """Municipality-scoped text search that never raises to its caller."""

    def __init__(self, api_key: str, municipality: Municipality) -> None:
        self.api_key = api_key
        self.municipality = municipality

    def build_query(self, search_term: str) -> str:
        return f"{search_term.strip()} in {self.municipality.name}, {self.municipality.state}"

    def search(self, search_term: str, max_results: int = MAX_RESULT_COUNT) -> List[PlaceCandidate]:
        query = self.build_query(search_term)
        try:
            places = search_text(query, self.api_key, max_results=max_results)
        except (requests.RequestException, GooglePlacesError, ValueError) as exc:
            logger.error("Places search failed for query=%s: %s", query, exc)
            return []

        candidates: List[PlaceCandidate] = []
        for place in places:
            if not isinstance(place, dict) or not place.get("id"):
                logger.debug("Skipping place without id: %s", place)
                continue
            candidates.append(PlaceCandidate.from_api(place))

        logger.info("Found %d businesses for %r", len(candidates), search_term)
        return candidates
