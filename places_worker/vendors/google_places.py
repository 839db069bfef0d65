"""Client utilities for the Google Places API."""

import logging
from typing import Any, Dict, Optional

import requests

from places_worker.models import SearchQuery

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://maps.googleapis.com/maps/api/place"

DETAIL_FIELDS = (
    "name,formatted_address,rating,user_ratings_total,types,geometry,photos,formatted_phone_number,website"
)


class GooglePlacesError(RuntimeError):
    """Raised when the Places API returns a non-successful response."""

    def __init__(self, status: Optional[str], message: Optional[str] = None) -> None:
        super().__init__(message or status or "unknown Places API error")
        self.status = status
        self.message = message


def text_search(query: SearchQuery, api_key: str, pagetoken: Optional[str] = None) -> Dict[str, Any]:
    params = {
        "query": query.text,
        "type": query.place_type,
        "radius": query.radius,
        "location": query.location,
        "key": api_key,
    }
    if pagetoken:
        params["pagetoken"] = pagetoken
    response = _SESSION.get(f"{_BASE_URL}/textsearch/json", params=params, timeout=10)
    response.raise_for_status()
    payload = response.json()
    status = payload.get("status")
    if status not in {"OK", "ZERO_RESULTS"}:
        logger.debug("text_search rejected: status=%s, error_message=%s", status, payload.get("error_message"))
        raise GooglePlacesError(status, payload.get("error_message"))
    return payload


def place_details(place_id: str, api_key: str) -> Dict[str, Any]:
    params = {"place_id": place_id, "key": api_key, "fields": DETAIL_FIELDS}
    response = _SESSION.get(f"{_BASE_URL}/details/json", params=params, timeout=10)
    response.raise_for_status()
    payload = response.json()
    status = payload.get("status")
    if status != "OK":
        raise GooglePlacesError(status, payload.get("error_message"))
    result = payload.get("result")
    if not result:
        raise GooglePlacesError(status, f"Place Details returned no result for {place_id}")
    return result


def photo_url(photo_reference: Optional[str], api_key: str, max_width: int = 400) -> Optional[str]:
    """Build a Place Photo URL for a photo reference, or None when there is no photo."""
    if not photo_reference:
        return None
    request = requests.Request(
        "GET",
        f"{_BASE_URL}/photo",
        params={"maxwidth": max_width, "photo_reference": photo_reference, "key": api_key},
    )
    return request.prepare().url
