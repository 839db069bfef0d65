"""Utilities for turning Places API payloads and scraped cards into result models."""

import logging
import re
from typing import Any, Dict, Optional

from places_worker.models import UNAVAILABLE, EnrichedResult, RawResult, ScrapedResult

logger = logging.getLogger(__name__)

_LEADING_DECIMAL = re.compile(r"^\s*(\d+(?:[.,]\d+)?)")


def _first_photo_reference(result: Dict[str, Any]) -> Optional[str]:
    photos = result.get("photos") or []
    if photos:
        return photos[0].get("photo_reference")
    return None


def _or_unavailable(value: Any) -> Any:
    if value is None or value == "":
        return UNAVAILABLE
    return value


def to_raw_result(result: Dict[str, Any]) -> RawResult:
    location = result.get("geometry", {}).get("location", {})
    return RawResult(
        place_id=result.get("place_id"),
        name=result.get("name"),
        address=result.get("formatted_address"),
        rating=result.get("rating"),
        review_count=result.get("user_ratings_total"),
        types=list(result.get("types") or []),
        lat=location.get("lat"),
        lng=location.get("lng"),
        photo_reference=_first_photo_reference(result),
        raw=result,
    )


def to_enriched_result(detail: Dict[str, Any], raw: RawResult) -> EnrichedResult:
    """Build the output record from a details payload.

    The details payload wins for every overlapping attribute. The place id is
    taken from ``raw`` when the details field mask does not echo it back.
    """
    location = detail.get("geometry", {}).get("location", {})
    rating = detail.get("rating")
    return EnrichedResult(
        place_id=detail.get("place_id") or raw.place_id,
        name=detail.get("name"),
        address=detail.get("formatted_address"),
        rating=UNAVAILABLE if rating is None else rating,
        user_ratings_total=detail.get("user_ratings_total") or 0,
        types=list(detail.get("types") or []),
        lat=location.get("lat"),
        lng=location.get("lng"),
        photo_reference=_first_photo_reference(detail),
        phone_number=_or_unavailable(detail.get("formatted_phone_number")),
        website=_or_unavailable(detail.get("website")),
    )


def fallback_result(raw: RawResult) -> EnrichedResult:
    """Output record for a place whose details could not be fetched."""
    return EnrichedResult(
        place_id=raw.place_id,
        name=raw.name,
        address=raw.address,
        rating=UNAVAILABLE if raw.rating is None else raw.rating,
        user_ratings_total=raw.review_count or 0,
        types=list(raw.types),
        lat=raw.lat,
        lng=raw.lng,
        photo_reference=raw.photo_reference,
        phone_number=UNAVAILABLE,
        website=UNAVAILABLE,
    )


def parse_rating(label: Optional[str]) -> Any:
    """Read the leading number of an aria-label such as ``"4.5 stars "``."""
    if not label:
        return UNAVAILABLE
    match = _LEADING_DECIMAL.match(label)
    if not match:
        logger.debug("Unable to parse rating from label %r", label)
        return UNAVAILABLE
    return float(match.group(1).replace(",", "."))


def to_scraped_result(card: Dict[str, Optional[str]]) -> Optional[ScrapedResult]:
    """Convert the raw text read from one results card; None when it has no name."""
    name = (card.get("name") or "").strip()
    if not name:
        return None

    address = (card.get("address") or "").strip()
    review_count = re.sub(r"[()]", "", card.get("review_count") or "").strip()
    return ScrapedResult(
        name=name,
        address=address or UNAVAILABLE,
        rating=parse_rating((card.get("rating_label") or "").strip()),
        review_count=review_count or UNAVAILABLE,
    )
