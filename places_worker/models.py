"""Request-scoped data models shared by the Places API and scraper pipelines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

UNAVAILABLE = "N/A"

DEFAULT_PLACE_TYPE = "point_of_interest"
DEFAULT_RADIUS_METERS = 50000
DEFAULT_LOCATION = "-6.2088,106.8456"  # Jakarta


@dataclass(frozen=True, slots=True)
class SearchQuery:
    """Free-text search plus the category hint and geographic bias sent upstream."""

    text: str
    place_type: str = DEFAULT_PLACE_TYPE
    radius: int = DEFAULT_RADIUS_METERS
    location: str = DEFAULT_LOCATION

    def __post_init__(self) -> None:
        if not self.text or not self.text.strip():
            raise ValueError("Search query must not be empty")


@dataclass(slots=True)
class RawResult:
    """A place as returned by the text search endpoint."""

    place_id: str
    name: str
    address: str
    rating: Optional[float] = None
    review_count: Optional[int] = None
    types: List[str] = field(default_factory=list)
    lat: Optional[float] = None
    lng: Optional[float] = None
    photo_reference: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass(slots=True)
class EnrichedResult:
    """Terminal output of the Places API pipeline, one per place."""

    place_id: str
    name: str
    address: str
    rating: Union[float, str] = UNAVAILABLE
    user_ratings_total: int = 0
    types: List[str] = field(default_factory=list)
    lat: Optional[float] = None
    lng: Optional[float] = None
    photo_reference: Optional[str] = None
    phone_number: str = UNAVAILABLE
    website: str = UNAVAILABLE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "place_id": self.place_id,
            "name": self.name,
            "address": self.address,
            "rating": self.rating,
            "user_ratings_total": self.user_ratings_total,
            "types": list(self.types),
            "lat": self.lat,
            "lng": self.lng,
            "photo_reference": self.photo_reference,
            "phoneNumber": self.phone_number,
            "website": self.website,
        }


@dataclass(slots=True)
class ScrapedResult:
    """What can be read from a rendered Maps results card."""

    name: str
    address: str = UNAVAILABLE
    rating: Union[float, str] = UNAVAILABLE
    review_count: str = UNAVAILABLE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "address": self.address,
            "rating": self.rating,
            "reviewCount": self.review_count,
        }
