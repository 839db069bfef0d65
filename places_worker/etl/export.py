"""CSV export of pipeline results."""

import csv
import io
from typing import Any, Dict, Iterable, Sequence

from places_worker.vendors import google_places

PLACES_CSV_COLUMNS = (
    "place_id",
    "name",
    "address",
    "rating",
    "user_ratings_total",
    "types",
    "lat",
    "lng",
    "phoneNumber",
    "website",
    "photo_url",
)
SCRAPE_CSV_COLUMNS = ("name", "address", "rating", "reviewCount")


def _cell(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    if value is None:
        return ""
    return value


def to_csv(rows: Iterable[Dict[str, Any]], columns: Sequence[str]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(columns), extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow({column: _cell(row.get(column)) for column in columns})
    return buffer.getvalue()


def with_photo_urls(rows: Iterable[Dict[str, Any]], api_key: str) -> Iterable[Dict[str, Any]]:
    """Add a ``photo_url`` built from each row's photo reference."""
    for row in rows:
        yield {**row, "photo_url": google_places.photo_url(row.get("photo_reference"), api_key)}
