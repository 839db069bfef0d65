"""Concurrent Place Details enrichment of text search results."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence

from places_worker.etl.transform import fallback_result, to_enriched_result
from places_worker.models import EnrichedResult, RawResult
from places_worker.vendors import google_places

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class EnrichmentOutcome:
    result: EnrichedResult
    fell_back: bool = False
    error: Optional[str] = None


def enrich_one(raw: RawResult, api_key: str) -> EnrichmentOutcome:
    """Look up details for one place. Never raises; failures fall back to ``raw``."""
    try:
        detail = google_places.place_details(place_id=raw.place_id, api_key=api_key)
        result = to_enriched_result(detail, raw)
    except google_places.GooglePlacesError as exc:
        logger.warning("Place Details error for %s: status=%s, error_message=%s", raw.place_id, exc.status, exc.message)
        return EnrichmentOutcome(result=fallback_result(raw), fell_back=True, error=str(exc))
    except Exception as exc:  # noqa: BLE001
        logger.error("Error fetching Place Details for %s: %s", raw.place_id, exc)
        return EnrichmentOutcome(result=fallback_result(raw), fell_back=True, error=str(exc))

    return EnrichmentOutcome(result=result)


def enrich_places(raw_results: Sequence[RawResult], api_key: str) -> List[EnrichedResult]:
    """Fetch details for every place concurrently and wait for all of them.

    The output has one record per input, in input order.
    """
    if not raw_results:
        return []

    with ThreadPoolExecutor(max_workers=len(raw_results)) as executor:
        outcomes = list(executor.map(lambda raw: enrich_one(raw, api_key), raw_results))

    fell_back = sum(1 for outcome in outcomes if outcome.fell_back)
    if fell_back:
        logger.warning("Details unavailable for %d of %d places", fell_back, len(outcomes))
    logger.info("Enriched %d places", len(outcomes))
    return [outcome.result for outcome in outcomes]
