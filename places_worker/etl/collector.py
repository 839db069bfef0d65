"""Paginated text search collection against the Places API."""

import enum
import logging
import time
from typing import List, Optional

from places_worker.etl.transform import to_raw_result
from places_worker.models import RawResult, SearchQuery
from places_worker.vendors import google_places

logger = logging.getLogger(__name__)

MAX_PAGES = 3
# Page tokens are rejected by the API until a short while after they are issued.
PAGE_TOKEN_DELAY_SECONDS = 2.0


class PageStep(enum.Enum):
    FETCHING = "fetching"
    CONTINUING = "continuing"
    STOPPING = "stopping"
    ABORTING = "aborting"


def next_step(
    status: Optional[str],
    used_token: bool,
    next_token: Optional[str],
    page_count: int,
    max_pages: int = MAX_PAGES,
) -> PageStep:
    """Decide what follows a fetched page.

    ``page_count`` is the number of pages already requested, including the one
    that produced ``status``.
    """
    if status == "INVALID_REQUEST" and used_token:
        return PageStep.STOPPING
    if status not in {"OK", "ZERO_RESULTS"}:
        return PageStep.ABORTING
    if status == "ZERO_RESULTS":
        return PageStep.STOPPING
    if next_token and page_count < max_pages:
        return PageStep.CONTINUING
    return PageStep.STOPPING


def collect_places(query: SearchQuery, api_key: str, max_pages: int = MAX_PAGES) -> List[RawResult]:
    """Follow continuation tokens for ``query`` and return every place seen, in upstream order.

    Raises :class:`google_places.GooglePlacesError` when the API rejects a request
    outright. Transport errors from ``requests`` propagate unchanged.
    """
    max_pages = min(max_pages, MAX_PAGES)
    collected: List[RawResult] = []
    page_token: Optional[str] = None
    page_count = 0
    step = PageStep.FETCHING

    while step in {PageStep.FETCHING, PageStep.CONTINUING}:
        used_token = page_token is not None
        if used_token:
            time.sleep(PAGE_TOKEN_DELAY_SECONDS)

        error: Optional[google_places.GooglePlacesError] = None
        logger.info("Calling Places text search (page %d) for query=%s", page_count + 1, query.text)
        try:
            payload = google_places.text_search(query=query, api_key=api_key, pagetoken=page_token)
            status = payload.get("status")
        except google_places.GooglePlacesError as exc:
            payload = {}
            status = exc.status
            error = exc
        page_count += 1

        page_token = payload.get("next_page_token") or None
        step = next_step(status, used_token, page_token, page_count, max_pages)

        if step is PageStep.ABORTING:
            logger.error("Places text search failed on page %d: status=%s, error=%s", page_count, status, error)
            raise error or google_places.GooglePlacesError(status)
        if status == "INVALID_REQUEST":
            logger.warning("Page token rejected on page %d; keeping %d results", page_count, len(collected))
            break

        results = payload.get("results", [])
        logger.info("Fetched %d results on page %d", len(results), page_count)
        for result in results:
            if not result.get("place_id"):
                logger.debug("Skipping result without place_id: %s", result)
                continue
            collected.append(to_raw_result(result))

    logger.info("Collected %d places over %d page(s)", len(collected), page_count)
    return collected
