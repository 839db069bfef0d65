"""Query-in, results-out pipelines behind the HTTP and CLI entrypoints."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from places_worker.core.config import Settings, require_api_key
from places_worker.core.maps_scraper import MapsScraper
from places_worker.etl.collector import collect_places
from places_worker.etl.enrichment import enrich_places
from places_worker.models import SearchQuery

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No results found."
NO_SCRAPE_RESULTS_MESSAGE = "No results found or the page selectors have changed."


@dataclass
class SearchOutcome:
    data: List[Any] = field(default_factory=list)
    message: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": True, "data": [item.to_dict() for item in self.data]}
        if self.message:
            payload["message"] = self.message
        return payload


class PlacesPipeline:
    """Text search pagination followed by a Place Details fan-out."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.api_key = require_api_key(settings)

    def run(self, query: SearchQuery) -> SearchOutcome:
        raw_results = collect_places(query, self.api_key, max_pages=self.settings.max_pages)
        if not raw_results:
            logger.info("No places found for query=%s", query.text)
            return SearchOutcome(data=[], message=NO_RESULTS_MESSAGE)
        return SearchOutcome(data=enrich_places(raw_results, self.api_key))


class ScrapePipeline:
    """Maps results scraping through a headless browser."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def run(self, query: str) -> SearchOutcome:
        with MapsScraper(self.settings) as scraper:
            results = scraper.scrape(query)
        if not results:
            return SearchOutcome(data=[], message=NO_SCRAPE_RESULTS_MESSAGE)
        return SearchOutcome(data=results)
