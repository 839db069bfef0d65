"""CLI job to search places and export them as CSV."""

import argparse
import logging
import sys
from dataclasses import replace
from typing import Optional, Sequence

from places_worker.core.config import ConfigError, get_settings
from places_worker.etl.export import PLACES_CSV_COLUMNS, SCRAPE_CSV_COLUMNS, to_csv, with_photo_urls
from places_worker.etl.pipeline import PlacesPipeline, ScrapePipeline
from places_worker.models import DEFAULT_LOCATION, DEFAULT_PLACE_TYPE, DEFAULT_RADIUS_METERS, SearchQuery

logger = logging.getLogger(__name__)


def run_query_job(
    *,
    query: str,
    place_type: str = DEFAULT_PLACE_TYPE,
    radius: int = DEFAULT_RADIUS_METERS,
    location: str = DEFAULT_LOCATION,
    max_pages: Optional[int] = None,
    scrape: bool = False,
    output: Optional[str] = None,
) -> int:
    """Run one search and write its CSV export. Returns the number of rows written."""
    settings = get_settings()
    if max_pages is not None:
        settings = replace(settings, max_pages=max_pages)

    if scrape:
        outcome = ScrapePipeline(settings).run(query)
        body = to_csv((item.to_dict() for item in outcome.data), SCRAPE_CSV_COLUMNS)
    else:
        pipeline = PlacesPipeline(settings)
        outcome = pipeline.run(SearchQuery(text=query, place_type=place_type, radius=radius, location=location))
        rows = with_photo_urls((item.to_dict() for item in outcome.data), pipeline.api_key)
        body = to_csv(rows, PLACES_CSV_COLUMNS)

    if outcome.message:
        logger.info(outcome.message)

    if output:
        with open(output, "w", encoding="utf-8", newline="") as fh:
            fh.write(body)
        logger.info("Wrote %d rows to %s", len(outcome.data), output)
    else:
        sys.stdout.write(body)
    return len(outcome.data)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search places and export them as CSV")
    parser.add_argument("--query", required=True, help="Free-text search, e.g. 'coffee shop jakarta'")
    parser.add_argument("--type", dest="place_type", default=DEFAULT_PLACE_TYPE, help="Places API type hint")
    parser.add_argument("--radius", type=int, default=DEFAULT_RADIUS_METERS, help="Search radius in meters")
    parser.add_argument("--location", default=DEFAULT_LOCATION, help="Search center as 'lat,lng'")
    parser.add_argument(
        "--max-pages",
        dest="max_pages",
        type=int,
        default=get_settings().max_pages,
        help="Maximum number of result pages to request",
    )
    parser.add_argument("--scrape", action="store_true", help="Scrape Google Maps instead of calling the Places API")
    parser.add_argument("--output", help="CSV file to write (stdout when omitted)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)

    try:
        run_query_job(
            query=args.query,
            place_type=args.place_type,
            radius=args.radius,
            location=args.location,
            max_pages=args.max_pages,
            scrape=args.scrape,
            output=args.output,
        )
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc


if __name__ == "__main__":
    main()
