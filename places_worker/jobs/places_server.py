"""HTTP entrypoint exposing the Places API and scraper searches."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional, Tuple

import requests
from flask import Flask, Response, jsonify, request

from places_worker.core.config import ConfigError, get_settings
from places_worker.core.maps_scraper import ScrapeError
from places_worker.etl.export import PLACES_CSV_COLUMNS, SCRAPE_CSV_COLUMNS, to_csv, with_photo_urls
from places_worker.etl.pipeline import PlacesPipeline, ScrapePipeline, SearchOutcome
from places_worker.models import DEFAULT_LOCATION, DEFAULT_PLACE_TYPE, DEFAULT_RADIUS_METERS, SearchQuery
from places_worker.vendors.google_places import GooglePlacesError

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)

# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "places_api_configured": bool(settings.google_api_key),
                "max_pages": settings.max_pages,
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.get("/api/places")
def search_places() -> Any:
    """
    Search through the Places API and enrich every hit with Place Details.
    Required query param: query
    Optional: type, radius (meters), location ("lat,lng"), format (json|csv)
    """
    query_text = (request.args.get("query") or "").strip()
    if not query_text:
        return jsonify({"error": 'Parameter "query" is required.'}), 400

    try:
        radius = int(request.args.get("radius") or DEFAULT_RADIUS_METERS)
    except ValueError:
        return jsonify({"error": "radius must be numeric"}), 400

    query = SearchQuery(
        text=query_text,
        place_type=request.args.get("type") or DEFAULT_PLACE_TYPE,
        radius=radius,
        location=request.args.get("location") or DEFAULT_LOCATION,
    )

    settings = get_settings()
    try:
        pipeline = PlacesPipeline(settings)
    except ConfigError as exc:
        logger.error("Places search requested without an API key: %s", exc)
        return _failure("Server API key is not configured.", str(exc))

    try:
        outcome = pipeline.run(query)
    except GooglePlacesError as exc:
        return _failure(
            exc.message or "Failed to fetch data from the Places API (Text Search).",
            str(exc),
            status=exc.status,
        )
    except requests.RequestException as exc:
        logger.error("Server error while calling the Places API: %s", exc)
        return _failure("Server error while calling the Places API.", str(exc))
    except Exception as exc:  # noqa: BLE001
        logger.exception("Places search failed for query=%s: %s", query_text, exc)
        return _failure("Server error.", str(exc) or "Unknown error")

    if _wants_csv():
        rows = with_photo_urls((item.to_dict() for item in outcome.data), settings.google_api_key)
        return _csv_response(to_csv(rows, PLACES_CSV_COLUMNS), "places.csv")
    return jsonify(outcome.to_payload()), 200


@app.get("/api/scrape")
def scrape_places() -> Any:
    """
    Scrape the Maps results feed with a headless browser.
    Required query param: query
    Optional: format (json|csv)
    """
    query_text = (request.args.get("query") or "").strip()
    if not query_text:
        return jsonify({"error": 'Parameter "query" is required.'}), 400

    try:
        outcome: SearchOutcome = ScrapePipeline(get_settings()).run(query_text)
    except ScrapeError as exc:
        logger.error("Scraping failed for query=%s: %s", query_text, exc)
        return _failure("Scraping failed.", str(exc))
    except Exception as exc:  # noqa: BLE001
        logger.exception("Scraping error for query=%s: %s", query_text, exc)
        return _failure("Scraping failed.", str(exc) or "Unknown error")

    if _wants_csv():
        rows = (item.to_dict() for item in outcome.data)
        return _csv_response(to_csv(rows, SCRAPE_CSV_COLUMNS), "scrape.csv")
    return jsonify(outcome.to_payload()), 200


# ---------- Internals ----------


def _wants_csv() -> bool:
    return (request.args.get("format") or "json").lower() == "csv"


def _csv_response(body: str, filename: str) -> Response:
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _failure(error: str, details: str, status: Optional[str] = None) -> Tuple[Any, int]:
    payload: Dict[str, Any] = {"success": False, "error": error, "details": details}
    if status:
        payload["status"] = status
    return jsonify(payload), 500


def main() -> None:
    env_port = os.getenv("PORT")
    port = int(env_port or get_settings().worker_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port, threaded=True)


if __name__ == "__main__":
    main()
