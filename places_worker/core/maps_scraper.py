"""Headless-browser scraping of the Google Maps search results feed.

The selectors below match the markup Google Maps serves today. They are not a
stable interface and break whenever that markup changes; when they stop
matching, searches come back empty rather than failing.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from playwright.sync_api import Error as PlaywrightError, sync_playwright

from places_worker.core.config import Settings, get_settings
from places_worker.etl.transform import to_scraped_result
from places_worker.models import ScrapedResult

logger = logging.getLogger(__name__)

SEARCH_URL = "https://www.google.com/maps/search/{query}"
NAVIGATION_TIMEOUT_MS = 60000
FEED_WAIT_TIMEOUT_MS = 15000
SCROLL_PAUSE_MS = 2000
VIEWPORT = {"width": 1280, "height": 800}
BROWSER_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

RESULT_ITEM_SELECTOR = ".hfpxzc"
FEED_SELECTOR = '[role="feed"]'
CARD_SELECTORS = {
    "item": RESULT_ITEM_SELECTOR,
    "name": ".fontHeadlineSmall",
    "address": ".W4Efsd:nth-child(2) > span:nth-child(2)",
    "rating": ".g88MCb",
    "reviews": ".UY7F9b",
}

_FEED_HEIGHT_JS = """
(selector) => {
  const feed = document.querySelector(selector);
  return feed ? feed.scrollHeight : null;
}
"""

_SCROLL_FEED_JS = """
(selector) => {
  const feed = document.querySelector(selector);
  if (feed) {
    feed.scrollBy(0, feed.scrollHeight);
  }
}
"""

_EXTRACT_CARDS_JS = """
(sel) => Array.from(document.querySelectorAll(sel.item)).map((el) => {
  const text = (selector) => {
    const node = el.querySelector(selector);
    return node ? node.textContent : null;
  };
  const ratingNode = el.querySelector(sel.rating);
  return {
    name: text(sel.name),
    address: text(sel.address),
    rating_label: ratingNode ? ratingNode.getAttribute("aria-label") : null,
    review_count: text(sel.reviews),
  };
})
"""


class ScrapeError(RuntimeError):
    """Raised when the search page cannot be loaded at all."""


class ScrapeState(enum.Enum):
    NAVIGATING = "navigating"
    WAITING_FOR_FEED = "waiting_for_feed"
    SCROLLING = "scrolling"
    EXTRACTING = "extracting"
    DONE = "done"
    FAILED = "failed"


def build_search_url(query: str) -> str:
    return SEARCH_URL.format(query=quote(query.strip(), safe=""))


def scroll_feed(page: Any, max_scrolls: int = 0) -> int:
    """Scroll the results feed until its height stops growing.

    Returns the number of scrolls performed. ``max_scrolls`` of 0 means no cap.
    """
    height = page.evaluate(_FEED_HEIGHT_JS, FEED_SELECTOR)
    if height is None:
        logger.debug("No results feed container found; skipping scroll")
        return 0

    scrolls = 0
    while True:
        page.evaluate(_SCROLL_FEED_JS, FEED_SELECTOR)
        page.wait_for_timeout(SCROLL_PAUSE_MS)
        scrolls += 1
        new_height = page.evaluate(_FEED_HEIGHT_JS, FEED_SELECTOR)
        if new_height == height:
            break
        height = new_height
        if max_scrolls and scrolls >= max_scrolls:
            logger.warning("Stopped scrolling after %d scrolls; feed was still growing", scrolls)
            break

    logger.info("Feed settled after %d scroll(s) at height=%s", scrolls, height)
    return scrolls


def extract_cards(page: Any) -> List[ScrapedResult]:
    cards: List[Dict[str, Optional[str]]] = page.evaluate(_EXTRACT_CARDS_JS, CARD_SELECTORS) or []
    results = [result for result in (to_scraped_result(card) for card in cards) if result is not None]
    if len(results) != len(cards):
        logger.debug("Dropped %d cards without a name", len(cards) - len(results))
    return results


class MapsScraper:
    """Drive one headless Chromium page through a Maps search.

    A browser is launched per :meth:`scrape` call and always torn down before
    it returns or raises.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self.state: Optional[ScrapeState] = None
        self._playwright = None
        self._browser = None
        self._page = None

    def _open_page(self) -> Any:
        self._playwright = sync_playwright().start()
        self._browser = self._playwright.chromium.launch(headless=self.settings.scraper_headless, args=BROWSER_ARGS)
        self._page = self._browser.new_page(viewport=VIEWPORT)
        return self._page

    def scrape(self, query: str) -> List[ScrapedResult]:
        if not query or not query.strip():
            raise ValueError("Search query must not be empty")

        url = build_search_url(query)
        try:
            self.state = ScrapeState.NAVIGATING
            logger.info("Navigating to %s", url)
            try:
                page = self._open_page()
                page.goto(url, wait_until="load", timeout=NAVIGATION_TIMEOUT_MS)
            except PlaywrightError as exc:
                self.state = ScrapeState.FAILED
                raise ScrapeError(f"Failed to load {url}: {exc}") from exc

            self.state = ScrapeState.WAITING_FOR_FEED
            try:
                page.wait_for_selector(RESULT_ITEM_SELECTOR, timeout=FEED_WAIT_TIMEOUT_MS)
            except PlaywrightError as exc:
                logger.warning(
                    "Selector %s not found for query=%s; no results or the page layout changed: %s",
                    RESULT_ITEM_SELECTOR,
                    query,
                    exc,
                )
                self.state = ScrapeState.DONE
                return []

            self.state = ScrapeState.SCROLLING
            scroll_feed(page, self.settings.scraper_max_scrolls)

            self.state = ScrapeState.EXTRACTING
            results = extract_cards(page)
            logger.info("Scraped %d places for query=%s", len(results), query)
            self.state = ScrapeState.DONE
            return results
        finally:
            self.close()

    def close(self) -> None:
        """Release the page, browser and driver. Each step runs even when an earlier one fails."""
        page, browser, driver = self._page, self._browser, self._playwright
        self._page = self._browser = self._playwright = None
        for name, release in (
            ("page", page.close if page is not None else None),
            ("browser", browser.close if browser is not None else None),
            ("playwright", driver.stop if driver is not None else None),
        ):
            if release is None:
                continue
            try:
                release()
            except Exception as exc:  # noqa: BLE001
                logger.warning("Failed to close %s: %s", name, exc)

    def __enter__(self) -> "MapsScraper":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: D401
        self.close()
