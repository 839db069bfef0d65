"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """Raised when mandatory configuration is missing."""


@dataclass(frozen=True)
class Settings:
    google_api_key: str
    worker_port: int = 8080
    max_pages: int = 3
    scraper_headless: bool = True
    scraper_max_scrolls: int = 0


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_api_key = os.getenv("GOOGLE_MAPS_API_KEY") or os.getenv("NEXT_PUBLIC_GOOGLE_MAPS_API_KEY", "")
    worker_port = int(os.getenv("WORKER_PORT", "8080"))
    max_pages = int(os.getenv("WORKER_MAX_PAGES", "3"))
    scraper_headless = os.getenv("SCRAPER_HEADLESS", "true").lower() in {"1", "true", "yes"}
    scraper_max_scrolls = int(os.getenv("SCRAPER_MAX_SCROLLS", "0"))

    if not google_api_key:
        logger.warning("GOOGLE_MAPS_API_KEY is not configured; Places API searches will fail.")

    return Settings(
        google_api_key=google_api_key,
        worker_port=worker_port,
        max_pages=max_pages,
        scraper_headless=scraper_headless,
        scraper_max_scrolls=scraper_max_scrolls,
    )


def require_api_key(settings: Settings) -> str:
    if not settings.google_api_key:
        raise ConfigError("GOOGLE_MAPS_API_KEY is required for Places API searches")
    return settings.google_api_key
