"""
Import pipeline: validate URL -> fetch page -> extract tea attributes.
"""
from __future__ import annotations

import logging
import time
from typing import Dict

from starlette.concurrency import run_in_threadpool

from core.scraper.errors import ExtractionError, FetchError, ScrapeError, UnsafeURLError
from core.scraper.extract import caffeine_level_from_text, parse_tea_page
from core.scraper.fetch import fetch_rendered_html, fetch_static_html, scraper_backend
from core.scraper.url_guard import is_private_host, validate_url_for_ssrf

log = logging.getLogger("scraper")


async def fetch_page(url: str) -> str:
    if scraper_backend() == "browser":
        return await fetch_rendered_html(url)
    return await run_in_threadpool(fetch_static_html, url)


async def import_tea_from_url(url: str) -> Dict:
    """
    Scrape a vendor product page into an unsaved tea payload.
    Raises UnsafeURLError, FetchError or ExtractionError.
    """
    started = time.monotonic()

    ok, error = validate_url_for_ssrf(url)
    if not ok:
        log.warning("Scraping failed - %s: SSRF validation failed - %s", url, error)
        raise UnsafeURLError(error)

    url = url.strip()
    html = await fetch_page(url)
    tea = parse_tea_page(html, url)

    elapsed_ms = int((time.monotonic() - started) * 1000)
    log.info("Successfully scraped tea data from %s: %s (%dms)", url, tea["name"], elapsed_ms)
    return tea


__all__ = [
    "ScrapeError",
    "UnsafeURLError",
    "FetchError",
    "ExtractionError",
    "caffeine_level_from_text",
    "parse_tea_page",
    "is_private_host",
    "validate_url_for_ssrf",
    "fetch_page",
    "import_tea_from_url",
]
