"""
Page download for the import pipeline.

Two backends:
- requests (default): plain HTTP GET, redirects followed by hand so every hop
  goes through the URL guard.
- browser: headless Chromium via Playwright for vendor pages that render
  their product details with JavaScript. The route handler fetches each
  request itself with redirects off and re-validates every hop.
"""
from __future__ import annotations

import logging
import os
from urllib.parse import urljoin, urlsplit

import requests
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from core.scraper.errors import FetchError, UnsafeURLError
from core.scraper.url_guard import is_private_host, validate_url_for_ssrf

log = logging.getLogger("scraper")

FETCH_TIMEOUT = 30  # seconds
MAX_REDIRECTS = 5
HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/118.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
}


def scraper_backend() -> str:
    backend = (os.getenv("SCRAPER_BACKEND") or "requests").strip().lower()
    return "browser" if backend == "browser" else "requests"


def _headless() -> bool:
    return os.getenv("PLAYWRIGHT_HEADLESS", "true").lower() == "true"


def fetch_static_html(url: str, session: requests.Session | None = None) -> str:
    """GET `url` and return the body text. Each redirect target is re-validated."""
    http = session or requests.Session()
    current = url
    try:
        for _ in range(MAX_REDIRECTS + 1):
            resp = http.get(current, headers=HEADERS, timeout=FETCH_TIMEOUT, allow_redirects=False)
            if resp.is_redirect:
                target = urljoin(current, resp.headers.get("Location", ""))
                ok, error = validate_url_for_ssrf(target)
                if not ok:
                    log.warning("Blocked redirect from %s to %s: %s", current, target, error)
                    raise UnsafeURLError(error)
                current = target
                continue
            if resp.status_code >= 400:
                raise FetchError(f"HTTP {resp.status_code} for {current}")
            return resp.text
    except requests.RequestException as exc:
        raise FetchError(str(exc)) from exc
    finally:
        if session is None:
            http.close()
    raise FetchError(f"Too many redirects for {url}")


async def fetch_rendered_html(url: str) -> str:
    """
    Render `url` in headless Chromium and return the resulting DOM as HTML.

    Every request the page makes is fetched by the route handler with
    redirects disabled, so each hop goes through the URL guard before the
    browser sees it. Service workers are blocked since they bypass routing.
    """
    blocked_navigation = []

    async def _guard(route):
        request = route.request
        current = request.url
        if is_private_host(urlsplit(current).hostname or ""):
            log.warning("Blocked browser request to private host: %s", current)
            if request.is_navigation_request():
                blocked_navigation.append("Cannot scrape private/local URLs")
            await route.abort("blockedbyclient")
            return

        for _ in range(MAX_REDIRECTS + 1):
            try:
                resp = await route.fetch(url=current, max_redirects=0, timeout=FETCH_TIMEOUT * 1000)
            except PlaywrightError as exc:
                log.warning("Browser request failed - %s: %s", current, exc)
                await route.abort("failed")
                return
            location = resp.headers.get("location")
            if 300 <= resp.status < 400 and location:
                target = urljoin(current, location)
                ok, error = validate_url_for_ssrf(target)
                if not ok:
                    log.warning("Blocked redirect from %s to %s: %s", current, target, error)
                    if request.is_navigation_request():
                        blocked_navigation.append(error)
                    await route.abort("blockedbyclient")
                    return
                current = target
                continue
            await route.fulfill(response=resp)
            return

        log.warning("Too many redirects for browser request: %s", request.url)
        await route.abort("failed")

    try:
        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=_headless())
            try:
                context = await browser.new_context(
                    user_agent=HEADERS["User-Agent"],
                    extra_http_headers={"Accept-Language": HEADERS["Accept-Language"]},
                    service_workers="block",
                )
                page = await context.new_page()
                await page.route("**/*", _guard)

                response = await page.goto(url, wait_until="domcontentloaded", timeout=FETCH_TIMEOUT * 1000)
                final_url = response.url if response else page.url
                if is_private_host(urlsplit(final_url).hostname or ""):
                    raise UnsafeURLError("Cannot scrape private/local URLs")
                status = response.status if response else None
                log.debug("Browser fetch %s -> %s", url, status)
                if status is not None and status >= 400:
                    raise FetchError(f"HTTP {status} for {url}")

                # Give client-side rendering a moment to fill in product details
                await page.wait_for_timeout(2000)
                return await page.content()
            finally:
                await browser.close()
    except PlaywrightError as exc:
        if blocked_navigation:
            raise UnsafeURLError(blocked_navigation[0]) from exc
        raise FetchError(str(exc)) from exc


__all__ = [
    "FETCH_TIMEOUT",
    "HEADERS",
    "MAX_REDIRECTS",
    "scraper_backend",
    "fetch_static_html",
    "fetch_rendered_html",
]
