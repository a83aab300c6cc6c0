"""HTTP fetcher with optional Playwright fallback for JS-rendered pages."""

from __future__ import annotations

import re

import httpx

from scrapelens.config import settings
from scrapelens.errors import FetchError
from scrapelens.logger import get_module_logger
from scrapelens.scraper.models import RawPage

logger = get_module_logger("fetcher")

# ---------------------------------------------------------------------------
# SPA / JS-rendered page detection heuristics
# ---------------------------------------------------------------------------
_SPA_PATTERNS = [
    re.compile(r'<div[^>]+id=["\'](?:root|app|__next)["\']', re.IGNORECASE),
    re.compile(r"window\.__NEXT_DATA__", re.IGNORECASE),
    re.compile(r"window\.__NUXT__", re.IGNORECASE),
    re.compile(r"ng-version=", re.IGNORECASE),
    re.compile(r"data-reactroot", re.IGNORECASE),
]

_DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36 ScrapeLens/1.0"
    ),
    "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
}


def _is_spa(html: str) -> bool:
    """Return ``True`` if *html* looks like a JavaScript SPA that needs rendering."""
    for pattern in _SPA_PATTERNS:
        if pattern.search(html):
            return True
    # Very little visible text relative to total HTML size.  Script and style
    # bodies are removed first so their source doesn't count as text.
    no_scripts = re.sub(
        r"<(script|style)[^>]*>.*?</(script|style)>", "", html,
        flags=re.IGNORECASE | re.DOTALL,
    )
    stripped = re.sub(r"<[^>]+>", "", no_scripts).strip()
    if len(html) > 2000 and len(stripped) < 200:
        return True
    return False


def _fetch_with_playwright(url: str) -> RawPage:
    """Render *url* with a headless Chromium browser and return its HTML.

    Playwright is imported lazily so tests that don't exercise the SPA path
    don't need a browser installed.
    """
    from playwright.sync_api import Error as PlaywrightError  # noqa: PLC0415
    from playwright.sync_api import sync_playwright  # noqa: PLC0415

    try:
        with sync_playwright() as pw:
            browser = pw.chromium.launch(headless=True)
            try:
                page = browser.new_page()
                response = page.goto(
                    url,
                    timeout=int(settings.request_timeout * 1000),
                    wait_until="networkidle",
                )
                html = page.content()
                status_code = response.status if response is not None else 200
            finally:
                browser.close()
    except PlaywrightError as exc:
        raise FetchError(f"Rendering {url} failed: {exc}", url=url) from exc

    if status_code >= 400:
        raise FetchError(
            f"Rendering {url} returned HTTP {status_code}",
            url=url,
            status_code=status_code,
        )
    return RawPage(url=url, html=html, status_code=status_code)


def fetch_url(url: str) -> RawPage:
    """Fetch *url* and return a :class:`RawPage`.

    Uses ``httpx`` for standard pages.  Falls back to a headless Playwright
    browser when a JavaScript SPA fingerprint is detected in the initial
    response and ``settings.render_js`` is enabled.

    Raises:
        FetchError: If the URL is unreachable, times out, or the server
            returns a 4xx/5xx status code.
    """
    logger.debug(f"GET {url}")
    try:
        with httpx.Client(
            headers=_DEFAULT_HEADERS,
            timeout=settings.request_timeout,
            follow_redirects=True,
        ) as client:
            response = client.get(url)
            response.raise_for_status()
            html = response.text
            status_code = response.status_code
    except httpx.TimeoutException as exc:
        raise FetchError(f"Timed out fetching {url}", url=url) from exc
    except httpx.HTTPStatusError as exc:
        code = exc.response.status_code
        raise FetchError(
            f"Fetching {url} returned HTTP {code}", url=url, status_code=code
        ) from exc
    except httpx.HTTPError as exc:
        raise FetchError(f"Could not fetch {url}: {exc}", url=url) from exc

    raw = RawPage(url=url, html=html, status_code=status_code)

    if settings.render_js and _is_spa(raw.html):
        logger.info(f"SPA fingerprint detected, rendering {url} with Playwright")
        raw = _fetch_with_playwright(url)

    return raw
