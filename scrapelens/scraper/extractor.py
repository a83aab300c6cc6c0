"""Content normalisation: turns a :class:`RawPage` into :class:`RawContent`."""

from __future__ import annotations

import re

import trafilatura

from scrapelens.scraper.fetcher import fetch_url
from scrapelens.scraper.models import RawContent, RawPage

# Elements that never carry page content
_NOISE_TAGS = ["script", "style", "noscript", "svg", "iframe", "nav", "footer", "header"]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _extract_title(html: str) -> str:
    """Return the text content of the first ``<title>`` tag, or empty string."""
    match = re.search(r"<title[^>]*>([^<]+)</title>", html, re.IGNORECASE)
    if match:
        return match.group(1).strip()
    return ""


def _bs4_fallback(html: str) -> str:
    """Extract readable text using BeautifulSoup ``<main>``/``<article>`` heuristics.

    Imported lazily so the rest of the module can be imported without bs4 if
    trafilatura always succeeds.
    """
    from bs4 import BeautifulSoup  # noqa: PLC0415

    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_NOISE_TAGS):
        tag.decompose()
    container = soup.find("main") or soup.find("article") or soup.body
    if container is None:
        return soup.get_text(separator="\n", strip=True)
    return container.get_text(separator="\n", strip=True)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def normalize_page(raw: RawPage) -> RawContent:
    """Strip markup and boilerplate from *raw*, keeping the readable text.

    Tries ``trafilatura`` first.  Falls back to a BeautifulSoup heuristic when
    trafilatura returns ``None`` or an empty string (highly dynamic or
    minimal pages).
    """
    text: str | None = trafilatura.extract(
        raw.html,
        include_links=False,
        include_images=False,
        include_tables=True,
        no_fallback=False,
        url=raw.url,
    )

    if not text:
        text = _bs4_fallback(raw.html)

    return RawContent.now(url=raw.url, body=text or "", title=_extract_title(raw.html))


def fetch_content(url: str) -> RawContent:
    """Fetch *url* and return its normalised content.

    Raises:
        FetchError: Propagated from :func:`~scrapelens.scraper.fetcher.fetch_url`.
    """
    return normalize_page(fetch_url(url))
