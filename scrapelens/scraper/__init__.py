"""Scraper package — web fetch & content normalisation."""

from scrapelens.scraper.extractor import fetch_content, normalize_page
from scrapelens.scraper.fetcher import fetch_url
from scrapelens.scraper.models import RawContent, RawPage

__all__ = ["fetch_url", "fetch_content", "normalize_page", "RawPage", "RawContent"]
