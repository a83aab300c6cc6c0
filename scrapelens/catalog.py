"""Catalog of extraction models offered to users.

The list is scraped from the Ollama library page and kept in the ``catalog``
namespace of the cache.  The pipeline never reads it; it only backs the model
picker (``GET /models``, ``scrapelens models list``).
"""

from __future__ import annotations

from typing import Callable, Optional

from bs4 import BeautifulSoup

from scrapelens.cache.store import CATALOG, CacheStore
from scrapelens.config import settings
from scrapelens.logger import get_module_logger
from scrapelens.scraper.fetcher import fetch_url
from scrapelens.scraper.models import RawPage

logger = get_module_logger("catalog")

MODELS_KEY = "models"
_LIBRARY_PREFIX = "/library/"


def parse_model_names(html: str) -> list[str]:
    """Return model names linked as ``/library/<name>`` in *html*, in page order."""
    soup = BeautifulSoup(html, "html.parser")
    seen: set[str] = set()
    names: list[str] = []
    for link in soup.select(f'a[href^="{_LIBRARY_PREFIX}"]'):
        name = link["href"][len(_LIBRARY_PREFIX):].strip("/")
        if name and name not in seen:
            seen.add(name)
            names.append(name)
    return names


def refresh_models(
    store: CacheStore,
    fetch: Optional[Callable[[str], RawPage]] = None,
    url: Optional[str] = None,
) -> list[str]:
    """Scrape the model library page and cache the model names.

    Raises:
        FetchError: If the catalog page cannot be fetched.
        CacheError: If the list cannot be stored.
    """
    fetch = fetch or fetch_url
    url = url or settings.model_catalog_url
    models = parse_model_names(fetch(url).html)
    store.put(CATALOG, MODELS_KEY, models)
    logger.info(f"Stored {len(models)} models from {url}")
    return models


def list_models(store: CacheStore) -> list[str]:
    """Return the cached model names, or ``[]`` if the catalog was never refreshed."""
    return store.get(CATALOG, MODELS_KEY) or []
