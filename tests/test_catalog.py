"""Tests for the model catalog."""

from __future__ import annotations

from typing import Generator

import httpx
import pytest
import respx

from scrapelens.cache.store import CacheStore, open_store
from scrapelens.catalog import list_models, parse_model_names, refresh_models
from scrapelens.errors import FetchError
from scrapelens.scraper.models import RawPage

_LIBRARY_HTML = """\
<html><body>
  <a href="/library/llama3.1">llama3.1</a>
  <a href="/library/mistral">mistral</a>
  <a href="/library/llama3.1">llama3.1 again</a>
  <a href="/library/">empty</a>
  <a href="/blog/post">blog</a>
  <a href="https://github.com/ollama">github</a>
  <p>Enough visible text to not look like a single page app at all.</p>
</body></html>
"""


@pytest.fixture()
def store() -> Generator[CacheStore, None, None]:
    s = open_store(":memory:")
    yield s
    s.close()


class TestParseModelNames:
    def test_collects_library_links_in_order(self) -> None:
        assert parse_model_names(_LIBRARY_HTML) == ["llama3.1", "mistral"]

    def test_no_links(self) -> None:
        assert parse_model_names("<html><body>nothing</body></html>") == []


class TestRefreshModels:
    def test_refresh_then_list(self, store: CacheStore) -> None:
        page = RawPage(url="https://ollama.test/library", html=_LIBRARY_HTML, status_code=200)
        models = refresh_models(store, fetch=lambda url: page)

        assert models == ["llama3.1", "mistral"]
        assert list_models(store) == ["llama3.1", "mistral"]

    def test_refresh_over_http(self, store: CacheStore) -> None:
        with respx.mock:
            respx.get("https://ollama.test/library").mock(
                return_value=httpx.Response(200, text=_LIBRARY_HTML)
            )
            models = refresh_models(store, url="https://ollama.test/library")
        assert models == ["llama3.1", "mistral"]

    def test_fetch_failure_keeps_previous_list(self, store: CacheStore) -> None:
        page = RawPage(url="u", html=_LIBRARY_HTML, status_code=200)
        refresh_models(store, fetch=lambda url: page)

        def failing(url: str) -> RawPage:
            raise FetchError("down", url=url)

        with pytest.raises(FetchError):
            refresh_models(store, fetch=failing)
        assert list_models(store) == ["llama3.1", "mistral"]

    def test_list_before_refresh_is_empty(self, store: CacheStore) -> None:
        assert list_models(store) == []
