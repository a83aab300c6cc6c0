"""Tests for the HTTP layer.

All tests use an in-memory cache store via the FastAPI TestClient.  The
fetcher and extraction client are patched so no network calls are made.
"""

from __future__ import annotations

import csv
import io
import json
from typing import Generator
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from scrapelens.api.app import create_app
from scrapelens.cache.store import CATALOG, STRUCTURED, CacheStore, open_store
from scrapelens.errors import ExtractionTimeout, FetchError
from scrapelens.scraper.models import RawContent

URL = "https://shop.example.com/lantern"
PAGE = RawContent(url=URL, body="Lantern 10 EUR / 12 EUR", fetched_at="t", title="Lantern")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def store() -> Generator[CacheStore, None, None]:
    s = open_store(":memory:")
    yield s
    s.close()


@pytest.fixture()
def client(store: CacheStore, tmp_path, monkeypatch: pytest.MonkeyPatch) -> Generator[TestClient, None, None]:
    """TestClient whose lifespan store is replaced by an in-memory one."""
    monkeypatch.setattr("scrapelens.config.settings.workspace_dir", tmp_path)
    app = create_app()
    with TestClient(app, raise_server_exceptions=True) as c:
        c.app.state.store = store
        yield c


def _scrape(client: TestClient, **body):
    return client.post("/scrape", json={"url": URL, "fields": "title, price", **body})


# ---------------------------------------------------------------------------
# POST /scrape
# ---------------------------------------------------------------------------

class TestScrape:
    def test_success_returns_record_and_key(self, client: TestClient, store: CacheStore) -> None:
        with patch("scrapelens.pipeline.orchestrator.fetch_content", return_value=PAGE), patch(
            "scrapelens.pipeline.orchestrator.extract_fields",
            return_value={"title": ["X"], "price": ["10", "12"]},
        ) as mock_extract:
            resp = _scrape(client, model="mistral")

        assert resp.status_code == 201
        data = resp.json()
        assert data["fields"] == ["title", "price"]
        assert data["data"] == {"title": ["X"], "price": ["10", "12"]}
        assert data["model"] == "mistral"
        assert store.get(STRUCTURED, data["key"]) == data["data"]
        mock_extract.assert_called_once_with(PAGE.body, ["title", "price"], "mistral")

    def test_default_model(self, client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("scrapelens.config.settings.default_model", "llama3.1")
        with patch("scrapelens.pipeline.orchestrator.fetch_content", return_value=PAGE), patch(
            "scrapelens.pipeline.orchestrator.extract_fields", return_value={"title": [], "price": []}
        ):
            resp = _scrape(client)
        assert resp.json()["model"] == "llama3.1"

    def test_empty_fields_rejected_without_fetch(self, client: TestClient) -> None:
        with patch("scrapelens.pipeline.orchestrator.fetch_content") as mock_fetch:
            resp = client.post("/scrape", json={"url": URL, "fields": " "})

        assert resp.status_code == 422
        assert resp.json()["detail"]["error"] == "ValidationError"
        mock_fetch.assert_not_called()

    def test_fetch_failure_is_server_error(self, client: TestClient) -> None:
        with patch(
            "scrapelens.pipeline.orchestrator.fetch_content",
            side_effect=FetchError("Fetching failed", url=URL, status_code=500),
        ):
            resp = _scrape(client)

        assert resp.status_code == 502
        assert resp.json()["detail"]["message"] == "Fetching failed"

    def test_extraction_timeout(self, client: TestClient, store: CacheStore) -> None:
        with patch("scrapelens.pipeline.orchestrator.fetch_content", return_value=PAGE), patch(
            "scrapelens.pipeline.orchestrator.extract_fields",
            side_effect=ExtractionTimeout("too slow"),
        ):
            resp = _scrape(client)

        assert resp.status_code == 504
        assert resp.json()["detail"]["error"] == "ExtractionTimeout"
        assert store.keys(STRUCTURED) == []


# ---------------------------------------------------------------------------
# GET /records
# ---------------------------------------------------------------------------

class TestRecords:
    def test_view_record(self, client: TestClient, store: CacheStore) -> None:
        store.put(STRUCTURED, "k1", {"title": ["X"], "price": ["10", "12"]})
        resp = client.get("/records/k1")
        assert resp.status_code == 200
        assert resp.json() == {
            "key": "k1",
            "fields": ["title", "price"],
            "data": {"title": ["X"], "price": ["10", "12"]},
        }

    def test_view_unknown_key(self, client: TestClient) -> None:
        resp = client.get("/records/missing")
        assert resp.status_code == 404
        assert resp.json()["detail"]["error"] == "NotFound"

    def test_list_records(self, client: TestClient, store: CacheStore) -> None:
        store.put(STRUCTURED, "k1", {})
        resp = client.get("/records")
        assert resp.status_code == 200
        assert resp.json() == ["k1"]

    def test_export_csv(self, client: TestClient, store: CacheStore) -> None:
        store.put(STRUCTURED, "k1", {"title": ["X"], "price": ["10", "12"]})
        resp = client.get("/records/k1/export", params={"format": "csv"})

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert 'filename="results.csv"' in resp.headers["content-disposition"]
        rows = list(csv.reader(io.StringIO(resp.text)))
        assert rows == [["title", "price"], ["X", "10"], ["", "12"]]

    def test_export_json(self, client: TestClient, store: CacheStore) -> None:
        record = {"title": ["X"], "price": ["10", "12"]}
        store.put(STRUCTURED, "k1", record)
        resp = client.get("/records/k1/export", params={"format": "json"})

        assert resp.status_code == 200
        assert 'filename="results.json"' in resp.headers["content-disposition"]
        assert json.loads(resp.content) == record

    @pytest.mark.parametrize("fmt", ["csv", "json"])
    def test_export_unknown_key(self, client: TestClient, fmt: str) -> None:
        resp = client.get("/records/missing/export", params={"format": fmt})
        assert resp.status_code == 404

    def test_export_bad_format(self, client: TestClient, store: CacheStore) -> None:
        store.put(STRUCTURED, "k1", {"title": ["X"]})
        resp = client.get("/records/k1/export", params={"format": "xml"})
        assert resp.status_code == 422

    def test_scrape_then_view_then_export(self, client: TestClient) -> None:
        with patch("scrapelens.pipeline.orchestrator.fetch_content", return_value=PAGE), patch(
            "scrapelens.pipeline.orchestrator.extract_fields",
            return_value={"title": ["X"], "price": ["10", "12"]},
        ):
            key = _scrape(client).json()["key"]

        assert client.get(f"/records/{key}").json()["data"]["price"] == ["10", "12"]
        exported = client.get(f"/records/{key}/export", params={"format": "json"})
        assert json.loads(exported.content) == {"title": ["X"], "price": ["10", "12"]}


# ---------------------------------------------------------------------------
# GET /models
# ---------------------------------------------------------------------------

class TestModels:
    def test_empty_catalog(self, client: TestClient) -> None:
        assert client.get("/models").json() == {"models": []}

    def test_cached_catalog(self, client: TestClient, store: CacheStore) -> None:
        store.put(CATALOG, "models", ["llama3.1", "mistral"])
        assert client.get("/models").json() == {"models": ["llama3.1", "mistral"]}
