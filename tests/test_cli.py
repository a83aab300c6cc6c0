"""Tests for the ScrapeLens CLI."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from cli.main import app
from scrapelens.cache import CATALOG, STRUCTURED, open_store
from scrapelens.errors import ExtractionTimeout
from scrapelens.scraper.models import RawContent

runner = CliRunner()

URL = "https://shop.example.com/lantern"
PAGE = RawContent(url=URL, body="Lantern 10 EUR / 12 EUR", fetched_at="t", title="Lantern")
RECORD = {"title": ["X"], "price": ["10", "12"]}


@pytest.fixture(autouse=True)
def workspace(tmp_path, monkeypatch):
    """Point the cache at a throwaway workspace for each test."""
    monkeypatch.setattr("scrapelens.config.settings.workspace_dir", tmp_path / "ws")
    return tmp_path


def _seed(key: str, record: dict) -> None:
    with open_store() as store:
        store.put(STRUCTURED, key, record)


def test_scrape_prints_key_and_values():
    with patch("scrapelens.pipeline.orchestrator.fetch_content", return_value=PAGE), patch(
        "scrapelens.pipeline.orchestrator.extract_fields", return_value=RECORD
    ):
        result = runner.invoke(app, ["scrape", "--url", URL, "--fields", "title, price"])

    assert result.exit_code == 0
    assert "✅ Cached as formatted_data_" in result.output
    assert "- 12" in result.output

    with open_store() as store:
        keys = store.keys(STRUCTURED)
        assert len(keys) == 1
        assert store.get(STRUCTURED, keys[0]) == RECORD


def test_scrape_json_output():
    with patch("scrapelens.pipeline.orchestrator.fetch_content", return_value=PAGE), patch(
        "scrapelens.pipeline.orchestrator.extract_fields", return_value=RECORD
    ):
        result = runner.invoke(
            app, ["scrape", "--url", URL, "--fields", "title, price", "--json"]
        )

    assert result.exit_code == 0
    assert '"price": [' in result.output


def test_scrape_empty_fields_fails():
    with patch("scrapelens.pipeline.orchestrator.fetch_content") as mock_fetch:
        result = runner.invoke(app, ["scrape", "--url", URL, "--fields", ","])

    assert result.exit_code == 1
    assert "Fields are missing" in result.output
    mock_fetch.assert_not_called()


def test_scrape_extraction_timeout():
    with patch("scrapelens.pipeline.orchestrator.fetch_content", return_value=PAGE), patch(
        "scrapelens.pipeline.orchestrator.extract_fields",
        side_effect=ExtractionTimeout("Extraction service did not respond"),
    ):
        result = runner.invoke(app, ["scrape", "--url", URL, "--fields", "title"])

    assert result.exit_code == 1
    assert "did not respond" in result.output


def test_show_record():
    _seed("k1", RECORD)
    result = runner.invoke(app, ["show", "k1"])
    assert result.exit_code == 0
    assert "title:" in result.output
    assert "- X" in result.output


def test_show_unknown_key():
    result = runner.invoke(app, ["show", "missing"])
    assert result.exit_code == 1
    assert "No data available" in result.output


def test_export_csv_to_directory(workspace):
    _seed("k1", RECORD)
    out_dir = workspace / "out"
    out_dir.mkdir()

    result = runner.invoke(app, ["export", "k1", "--format", "csv", "--out", str(out_dir)])

    assert result.exit_code == 0
    assert (out_dir / "results.csv").read_bytes() == b"title,price\r\nX,10\r\n,12\r\n"


def test_export_json_to_file(workspace):
    _seed("k1", RECORD)
    target = workspace / "record.json"

    result = runner.invoke(app, ["export", "k1", "-f", "json", "-o", str(target)])

    assert result.exit_code == 0
    assert json.loads(target.read_text(encoding="utf-8")) == RECORD


def test_export_creates_missing_directory(workspace):
    _seed("k1", RECORD)
    out_dir = workspace / "nested" / "exports"

    result = runner.invoke(app, ["export", "k1", "--format", "json", "--out", str(out_dir)])

    assert result.exit_code == 0
    assert out_dir.is_dir()
    assert json.loads((out_dir / "results.json").read_text(encoding="utf-8")) == RECORD


def test_export_file_in_missing_parent(workspace):
    _seed("k1", RECORD)
    target = workspace / "new" / "record.csv"

    result = runner.invoke(app, ["export", "k1", "-o", str(target)])

    assert result.exit_code == 0
    assert target.is_file()


def test_export_unknown_key(workspace):
    result = runner.invoke(app, ["export", "missing", "--out", str(workspace)])
    assert result.exit_code == 1
    assert not (workspace / "results.csv").exists()


def test_records_lists_keys():
    _seed("k1", RECORD)
    result = runner.invoke(app, ["records"])
    assert result.exit_code == 0
    assert "k1" in result.output


def test_models_list_and_cache_clear():
    with open_store() as store:
        store.put(CATALOG, "models", ["llama3.1"])

    result = runner.invoke(app, ["models", "list"])
    assert result.exit_code == 0
    assert "llama3.1" in result.output

    result = runner.invoke(app, ["cache", "clear", "catalog", "--yes"])
    assert result.exit_code == 0

    result = runner.invoke(app, ["models", "list"])
    assert "No models cached" in result.output


def test_cache_keys_unknown_namespace():
    result = runner.invoke(app, ["cache", "keys", "bogus"])
    assert result.exit_code == 1


def test_check_reports_unreachable_service():
    with patch("cli.main.check_service", return_value=False):
        result = runner.invoke(app, ["check"])
    assert result.exit_code == 1
    assert "No extraction service" in result.output


@pytest.mark.parametrize(
    "args",
    [
        ["scrape", "--url", URL, "--fields", "title"],
        ["show", "k1"],
        ["export", "k1"],
        ["records"],
        ["models", "list"],
        ["models", "refresh"],
        ["cache", "keys"],
        ["cache", "clear", "raw", "--yes"],
    ],
)
def test_unusable_workspace_reports_error(workspace, monkeypatch, args):
    blocker = workspace / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")
    monkeypatch.setattr("scrapelens.config.settings.workspace_dir", blocker / "ws")

    result = runner.invoke(app, args)

    assert result.exit_code == 1
    assert "❌" in result.output
    assert "Cannot open cache store" in result.output
    assert isinstance(result.exception, SystemExit)
