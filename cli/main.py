"""ScrapeLens CLI — entry-point for all pipeline operations.

Usage:
    python cli/main.py --help

Commands:
    scrape    → run the scrape → extract → cache pipeline
    show      → print a cached record
    export    → write a cached record to results.csv / results.json
    records   → list recently cached record keys
    check     → probe the extraction service
    models    → model catalog (refresh / list)
    cache     → cache maintenance (keys / clear)
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from scrapelens.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
from typing import Optional

import typer

from cli.commands.cache import cache_app
from cli.commands.models import models_app
from cli.store import open_store_or_exit
from scrapelens.cache import STRUCTURED
from scrapelens.config import settings
from scrapelens.errors import ScrapeLensError
from scrapelens.export import ExportFormat
from scrapelens.extraction import check_service
from scrapelens.pipeline import ScrapePipeline
from scrapelens.records import export_record, get_record

app = typer.Typer(
    name="scrapelens",
    help="Scrape pages, extract fields with a language model, export the results.",
    no_args_is_help=True,
)
app.add_typer(models_app, name="models")
app.add_typer(cache_app, name="cache")


def _print_record(record: dict[str, list[str]]) -> None:
    for name, values in record.items():
        typer.echo(f"  {name}:")
        if not values:
            typer.echo("    (none)")
        for value in values:
            typer.echo(f"    - {value}")


def _export_target(out: Optional[Path], filename: str) -> Path:
    # A path without a suffix names a directory, existing or not
    if out is None:
        return Path.cwd() / filename
    if out.is_dir() or not out.suffix:
        return out / filename
    return out


@app.command("scrape")
def scrape(
    url: str = typer.Option(..., help="URL to scrape."),
    fields: str = typer.Option(..., help="Comma-separated field names, e.g. 'title, price'."),
    model: Optional[str] = typer.Option(None, help="Extraction model (default from settings)."),
    as_json: bool = typer.Option(False, "--json", help="Print the record as JSON."),
) -> None:
    """Scrape URL, extract FIELDS, cache the result, and print its key."""
    store = open_store_or_exit()
    try:
        typer.echo(f"[scrape] {url!r} → {fields!r} with {model or settings.default_model!r} …")
        result = ScrapePipeline(store=store).run(url, fields, model)
    except ScrapeLensError as exc:
        typer.echo(f"❌ {exc.message}")
        raise typer.Exit(code=1)
    finally:
        store.close()

    typer.echo(f"✅ Cached as {result.key}")
    if as_json:
        typer.echo(json.dumps(result.record, indent=2, ensure_ascii=False))
    else:
        _print_record(result.record)


@app.command("show")
def show(key: str = typer.Argument(..., help="Record key returned by 'scrape'.")) -> None:
    """Print the record cached under KEY."""
    store = open_store_or_exit()
    try:
        record = get_record(store, key)
    except ScrapeLensError as exc:
        typer.echo(f"❌ {exc.message}")
        raise typer.Exit(code=1)
    finally:
        store.close()

    typer.echo(f"[show] {key}")
    _print_record(record)


@app.command("export")
def export(
    key: str = typer.Argument(..., help="Record key returned by 'scrape'."),
    format: ExportFormat = typer.Option(ExportFormat.CSV, "--format", "-f", help="csv | json"),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Output directory (created if missing) or file path with an extension "
        "(default: ./results.<format>).",
    ),
) -> None:
    """Write the record cached under KEY to a CSV or JSON file."""
    store = open_store_or_exit()
    try:
        exported = export_record(store, key, format)
    except ScrapeLensError as exc:
        typer.echo(f"❌ {exc.message}")
        raise typer.Exit(code=1)
    finally:
        store.close()

    target = _export_target(out, exported.filename)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(exported.content)
    except OSError as exc:
        typer.echo(f"❌ Cannot write {target}: {exc}")
        raise typer.Exit(code=1)
    typer.echo(f"✅ Wrote {target}")


@app.command("records")
def records(limit: int = typer.Option(20, help="Maximum number of keys to list.")) -> None:
    """List the most recently cached record keys."""
    store = open_store_or_exit()
    try:
        keys = store.keys(STRUCTURED, limit=limit)
    except ScrapeLensError as exc:
        typer.echo(f"❌ {exc.message}")
        raise typer.Exit(code=1)
    finally:
        store.close()

    if not keys:
        typer.echo("[records] No cached records.")
        return
    for key in keys:
        typer.echo(f"  {key}")


@app.command("check")
def check() -> None:
    """Check that the extraction service is reachable."""
    target = (
        settings.ollama_base_url
        if settings.extraction_provider == "ollama"
        else settings.extraction_service_url
    )
    if check_service():
        typer.echo(f"✅ Extraction service reachable at {target}")
        return
    typer.echo(f"❌ No extraction service at {target}")
    raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
