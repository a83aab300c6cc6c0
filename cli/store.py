"""Cache access shared by the CLI commands."""

import typer

from scrapelens.cache import CacheStore, open_store
from scrapelens.errors import ScrapeLensError


def open_store_or_exit() -> CacheStore:
    """Open the workspace cache, or print the error and exit with code 1."""
    try:
        return open_store()
    except ScrapeLensError as exc:
        typer.echo(f"❌ {exc.message}")
        raise typer.Exit(code=1)
