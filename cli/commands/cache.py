"""Cache maintenance commands."""

import typer

from cli.store import open_store_or_exit
from scrapelens.cache.store import NAMESPACES
from scrapelens.errors import ScrapeLensError

cache_app = typer.Typer(help="Inspect or clear the local cache.")


def _check_namespace(namespace: str) -> None:
    if namespace not in NAMESPACES:
        typer.echo(f"❌ Unknown namespace {namespace!r}. Use: {' | '.join(sorted(NAMESPACES))}")
        raise typer.Exit(code=1)


@cache_app.command("keys")
def cache_keys(
    namespace: str = typer.Argument("structured", help="raw | structured | catalog"),
    limit: int = typer.Option(50, help="Maximum number of keys to list."),
) -> None:
    """List keys stored in NAMESPACE, newest first."""
    _check_namespace(namespace)
    store = open_store_or_exit()
    try:
        keys = store.keys(namespace, limit=limit)
    except ScrapeLensError as e:
        typer.echo(f"❌ Error: {e.message}")
        raise typer.Exit(code=1)
    finally:
        store.close()

    if not keys:
        typer.echo(f"No entries in {namespace!r}.")
        return
    for key in keys:
        typer.echo(f"  {key}")


@cache_app.command("clear")
def cache_clear(
    namespace: str = typer.Argument(..., help="raw | structured | catalog"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Delete every entry in NAMESPACE."""
    _check_namespace(namespace)
    if not yes:
        typer.confirm(f"Delete all entries in {namespace!r}?", abort=True)

    store = open_store_or_exit()
    try:
        removed = store.clear(namespace)
    except ScrapeLensError as e:
        typer.echo(f"❌ Error: {e.message}")
        raise typer.Exit(code=1)
    finally:
        store.close()
    typer.echo(f"🗑️  Removed {removed} entries from {namespace!r}.")
