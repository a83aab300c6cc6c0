"""Model catalog commands."""

import typer

from cli.store import open_store_or_exit
from scrapelens.catalog import list_models, refresh_models
from scrapelens.errors import ScrapeLensError

models_app = typer.Typer(help="List or refresh available extraction models.")


@models_app.command("refresh")
def models_refresh() -> None:
    """Scrape the model library page and store the model names."""
    store = open_store_or_exit()
    try:
        models = refresh_models(store)
        typer.echo(f"✅ Stored {len(models)} models.")
    except ScrapeLensError as e:
        typer.echo(f"❌ Error: {e.message}")
        raise typer.Exit(code=1)
    finally:
        store.close()


@models_app.command("list")
def models_list() -> None:
    """List the cached model names."""
    store = open_store_or_exit()
    try:
        models = list_models(store)
    except ScrapeLensError as e:
        typer.echo(f"❌ Error: {e.message}")
        raise typer.Exit(code=1)
    finally:
        store.close()

    if not models:
        typer.echo("No models cached. Run 'models refresh' first.")
        return
    for name in models:
        typer.echo(f"  {name}")
