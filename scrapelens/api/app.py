"""FastAPI application factory.

Lifespan
--------
On startup the app opens a single cache store (shared across all requests via
``request.app.state.store``).  On shutdown it closes the store cleanly.

Routers
-------
    /scrape    — run the scrape → extract → cache pipeline
    /records   — view and export cached records
    /models    — model catalog
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scrapelens.api.routers import models as models_router
from scrapelens.api.routers import records as records_router
from scrapelens.api.routers import scrape as scrape_router
from scrapelens.cache import open_store
from scrapelens.logger import setup_logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the cache store on startup and close it on shutdown."""
    store = open_store()
    app.state.store = store
    try:
        yield
    finally:
        # Tests may swap in their own store; close whichever is current.
        app.state.store.close()
        store.close()


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    setup_logger()
    app = FastAPI(
        title="ScrapeLens API",
        description=(
            "Scrape a web page, extract user-chosen fields with a language "
            "model, and retrieve or export the cached result by key."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(scrape_router.router, prefix="/scrape", tags=["scrape"])
    app.include_router(records_router.router, prefix="/records", tags=["records"])
    app.include_router(models_router.router, prefix="/models", tags=["models"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn scrapelens.api.app:app --reload
app = create_app()
