"""Pipeline trigger endpoint.

Routes
------
POST /scrape    Body: {"url": "https://...", "fields": "title, price", "model": "llama3.1"}
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from scrapelens.api.errors import to_http_exception
from scrapelens.errors import ScrapeLensError
from scrapelens.pipeline import ScrapePipeline

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ScrapeRequest(BaseModel):
    url: str
    fields: str
    model: Optional[str] = None


class ScrapeResponse(BaseModel):
    key: str
    model: str
    fields: list[str]
    data: dict[str, list[str]]


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

@router.post("", response_model=ScrapeResponse, status_code=201)
def scrape_endpoint(body: ScrapeRequest, request: Request) -> dict[str, Any]:
    """Fetch the page, extract the requested fields, and cache the result.

    The returned ``key`` retrieves the record later from ``/records/{key}``.
    """
    pipeline = ScrapePipeline(store=request.app.state.store)
    try:
        result = pipeline.run(body.url, body.fields, body.model)
    except ScrapeLensError as exc:
        raise to_http_exception(exc) from exc
    return {
        "key": result.key,
        "model": result.model,
        "fields": list(result.record.keys()),
        "data": result.record,
    }
