"""Model catalog endpoint.

Routes
------
GET /models    {"models": ["llama3.1", ...]}
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from scrapelens.api.errors import to_http_exception
from scrapelens.catalog import list_models
from scrapelens.errors import ScrapeLensError

router = APIRouter()


@router.get("")
def get_models(request: Request) -> dict[str, list[str]]:
    try:
        return {"models": list_models(request.app.state.store)}
    except ScrapeLensError as exc:
        raise to_http_exception(exc) from exc
