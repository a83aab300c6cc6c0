"""Cached record retrieval and download.

Routes
------
GET /records                        Most recent record keys
GET /records/{key}                  The record as JSON
GET /records/{key}/export?format=   Download as results.csv / results.json
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request, Response

from scrapelens.api.errors import to_http_exception
from scrapelens.cache.store import STRUCTURED
from scrapelens.errors import ScrapeLensError
from scrapelens.export import ExportFormat
from scrapelens.records import export_record, get_record

router = APIRouter()


@router.get("")
def list_records(request: Request, limit: int = 20) -> list[str]:
    """Return the keys of the most recently cached records."""
    try:
        return request.app.state.store.keys(STRUCTURED, limit=limit)
    except ScrapeLensError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{key}")
def view_record(key: str, request: Request) -> dict[str, Any]:
    try:
        record = get_record(request.app.state.store, key)
    except ScrapeLensError as exc:
        raise to_http_exception(exc) from exc
    return {"key": key, "fields": list(record.keys()), "data": record}


@router.get("/{key}/export")
def download_record(
    key: str,
    request: Request,
    format: ExportFormat = ExportFormat.CSV,
) -> Response:
    """Download the record as an attachment with a fixed file name."""
    try:
        exported = export_record(request.app.state.store, key, format)
    except ScrapeLensError as exc:
        raise to_http_exception(exc) from exc
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )
