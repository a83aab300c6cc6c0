"""Translate pipeline errors into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException

from scrapelens.errors import (
    ExtractionError,
    ExtractionTimeout,
    FetchError,
    NotFound,
    ScrapeLensError,
    ValidationError,
)


def status_for(exc: ScrapeLensError) -> int:
    """Return the HTTP status code for *exc*."""
    if isinstance(exc, NotFound):
        return 404
    if isinstance(exc, ValidationError):
        return 422
    if isinstance(exc, ExtractionTimeout):
        return 504
    if isinstance(exc, (FetchError, ExtractionError)):
        return 502
    return 500


def to_http_exception(exc: ScrapeLensError) -> HTTPException:
    return HTTPException(status_code=status_for(exc), detail=exc.to_response())
