"""Exception hierarchy for the scrape → extract → cache → retrieve pipeline.

Every error carries a ``category``:

``client``
    The request itself was unusable (missing URL / fields, unknown key).
    Never triggers any I/O.

``server``
    A collaborator failed (network fetch, cache store, extraction service).

Callers at the edge (HTTP routers, CLI commands) turn these into a
human-readable message; nothing below them swallows an error.
"""

from __future__ import annotations

from typing import Any, Optional


class ScrapeLensError(Exception):
    """Base exception for all ScrapeLens errors."""

    category = "server"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_response(self) -> dict[str, Any]:
        """Serialise to the JSON body used by the HTTP layer."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details,
        }


# ---------------------------------------------------------------------------
# Client errors
# ---------------------------------------------------------------------------

class ValidationError(ScrapeLensError):
    """Missing or malformed pipeline input (URL, field list)."""

    category = "client"


class NotFound(ScrapeLensError):
    """No cached entry exists for the requested key."""

    category = "client"

    def __init__(self, key: str, namespace: str = "structured"):
        super().__init__(
            f"No data available for key {key!r}.",
            details={"key": key, "namespace": namespace},
        )
        self.key = key


# ---------------------------------------------------------------------------
# Server errors
# ---------------------------------------------------------------------------

class FetchError(ScrapeLensError):
    """The target URL was unreachable, returned a non-2xx status, or timed out."""

    def __init__(
        self,
        message: str,
        url: str,
        status_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, {"url": url, "status_code": status_code, **(details or {})})
        self.url = url
        self.status_code = status_code


class CacheError(ScrapeLensError):
    """The cache store is unreachable or an operation on it failed."""


class ExtractionError(ScrapeLensError):
    """The extraction service returned an error or an unusable response."""

    def __init__(
        self,
        message: str,
        payload: Any = None,
        status_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        # The service's own error body, when it sent one
        self.payload = payload
        self.status_code = status_code
        if payload is not None:
            self.details.setdefault("payload", payload)
        if status_code is not None:
            self.details.setdefault("status_code", status_code)


class ExtractionTimeout(ExtractionError):
    """The extraction service did not answer within ``extraction_timeout``."""


class PipelineError(ScrapeLensError):
    """An unexpected failure inside a pipeline step."""
