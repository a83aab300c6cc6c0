"""Client for the language-model extraction service.

Extraction providers
--------------------
``service`` (default)
    POSTs ``{"content", "fields", "model"}`` to
    ``EXTRACTION_SERVICE_URL/extract`` and expects ``{field: [values]}``.

``ollama``
    Calls the local Ollama REST API at ``/api/generate`` in JSON mode with a
    prompt built from the field list.  Configure via ``OLLAMA_BASE_URL``.

Set ``EXTRACTION_PROVIDER=ollama`` in your ``.env`` to switch providers.
Whatever the provider returns is passed through
:func:`~scrapelens.extraction.normalize.normalize_response`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from scrapelens.config import settings
from scrapelens.errors import ExtractionError, ExtractionTimeout
from scrapelens.extraction.normalize import StructuredRecord, normalize_response
from scrapelens.extraction.prompt import build_prompt
from scrapelens.logger import get_module_logger

logger = get_module_logger("extraction")


@dataclass(frozen=True)
class ExtractionRequest:
    content: str
    fields: list[str]
    model: str

    def to_json(self) -> dict[str, Any]:
        return {"content": self.content, "fields": list(self.fields), "model": self.model}


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

def _error_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


def _post_json(url: str, body: dict[str, Any]) -> Any:
    """POST *body* to *url* and return the decoded JSON response."""
    try:
        with httpx.Client(timeout=settings.extraction_timeout) as client:
            response = client.post(url, json=body)
    except httpx.TimeoutException as exc:
        logger.error(f"Extraction request to {url} timed out")
        raise ExtractionTimeout(
            f"Extraction service did not respond within {settings.extraction_timeout:g}s"
        ) from exc
    except httpx.HTTPError as exc:
        logger.error(f"Extraction request to {url} failed: {exc}")
        raise ExtractionError(f"Extraction service unreachable: {exc}") from exc

    if response.is_error:
        payload = _error_payload(response)
        logger.error(f"Extraction service returned HTTP {response.status_code}: {payload}")
        raise ExtractionError(
            f"Extraction service returned HTTP {response.status_code}",
            payload=payload,
            status_code=response.status_code,
        )

    try:
        return response.json()
    except ValueError as exc:
        raise ExtractionError(
            "Extraction service returned a non-JSON body",
            payload=response.text,
            status_code=response.status_code,
        ) from exc


# ---------------------------------------------------------------------------
# Provider implementations
# ---------------------------------------------------------------------------

def _extract_service(request: ExtractionRequest) -> Any:
    url = f"{settings.extraction_service_url.rstrip('/')}/extract"
    return _post_json(url, request.to_json())


def _extract_ollama(request: ExtractionRequest) -> Any:
    url = f"{settings.ollama_base_url.rstrip('/')}/api/generate"
    body = {
        "model": request.model,
        "prompt": build_prompt(request.content, request.fields, settings.max_content_chars),
        "format": "json",
        "stream": False,
        "options": {"temperature": 0},
    }
    data = _post_json(url, body)
    if not isinstance(data, dict) or "response" not in data:
        raise ExtractionError("Ollama response has no 'response' field", payload=data)
    return data["response"]


_PROVIDERS = {
    "service": _extract_service,
    "ollama": _extract_ollama,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_fields(content: str, fields: list[str], model: str) -> StructuredRecord:
    """Ask the extraction service for *fields* in *content* using *model*.

    Args:
        content: Normalised page text.
        fields: Field names to extract, in output order.
        model: Model identifier understood by the service.

    Returns:
        A record with exactly one key per field; fields the service did not
        return map to an empty list.

    Raises:
        ExtractionTimeout: If the service does not answer within
            ``settings.extraction_timeout``.
        ExtractionError: On a non-2xx response (carrying the service's error
            payload), a connection failure, or an unusable response body.
    """
    provider = _PROVIDERS.get(settings.extraction_provider)
    if provider is None:
        raise ExtractionError(
            f"Unknown EXTRACTION_PROVIDER {settings.extraction_provider!r}. "
            f"Use one of: {', '.join(sorted(_PROVIDERS))}"
        )

    request = ExtractionRequest(content=content, fields=list(fields), model=model)
    logger.info(
        f"Extracting {len(request.fields)} field(s) with model {model!r} "
        f"via {settings.extraction_provider}"
    )
    return normalize_response(provider(request), request.fields)


def check_service(timeout: float = 5.0) -> bool:
    """Return ``True`` if the configured extraction backend answers at all."""
    if settings.extraction_provider == "ollama":
        url = f"{settings.ollama_base_url.rstrip('/')}/api/tags"
    else:
        url = settings.extraction_service_url
    try:
        with httpx.Client(timeout=timeout) as client:
            client.get(url)
    except httpx.HTTPError as exc:
        logger.warning(f"Extraction backend at {url} is not reachable: {exc}")
        return False
    return True
