"""Input checks run before any pipeline I/O."""

from __future__ import annotations

from typing import Iterable, Union
from urllib.parse import urlparse

from scrapelens.errors import ValidationError


def parse_fields(fields: Union[str, Iterable[str], None]) -> list[str]:
    """Turn ``"title, price"`` (or a list) into ``["title", "price"]``.

    Entries are trimmed and blank ones dropped; order and duplicates are kept.
    """
    if fields is None:
        return []
    parts = fields.split(",") if isinstance(fields, str) else list(fields)
    return [p.strip() for p in parts if p and p.strip()]


def validate_url(url: str | None) -> str:
    """Return *url* stripped, or raise if it is not an absolute http(s) URL."""
    if not url or not url.strip():
        raise ValidationError("URL is missing.")
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError(
            f"URL must be an absolute http(s) URL, got {url!r}.",
            details={"url": url},
        )
    return url


def validate_request(
    url: str | None, fields: Union[str, Iterable[str], None]
) -> tuple[str, list[str]]:
    """Validate a scrape request and return ``(url, field_list)``.

    Raises:
        ValidationError: If the URL is missing/invalid or no fields remain
            after parsing.
    """
    clean_url = validate_url(url)
    field_list = parse_fields(fields)
    if not field_list:
        raise ValidationError("Fields are missing.")
    return clean_url, field_list
