"""Data models for the content fetcher."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass
class RawPage:
    """The raw HTTP (or rendered) response for a single URL fetch."""

    url: str
    html: str
    status_code: int


@dataclass(frozen=True)
class RawContent:
    """Normalised text of a fetched page, as stored in the ``raw`` namespace."""

    url: str
    body: str
    fetched_at: str
    title: str = ""

    @classmethod
    def now(cls, url: str, body: str, title: str = "") -> RawContent:
        """Build a :class:`RawContent` stamped with the current UTC time."""
        return cls(
            url=url,
            body=body,
            fetched_at=datetime.now(timezone.utc).isoformat(),
            title=title,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RawContent:
        return cls(
            url=data["url"],
            body=data["body"],
            fetched_at=data["fetched_at"],
            title=data.get("title", ""),
        )
