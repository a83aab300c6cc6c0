"""Serialise a cached record to downloadable CSV or JSON.

Both formatters are pure: the caller looks the record up and passes it in.
"""

from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Sequence

Record = Mapping[str, Sequence[str]]


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"

    @property
    def filename(self) -> str:
        return f"results.{self.value}"

    @property
    def media_type(self) -> str:
        return "text/csv" if self is ExportFormat.CSV else "application/json"


@dataclass(frozen=True)
class ExportFile:
    filename: str
    media_type: str
    content: bytes


def to_csv(record: Record) -> bytes:
    """Return *record* as CSV: one column per field, one row per value index.

    Fields are independent lists of different lengths, so the row count is the
    longest list and shorter columns are padded with empty cells.
    """
    fields = list(record.keys())
    num_rows = max((len(record[f]) for f in fields), default=0)

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(fields)
    for i in range(num_rows):
        writer.writerow([record[f][i] if i < len(record[f]) else "" for f in fields])
    return buffer.getvalue().encode("utf-8")


def to_json(record: Record) -> bytes:
    """Return *record* pretty-printed as UTF-8 JSON, values in stored order."""
    data = {name: list(values) for name, values in record.items()}
    return json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")


_RENDERERS = {
    ExportFormat.CSV: to_csv,
    ExportFormat.JSON: to_json,
}


def render(record: Record, fmt: ExportFormat | str) -> ExportFile:
    """Render *record* in *fmt* together with its download name and MIME type.

    Raises:
        ValueError: If *fmt* is not a known export format.
    """
    fmt = ExportFormat(fmt)
    return ExportFile(
        filename=fmt.filename,
        media_type=fmt.media_type,
        content=_RENDERERS[fmt](record),
    )
