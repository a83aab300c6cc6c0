"""Map the extraction service's loosely shaped response onto a record.

The service is expected to answer ``{field: [value, ...]}`` but in practice a
language model may return a bare string, a wrapped object, differently cased
keys, or skip fields.  :func:`normalize_response` turns all of that into a
``StructuredRecord`` whose keys are exactly the requested fields.
"""

from __future__ import annotations

import json
import re
from typing import Any

from scrapelens.errors import ExtractionError

StructuredRecord = dict[str, list[str]]

# Wrapper keys some services put around the actual field mapping
_ENVELOPE_KEYS = ("data", "result", "results", "fields", "extracted")

_FENCE_RE = re.compile(r"```(?:json)?[ \t]*\n?(.*?)```", re.DOTALL | re.IGNORECASE)


def _canonical(name: str) -> str:
    return "".join(name.split()).lower()


def _coerce_json(payload: Any) -> Any:
    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode("utf-8", errors="replace")
    if isinstance(payload, str):
        text = payload.strip()
        # Models often fence JSON in markdown, sometimes with prose around it
        fenced = None if text.startswith(("{", "[")) else _FENCE_RE.search(text)
        if fenced:
            text = fenced.group(1).strip()
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ExtractionError(
                "Extraction service returned non-JSON output",
                payload=payload,
            ) from exc
    return payload


def _unwrap(payload: dict[str, Any], fields: list[str]) -> dict[str, Any]:
    wanted = {_canonical(f) for f in fields}
    if any(_canonical(k) in wanted for k in payload):
        return payload
    for key in _ENVELOPE_KEYS:
        inner = payload.get(key)
        if isinstance(inner, str):
            try:
                inner = json.loads(inner)
            except json.JSONDecodeError:
                continue
        if isinstance(inner, dict):
            return inner
    return payload


def _as_strings(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        value = [value]
    values: list[str] = []
    for item in value:
        if item is None:
            continue
        if isinstance(item, str):
            values.append(item)
        elif isinstance(item, (dict, list)):
            values.append(json.dumps(item, ensure_ascii=False))
        else:
            values.append(str(item))
    return values


def normalize_response(payload: Any, fields: list[str]) -> StructuredRecord:
    """Return a record with exactly one key per entry in *fields*.

    Missing fields map to ``[]``; fields the service added on its own are
    dropped.  Keys are matched exactly first, then ignoring case and
    whitespace.

    Raises:
        ExtractionError: If *payload* is not (and does not decode to) a JSON
            object.
    """
    payload = _coerce_json(payload)
    if not isinstance(payload, dict):
        raise ExtractionError(
            f"Expected a JSON object from the extraction service, got {type(payload).__name__}",
            payload=payload,
        )
    payload = _unwrap(payload, fields)

    by_canonical: dict[str, Any] = {}
    for key, value in payload.items():
        by_canonical.setdefault(_canonical(str(key)), value)

    record: StructuredRecord = {}
    for name in fields:
        if name in payload:
            record[name] = _as_strings(payload[name])
        else:
            record[name] = _as_strings(by_canonical.get(_canonical(name)))
    return record
