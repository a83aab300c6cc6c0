"""Prompt construction for providers that take free-form prompts (Ollama)."""

from __future__ import annotations

import json

_INSTRUCTIONS = (
    "You extract structured data from web page text.\n"
    "Return a JSON object whose keys are exactly these field names: {fields}.\n"
    "Each value must be a JSON array of strings holding every value found for "
    "that field, in the order it appears on the page.  Use an empty array when "
    "a field is not present.  Do not add other keys or any commentary.\n"
)


def build_prompt(content: str, fields: list[str], max_chars: int) -> str:
    """Return the extraction prompt for *content*, truncated to *max_chars*."""
    if len(content) > max_chars:
        content = content[:max_chars]
    header = _INSTRUCTIONS.format(fields=json.dumps(fields, ensure_ascii=False))
    return f"{header}\nPage content:\n\"\"\"\n{content}\n\"\"\""
