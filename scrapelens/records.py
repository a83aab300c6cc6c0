"""Read side: look up a cached record by key and export it.

Usage::

    from scrapelens.records import get_record, export_record

    record = get_record(store, key)
    file = export_record(store, key, "csv")
"""

from __future__ import annotations

from scrapelens.cache.store import STRUCTURED, CacheStore
from scrapelens.errors import NotFound, ValidationError
from scrapelens.export.formatter import ExportFile, ExportFormat, render
from scrapelens.extraction.normalize import StructuredRecord


def get_record(store: CacheStore, key: str) -> StructuredRecord:
    """Return the structured record cached under *key*.

    Raises:
        NotFound: If nothing is cached under *key*.
    """
    record = store.get(STRUCTURED, key)
    if record is None:
        raise NotFound(key)
    return record


def export_record(store: CacheStore, key: str, fmt: ExportFormat | str) -> ExportFile:
    """Render the record cached under *key* as *fmt*.

    Raises:
        ValidationError: If *fmt* is not ``csv`` or ``json``.
        NotFound: If nothing is cached under *key*.
    """
    try:
        fmt = ExportFormat(fmt)
    except ValueError as exc:
        raise ValidationError(
            f"Unknown export format {fmt!r}. Use: csv | json",
            details={"format": str(fmt)},
        ) from exc
    return render(get_record(store, key), fmt)
