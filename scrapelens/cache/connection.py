"""SQLite connection factory for the cache store.

Usage::

    from scrapelens.cache.connection import get_connection, init_cache

    conn = get_connection()
    init_cache(conn)
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional

from scrapelens.config import settings


def get_connection(db_path: Optional[Path | str] = None) -> sqlite3.Connection:
    """Open and configure a SQLite connection.

    The connection is shared across request threads, so it is opened with
    ``check_same_thread=False``; :class:`~scrapelens.cache.store.CacheStore`
    serialises access to it.

    Args:
        db_path: Override the DB path.  Defaults to ``settings.cache_path``.

    Returns:
        A configured :class:`sqlite3.Connection` with ``row_factory`` set to
        :class:`sqlite3.Row` so columns can be accessed by name.
    """
    path = db_path or settings.cache_path

    # Create parent directory if needed (no-op for `:memory:`)
    if str(path) != ":memory:":
        settings.ensure_workspace()

    conn = sqlite3.connect(str(path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


def init_cache(conn: sqlite3.Connection) -> None:
    """Create the cache table and index.

    Idempotent: every DDL statement uses ``IF NOT EXISTS``.
    """
    conn.executescript(settings.schema_path.read_text(encoding="utf-8"))
