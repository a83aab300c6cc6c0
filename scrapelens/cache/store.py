"""Namespaced key-value cache on top of a single SQLite connection.

Two namespaces back the pipeline:

``raw``
    Normalised page content (:class:`~scrapelens.scraper.models.RawContent`
    as a dict), written before extraction.

``structured``
    Extracted records (``{field: [value, ...]}``), addressed by the key the
    caller gets back.

``catalog`` holds the list of available extraction models.

Values are stored as JSON text.  ``get`` returns ``None`` for an absent key
and the stored value otherwise, so an all-empty record is never confused with
a missing one.
"""

from __future__ import annotations

import json
import sqlite3
import threading
from pathlib import Path
from typing import Any, Optional

from scrapelens.cache.connection import get_connection, init_cache
from scrapelens.errors import CacheError
from scrapelens.logger import get_module_logger

logger = get_module_logger("cache")

RAW = "raw"
STRUCTURED = "structured"
CATALOG = "catalog"
NAMESPACES = frozenset({RAW, STRUCTURED, CATALOG})


class CacheStore:
    """Thread-safe cache handle wrapping one open SQLite connection.

    The connection is opened once (usually at process start) and injected.
    Every operation holds the store lock and runs in its own ``with conn:``
    transaction, so a failing operation is rolled back and the next caller
    finds the connection in a clean state.
    """

    def __init__(self, conn: sqlite3.Connection):
        self._conn: Optional[sqlite3.Connection] = conn
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_namespace(namespace: str) -> None:
        if namespace not in NAMESPACES:
            raise CacheError(
                f"Unknown cache namespace {namespace!r}",
                details={"namespace": namespace},
            )

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise CacheError("Cache store is closed")
        return self._conn

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def put(self, namespace: str, key: str, value: Any) -> None:
        """Store *value* under *key*, silently replacing any previous value."""
        self._check_namespace(namespace)
        if value is None:
            # get() reports absence as None
            raise CacheError(
                f"Cannot store None under {namespace}/{key}",
                details={"namespace": namespace, "key": key},
            )
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise CacheError(
                f"Value for {namespace}/{key} is not JSON-serialisable: {exc}",
                details={"namespace": namespace, "key": key},
            ) from exc

        with self._lock:
            conn = self._connection()
            try:
                with conn:
                    conn.execute(
                        "INSERT OR REPLACE INTO cache_entries(namespace, key, value) "
                        "VALUES (?, ?, ?)",
                        (namespace, key, payload),
                    )
            except sqlite3.Error as exc:
                logger.error(f"Cache write failed for {namespace}/{key}: {exc}")
                raise CacheError(
                    f"Cache write failed: {exc}",
                    details={"namespace": namespace, "key": key},
                ) from exc
        logger.debug(f"put {namespace}/{key} ({len(payload)} bytes)")

    def get(self, namespace: str, key: str) -> Optional[Any]:
        """Return the value stored under *key*, or ``None`` when absent."""
        self._check_namespace(namespace)
        with self._lock:
            conn = self._connection()
            try:
                with conn:
                    row = conn.execute(
                        "SELECT value FROM cache_entries WHERE namespace = ? AND key = ?",
                        (namespace, key),
                    ).fetchone()
            except sqlite3.Error as exc:
                logger.error(f"Cache read failed for {namespace}/{key}: {exc}")
                raise CacheError(
                    f"Cache read failed: {exc}",
                    details={"namespace": namespace, "key": key},
                ) from exc

        if row is None:
            logger.debug(f"miss {namespace}/{key}")
            return None
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError as exc:
            raise CacheError(
                f"Corrupt cache entry {namespace}/{key}",
                details={"namespace": namespace, "key": key},
            ) from exc

    def keys(self, namespace: str, limit: Optional[int] = None) -> list[str]:
        """Return the keys in *namespace*, most recently written first."""
        self._check_namespace(namespace)
        sql = (
            "SELECT key FROM cache_entries WHERE namespace = ? "
            "ORDER BY created_at DESC, key DESC"
        )
        params: tuple[Any, ...] = (namespace,)
        if limit is not None:
            sql += " LIMIT ?"
            params = (namespace, limit)
        with self._lock:
            conn = self._connection()
            try:
                with conn:
                    rows = conn.execute(sql, params).fetchall()
            except sqlite3.Error as exc:
                raise CacheError(f"Cache listing failed: {exc}") from exc
        return [row["key"] for row in rows]

    def clear(self, namespace: str) -> int:
        """Delete every entry in *namespace*.  Returns the number removed."""
        self._check_namespace(namespace)
        with self._lock:
            conn = self._connection()
            try:
                with conn:
                    cur = conn.execute(
                        "DELETE FROM cache_entries WHERE namespace = ?", (namespace,)
                    )
            except sqlite3.Error as exc:
                raise CacheError(f"Cache clear failed: {exc}") from exc
        logger.info(f"Cleared {cur.rowcount} entries from {namespace!r}")
        return cur.rowcount

    def close(self) -> None:
        """Release the underlying connection.  Safe to call twice."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def __enter__(self) -> CacheStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def open_store(db_path: Optional[Path | str] = None) -> CacheStore:
    """Open the cache database, create its schema, and wrap it in a store.

    Raises:
        CacheError: If the database cannot be opened or initialised.
    """
    try:
        conn = get_connection(db_path)
        init_cache(conn)
    except (sqlite3.Error, OSError) as exc:
        raise CacheError(f"Cannot open cache store: {exc}") from exc
    return CacheStore(conn)
