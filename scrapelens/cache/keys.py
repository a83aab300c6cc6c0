"""Cache key generation.

A key looks like ``raw_data_2026-10-17T09-30-12-345678Z_1f-9c2e41ab``:

* a caller-chosen prefix,
* the UTC wall-clock time with ``:`` and ``.`` replaced so the key is safe in
  file names and URLs,
* a per-process monotonic counter, which keeps keys from concurrent threads
  apart even inside one clock tick,
* a random suffix, which keeps keys from separate processes apart.
"""

from __future__ import annotations

import itertools
import secrets
import threading
from datetime import datetime, timezone

_counter = itertools.count(1)
_counter_lock = threading.Lock()


def _timestamp() -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return stamp.replace(":", "-").replace(".", "-")


def new_key(prefix: str = "entry") -> str:
    """Return a fresh, unique cache key starting with *prefix*."""
    with _counter_lock:
        seq = next(_counter)
    return f"{prefix}_{_timestamp()}_{seq:x}-{secrets.token_hex(4)}"
