"""Cache layer package.

Public re-exports so callers can write::

    from scrapelens.cache import open_store, new_key, RAW, STRUCTURED
"""

from scrapelens.cache.keys import new_key
from scrapelens.cache.store import CATALOG, RAW, STRUCTURED, CacheStore, open_store

__all__ = ["CacheStore", "open_store", "new_key", "RAW", "STRUCTURED", "CATALOG"]
