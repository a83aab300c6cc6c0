"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from scrapelens.api import app

    uvicorn scrapelens.api:app --reload
"""

from scrapelens.api.app import app

__all__ = ["app"]
