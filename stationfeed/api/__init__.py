"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from stationfeed.api import app

    uvicorn stationfeed.api:app --reload
"""

from stationfeed.api.app import app

__all__ = ["app"]
