"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from linkcheck.api import app

    uvicorn linkcheck.api:app --reload
"""

from linkcheck.api.app import app, create_app

__all__ = ["app", "create_app"]
