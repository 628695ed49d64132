"""Posts source package.

Public re-exports so callers can write::

    from linkcheck.db import get_connection, load_posts
"""

from linkcheck.db.connection import get_connection
from linkcheck.db.models import Post
from linkcheck.db.posts import load_posts

__all__ = ["get_connection", "load_posts", "Post"]
