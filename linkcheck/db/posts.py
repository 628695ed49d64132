"""Read-only access to blog posts stored in a WordPress-style table.

Only rows of ``<prefix>posts`` with ``post_type = 'post'`` are loaded; pages,
revisions and attachments are skipped.
"""

from __future__ import annotations

import re
import sqlite3

from linkcheck.db.models import Post

_PREFIX_PATTERN = re.compile(r"^[A-Za-z0-9_]*$")


def posts_table(prefix: str) -> str:
    """Return the posts table name for *prefix*.

    Raises:
        ValueError: If *prefix* contains anything but letters, digits and
            underscores; it ends up inside the SQL text.
    """
    if not _PREFIX_PATTERN.match(prefix):
        raise ValueError(f"Invalid table prefix: {prefix!r}")
    return f"{prefix}posts"


def load_posts(conn: sqlite3.Connection, prefix: str = "wp_") -> list[Post]:
    """Return every post in the ``<prefix>posts`` table, in table order."""
    table = posts_table(prefix)
    rows = conn.execute(
        f"SELECT ID, post_title, post_content FROM `{table}` WHERE post_type = 'post'"
    ).fetchall()
    return [
        Post(id=row["ID"], title=row["post_title"] or "", content=row["post_content"] or "")
        for row in rows
    ]
