"""SQLite connection factory for the posts database.

Usage::

    from linkcheck.db.connection import get_connection

    conn = get_connection(Path("blog.sqlite"))
    posts = load_posts(conn)
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional, Union

from linkcheck.config import settings


def get_connection(db_path: Optional[Union[Path, str]] = None) -> sqlite3.Connection:
    """Open a SQLite connection to the posts database.

    Args:
        db_path: Override the DB path.  Defaults to ``settings.posts_db``.

    Returns:
        A :class:`sqlite3.Connection` with ``row_factory`` set to
        :class:`sqlite3.Row` so columns can be accessed by name.

    Raises:
        ValueError: If no path was given and ``POSTS_DB`` is not configured.
        FileNotFoundError: If the database file does not exist.
    """
    path = db_path or settings.posts_db
    if path is None:
        raise ValueError("No posts database configured (pass a path or set POSTS_DB).")

    # Never create an empty database by accident (no-op for `:memory:`)
    if str(path) != ":memory:" and not Path(path).exists():
        raise FileNotFoundError(f"Posts database not found: {path}")

    conn = sqlite3.connect(str(path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn
