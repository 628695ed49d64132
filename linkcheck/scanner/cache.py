"""In-process memo of resolved link statuses.

Entries are write-once: the first status stored for a URL is kept for the
lifetime of the cache.  :meth:`LinkCache.get_or_resolve` also de-duplicates
concurrent lookups, so two worker threads asking for the same uncached URL
share a single network probe.
"""

from __future__ import annotations

import threading
from typing import Callable, Dict, Optional

from linkcheck.scanner.models import LinkStatus


class LinkCache:
    """Thread-safe URL -> :class:`LinkStatus` map."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[str, LinkStatus] = {}
        self._inflight: Dict[str, threading.Event] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._entries

    def get(self, url: str) -> Optional[LinkStatus]:
        with self._lock:
            return self._entries.get(url)

    def put(self, url: str, status: LinkStatus) -> LinkStatus:
        """Store *status* unless *url* already has one; return the stored status."""
        with self._lock:
            return self._entries.setdefault(url, status)

    def get_or_resolve(self, url: str, resolve: Callable[[str], LinkStatus]) -> LinkStatus:
        """Return the cached status for *url*, calling *resolve* at most once.

        The first caller for an uncached URL runs *resolve*; callers arriving
        while it is in flight block until it finishes and get the same result.
        """
        while True:
            with self._lock:
                cached = self._entries.get(url)
                if cached is not None:
                    return cached
                pending = self._inflight.get(url)
                if pending is None:
                    done = threading.Event()
                    self._inflight[url] = done
                    break
            pending.wait()
            # The owner either stored a result or failed; re-check and, if
            # nothing was stored, race to become the new owner.

        try:
            return self.put(url, resolve(url))
        finally:
            with self._lock:
                del self._inflight[url]
            done.set()

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
