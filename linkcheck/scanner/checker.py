"""Document checking: extract every link from a text and resolve each one.

Links of one document are resolved **in parallel** on a bounded
``ThreadPoolExecutor`` and joined back into the order they were found in.
A per-document deadline caps the total wait; links still unresolved when it
passes are reported as cancelled rather than holding up the caller.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Dict, List, Optional

from linkcheck.config import Settings, settings
from linkcheck.scanner.cache import LinkCache
from linkcheck.scanner.extractor import extract_links
from linkcheck.scanner.models import ErrorKind, LinkStatus
from linkcheck.scanner.resolver import StatusResolver

logger = logging.getLogger(__name__)


class LinkChecker:
    """Resolves the links of documents, memoising results in a :class:`LinkCache`.

    Args:
        resolver: Performs the actual HTTP probes.
        cache: Shared memo of resolved statuses.  A fresh cache is created
            when omitted, so its lifetime is this checker's.
        max_workers: Upper bound on concurrent probes per document.
        document_timeout: Default deadline in seconds for one
            :meth:`check_document` call; ``None`` waits for every probe.
    """

    def __init__(
        self,
        resolver: StatusResolver,
        cache: Optional[LinkCache] = None,
        max_workers: int = 8,
        document_timeout: Optional[float] = None,
    ) -> None:
        self.resolver = resolver
        self.cache = cache if cache is not None else LinkCache()
        self.max_workers = max(1, max_workers)
        self.document_timeout = document_timeout

    @classmethod
    def from_settings(cls, config: Settings = settings) -> LinkChecker:
        """Build a checker (HTTP client, redirect policy, cache) from *config*."""
        return cls(
            StatusResolver.from_settings(config),
            max_workers=config.check_concurrency,
            document_timeout=config.document_deadline,
        )

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    def resolve(self, url: str) -> LinkStatus:
        """Resolve *url*, probing the network only if it is not cached yet."""
        return self.cache.get_or_resolve(url, self.resolver.resolve)

    def check_document(self, text: str, timeout: Optional[float] = None) -> List[LinkStatus]:
        """Return one :class:`LinkStatus` per distinct link in *text*, in order.

        A failing link never aborts the others; it occupies its slot with an
        ``http_code == 0`` status.

        Args:
            text: Raw document body.
            timeout: Deadline in seconds for the whole document.  Falls back
                to ``self.document_timeout``.
        """
        links = extract_links(text)
        if not links:
            return []

        deadline = timeout if timeout is not None else self.document_timeout
        started = time.monotonic()

        pool = ThreadPoolExecutor(max_workers=min(self.max_workers, len(links)))
        try:
            futures: Dict[str, Future[LinkStatus]] = {
                url: pool.submit(self.resolve, url) for url in links
            }
            _, not_done = wait(futures.values(), timeout=deadline)
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        results: List[LinkStatus] = []
        for url, future in futures.items():
            if future in not_done:
                future.cancel()
                results.append(
                    LinkStatus.failed(
                        url,
                        ErrorKind.CANCELLED,
                        f"Check deadline of {deadline:g}s exceeded.",
                    )
                )
            else:
                results.append(future.result())

        if not_done:
            logger.warning(
                "Deadline of %gs hit: %d of %d link(s) left unresolved.",
                deadline, len(not_done), len(links),
            )
        good = sum(1 for status in results if status.good)
        logger.info(
            "Checked %d link(s) in %.2fs: %d good, %d broken.",
            len(results), time.monotonic() - started, good, len(results) - good,
        )
        return results

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def close(self) -> None:
        """Release the underlying HTTP client."""
        self.resolver.close()

    def __enter__(self) -> LinkChecker:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def check_document(text: str, checker: Optional[LinkChecker] = None) -> List[LinkStatus]:
    """Check every link in *text* with *checker*, or a throwaway one built from settings."""
    if checker is not None:
        return checker.check_document(text)
    with LinkChecker.from_settings() as own:
        return own.check_document(text)
