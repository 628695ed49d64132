"""HTTP status resolution for a single link.

:class:`StatusResolver` issues one GET per call through an injected
:class:`~linkcheck.scanner.redirects.RedirectPolicy` and turns whatever
happens into a :class:`~linkcheck.scanner.models.LinkStatus`.  Network
failures never escape as exceptions; they become ``TransportError``
outcomes so one dead link cannot abort a whole document.
"""

from __future__ import annotations

import html
import logging
import re
import socket
from typing import Optional

import httpx

from linkcheck.config import Settings, settings
from linkcheck.scanner.models import ErrorKind, HttpStatus, LinkStatus
from linkcheck.scanner.redirects import RedirectPolicy, redirect_policy

logger = logging.getLogger(__name__)

_TITLE_PATTERN = re.compile(r"<title(?:\s[^>]*)?>(.*?)</title>", re.IGNORECASE | re.DOTALL)

# Resolver messages of getaddrinfo() on glibc, musl, macOS and Windows.
_HOST_NOT_FOUND_MARKERS = (
    "name or service not known",
    "nodename nor servname provided",
    "temporary failure in name resolution",
    "no address associated with hostname",
    "getaddrinfo failed",
    "could not resolve host",
    "name does not resolve",
)

DEFAULT_MAX_BODY_BYTES = 1024 * 1024


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _extract_title(body: str) -> Optional[str]:
    """Return the decoded text of the first ``<title>`` tag, or ``None``."""
    match = _TITLE_PATTERN.search(body)
    if not match:
        return None
    title = html.unescape(match.group(1)).strip()
    return title or None


def _read_body(response: httpx.Response, limit: int) -> str:
    """Read at most *limit* bytes of a streamed response and decode them."""
    buf = bytearray()
    for chunk in response.iter_bytes():
        buf.extend(chunk)
        if len(buf) >= limit:
            break
    encoding = response.charset_encoding or "utf-8"
    try:
        return bytes(buf[:limit]).decode(encoding, errors="replace")
    except LookupError:
        return bytes(buf[:limit]).decode("utf-8", errors="replace")


def _is_host_not_found(exc: BaseException) -> bool:
    """Walk the exception chain looking for a DNS resolution failure."""
    seen: set[int] = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, socket.gaierror):
            return True
        message = str(current).lower()
        if any(marker in message for marker in _HOST_NOT_FOUND_MARKERS):
            return True
        current = current.__cause__ or current.__context__
    return False


def classify_error(exc: Exception) -> ErrorKind:
    """Map an ``httpx`` exception onto an :class:`ErrorKind`."""
    if isinstance(exc, httpx.TooManyRedirects):
        return ErrorKind.TOO_MANY_REDIRECTS
    if isinstance(exc, httpx.TimeoutException):
        return ErrorKind.TIMEOUT
    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
        return ErrorKind.INVALID_URL
    if isinstance(exc, httpx.ConnectError) and _is_host_not_found(exc):
        return ErrorKind.SERVER_NOT_FOUND
    if isinstance(exc, httpx.TransportError):
        return ErrorKind.CONNECTION
    return ErrorKind.OTHER


def build_client(config: Settings = settings) -> httpx.Client:
    """Return an ``httpx.Client`` configured for probing third-party links."""
    return httpx.Client(
        headers={"User-Agent": config.user_agent},
        timeout=config.request_timeout,
        verify=config.verify_tls,
        max_redirects=config.max_redirects,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class StatusResolver:
    """Probes URLs over HTTP and classifies the outcome.

    Args:
        client: The ``httpx.Client`` used for every request.  Its headers,
            timeout and TLS settings apply to all probes.
        redirects: How redirects are followed.  Defaults to letting the
            client follow them natively with a 5-hop cap.
        max_body_bytes: Upper bound on how much of a response body is read
            while looking for the page title.
    """

    def __init__(
        self,
        client: httpx.Client,
        redirects: Optional[RedirectPolicy] = None,
        max_body_bytes: int = DEFAULT_MAX_BODY_BYTES,
    ) -> None:
        self.client = client
        self.redirects = redirects or redirect_policy("native")
        self.max_body_bytes = max_body_bytes

    @classmethod
    def from_settings(cls, config: Settings = settings) -> StatusResolver:
        return cls(
            build_client(config),
            redirect_policy(config.redirect_mode, config.max_redirects),
            max_body_bytes=config.max_body_bytes,
        )

    def resolve(self, url: str) -> LinkStatus:
        """Probe *url* once and return its :class:`LinkStatus`.

        Never raises for network problems: DNS failures, refused
        connections, TLS errors, timeouts and redirect loops all come back
        as a status with ``http_code == 0``.
        """
        logger.debug("Probing %s", url)
        try:
            with self.redirects.open(self.client, url) as (response, final_url):
                body = _read_body(response, self.max_body_bytes)
                code = response.status_code
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            kind = classify_error(exc)
            logger.debug("Probe of %s failed (%s): %s", url, kind.value, exc)
            return LinkStatus.failed(url, kind, str(exc) or type(exc).__name__)

        status = LinkStatus(
            url=url,
            actual_url=final_url,
            outcome=HttpStatus(code),
            title=_extract_title(body),
        )
        logger.debug("Probe of %s -> %s %s", url, code, final_url)
        return status

    def close(self) -> None:
        self.client.close()


__all__ = [
    "StatusResolver",
    "build_client",
    "classify_error",
]
