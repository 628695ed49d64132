"""Data models for link checking results.

A probe ends in exactly one of two outcomes: the server answered
(:class:`HttpStatus`) or the request never completed
(:class:`TransportError`).  :class:`LinkStatus` pairs that outcome with the
URL that was probed, the URL it ended up on, and the page title.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional, Union


class ErrorKind(str, enum.Enum):
    """Why a request could not complete."""

    SERVER_NOT_FOUND = "server_not_found"
    TOO_MANY_REDIRECTS = "too_many_redirects"
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    INVALID_URL = "invalid_url"
    CANCELLED = "cancelled"
    OTHER = "other"


@dataclass(frozen=True)
class HttpStatus:
    """The server answered with *code*."""

    code: int


@dataclass(frozen=True)
class TransportError:
    """No HTTP response was received."""

    kind: ErrorKind
    message: str


Outcome = Union[HttpStatus, TransportError]


@dataclass(frozen=True)
class LinkStatus:
    """The resolved state of a single link."""

    url: str
    actual_url: str
    outcome: Outcome
    title: Optional[str] = None

    # ------------------------------------------------------------------
    # Convenience helpers
    # ------------------------------------------------------------------
    @property
    def http_code(self) -> int:
        """HTTP status code, or ``0`` when the request could not complete."""
        if isinstance(self.outcome, HttpStatus):
            return self.outcome.code
        return 0

    @property
    def transport_error(self) -> Optional[TransportError]:
        if isinstance(self.outcome, TransportError):
            return self.outcome
        return None

    @property
    def redirected(self) -> bool:
        return self.actual_url != self.url

    @property
    def good(self) -> bool:
        from linkcheck.scanner.describe import is_good  # noqa: PLC0415

        return is_good(self)

    @property
    def description(self) -> str:
        from linkcheck.scanner.describe import describe  # noqa: PLC0415

        return describe(self)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the flat record handed to presentation layers."""
        error = self.transport_error
        return {
            "url": self.url,
            "actual_url": self.actual_url,
            "title": self.title,
            "http_code": self.http_code,
            "good": self.good,
            "description": self.description,
            "error_kind": error.kind.value if error else None,
        }

    @classmethod
    def failed(cls, url: str, kind: ErrorKind, message: str) -> LinkStatus:
        """Build the status of a request that never got a response."""
        return cls(url=url, actual_url=url, outcome=TransportError(kind, message))
