"""Redirect-following strategies for the status resolver.

Two interchangeable policies open a streamed GET response for a URL and
report the URL it finally landed on:

``NativeRedirects``  follows whatever ``httpx`` treats as a redirect, using the
                     client's own next-request logic (303 rewrites, 307/308
                     keep the method).
``ManualRedirects``  walks 301/302 responses by hand.  Some hosting setups
                     forbid transparent redirect following, so this one
                     issues each hop as its own request.

Redirect bodies are never read.  Both cap the walk at ``max_hops`` redirects
and raise ``httpx.TooManyRedirects`` when a response is still redirecting
after that.
The policy is picked once when the resolver is built (see
:func:`redirect_policy`); nothing here inspects the runtime environment.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import ContextManager, Iterator, Tuple

import httpx

logger = logging.getLogger(__name__)

DEFAULT_MAX_HOPS = 5

REDIRECT_CODES = frozenset({301, 302})

_SCHEME_PREFIX = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)


def absolute_location(current_url: str, location: str) -> str:
    """Resolve a ``Location`` header against the URL that returned it.

    Locations that already carry a scheme are used as-is.
    """
    if _SCHEME_PREFIX.match(location):
        return location
    return str(httpx.URL(current_url).join(location))


class RedirectPolicy(ABC):
    """Opens a streamed GET response for a URL, following redirects."""

    def __init__(self, max_hops: int = DEFAULT_MAX_HOPS) -> None:
        self.max_hops = max_hops

    @abstractmethod
    def open(self, client: httpx.Client, url: str) -> ContextManager[Tuple[httpx.Response, str]]:
        """Yield ``(response, final_url)``; the response body is not read yet."""


class NativeRedirects(RedirectPolicy):
    """Follow every redirect ``httpx`` recognises, one hop at a time.

    Each hop is sent with ``follow_redirects=False`` and the client's
    ``response.next_request`` drives the walk, so redirect bodies are
    closed without being read.
    """

    @contextmanager
    def open(self, client: httpx.Client, url: str) -> Iterator[Tuple[httpx.Response, str]]:
        request = client.build_request("GET", url)
        hops_left = self.max_hops
        redirected = False

        while True:
            response = client.send(request, stream=True, follow_redirects=False)
            next_request = response.next_request
            if next_request is None:
                break

            response.close()
            if hops_left == 0:
                raise httpx.TooManyRedirects(
                    f"Exceeded maximum allowed redirects ({self.max_hops}).",
                    request=request,
                )
            logger.debug(
                "Redirect %s %s -> %s", response.status_code, request.url, next_request.url
            )
            request = next_request
            hops_left -= 1
            redirected = True

        try:
            yield response, str(response.url) if redirected else url
        finally:
            response.close()


class ManualRedirects(RedirectPolicy):
    """Follow 301/302 responses one request at a time."""

    @contextmanager
    def open(self, client: httpx.Client, url: str) -> Iterator[Tuple[httpx.Response, str]]:
        current = url
        hops_left = self.max_hops

        while True:
            request = client.build_request("GET", current)
            response = client.send(request, stream=True, follow_redirects=False)
            location = response.headers.get("location")
            if response.status_code not in REDIRECT_CODES or not location:
                break

            response.close()
            if hops_left == 0:
                raise httpx.TooManyRedirects(
                    f"Exceeded maximum allowed redirects ({self.max_hops}).",
                    request=request,
                )
            next_url = absolute_location(current, location)
            logger.debug("Redirect %s %s -> %s", response.status_code, current, next_url)
            current = next_url
            hops_left -= 1

        try:
            yield response, current
        finally:
            response.close()


_POLICIES = {
    "native": NativeRedirects,
    "manual": ManualRedirects,
}


def redirect_policy(mode: str, max_hops: int = DEFAULT_MAX_HOPS) -> RedirectPolicy:
    """Return the redirect policy registered under *mode* (``native`` or ``manual``)."""
    try:
        policy_cls = _POLICIES[mode.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown redirect mode {mode!r}. Use: {' | '.join(_POLICIES)}"
        ) from None
    return policy_cls(max_hops=max_hops)
