"""Human-readable descriptions of link statuses."""

from __future__ import annotations

from linkcheck.scanner.http_codes import reason_phrase
from linkcheck.scanner.models import ErrorKind, LinkStatus, TransportError


def is_good(status: LinkStatus) -> bool:
    """A link is good when the server answered with a non-error code."""
    return 0 < status.http_code < 400


def describe(status: LinkStatus) -> str:
    """Return a one-line description of *status* for display next to the link."""
    outcome = status.outcome

    if isinstance(outcome, TransportError):
        if outcome.kind is ErrorKind.SERVER_NOT_FOUND:
            return "Server not found."
        return f"Error: {outcome.message}"

    code = outcome.code

    if code == 200:
        desc = "OK"
        if status.title:
            desc += f" ({status.title})"
        if status.redirected:
            desc += f" (redirected to {status.actual_url})"
        return desc
    if code == 404:
        return "No page under this URL."
    if code == 403:
        return "Permission denied."
    if code >= 400:
        reason = reason_phrase(code)
        if reason is not None:
            return f"Error {code} {reason}"
    return "Unknown status."
