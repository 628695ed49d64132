"""Scanner package: link extraction, status resolution and document checking."""

from linkcheck.scanner.cache import LinkCache
from linkcheck.scanner.checker import LinkChecker, check_document
from linkcheck.scanner.describe import describe, is_good
from linkcheck.scanner.extractor import extract_links
from linkcheck.scanner.models import ErrorKind, HttpStatus, LinkStatus, TransportError
from linkcheck.scanner.redirects import ManualRedirects, NativeRedirects, redirect_policy
from linkcheck.scanner.resolver import StatusResolver, build_client

__all__ = [
    "extract_links",
    "check_document",
    "describe",
    "is_good",
    "build_client",
    "redirect_policy",
    "ErrorKind",
    "HttpStatus",
    "LinkCache",
    "LinkChecker",
    "LinkStatus",
    "ManualRedirects",
    "NativeRedirects",
    "StatusResolver",
    "TransportError",
]
