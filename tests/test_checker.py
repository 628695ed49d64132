"""Tests for document checking (extract + resolve, in parallel).

Mocking strategy:
- ``respx`` patches ``httpx`` at the transport layer; route ``call_count``
  doubles as the network-probe counter.
- The deadline tests use a stub resolver that blocks on a
  ``threading.Event`` instead of a real slow server.
"""

from __future__ import annotations

import threading
from typing import Generator

import httpx
import pytest
import respx

from linkcheck.config import Settings
from linkcheck.scanner.cache import LinkCache
from linkcheck.scanner.checker import LinkChecker, check_document
from linkcheck.scanner.models import ErrorKind, HttpStatus, LinkStatus
from linkcheck.scanner.redirects import ManualRedirects, NativeRedirects
from linkcheck.scanner.resolver import StatusResolver


# ---------------------------------------------------------------------------
# Fixtures / helpers
# ---------------------------------------------------------------------------

@pytest.fixture()
def checker() -> Generator[LinkChecker, None, None]:
    with LinkChecker(StatusResolver(httpx.Client()), max_workers=4) as c:
        yield c


class _BlockingResolver:
    """Answers instantly except for URLs listed in ``slow``, which block."""

    def __init__(self, slow: set[str]) -> None:
        self.slow = slow
        self.release = threading.Event()

    def resolve(self, url: str) -> LinkStatus:
        if url in self.slow:
            self.release.wait(timeout=5)
        return LinkStatus(url=url, actual_url=url, outcome=HttpStatus(200))

    def close(self) -> None:
        self.release.set()


# ---------------------------------------------------------------------------
# check_document
# ---------------------------------------------------------------------------

class TestCheckDocument:
    def test_end_to_end_scenario(self, checker: LinkChecker) -> None:
        text = "Check https://good.example and https://dead.example/404 please"
        with respx.mock:
            respx.get(host="good.example").mock(
                return_value=httpx.Response(200, text="<title>Hi</title>")
            )
            respx.get(host="dead.example", path="/404").mock(return_value=httpx.Response(404))
            results = checker.check_document(text)

        assert [r.url for r in results] == ["https://good.example", "https://dead.example/404"]
        assert results[0].good is True
        assert results[0].description == "OK (Hi)"
        assert results[1].good is False
        assert results[1].description == "No page under this URL."

    def test_no_links(self, checker: LinkChecker) -> None:
        assert checker.check_document("No links in this post.") == []

    def test_preserves_order_of_first_appearance(self, checker: LinkChecker) -> None:
        urls = [f"https://site{i}.example/" for i in range(10)]
        text = " ".join(reversed(urls))
        with respx.mock:
            respx.get(host__regex=r"site\d\.example").mock(return_value=httpx.Response(200))
            results = checker.check_document(text)

        assert [r.url for r in results] == list(reversed(urls))

    def test_failure_does_not_abort_other_links(self, checker: LinkChecker) -> None:
        text = "https://a.example/ https://gone.example/ https://c.example/"
        with respx.mock:
            respx.get(host="a.example").mock(return_value=httpx.Response(200))
            respx.get(host="gone.example").mock(
                side_effect=httpx.ConnectError("[Errno -2] Name or service not known")
            )
            respx.get(host="c.example").mock(return_value=httpx.Response(500))
            results = checker.check_document(text)

        assert [r.http_code for r in results] == [200, 0, 500]
        assert results[1].description == "Server not found."
        assert results[2].description == "Error 500 Internal Server Error"

    def test_duplicate_url_probed_once(self, checker: LinkChecker) -> None:
        text = "https://a.example/page and again https://a.example/page."
        with respx.mock:
            route = respx.get("https://a.example/page").mock(return_value=httpx.Response(200))
            results = checker.check_document(text)

        assert route.call_count == 1
        assert len(results) == 1


# ---------------------------------------------------------------------------
# Caching
# ---------------------------------------------------------------------------

class TestCaching:
    def test_resolve_twice_probes_once(self, checker: LinkChecker) -> None:
        with respx.mock:
            route = respx.get("https://a.example/").mock(
                return_value=httpx.Response(200, text="<title>A</title>")
            )
            first = checker.resolve("https://a.example/")
            second = checker.resolve("https://a.example/")

        assert route.call_count == 1
        assert first == second

    def test_cache_shared_across_documents(self, checker: LinkChecker) -> None:
        with respx.mock:
            route = respx.get("https://a.example/").mock(return_value=httpx.Response(200))
            checker.check_document("post one: https://a.example/")
            checker.check_document("post two: https://a.example/ too")

        assert route.call_count == 1
        assert "https://a.example/" in checker.cache

    def test_cache_keyed_by_requested_url(self, checker: LinkChecker) -> None:
        with respx.mock:
            respx.get("http://a.test/x").mock(
                return_value=httpx.Response(301, headers={"Location": "http://a.test/y"})
            )
            respx.get("http://a.test/y").mock(return_value=httpx.Response(200))
            checker.resolve("http://a.test/x")

        assert "http://a.test/x" in checker.cache
        assert "http://a.test/y" not in checker.cache

    def test_injected_cache_is_used(self) -> None:
        cache = LinkCache()
        seeded = LinkStatus(url="https://a.example/", actual_url="https://a.example/",
                            outcome=HttpStatus(410))
        cache.put("https://a.example/", seeded)
        checker = LinkChecker(StatusResolver(httpx.Client()), cache=cache)

        with respx.mock(assert_all_called=False):
            route = respx.get("https://a.example/").mock(return_value=httpx.Response(200))
            results = checker.check_document("https://a.example/")
        checker.close()

        assert route.call_count == 0
        assert results == [seeded]


# ---------------------------------------------------------------------------
# Redirect policies through the checker
# ---------------------------------------------------------------------------

class TestRedirectPolicies:
    @pytest.mark.parametrize("policy", [NativeRedirects(), ManualRedirects()])
    def test_redirect_cap_inside_document(self, policy) -> None:
        checker = LinkChecker(StatusResolver(httpx.Client(), redirects=policy))
        with respx.mock:
            respx.get(host="loop.test").mock(
                return_value=httpx.Response(302, headers={"Location": "/next"})
            )
            respx.get(host="fine.test").mock(return_value=httpx.Response(200))
            results = checker.check_document("http://loop.test/ and http://fine.test/")
        checker.close()

        assert results[0].http_code == 0
        assert results[0].transport_error.kind is ErrorKind.TOO_MANY_REDIRECTS
        assert results[1].http_code == 200


# ---------------------------------------------------------------------------
# Deadlines
# ---------------------------------------------------------------------------

class TestDeadline:
    def test_unfinished_links_are_cancelled(self) -> None:
        resolver = _BlockingResolver(slow={"https://slow.example/"})
        checker = LinkChecker(resolver, max_workers=2)  # type: ignore[arg-type]
        try:
            results = checker.check_document(
                "https://fast.example/ https://slow.example/", timeout=0.2
            )
        finally:
            checker.close()

        assert results[0].http_code == 200
        assert results[1].http_code == 0
        assert results[1].transport_error.kind is ErrorKind.CANCELLED
        assert results[1].description.startswith("Error: Check deadline")

    def test_cancelled_result_not_cached(self) -> None:
        resolver = _BlockingResolver(slow={"https://slow.example/"})
        checker = LinkChecker(resolver, document_timeout=0.1)  # type: ignore[arg-type]
        try:
            results = checker.check_document("https://slow.example/")
            assert results[0].transport_error is not None
            assert results[0].transport_error.kind is ErrorKind.CANCELLED
            assert checker.cache.get("https://slow.example/") is None
            assert "https://slow.example/" not in checker.cache
        finally:
            checker.close()

    def test_no_deadline_waits_for_all(self) -> None:
        resolver = _BlockingResolver(slow={"https://slow.example/"})
        checker = LinkChecker(resolver)  # type: ignore[arg-type]
        threading.Timer(0.1, resolver.release.set).start()
        results = checker.check_document("https://slow.example/")

        assert results[0].http_code == 200


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestFromSettings:
    def test_builds_from_settings(self, monkeypatch) -> None:
        monkeypatch.setenv("CHECK_CONCURRENCY", "3")
        monkeypatch.setenv("DOCUMENT_TIMEOUT", "0")
        monkeypatch.setenv("REDIRECT_MODE", "manual")
        monkeypatch.setenv("MAX_REDIRECTS", "2")
        config = Settings()

        with LinkChecker.from_settings(config) as checker:
            assert checker.max_workers == 3
            assert checker.document_timeout is None
            assert isinstance(checker.resolver.redirects, ManualRedirects)
            assert checker.resolver.redirects.max_hops == 2

    def test_module_helper_uses_given_checker(self, checker: LinkChecker) -> None:
        with respx.mock:
            respx.get(host="a.example").mock(return_value=httpx.Response(200))
            results = check_document("https://a.example/", checker=checker)

        assert [r.http_code for r in results] == [200]
