"""Tests for link extraction from post bodies."""

from __future__ import annotations

import pytest

from linkcheck.scanner.extractor import extract_links


class TestExtractLinks:
    def test_finds_http_and_https(self) -> None:
        text = "Old: http://example.com/a new: https://example.org/b"
        assert extract_links(text) == ["http://example.com/a", "https://example.org/b"]

    def test_no_links_returns_empty(self) -> None:
        assert extract_links("Nothing to see here, just words.") == []

    def test_empty_text(self) -> None:
        assert extract_links("") == []

    def test_scheme_is_case_insensitive(self) -> None:
        assert extract_links("Visit HTTPS://Example.com/Path today") == [
            "HTTPS://Example.com/Path"
        ]

    def test_ignores_other_schemes(self) -> None:
        assert extract_links("ftp://files.example.com and mailto:me@example.com") == []

    def test_keeps_query_and_fragment(self) -> None:
        text = "see https://example.com/search?q=a+b&lang=en#results now"
        assert extract_links(text) == ["https://example.com/search?q=a+b&lang=en#results"]

    def test_is_idempotent(self) -> None:
        text = "a https://x.example/1 b https://y.example/2 c https://x.example/1"
        assert extract_links(text) == extract_links(text)


class TestDeduplication:
    def test_repeated_url_listed_once_at_first_position(self) -> None:
        text = (
            "https://b.example/ first, then https://a.example/ "
            "and https://b.example/ again"
        )
        assert extract_links(text) == ["https://b.example/", "https://a.example/"]

    def test_dedup_is_case_sensitive(self) -> None:
        text = "https://example.com/Page and https://example.com/page"
        assert extract_links(text) == [
            "https://example.com/Page",
            "https://example.com/page",
        ]

    def test_no_normalisation(self) -> None:
        text = "https://example.com and https://example.com/"
        assert extract_links(text) == ["https://example.com", "https://example.com/"]


class TestTrailingPunctuation:
    def test_trailing_comma_excluded(self) -> None:
        text = "See https://example.com/page, it's great."
        assert extract_links(text) == ["https://example.com/page"]

    @pytest.mark.parametrize("mark", [".", ",", ":", "?", "!", ";"])
    def test_sentence_punctuation_excluded(self, mark: str) -> None:
        assert extract_links(f"Go to https://example.com/doc{mark}") == [
            "https://example.com/doc"
        ]

    def test_inner_punctuation_kept(self) -> None:
        text = "https://example.com/a,b;c:d.html."
        assert extract_links(text) == ["https://example.com/a,b;c:d.html"]

    def test_trailing_slash_kept(self) -> None:
        assert extract_links("(https://example.com/dir/)") == ["https://example.com/dir/"]


class TestBoundaries:
    def test_links_inside_html_markup(self) -> None:
        text = '<a href="https://a.example/x">https://a.example/x</a><br>https://b.example/y'
        assert extract_links(text) == ["https://a.example/x", "https://b.example/y"]

    def test_back_to_back_links_separated_by_markup(self) -> None:
        text = "https://a.example/1<https://b.example/2>https://c.example/3"
        assert extract_links(text) == [
            "https://a.example/1",
            "https://b.example/2",
            "https://c.example/3",
        ]

    def test_requires_word_boundary_before_scheme(self) -> None:
        assert extract_links("xhttps://example.com") == []

    def test_scheme_without_host_not_matched(self) -> None:
        assert extract_links("just https:// on its own") == []


class TestAsciiAlphabet:
    def test_non_ascii_letter_ends_the_url(self) -> None:
        assert extract_links("see http://examſple.com today") == ["http://exam"]

    def test_non_ascii_letter_in_scheme(self) -> None:
        assert extract_links("httpſ://x.com") == []

    def test_kelvin_sign_is_not_a_k(self) -> None:
        assert extract_links("http://aK.com") == ["http://a"]

    def test_scheme_after_non_ascii_word(self) -> None:
        assert extract_links("caféhttps://example.com") == ["https://example.com"]
