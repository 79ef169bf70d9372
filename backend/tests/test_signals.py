"""Tests for mention/citation signal extraction."""

from geotracker.services.signals import (
    extract_context,
    extract_signals,
    extract_urls,
    normalize_domain,
)


class TestNormalizeDomain:

    def test_strips_protocol_www_and_slash(self):
        assert normalize_domain("https://www.Example.com/") == "example.com"
        assert normalize_domain("http://example.com") == "example.com"
        assert normalize_domain("example.com") == "example.com"

    def test_empty(self):
        assert normalize_domain("") == ""


class TestExtractUrls:

    def test_deduplicated_in_order(self):
        text = "See https://b.test/x and http://a.test, then https://b.test/x again."

        assert extract_urls(text) == ["https://b.test/x", "http://a.test,"]

    def test_stops_at_brackets_and_quotes(self):
        assert extract_urls('link: "https://a.test/page" [https://b.test]') == [
            "https://a.test/page",
            "https://b.test",
        ]


class TestExtractSignals:

    def test_mention_and_citation(self):
        text = "Check out https://www.example.com/pricing and example.com is great"

        signal = extract_signals(text, "example.com")

        assert signal.mentioned is True
        assert signal.cited is True
        assert signal.urls == ["https://www.example.com/pricing"]
        assert len(signal.context) == 2

    def test_mention_without_citation(self):
        signal = extract_signals("People often recommend Example.com for this.", "https://example.com")

        assert signal.mentioned is True
        assert signal.cited is False
        assert signal.urls == []

    def test_empty_domain_still_extracts_urls(self):
        signal = extract_signals("Try https://other.test today", "")

        assert signal.mentioned is False
        assert signal.cited is False
        assert signal.urls == ["https://other.test"]
        assert signal.context == []

    def test_not_mentioned(self):
        signal = extract_signals("Nothing relevant here.", "example.com")

        assert signal.mentioned is False
        assert signal.context == []

    def test_to_dict(self):
        signal = extract_signals("example.com", "example.com")

        assert signal.to_dict() == {
            "mentioned": True,
            "cited": False,
            "urls": [],
            "context": ["example.com"],
        }


class TestExtractContext:

    def test_clipped_excerpts_get_ellipses(self):
        text = "a" * 150 + " example.com " + "b" * 150

        [excerpt] = extract_context(text, "example.com", radius=20)

        assert excerpt.startswith("...")
        assert excerpt.endswith("...")
        assert "example.com" in excerpt

    def test_unclipped_excerpt_has_no_ellipses(self):
        assert extract_context("Visit example.com now", "example.com") == ["Visit example.com now"]

    def test_case_insensitive_occurrences(self):
        text = "EXAMPLE.COM first, example.com second"

        assert len(extract_context(text, "example.com")) == 2
