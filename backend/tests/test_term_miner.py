"""Tests for term mining, location candidates and forbidden terms."""

from geotracker.services.forbidden_terms import (
    build_forbidden_terms,
    has_forbidden_term,
    slug_to_tokens,
)
from geotracker.services.html_extractor import ParsedPage
from geotracker.services.term_miner import (
    MAX_LOCATION_CANDIDATES,
    SUGGESTED_TERMS_KEPT,
    build_context,
    extract_location_candidates,
    top_terms,
)


def make_page(title="", description="", headings=None, snippet="", url="https://site.test"):
    return ParsedPage(
        url=url,
        title=title,
        meta_description=description,
        headings=headings or [],
        snippet=snippet,
    )


class TestTopTerms:

    def test_ranked_by_frequency(self):
        text = "boiler boiler boiler drain drain radiator"
        assert top_terms(text, 3) == ["boiler", "drain", "radiator"]

    def test_ties_keep_first_seen_order(self):
        text = "zebra apple mango apple zebra mango"
        assert top_terms(text, 3) == ["zebra", "apple", "mango"]

    def test_stop_words_and_short_words_excluded(self):
        text = "this that with from the and cat boiler"
        assert top_terms(text, 10) == ["boiler"]

    def test_lowercases_input(self):
        assert top_terms("Boiler BOILER boiler", 5) == ["boiler"]

    def test_deterministic(self):
        text = "alpha beta gamma delta alpha beta epsilon zeta"
        assert top_terms(text, 5) == top_terms(text, 5)


class TestForbiddenTerms:

    def test_slug_to_tokens(self):
        assert slug_to_tokens("My-Shop_2024 co") == ["shop", "2024"]

    def test_build_from_domain_and_title(self, site_pages):
        terms = build_forbidden_terms("acmeplumbing.com", site_pages)

        assert terms == [
            "acmeplumbing.com",
            "acmeplumbing",
            "acme",
            "plumbing",
            "acme plumbing",
        ]

    def test_build_without_pages(self):
        assert build_forbidden_terms("best-widgets.io", []) == [
            "best-widgets.io",
            "best",
            "widgets",
            "best-widgets",
        ]

    def test_has_forbidden_term_is_case_insensitive(self):
        assert has_forbidden_term("Call ACME today", ["acme"])
        assert not has_forbidden_term("Call a plumber today", ["acme"])

    def test_blank_terms_never_match(self):
        assert not has_forbidden_term("anything", ["", "   "])


class TestLocationCandidates:

    def test_capitalized_phrases_without_forbidden_terms(self, site_pages):
        forbidden = build_forbidden_terms("acmeplumbing.com", site_pages)

        candidates = extract_location_candidates(site_pages, forbidden)

        assert "Leeds" in candidates
        assert "Manchester" in candidates
        assert not any("Acme" in c for c in candidates)
        assert len(candidates) <= MAX_LOCATION_CANDIDATES

    def test_deduplicated(self):
        pages = [make_page(title="Paris", headings=["Paris", "Paris"])]
        assert extract_location_candidates(pages, []) == ["Paris"]


class TestBuildContext:

    def test_summary_and_terms(self, site_pages):
        forbidden = build_forbidden_terms("acmeplumbing.com", site_pages)

        context = build_context("acmeplumbing.com", site_pages, forbidden)

        assert context.summary.startswith("Domain: acmeplumbing.com")
        assert "Pages analyzed: 3" in context.summary
        assert "Page 2 (/services)" in context.summary
        assert "boiler" in context.suggested_terms
        assert len(context.suggested_terms) <= SUGGESTED_TERMS_KEPT
        assert not any(has_forbidden_term(t, forbidden) for t in context.suggested_terms)

    def test_missing_fields_render_as_na(self):
        context = build_context("site.test", [make_page(snippet="hello")], [])

        assert "Title: n/a" in context.summary
        assert "Headings: n/a" in context.summary
