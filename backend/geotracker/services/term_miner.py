"""Topical term and location mining over a crawled page corpus."""

import re
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from urllib.parse import urlparse

from geotracker.services.forbidden_terms import has_forbidden_term
from geotracker.services.html_extractor import ParsedPage

SUGGESTED_TERMS_COMPUTED = 22
SUGGESTED_TERMS_KEPT = 16
MAX_LOCATION_CANDIDATES = 6

STOP_WORDS = frozenset([
    "about", "after", "again", "also", "been", "being", "below", "between", "both",
    "because", "before", "cannot", "could", "every", "from", "have", "having", "into",
    "just", "like", "many", "more", "most", "other", "over", "same", "some", "such",
    "than", "that", "their", "there", "these", "they", "this", "those", "through",
    "under", "very", "what", "when", "where", "which", "while", "with", "your",
    # Web boilerplate
    "http", "https", "www", "home", "page", "contact", "privacy", "terms", "cookie",
])

_WORD_PATTERN = re.compile(r"[a-z][a-z0-9-]{3,}")
_CAPITALIZED_PHRASE = re.compile(r"\b[A-Z][a-z]{2,}(?:\s+[A-Z][a-z]{2,}){0,2}\b")


@dataclass(frozen=True)
class SiteContext:
    """Digest of a crawl handed to prompt generation."""

    summary: str
    suggested_terms: list[str] = field(default_factory=list)
    location_candidates: list[str] = field(default_factory=list)


def merged_page_text(pages: Sequence[ParsedPage]) -> str:
    """Concatenate the textual signal of every page."""
    return " ".join(
        f"{page.title} {page.meta_description} {' '.join(page.headings)} {page.snippet}"
        for page in pages
    )


def top_terms(text: str, count: int) -> list[str]:
    """Most frequent non-stop-word terms, most frequent first.

    Ties keep the order in which terms were first seen.
    """
    words = _WORD_PATTERN.findall(text.lower())
    frequencies = Counter(word for word in words if word not in STOP_WORDS)

    # Counter preserves insertion order and sorted() is stable
    ranked = sorted(frequencies.items(), key=lambda item: item[1], reverse=True)
    return [word for word, _ in ranked[:count]]


def extract_location_candidates(
    pages: Sequence[ParsedPage],
    forbidden_terms: Sequence[str],
) -> list[str]:
    """Capitalized 1-3 word phrases from titles, descriptions and headings."""
    source = " | ".join(
        " | ".join([page.title, page.meta_description, *page.headings])
        for page in pages
    )

    candidates: list[str] = []
    for match in _CAPITALIZED_PHRASE.findall(source):
        value = match.strip()
        if len(value) < 3:
            continue
        if has_forbidden_term(value, forbidden_terms):
            continue
        if value.lower() in STOP_WORDS:
            continue
        if value not in candidates:
            candidates.append(value)
        if len(candidates) >= MAX_LOCATION_CANDIDATES:
            break

    return candidates


def _page_path(url: str) -> str:
    try:
        return urlparse(url).path or "/"
    except ValueError:
        return "/"


def _summarize_page(index: int, page: ParsedPage) -> str:
    headings = " | ".join(page.headings) if page.headings else "n/a"
    return "\n".join([
        f"Page {index} ({_page_path(page.url)})",
        f"Title: {page.title or 'n/a'}",
        f"Description: {page.meta_description or 'n/a'}",
        f"Headings: {headings}",
        f"Snippet: {page.snippet}",
    ])


def build_context(
    domain: str,
    pages: Sequence[ParsedPage],
    forbidden_terms: Sequence[str],
) -> SiteContext:
    """Build the context passed to prompt generation."""
    page_summaries = [_summarize_page(i, page) for i, page in enumerate(pages, 1)]

    suggested_terms = [
        term
        for term in top_terms(merged_page_text(pages), SUGGESTED_TERMS_COMPUTED)
        if not has_forbidden_term(term, forbidden_terms)
    ]

    summary = "\n\n".join([
        f"Domain: {domain}",
        f"Pages analyzed: {len(pages)}",
        "\n\n".join(page_summaries),
    ])

    return SiteContext(
        summary=summary,
        suggested_terms=suggested_terms[:SUGGESTED_TERMS_KEPT],
        location_candidates=extract_location_candidates(pages, forbidden_terms),
    )
