"""Terms that would identify the tracked site inside a generated prompt."""

import re
from collections.abc import Iterable, Sequence

from geotracker.services.html_extractor import ParsedPage

MIN_TERM_LENGTH = 3

_TLD_PATTERN = re.compile(r"\.[a-z0-9-]+$", re.IGNORECASE)
_TITLE_SEPARATOR = re.compile(r"[-|:]")
_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")


def slug_to_tokens(text: str) -> list[str]:
    """Split text into lowercase alphanumeric tokens of at least 3 chars."""
    return [
        token
        for token in _TOKEN_SPLIT.split(text.lower())
        if len(token) >= MIN_TERM_LENGTH
    ]


def build_forbidden_terms(domain: str, pages: Sequence[ParsedPage]) -> list[str]:
    """Derive the self-identifying terms for a domain.

    Includes the domain, its root (domain minus TLD) whole and tokenized,
    and the homepage title's leading segment whole and tokenized.
    """
    terms: list[str] = [domain.lower()]

    domain_root = _TLD_PATTERN.sub("", domain)
    terms.extend(slug_to_tokens(domain_root))
    terms.append(domain_root.lower())

    homepage_title = pages[0].title if pages else ""
    if homepage_title:
        title_root = _TITLE_SEPARATOR.split(homepage_title)[0].strip() or homepage_title.strip()
        terms.extend(slug_to_tokens(title_root))
        terms.append(title_root.lower())

    # Ordered de-dup keeps prompt payloads deterministic
    return list(dict.fromkeys(term for term in terms if len(term) >= MIN_TERM_LENGTH))


def has_forbidden_term(text: str, forbidden_terms: Iterable[str]) -> bool:
    """Case-insensitive substring test against every forbidden term."""
    lower = (text or "").lower()
    for term in forbidden_terms:
        normalized = term.lower().strip()
        if normalized and normalized in lower:
            return True
    return False
