"""Mention and citation signals for an AI response against a tracked domain."""

import re
from dataclasses import asdict, dataclass, field

CONTEXT_RADIUS = 100

_URL_PATTERN = re.compile(r"https?://[^\s<>\"{}|\\^`\[\]]+", re.IGNORECASE)
_PROTOCOL_PREFIX = re.compile(r"^https?://")


@dataclass(frozen=True)
class Signal:
    """Visibility signal for one (response, domain) pair."""

    mentioned: bool
    cited: bool
    urls: list[str] = field(default_factory=list)
    context: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def normalize_domain(domain: str) -> str:
    """Lowercase and strip protocol, leading www. and one trailing slash."""
    normalized = _PROTOCOL_PREFIX.sub("", (domain or "").lower())
    if normalized.startswith("www."):
        normalized = normalized[4:]
    if normalized.endswith("/"):
        normalized = normalized[:-1]
    return normalized


def extract_urls(text: str) -> list[str]:
    """All URLs in the text, de-duplicated in order of appearance."""
    return list(dict.fromkeys(_URL_PATTERN.findall(text or "")))


def extract_context(text: str, domain: str, radius: int = CONTEXT_RADIUS) -> list[str]:
    """Excerpts around every occurrence of the (normalized) domain."""
    if not domain:
        return []

    lower_text = text.lower()
    contexts: list[str] = []
    position = 0

    while position < len(lower_text):
        index = lower_text.find(domain, position)
        if index == -1:
            break

        start = max(0, index - radius)
        end = min(len(text), index + len(domain) + radius)
        prefix = "..." if start > 0 else ""
        suffix = "..." if end < len(text) else ""
        contexts.append(prefix + text[start:end].strip() + suffix)

        position = index + len(domain)

    return contexts


def extract_signals(response_text: str, tracked_domain: str) -> Signal:
    """Score a provider response for mentions and citations of a domain."""
    text = response_text or ""
    domain = normalize_domain(tracked_domain)
    urls = extract_urls(text)

    if not domain:
        return Signal(mentioned=False, cited=False, urls=urls, context=[])

    return Signal(
        mentioned=domain in text.lower(),
        cited=any(domain in url.lower() for url in urls),
        urls=urls,
        context=extract_context(text, domain),
    )
