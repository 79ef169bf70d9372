"""Plain-text and metadata extraction from raw HTML.

Static markup only: nothing here executes scripts. All helpers tolerate
malformed HTML and return empty values rather than raising.
"""

import re
from dataclasses import dataclass, field
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

SNIPPET_LENGTH = 650
DEFAULT_HEADING_LIMIT = 4

_BLOCK_PATTERNS = [
    re.compile(r"<script[\s\S]*?</script\s*>", re.IGNORECASE),
    re.compile(r"<style[\s\S]*?</style\s*>", re.IGNORECASE),
    re.compile(r"<noscript[\s\S]*?</noscript\s*>", re.IGNORECASE),
]
_TAG_PATTERN = re.compile(r"<[^>]+>")
_ENTITIES = [
    (re.compile(r"&nbsp;", re.IGNORECASE), " "),
    (re.compile(r"&amp;", re.IGNORECASE), "&"),
    (re.compile(r"&quot;", re.IGNORECASE), '"'),
    (re.compile(r"&#39;", re.IGNORECASE), "'"),
]
_TITLE_PATTERN = re.compile(r"<title[^>]*>([\s\S]*?)</title>", re.IGNORECASE)
_HEADING_PATTERN = re.compile(r"<(h1|h2)[^>]*>([\s\S]*?)</\1>", re.IGNORECASE)
_SKIPPED_SCHEMES = ("mailto:", "tel:", "javascript:")
_ASSET_EXTENSIONS = (".pdf", ".jpg", ".jpeg", ".png", ".webp", ".gif", ".zip", ".svg", ".js", ".css")
_META_DESCRIPTION_KEYS = ("description", "og:description")
_DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True)
class ParsedPage:
    """Text signal extracted from one fetched page."""

    url: str
    title: str
    meta_description: str
    headings: list[str] = field(default_factory=list)
    snippet: str = ""


def strip_tags(html: str) -> str:
    """Flatten HTML to a single line of visible text."""
    if not html:
        return ""

    text = html
    for pattern in _BLOCK_PATTERNS:
        text = pattern.sub(" ", text)
    text = _TAG_PATTERN.sub(" ", text)
    # Unterminated tags ("<div class=") survive the tag pattern
    text = text.replace("<", " ").replace(">", " ")
    for pattern, replacement in _ENTITIES:
        text = pattern.sub(replacement, text)

    return re.sub(r"\s+", " ", text).strip()


def extract_title(html: str) -> str:
    """Extract the first <title> as plain text."""
    match = _TITLE_PATTERN.search(html or "")
    return strip_tags(match.group(1)) if match else ""


def extract_meta_description(html: str) -> str:
    """Return the content of the first description or og:description meta tag."""
    soup = BeautifulSoup(html or "", "lxml")

    for tag in soup.find_all("meta"):
        key = (tag.get("name") or tag.get("property") or "").strip().lower()
        content = tag.get("content")
        if not content or not content.strip():
            continue
        if key in _META_DESCRIPTION_KEYS:
            return content.strip()

    return ""


def extract_headings(html: str, limit: int = DEFAULT_HEADING_LIMIT) -> list[str]:
    """Extract distinct H1/H2 texts in document order."""
    headings: list[str] = []

    for match in _HEADING_PATTERN.finditer(html or ""):
        if len(headings) >= limit:
            break
        cleaned = strip_tags(match.group(2))
        if cleaned and cleaned not in headings:
            headings.append(cleaned)

    return headings


def canonicalize_url(url: str) -> str:
    """Reduce a URL to lowercase origin plus path.

    Query, fragment, userinfo and the scheme's default port are dropped, as
    are trailing slashes on non-root paths.
    """
    parsed = urlparse(url)
    host = parsed.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    port = parsed.port
    if port is not None and port != _DEFAULT_PORTS.get(parsed.scheme):
        host = f"{host}:{port}"

    path = parsed.path or "/"
    if path != "/":
        path = path.rstrip("/") or "/"
    return f"{parsed.scheme}://{host}{path}"


def extract_internal_links(html: str, base_url: str, limit: int) -> list[str]:
    """Extract same-host page links, canonicalized and de-duplicated.

    Asset links (images, archives, scripts, stylesheets, PDFs) are skipped,
    as is the base page itself.
    """
    if limit <= 0:
        return []

    soup = BeautifulSoup(html or "", "lxml")
    base_host = urlparse(base_url).hostname
    base_canonical = canonicalize_url(base_url)
    links: list[str] = []

    for anchor in soup.find_all("a", href=True):
        if len(links) >= limit:
            break

        href = anchor["href"].strip()
        if not href or href.startswith("#"):
            continue
        if href.lower().startswith(_SKIPPED_SCHEMES):
            continue

        try:
            absolute = urljoin(base_url, href)
            parsed = urlparse(absolute)
            host = parsed.hostname
            # Malformed or out-of-range ports raise here
            canonical = canonicalize_url(absolute)
        except ValueError:
            continue

        if parsed.scheme not in ("http", "https") or host != base_host:
            continue
        if parsed.path.lower().endswith(_ASSET_EXTENSIONS):
            continue

        if canonical != base_canonical and canonical not in links:
            links.append(canonical)

    return links


def parse_page(url: str, html: str) -> ParsedPage:
    """Build a ParsedPage from a fetched document."""
    return ParsedPage(
        url=url,
        title=extract_title(html),
        meta_description=extract_meta_description(html),
        headings=extract_headings(html),
        snippet=strip_tags(html)[:SNIPPET_LENGTH],
    )
