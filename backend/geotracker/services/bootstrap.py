"""Prompt bootstrap: turn a website into a stored collection of test prompts.

Flow: validate input -> crawl -> mine terms -> generate (LLM cascade or
fallback) -> normalize -> persist in one transaction.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from urllib.parse import urlparse

from sqlalchemy.ext.asyncio import AsyncSession

from geotracker.config import Settings
from geotracker.exceptions import (
    InvalidDomainError,
    PromptGenerationError,
    SiteUnreachableError,
)
from geotracker.repositories import CollectionRepository, SettingsRepository
from geotracker.services.crawler import SiteCrawler
from geotracker.services.forbidden_terms import build_forbidden_terms
from geotracker.services.prompt_synthesizer import (
    PromptSynthesizer,
    build_fallback,
    merge_with_fallback,
    normalize_prompt_candidates,
)
from geotracker.services.term_miner import build_context

logger = logging.getLogger(__name__)

DEFAULT_PROMPT_COUNT = 30
MIN_PROMPT_COUNT = 10
MAX_PROMPT_COUNT = 40
MAX_DISCOVERIES = 6

_SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
_HOSTNAME_PATTERN = re.compile(r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?(\.[a-z0-9]([a-z0-9-]*[a-z0-9])?)*$")


@dataclass
class BootstrapResult:
    """Summary returned to the caller after a successful bootstrap."""

    collection_id: int
    collection_name: str
    created_prompts: int
    discoveries: list[str] = field(default_factory=list)
    provider_used: str | None = None
    pages_scanned: int = 0


def clamp_count(
    value: object,
    default: int = DEFAULT_PROMPT_COUNT,
    minimum: int = MIN_PROMPT_COUNT,
    maximum: int = MAX_PROMPT_COUNT,
) -> int:
    """Coerce a requested prompt count into the supported range.

    Missing, zero, NaN or non-numeric values fall back to the default.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if number == 0 or math.isnan(number):
        return default
    if math.isinf(number):
        return maximum if number > 0 else minimum
    return max(minimum, min(maximum, math.floor(number)))


def normalize_website_input(raw: str | None) -> tuple[str, str] | None:
    """Split user input into (domain, base_url).

    The domain is the lowercase hostname without a leading ``www.``. The base
    URL keeps the given scheme (https when none was typed) and the hostname.
    """
    trimmed = (raw or "").strip()
    if not trimmed:
        return None

    with_scheme = trimmed if _SCHEME_PATTERN.match(trimmed) else f"https://{trimmed}"
    try:
        parsed = urlparse(with_scheme)
        hostname = parsed.hostname
    except ValueError:
        return None

    if not hostname or not _HOSTNAME_PATTERN.match(hostname):
        return None

    domain = hostname[4:] if hostname.startswith("www.") else hostname
    if not domain:
        return None

    return domain, f"{parsed.scheme.lower()}://{hostname}"


class BootstrapService:
    """Builds a prompt collection for a website."""

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings,
        crawler: SiteCrawler | None = None,
        synthesizer: PromptSynthesizer | None = None,
    ):
        self.session = session
        self.settings = settings
        self.crawler = crawler or SiteCrawler(settings)
        self.synthesizer = synthesizer or PromptSynthesizer(settings)
        self.settings_repo = SettingsRepository(session)
        self.collection_repo = CollectionRepository(session)

    async def bootstrap(self, domain: str | None, count: object = None) -> BootstrapResult:
        """Crawl a site and store a collection of generated prompts.

        Raises:
            InvalidDomainError: domain missing or unparseable
            SiteUnreachableError: homepage could not be fetched
            PromptGenerationError: no prompt survived normalization
        """
        requested = clamp_count(
            count,
            default=self.settings.default_prompt_count,
            minimum=self.settings.min_prompt_count,
            maximum=self.settings.max_prompt_count,
        )

        if not (domain or "").strip():
            raise InvalidDomainError("domain is required")

        normalized = normalize_website_input(domain)
        if normalized is None:
            raise InvalidDomainError("invalid domain")
        site_domain, base_url = normalized

        pages = await self.crawler.build_site_snapshot(base_url)
        if not pages:
            raise SiteUnreachableError("could not fetch website")

        forbidden_terms = build_forbidden_terms(site_domain, pages)
        context = build_context(site_domain, pages, forbidden_terms)

        credentials = await self.settings_repo.credentials()
        generated = await self.synthesizer.generate_with_model(
            credentials, requested, context, forbidden_terms
        )

        fallback = build_fallback(
            site_domain, pages, requested, forbidden_terms, context.location_candidates
        )
        output = generated.output or fallback
        if generated.output is None:
            logger.info(f"Using fallback prompts for {site_domain}")

        prompts = normalize_prompt_candidates(output.prompts, requested, forbidden_terms)
        prompts = merge_with_fallback(
            prompts,
            normalize_prompt_candidates(fallback.prompts, requested, forbidden_terms),
            requested,
            minimum=self.settings.min_prompt_count,
        )
        if not prompts:
            raise PromptGenerationError("failed to generate prompts")

        collection_name = f"Auto {site_domain}"
        try:
            collection, _ = await self.collection_repo.create_with_prompts(collection_name, prompts)
        except Exception:
            await self.session.rollback()
            raise

        discoveries = [d.strip() for d in output.discoveries if d.strip()][:MAX_DISCOVERIES]
        if not discoveries:
            discoveries = [
                f"Scanned {len(pages)} pages from {site_domain}.",
                f"Main terms: {', '.join(context.suggested_terms[:5]) or 'n/a'}.",
            ]

        logger.info(
            f"Bootstrapped {len(prompts)} prompts for {site_domain} "
            f"(provider={generated.provider_used or 'fallback'}, pages={len(pages)})"
        )

        return BootstrapResult(
            collection_id=collection.id,
            collection_name=collection_name,
            created_prompts=len(prompts),
            discoveries=discoveries,
            provider_used=generated.provider_used,
            pages_scanned=len(pages),
        )
