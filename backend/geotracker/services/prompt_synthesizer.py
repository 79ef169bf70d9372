"""Test prompt synthesis: LLM-assisted generation with a deterministic fallback."""

import asyncio
import json
import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from geotracker.config import Settings
from geotracker.prompts import (
    BEST_PAGE_INSTRUCTION,
    BOOTSTRAP_OUTPUT_SCHEMA,
    BOOTSTRAP_PROMPT_HEADER,
    GENERIC_LOCATION_INSTRUCTION,
    LOCATION_INSTRUCTION,
    SINGLE_PROMPT_CATEGORY,
    SINGLE_PROMPT_REQUEST,
    SINGLE_PROMPT_SYSTEM,
    SUGGESTED_TERMS_INSTRUCTION,
)
from geotracker.services.forbidden_terms import has_forbidden_term
from geotracker.services.html_extractor import ParsedPage
from geotracker.services.providers import PROVIDERS, LLMProvider, ProviderCredentials
from geotracker.services.term_miner import SiteContext, merged_page_text, top_terms

logger = logging.getLogger(__name__)

CATEGORIES = ("informational", "commercial", "transactional", "comparison", "local")

FALLBACK_TERM_COUNT = 24
DEFAULT_LOCATIONS = ("Paris", "London", "New York")
NAME_PREVIEW_LIMIT = 56
NAME_PREVIEW_CUT = 53
FALLBACK_NAME_LIMIT = 60

# Providers tried for single-prompt generation, in order
SINGLE_PROMPT_PROVIDERS = ("openai", "anthropic")

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


@dataclass
class PromptCandidate:
    """A generated test question before it is stored."""

    name: str
    content: str
    category: str | None = None
    best_page_url: str | None = None


@dataclass
class ModelOutput:
    """Provider-agnostic generation result (LLM reply or fallback)."""

    discoveries: list[str] = field(default_factory=list)
    prompts: list[PromptCandidate] = field(default_factory=list)


@dataclass
class GenerationResult:
    """Outcome of the provider cascade."""

    output: ModelOutput | None
    provider_used: str | None


# ---------------------------------------------------------------------------
# Instruction payload
# ---------------------------------------------------------------------------


def build_generation_prompt(
    count: int,
    context: SiteContext,
    forbidden_terms: Sequence[str],
) -> str:
    """Assemble the instruction sent to the providers."""
    lines = [
        BOOTSTRAP_PROMPT_HEADER.format(
            schema=BOOTSTRAP_OUTPUT_SCHEMA,
            count=count,
            categories=", ".join(CATEGORIES),
            forbidden_terms=", ".join(forbidden_terms),
        ),
    ]

    if context.location_candidates:
        lines.append(LOCATION_INSTRUCTION.format(locations=", ".join(context.location_candidates)))
    else:
        lines.append(GENERIC_LOCATION_INSTRUCTION)

    lines.append(BEST_PAGE_INSTRUCTION)

    if context.suggested_terms:
        lines.append(SUGGESTED_TERMS_INSTRUCTION.format(terms=", ".join(context.suggested_terms)))

    lines.append(context.summary)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Reply parsing
# ---------------------------------------------------------------------------


def _raw_text(raw: str) -> str | None:
    return raw.strip()


def _fenced_block(raw: str) -> str | None:
    match = _FENCED_BLOCK.search(raw)
    return match.group(1).strip() if match and match.group(1) else None


def _outer_braces(raw: str) -> str | None:
    first = raw.find("{")
    last = raw.rfind("}")
    if first >= 0 and last > first:
        return raw[first:last + 1]
    return None


# Ordered: the first strategy yielding a structurally valid object wins
PARSE_STRATEGIES: tuple[Callable[[str], str | None], ...] = (
    _raw_text,
    _fenced_block,
    _outer_braces,
)


def _optional_str(value: object) -> str | None:
    return value if isinstance(value, str) else None


def _coerce_model_output(data: object) -> ModelOutput | None:
    if not isinstance(data, dict) or not isinstance(data.get("prompts"), list):
        return None

    discoveries = data.get("discoveries")
    if not isinstance(discoveries, list):
        discoveries = []

    prompts = [
        PromptCandidate(
            name=item["name"],
            content=item["content"],
            category=_optional_str(item.get("category")),
            best_page_url=_optional_str(item.get("best_page_url")),
        )
        for item in data["prompts"]
        if isinstance(item, dict)
        and isinstance(item.get("name"), str)
        and isinstance(item.get("content"), str)
    ]

    return ModelOutput(
        discoveries=[d for d in discoveries if isinstance(d, str)],
        prompts=prompts,
    )


def parse_model_output(raw: str) -> ModelOutput | None:
    """Parse a loosely structured LLM reply.

    Returns None when no strategy yields an object with a ``prompts`` list.
    That is an expected outcome with untrusted provider output, not an error.
    """
    if not raw:
        return None

    for strategy in PARSE_STRATEGIES:
        candidate = strategy(raw)
        if not candidate:
            continue
        # Deeply nested replies exhaust the decoder stack
        try:
            data = json.loads(candidate)
        except (ValueError, RecursionError):
            continue
        output = _coerce_model_output(data)
        if output is not None:
            return output

    return None


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def _preview_name(content: str) -> str:
    if len(content) > NAME_PREVIEW_LIMIT:
        return f"{content[:NAME_PREVIEW_CUT].strip()}..."
    return content


def normalize_prompt_candidates(
    candidates: Sequence[PromptCandidate],
    count: int,
    forbidden_terms: Sequence[str],
) -> list[PromptCandidate]:
    """Trim, filter, de-duplicate and cap a batch of candidates.

    Candidates whose name or content contains a forbidden term are dropped,
    as are case-insensitive duplicates of an earlier content.
    """
    seen: set[str] = set()
    normalized: list[PromptCandidate] = []

    for candidate in candidates:
        if len(normalized) >= count:
            break

        content = (candidate.content or "").strip()
        if not content:
            continue
        name = candidate.name or ""
        if has_forbidden_term(content, forbidden_terms) or has_forbidden_term(name, forbidden_terms):
            continue

        key = content.lower()
        if key in seen:
            continue
        seen.add(key)

        normalized.append(PromptCandidate(
            name=name.strip() or _preview_name(content),
            content=content,
            category=(candidate.category or "").strip() or None,
            best_page_url=(candidate.best_page_url or "").strip() or None,
        ))

    return normalized


def merge_with_fallback(
    primary: list[PromptCandidate],
    fallback: Sequence[PromptCandidate],
    count: int,
    minimum: int = 10,
) -> list[PromptCandidate]:
    """Top up a short batch from the fallback set, skipping duplicates."""
    merged = list(primary)
    if len(merged) >= minimum:
        return merged

    seen = {p.content.lower() for p in merged}
    for candidate in fallback:
        if len(merged) >= count:
            break
        key = candidate.content.lower()
        if key in seen:
            continue
        seen.add(key)
        merged.append(candidate)

    return merged


# ---------------------------------------------------------------------------
# Deterministic fallback
# ---------------------------------------------------------------------------


def _informational(term_a: str, term_b: str, audience: str, location: str) -> str:
    return f"What should {audience} know before choosing {term_a} in {location}?"


def _commercial(term_a: str, term_b: str, audience: str, location: str) -> str:
    return f"What are the best {term_a} providers offering {term_b} for {audience} in {location}?"


def _transactional(term_a: str, term_b: str, audience: str, location: str) -> str:
    return f"I need {term_a} for {audience} in {location}. Which company should I contact first?"


def _comparison(term_a: str, term_b: str, audience: str, location: str) -> str:
    return f"Compare top {term_a} options in {location} and explain how {term_b} differs for {audience}."


def _local(term_a: str, term_b: str, audience: str, location: str) -> str:
    return f"What does {term_a} usually include for {audience} in {location}, and how is {term_b} handled?"


FALLBACK_TEMPLATES: tuple[tuple[str, Callable[[str, str, str, str], str]], ...] = (
    ("informational", _informational),
    ("commercial", _commercial),
    ("transactional", _transactional),
    ("comparison", _comparison),
    ("local", _local),
)


def build_fallback(
    domain: str,
    pages: Sequence[ParsedPage],
    count: int,
    forbidden_terms: Sequence[str],
    location_candidates: Sequence[str],
) -> ModelOutput:
    """Generate ``count`` template prompts from the crawl without any network call."""
    terms = [
        term
        for term in top_terms(merged_page_text(pages), FALLBACK_TERM_COUNT)
        if not has_forbidden_term(term, forbidden_terms)
    ]
    primary_term = terms[0] if terms else domain
    secondary_term = terms[1] if len(terms) > 1 else "services"
    audience = terms[2] if len(terms) > 2 else "businesses"
    locations = list(location_candidates) or list(DEFAULT_LOCATIONS)
    pool = max(len(terms), 1)

    prompts: list[PromptCandidate] = []
    for index in range(count):
        category, make = FALLBACK_TEMPLATES[index % len(FALLBACK_TEMPLATES)]
        term_a = terms[index % pool] if terms else primary_term
        term_b = terms[(index + 1) % pool] if terms else secondary_term
        location = locations[index % len(locations)]
        prompts.append(PromptCandidate(
            name=f"{category}: {term_a}"[:FALLBACK_NAME_LIMIT],
            content=make(term_a, term_b, audience, location),
            category=category,
            best_page_url=None,
        ))

    discoveries: list[str] = []
    if terms:
        discoveries.append(f"Top repeated topics: {', '.join(terms[:5])}")
    discoveries.append(f"Generated fallback prompts from {len(pages)} scanned pages.")
    discoveries.append("Run a GEO batch now to validate mention and citation rates.")

    return ModelOutput(discoveries=discoveries, prompts=prompts)


# ---------------------------------------------------------------------------
# Provider cascade
# ---------------------------------------------------------------------------


class PromptSynthesizer:
    """Runs prompt generation against the configured providers in priority order."""

    def __init__(self, settings: Settings, providers: Sequence[LLMProvider] = PROVIDERS):
        self.settings = settings
        self.providers = tuple(providers)
        self._models = {
            "openai": settings.openai_bootstrap_model,
            "anthropic": settings.anthropic_bootstrap_model,
            "perplexity": settings.perplexity_bootstrap_model,
        }

    def model_for(self, provider: LLMProvider) -> str:
        return self._models.get(provider.name) or provider.bootstrap_model

    def available_providers(self, credentials: ProviderCredentials) -> list[LLMProvider]:
        """Providers with a configured key, in priority order."""
        return [p for p in self.providers if credentials.key_for(p.name)]

    async def generate_with_model(
        self,
        credentials: ProviderCredentials,
        count: int,
        context: SiteContext,
        forbidden_terms: Sequence[str],
    ) -> GenerationResult:
        """Ask each available provider in turn until one reply parses."""
        prompt = build_generation_prompt(count, context, forbidden_terms)

        for provider in self.available_providers(credentials):
            model = self.model_for(provider)
            logger.info(f"Generating {count} prompts with {provider.name} {model}...")
            try:
                raw = await asyncio.to_thread(
                    provider.query, credentials.key_for(provider.name), prompt, model
                )
                parsed = parse_model_output(raw)
            except Exception as e:
                logger.warning(f"{provider.display_name} bootstrap generation failed: {e}")
                continue

            if parsed is not None:
                logger.info(f"{provider.name} returned {len(parsed.prompts)} prompt candidates")
                return GenerationResult(output=parsed, provider_used=provider.name)

            logger.warning(f"{provider.display_name} reply could not be parsed, trying next provider")

        return GenerationResult(output=None, provider_used=None)

    async def generate_single(
        self,
        credentials: ProviderCredentials,
        topic: str,
        category: str | None = None,
    ) -> str | None:
        """Write one GEO test question about a topic."""
        request = SINGLE_PROMPT_REQUEST.format(topic=topic)
        if category:
            request = f"{request}\n{SINGLE_PROMPT_CATEGORY.format(category=category)}"
        prompt = f"{SINGLE_PROMPT_SYSTEM}\n\n{request}"

        for provider in self.available_providers(credentials):
            if provider.name not in SINGLE_PROMPT_PROVIDERS:
                continue
            try:
                text = await asyncio.to_thread(
                    provider.query,
                    credentials.key_for(provider.name),
                    prompt,
                    self.model_for(provider),
                )
            except Exception as e:
                logger.warning(f"{provider.display_name} prompt generation failed: {e}")
                continue
            if text and text.strip():
                return text.strip()

        return None
