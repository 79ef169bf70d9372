"""Ordered provider registry and per-provider credentials."""

from dataclasses import dataclass

from geotracker.exceptions import UnknownProviderError
from geotracker.services.providers.anthropic_provider import AnthropicProvider
from geotracker.services.providers.base import LLMProvider
from geotracker.services.providers.openai_provider import OpenAIProvider
from geotracker.services.providers.perplexity_provider import PerplexityProvider

# Priority order for prompt generation: general chat first, search last
PROVIDERS: tuple[LLMProvider, ...] = (
    OpenAIProvider(),
    AnthropicProvider(),
    PerplexityProvider(),
)


def get_provider(name: str) -> LLMProvider:
    """Look up a provider by name."""
    for provider in PROVIDERS:
        if provider.name == name:
            return provider
    raise UnknownProviderError(f"Unknown provider: {name}")


@dataclass(frozen=True)
class ProviderCredentials:
    """API keys for each provider; None means not configured."""

    openai: str | None = None
    anthropic: str | None = None
    perplexity: str | None = None

    def key_for(self, provider_name: str) -> str | None:
        keys = {
            "openai": self.openai,
            "anthropic": self.anthropic,
            "perplexity": self.perplexity,
        }
        return keys.get(provider_name) or None
