"""AI provider adapters."""

from geotracker.services.providers.base import LLMProvider
from geotracker.services.providers.registry import PROVIDERS, ProviderCredentials, get_provider

__all__ = [
    "LLMProvider",
    "PROVIDERS",
    "ProviderCredentials",
    "get_provider",
]
