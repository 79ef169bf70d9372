"""Domain exceptions raised by the service layer.

Routes translate these into HTTP responses; nothing below the API layer
knows about status codes.
"""


class GeoTrackerError(Exception):
    """Base class for all application errors."""


class BootstrapError(GeoTrackerError):
    """A prompt bootstrap request could not be completed."""


class InvalidDomainError(BootstrapError):
    """The submitted domain is missing or cannot be parsed as a URL."""


class SiteUnreachableError(BootstrapError):
    """The homepage could not be fetched over HTTPS or HTTP."""


class PromptGenerationError(BootstrapError):
    """Neither the providers nor the fallback produced a usable prompt."""


class ProviderError(GeoTrackerError):
    """An AI provider could not be used."""


class UnknownProviderError(ProviderError):
    """No provider is registered under the requested name."""


class MissingCredentialError(ProviderError):
    """The provider has no API key configured."""


class PromptNotFoundError(GeoTrackerError):
    """The referenced prompt does not exist."""


class AllRunsFailedError(GeoTrackerError):
    """Every provider query in a run batch failed."""
