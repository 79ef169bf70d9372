"""Common interface for AI chat providers."""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class LLMProvider(ABC):
    """A vendor chat-completion API reduced to query/test calls.

    Implementations return plain text already pulled out of the vendor's
    response envelope, so callers never see provider-specific shapes.
    """

    name: str
    display_name: str
    models: tuple[str, ...] = ()
    bootstrap_model: str = ""

    @abstractmethod
    def query(self, api_key: str, prompt: str, model: str) -> str:
        """Send a single user message and return the reply text."""

    @abstractmethod
    def _ping(self, api_key: str) -> None:
        """Make the cheapest authenticated call the vendor offers."""

    def test_connection(self, api_key: str) -> bool:
        """Check that the key works. Never raises."""
        try:
            self._ping(api_key)
            return True
        except Exception as e:
            logger.info(f"{self.display_name} connection test failed: {type(e).__name__}")
            return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
