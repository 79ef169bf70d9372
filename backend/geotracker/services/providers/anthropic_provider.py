"""Anthropic messages provider."""

from anthropic import Anthropic

from geotracker.services.providers.base import LLMProvider

MAX_TOKENS = 2048


class AnthropicProvider(LLMProvider):
    name = "anthropic"
    display_name = "Anthropic"
    models = ("claude-sonnet-4-20250514", "claude-haiku-4-20250514")
    bootstrap_model = "claude-haiku-4-20250514"

    def _client(self, api_key: str) -> Anthropic:
        return Anthropic(api_key=api_key)

    def query(self, api_key: str, prompt: str, model: str = "claude-sonnet-4-20250514") -> str:
        client = self._client(api_key)

        response = client.messages.create(
            model=model,
            max_tokens=MAX_TOKENS,
            messages=[{"role": "user", "content": prompt}],
        )

        # Only text blocks carry the answer
        return "\n".join(block.text for block in response.content if block.type == "text")

    def _ping(self, api_key: str) -> None:
        self._client(api_key).messages.create(
            model=self.bootstrap_model,
            max_tokens=10,
            messages=[{"role": "user", "content": "Hi"}],
        )
