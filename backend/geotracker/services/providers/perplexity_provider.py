"""Perplexity provider (OpenAI-compatible API)."""

from openai import OpenAI

from geotracker.services.providers.base import LLMProvider

PERPLEXITY_BASE_URL = "https://api.perplexity.ai"
MAX_TOKENS = 2048


class PerplexityProvider(LLMProvider):
    name = "perplexity"
    display_name = "Perplexity"
    models = ("sonar-pro", "sonar")
    bootstrap_model = "sonar"

    def _client(self, api_key: str) -> OpenAI:
        return OpenAI(api_key=api_key, base_url=PERPLEXITY_BASE_URL)

    def query(self, api_key: str, prompt: str, model: str = "sonar") -> str:
        response = self._client(api_key).chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=MAX_TOKENS,
        )

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    def _ping(self, api_key: str) -> None:
        self._client(api_key).chat.completions.create(
            model=self.bootstrap_model,
            messages=[{"role": "user", "content": "Hi"}],
            max_tokens=10,
        )
