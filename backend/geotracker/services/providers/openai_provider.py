"""OpenAI chat completions provider."""

from openai import OpenAI

from geotracker.services.providers.base import LLMProvider

MAX_TOKENS = 2048


class OpenAIProvider(LLMProvider):
    name = "openai"
    display_name = "OpenAI"
    models = ("gpt-4o-search-preview", "gpt-4o", "gpt-4o-mini")
    bootstrap_model = "gpt-4o-mini"

    def _client(self, api_key: str) -> OpenAI:
        return OpenAI(api_key=api_key)

    def query(self, api_key: str, prompt: str, model: str = "gpt-4o") -> str:
        client = self._client(api_key)

        extra: dict = {}
        # Search-preview models answer with live web results
        if "search" in model:
            extra["web_search_options"] = {"search_context_size": "medium"}

        response = client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=MAX_TOKENS,
            **extra,
        )

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    def _ping(self, api_key: str) -> None:
        self._client(api_key).models.list()
