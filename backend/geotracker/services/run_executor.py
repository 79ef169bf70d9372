"""Fan a prompt out to several provider/model pairs and record the answers."""

import asyncio
import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from geotracker.exceptions import AllRunsFailedError, MissingCredentialError, PromptNotFoundError
from geotracker.models import Prompt, Run
from geotracker.repositories import PromptRepository, RunRepository, SettingsRepository
from geotracker.services.providers import LLMProvider, ProviderCredentials, get_provider
from geotracker.services.signals import extract_signals

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunTarget:
    """One provider/model pair to query."""

    provider: str
    model: str


class RunExecutor:
    """Executes a prompt against several providers concurrently."""

    def __init__(self, session: AsyncSession, provider_lookup=get_provider):
        self.session = session
        self.provider_lookup = provider_lookup
        self.prompt_repo = PromptRepository(session)
        self.run_repo = RunRepository(session)
        self.settings_repo = SettingsRepository(session)

    async def _run_one(
        self,
        prompt: Prompt,
        target: RunTarget,
        credentials: ProviderCredentials,
        tracked_domain: str,
    ) -> Run:
        provider: LLMProvider = self.provider_lookup(target.provider)
        api_key = credentials.key_for(provider.name)
        if not api_key:
            raise MissingCredentialError(f"API key not configured for {provider.name}")

        response = await asyncio.to_thread(provider.query, api_key, prompt.content, target.model)
        signal = extract_signals(response, tracked_domain)

        return Run(
            prompt_id=prompt.id,
            provider=provider.name,
            model=target.model,
            response=response,
            signals=json.dumps(signal.to_dict()),
        )

    async def execute(self, prompt_id: int, targets: Sequence[RunTarget]) -> list[Run]:
        """Query every target and store the successful runs.

        Failed targets are logged and skipped. Raises AllRunsFailedError when
        nothing succeeded.
        """
        prompt = await self.prompt_repo.get_by_id(prompt_id)
        if prompt is None:
            raise PromptNotFoundError(f"Prompt {prompt_id} not found")

        settings = await self.settings_repo.get()
        credentials = await self.settings_repo.credentials()
        tracked_domain = settings.tracked_domain or ""

        outcomes = await asyncio.gather(
            *(self._run_one(prompt, target, credentials, tracked_domain) for target in targets),
            return_exceptions=True,
        )

        runs: list[Run] = []
        for target, outcome in zip(targets, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(f"Run failed for {target.provider}/{target.model}: {outcome}")
                continue
            runs.append(outcome)

        if not runs:
            raise AllRunsFailedError("All runs failed")

        await self.run_repo.save_many(runs)
        logger.info(f"Stored {len(runs)}/{len(targets)} runs for prompt {prompt_id}")
        return runs
