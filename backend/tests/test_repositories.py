"""Tests for the SQLAlchemy repositories."""

import pytest

from geotracker.models import Prompt
from geotracker.repositories import CollectionRepository, PromptRepository, SettingsRepository
from geotracker.repositories.sql import DEFAULT_PROMPTS
from geotracker.services.prompt_synthesizer import PromptCandidate


class TestSettingsRepository:

    @pytest.mark.asyncio
    async def test_row_is_created_once(self, session):
        repo = SettingsRepository(session)

        first = await repo.get()
        second = await repo.get()

        assert first is second
        assert first.id == 1
        assert first.tracked_domain == ""

    @pytest.mark.asyncio
    async def test_credentials(self, session):
        repo = SettingsRepository(session)
        await repo.update({"openai_api_key": "sk-1", "unknown_field": "ignored"})

        credentials = await repo.credentials()

        assert credentials.key_for("openai") == "sk-1"
        assert credentials.key_for("anthropic") is None
        assert credentials.key_for("unknown") is None


class TestPromptRepository:

    @pytest.mark.asyncio
    async def test_seed_defaults_only_when_empty(self, session):
        repo = PromptRepository(session)

        assert await repo.seed_defaults() == len(DEFAULT_PROMPTS)
        assert await repo.seed_defaults() == 0
        assert await repo.count() == len(DEFAULT_PROMPTS)

    @pytest.mark.asyncio
    async def test_delete_cascades_memberships(self, session):
        prompt = await PromptRepository(session).save(Prompt(name="A", content="A?"))
        collections = CollectionRepository(session)
        collection = await collections.create("Group", [prompt.id])

        assert await PromptRepository(session).delete(prompt.id) is True

        stored = await collections.get_by_id(collection.id)
        assert stored.memberships == []


class TestCollectionRepository:

    @pytest.mark.asyncio
    async def test_create_with_prompts(self, session):
        repo = CollectionRepository(session)

        collection, prompts = await repo.create_with_prompts("Auto site.test", [
            PromptCandidate(name="One", content="First?", category="local"),
            PromptCandidate(name="Two", content="Second?"),
        ])

        stored = await repo.get_by_id(collection.id)
        assert sorted(m.prompt_id for m in stored.memberships) == sorted(p.id for p in prompts)
        assert prompts[0].category == "local"
        assert prompts[1].category is None
