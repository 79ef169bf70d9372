"""SQLAlchemy repository implementations.

Each repository wraps the request's AsyncSession and only flushes; the
caller (normally the get_db dependency) owns commit and rollback.
"""

from collections.abc import Iterable, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from geotracker.models import AppSettings, Collection, Prompt, PromptCollection, Run
from geotracker.models.app_settings import SETTINGS_ROW_ID
from geotracker.services.prompt_synthesizer import PromptCandidate
from geotracker.services.providers import ProviderCredentials

DEFAULT_PROMPTS = (
    ("Best tools for SEO", "What are the best tools for search engine optimization in 2025?", "SEO"),
    ("Top marketing platforms", "What are the top marketing automation platforms for small businesses?", "Marketing"),
    ("Website analytics solutions", "What website analytics solutions do you recommend for tracking user behavior?", "Analytics"),
)

API_KEY_FIELDS = ("openai_api_key", "anthropic_api_key", "perplexity_api_key")


class SettingsRepository:
    """Access to the single settings row."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self) -> AppSettings:
        """Get the settings row, creating an empty one if missing."""
        settings = await self.session.get(AppSettings, SETTINGS_ROW_ID)
        if settings is None:
            settings = AppSettings(id=SETTINGS_ROW_ID, tracked_domain="")
            self.session.add(settings)
            await self.session.flush()
        return settings

    async def credentials(self) -> ProviderCredentials:
        """Provider API keys as stored."""
        settings = await self.get()
        return ProviderCredentials(
            openai=settings.openai_api_key,
            anthropic=settings.anthropic_api_key,
            perplexity=settings.perplexity_api_key,
        )

    async def update(self, changes: dict[str, str | None]) -> AppSettings:
        """Apply field changes; unknown fields are ignored."""
        settings = await self.get()
        for field, value in changes.items():
            if field == "tracked_domain" or field in API_KEY_FIELDS:
                setattr(settings, field, value)
        await self.session.flush()
        return settings


class PromptRepository:
    """Prompt library access."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, prompt_id: int) -> Prompt | None:
        """Get a prompt by ID."""
        return await self.session.get(Prompt, prompt_id)

    async def get_all(self, limit: int) -> list[Prompt]:
        """Newest prompts first."""
        result = await self.session.execute(
            select(Prompt).order_by(Prompt.created_at.desc(), Prompt.id.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Prompt))
        return result.scalar_one()

    async def existing_ids(self, prompt_ids: Iterable[int]) -> set[int]:
        """Subset of the given IDs that exist."""
        ids = set(prompt_ids)
        if not ids:
            return set()
        result = await self.session.execute(select(Prompt.id).where(Prompt.id.in_(ids)))
        return set(result.scalars().all())

    async def save(self, prompt: Prompt) -> Prompt:
        """Save a prompt (insert or update)."""
        self.session.add(prompt)
        await self.session.flush()
        return prompt

    async def delete(self, prompt_id: int) -> bool:
        """Delete a prompt with its runs and memberships."""
        prompt = await self.get_by_id(prompt_id)
        if prompt is None:
            return False
        await self.session.delete(prompt)
        await self.session.flush()
        return True

    async def seed_defaults(self) -> int:
        """Insert the starter prompts into an empty library."""
        if await self.count() > 0:
            return 0
        self.session.add_all(
            Prompt(name=name, content=content, category=category)
            for name, content, category in DEFAULT_PROMPTS
        )
        await self.session.flush()
        return len(DEFAULT_PROMPTS)


class CollectionRepository:
    """Collections and their prompt memberships."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, collection_id: int) -> Collection | None:
        result = await self.session.execute(
            select(Collection)
            .options(selectinload(Collection.memberships))
            .where(Collection.id == collection_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_all(self) -> list[Collection]:
        """All collections ordered by name, memberships loaded."""
        result = await self.session.execute(
            select(Collection)
            .options(selectinload(Collection.memberships))
            .order_by(Collection.name.asc(), Collection.id.asc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def create(self, name: str, prompt_ids: Sequence[int] = ()) -> Collection:
        """Create a collection holding the given prompts."""
        collection = Collection(name=name)
        self.session.add(collection)
        await self.session.flush()
        await self._add_memberships(collection.id, prompt_ids)
        return collection

    async def set_prompts(self, collection_id: int, prompt_ids: Sequence[int]) -> bool:
        """Replace the membership set. Returns False if the collection is missing."""
        if await self.session.get(Collection, collection_id) is None:
            return False
        await self.session.execute(
            delete(PromptCollection).where(PromptCollection.collection_id == collection_id)
        )
        await self._add_memberships(collection_id, prompt_ids)
        return True

    async def delete(self, collection_id: int) -> bool:
        """Delete a collection; its prompts are kept."""
        await self.session.execute(
            delete(PromptCollection).where(PromptCollection.collection_id == collection_id)
        )
        result = await self.session.execute(
            delete(Collection).where(Collection.id == collection_id)
        )
        return result.rowcount > 0

    async def create_with_prompts(
        self, name: str, candidates: Sequence[PromptCandidate]
    ) -> tuple[Collection, list[Prompt]]:
        """Insert a collection, its prompts and memberships.

        Only flushes, so the whole write commits or rolls back with the
        surrounding transaction.
        """
        collection = Collection(name=name)
        prompts = [
            Prompt(name=c.name, content=c.content, category=c.category)
            for c in candidates
        ]
        self.session.add(collection)
        self.session.add_all(prompts)
        await self.session.flush()

        self.session.add_all(
            PromptCollection(prompt_id=prompt.id, collection_id=collection.id)
            for prompt in prompts
        )
        await self.session.flush()
        return collection, prompts

    async def _add_memberships(self, collection_id: int, prompt_ids: Sequence[int]) -> None:
        # Duplicate and unknown IDs are dropped, keeping request order
        existing = await PromptRepository(self.session).existing_ids(prompt_ids)
        self.session.add_all(
            PromptCollection(prompt_id=prompt_id, collection_id=collection_id)
            for prompt_id in dict.fromkeys(prompt_ids)
            if prompt_id in existing
        )
        await self.session.flush()


class RunRepository:
    """Stored provider responses."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def latest(self, limit: int = 100) -> list[Run]:
        """Newest runs first, each with its prompt loaded."""
        result = await self.session.execute(
            select(Run)
            .options(joinedload(Run.prompt))
            .order_by(Run.created_at.desc(), Run.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def save_many(self, runs: list[Run]) -> None:
        """Save multiple runs."""
        self.session.add_all(runs)
        await self.session.flush()
