"""Dependency injection for FastAPI routes."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from geotracker.config import Settings, get_settings
from geotracker.database import get_db
from geotracker.services.crawler import SiteCrawler
from geotracker.services.prompt_synthesizer import PromptSynthesizer
from geotracker.services.providers import LLMProvider, get_provider


def get_crawler(settings: Annotated[Settings, Depends(get_settings)]) -> SiteCrawler:
    return SiteCrawler(settings)


def get_synthesizer(settings: Annotated[Settings, Depends(get_settings)]) -> PromptSynthesizer:
    return PromptSynthesizer(settings)


def get_provider_lookup() -> Callable[[str], LLMProvider]:
    return get_provider


# Type aliases for dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]
AppConfig = Annotated[Settings, Depends(get_settings)]
Crawler = Annotated[SiteCrawler, Depends(get_crawler)]
Synthesizer = Annotated[PromptSynthesizer, Depends(get_synthesizer)]
ProviderLookup = Annotated[Callable[[str], LLMProvider], Depends(get_provider_lookup)]
