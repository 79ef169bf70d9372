"""Prompt library routes, including bootstrap and single-prompt generation."""

import logging
import math

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from geotracker.api.deps import AppConfig, Crawler, DbSession, Synthesizer
from geotracker.exceptions import (
    BootstrapError,
    InvalidDomainError,
    SiteUnreachableError,
)
from geotracker.models import Prompt
from geotracker.repositories import PromptRepository, SettingsRepository
from geotracker.services.bootstrap import BootstrapService

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_PROMPT_LIMIT = 200
MAX_PROMPT_LIMIT = 500


class PromptResponse(BaseModel):
    """Stored prompt."""

    id: int
    name: str
    content: str
    category: str | None = None
    created_at: str


class CreatePromptRequest(BaseModel):
    """Request to add a prompt to the library."""

    name: str | None = None
    content: str | None = None
    category: str | None = None


class BootstrapRequest(BaseModel):
    """Request to generate a prompt collection from a website."""

    domain: str | None = None
    count: int | float | str | None = None


class BootstrapResponse(BaseModel):
    """Summary of a bootstrap run."""

    collection_id: int
    collection_name: str
    created_prompts: int
    discoveries: list[str]
    provider_used: str | None = None
    pages_scanned: int


class GeneratePromptRequest(BaseModel):
    """Request to write one prompt about a topic."""

    topic: str | None = None
    category: str | None = None


class GeneratePromptResponse(BaseModel):
    prompt: str


def clamp_limit(value: str | None) -> int:
    """Parse the ``limit`` query parameter into 1..500 (default 200)."""
    if not value:
        return DEFAULT_PROMPT_LIMIT
    try:
        parsed = float(value)
    except ValueError:
        return DEFAULT_PROMPT_LIMIT
    if not math.isfinite(parsed):
        return DEFAULT_PROMPT_LIMIT
    return min(MAX_PROMPT_LIMIT, max(1, math.floor(parsed)))


def to_response(prompt: Prompt) -> PromptResponse:
    return PromptResponse(
        id=prompt.id,
        name=prompt.name,
        content=prompt.content,
        category=prompt.category,
        created_at=prompt.created_at.isoformat(),
    )


@router.get("", response_model=list[PromptResponse])
async def list_prompts(db: DbSession, limit: str | None = None) -> list[PromptResponse]:
    """List prompts, newest first."""
    prompts = await PromptRepository(db).get_all(clamp_limit(limit))
    return [to_response(prompt) for prompt in prompts]


@router.post("", response_model=PromptResponse, status_code=status.HTTP_201_CREATED)
async def create_prompt(request: CreatePromptRequest, db: DbSession) -> PromptResponse:
    """Add a prompt to the library."""
    if not request.name or not request.content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name and content are required",
        )

    prompt = Prompt(
        name=request.name,
        content=request.content,
        category=request.category or None,
    )
    await PromptRepository(db).save(prompt)
    return to_response(prompt)


@router.delete("/{prompt_id}")
async def delete_prompt(prompt_id: int, db: DbSession) -> dict:
    """Delete a prompt and its runs."""
    deleted = await PromptRepository(db).delete(prompt_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Prompt not found",
        )
    return {"success": True}


@router.post("/bootstrap", response_model=BootstrapResponse, status_code=status.HTTP_201_CREATED)
async def bootstrap_prompts(
    request: BootstrapRequest,
    db: DbSession,
    settings: AppConfig,
    crawler: Crawler,
    synthesizer: Synthesizer,
) -> BootstrapResponse:
    """Crawl a website and store a collection of generated test prompts."""
    service = BootstrapService(db, settings, crawler=crawler, synthesizer=synthesizer)

    try:
        result = await service.bootstrap(request.domain, request.count)
    except (InvalidDomainError, SiteUnreachableError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except BootstrapError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    except Exception:
        logger.exception(f"Error bootstrapping prompts for {request.domain}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to bootstrap prompts",
        )

    return BootstrapResponse(
        collection_id=result.collection_id,
        collection_name=result.collection_name,
        created_prompts=result.created_prompts,
        discoveries=result.discoveries,
        provider_used=result.provider_used,
        pages_scanned=result.pages_scanned,
    )


@router.post("/generate", response_model=GeneratePromptResponse)
async def generate_prompt(
    request: GeneratePromptRequest,
    db: DbSession,
    synthesizer: Synthesizer,
) -> GeneratePromptResponse:
    """Write one GEO-optimized prompt about a topic."""
    if not request.topic:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Topic is required",
        )

    credentials = await SettingsRepository(db).credentials()
    text = await synthesizer.generate_single(credentials, request.topic, request.category)
    if not text:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="No API keys configured or all providers failed",
        )

    return GeneratePromptResponse(prompt=text)
