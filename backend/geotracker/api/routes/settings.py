"""User settings routes: tracked domain and provider API keys."""

from fastapi import APIRouter
from pydantic import BaseModel

from geotracker.api.deps import DbSession
from geotracker.repositories import SettingsRepository
from geotracker.repositories.sql import API_KEY_FIELDS

router = APIRouter()

MASK_PREFIX = "***"


class SettingsResponse(BaseModel):
    """Settings with API keys masked to their last four characters."""

    id: int
    tracked_domain: str
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None
    perplexity_api_key: str | None = None
    updated_at: str


class UpdateSettingsRequest(BaseModel):
    """Fields left out of the request are not touched."""

    tracked_domain: str | None = None
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None
    perplexity_api_key: str | None = None


def mask_key(key: str | None) -> str | None:
    return f"{MASK_PREFIX}{key[-4:]}" if key else None


@router.get("", response_model=SettingsResponse)
async def get_settings(db: DbSession) -> SettingsResponse:
    """Current settings with masked keys."""
    settings = await SettingsRepository(db).get()
    return SettingsResponse(
        id=settings.id,
        tracked_domain=settings.tracked_domain or "",
        openai_api_key=mask_key(settings.openai_api_key),
        anthropic_api_key=mask_key(settings.anthropic_api_key),
        perplexity_api_key=mask_key(settings.perplexity_api_key),
        updated_at=settings.updated_at.isoformat(),
    )


@router.post("")
async def update_settings(request: UpdateSettingsRequest, db: DbSession) -> dict:
    """Update the provided fields.

    Masked keys echoed back by a client are ignored; an empty string clears
    a key.
    """
    provided = request.model_dump(exclude_unset=True)
    changes: dict[str, str | None] = {}

    if "tracked_domain" in provided:
        changes["tracked_domain"] = provided["tracked_domain"] or ""

    for field in API_KEY_FIELDS:
        if field not in provided:
            continue
        value = provided[field]
        if value and value.startswith(MASK_PREFIX):
            continue
        changes[field] = value or None

    if changes:
        await SettingsRepository(db).update(changes)

    return {"success": True}
