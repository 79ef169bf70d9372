"""Provider routes: list supported models and test API keys."""

import asyncio

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from geotracker.api.deps import ProviderLookup
from geotracker.exceptions import UnknownProviderError
from geotracker.services.providers import PROVIDERS

router = APIRouter()


class ProviderInfo(BaseModel):
    name: str
    display_name: str
    models: list[str]


class TestConnectionRequest(BaseModel):
    provider: str | None = None
    api_key: str | None = None


class TestConnectionResponse(BaseModel):
    success: bool
    provider: str


@router.get("", response_model=list[ProviderInfo])
async def list_providers() -> list[ProviderInfo]:
    """Supported providers and their models."""
    return [
        ProviderInfo(name=p.name, display_name=p.display_name, models=list(p.models))
        for p in PROVIDERS
    ]


@router.post("/test", response_model=TestConnectionResponse)
async def test_connection(
    request: TestConnectionRequest,
    provider_lookup: ProviderLookup,
) -> TestConnectionResponse:
    """Check whether an API key is accepted by the provider."""
    if not request.provider or not request.api_key:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="provider and api_key are required",
        )

    try:
        provider = provider_lookup(request.provider)
    except UnknownProviderError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    success = await asyncio.to_thread(provider.test_connection, request.api_key)
    return TestConnectionResponse(success=success, provider=request.provider)
