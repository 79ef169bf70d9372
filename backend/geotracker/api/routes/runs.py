"""Run routes: query providers with a prompt and list stored answers."""

import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from geotracker.api.deps import DbSession, ProviderLookup
from geotracker.exceptions import AllRunsFailedError, PromptNotFoundError
from geotracker.models import Prompt, Run
from geotracker.repositories import RunRepository
from geotracker.services.run_executor import RunExecutor, RunTarget

logger = logging.getLogger(__name__)

router = APIRouter()

LATEST_RUNS_LIMIT = 100


class SignalResponse(BaseModel):
    mentioned: bool
    cited: bool
    urls: list[str]
    context: list[str]


class RunResponse(BaseModel):
    """A stored provider answer with its signals and prompt."""

    id: int
    prompt_id: int
    provider: str
    model: str
    response: str
    signals: SignalResponse
    created_at: str
    prompt_name: str
    prompt_content: str


class RunTargetRequest(BaseModel):
    provider: str
    model: str


class CreateRunsRequest(BaseModel):
    """Prompt to execute and the provider/model pairs to ask."""

    prompt_id: int | None = None
    providers: list[RunTargetRequest] | None = None


def to_response(run: Run, prompt: Prompt) -> RunResponse:
    return RunResponse(
        id=run.id,
        prompt_id=run.prompt_id,
        provider=run.provider,
        model=run.model,
        response=run.response,
        signals=SignalResponse(**run.signals_dict()),
        created_at=run.created_at.isoformat(),
        prompt_name=prompt.name,
        prompt_content=prompt.content,
    )


@router.get("", response_model=list[RunResponse])
async def list_runs(db: DbSession) -> list[RunResponse]:
    """Latest runs, newest first."""
    runs = await RunRepository(db).latest(LATEST_RUNS_LIMIT)
    return [to_response(run, run.prompt) for run in runs]


@router.post("", response_model=list[RunResponse], status_code=status.HTTP_201_CREATED)
async def create_runs(
    request: CreateRunsRequest,
    db: DbSession,
    provider_lookup: ProviderLookup,
) -> list[RunResponse]:
    """Send a prompt to every requested provider/model concurrently."""
    if not request.prompt_id or not request.providers:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="prompt_id and providers are required",
        )

    executor = RunExecutor(db, provider_lookup=provider_lookup)
    targets = [RunTarget(provider=t.provider, model=t.model) for t in request.providers]

    try:
        runs = await executor.execute(request.prompt_id, targets)
    except PromptNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Prompt not found",
        )
    except AllRunsFailedError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )

    prompt = await executor.prompt_repo.get_by_id(request.prompt_id)
    return [to_response(run, prompt) for run in runs]
