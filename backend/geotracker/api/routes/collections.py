"""Collection management routes."""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from geotracker.api.deps import DbSession
from geotracker.models import Collection
from geotracker.repositories import CollectionRepository

router = APIRouter()


class CollectionResponse(BaseModel):
    """Collection with the IDs of its prompts."""

    id: int
    name: str
    created_at: str
    prompt_ids: list[int]


class CreateCollectionRequest(BaseModel):
    name: str | None = None
    prompt_ids: list[int] | None = None


class UpdateCollectionRequest(BaseModel):
    """Replace the prompts of a collection."""

    id: int | None = None
    prompt_ids: list[int] | None = None


def to_response(collection: Collection, prompt_ids: list[int]) -> CollectionResponse:
    return CollectionResponse(
        id=collection.id,
        name=collection.name,
        created_at=collection.created_at.isoformat(),
        prompt_ids=prompt_ids,
    )


@router.get("", response_model=list[CollectionResponse])
async def list_collections(db: DbSession) -> list[CollectionResponse]:
    """List collections ordered by name."""
    collections = await CollectionRepository(db).get_all()
    return [
        to_response(collection, [m.prompt_id for m in collection.memberships])
        for collection in collections
    ]


@router.post("", response_model=CollectionResponse, status_code=status.HTTP_201_CREATED)
async def create_collection(request: CreateCollectionRequest, db: DbSession) -> CollectionResponse:
    """Create a collection, optionally with prompts."""
    if not request.name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name is required",
        )

    repo = CollectionRepository(db)
    collection = await repo.create(request.name, request.prompt_ids or [])
    stored = await repo.get_by_id(collection.id)
    return to_response(stored, [m.prompt_id for m in stored.memberships])


@router.put("")
async def update_collection(request: UpdateCollectionRequest, db: DbSession) -> dict:
    """Replace the prompt membership of a collection."""
    if not request.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Collection ID is required",
        )

    updated = await CollectionRepository(db).set_prompts(request.id, request.prompt_ids or [])
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Collection not found",
        )
    return {"success": True}


@router.delete("/{collection_id}")
async def delete_collection(collection_id: int, db: DbSession) -> dict:
    """Delete a collection; its prompts stay in the library."""
    await CollectionRepository(db).delete(collection_id)
    return {"success": True}
