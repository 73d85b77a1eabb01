"""Collection API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from storeadmin.core.database import get_db
from storeadmin.models.collection import Collection
from storeadmin.repositories.collection_repository import CollectionRepository
from storeadmin.schemas.catalog import (
    CollectionCreate,
    CollectionListResponse,
    CollectionResponse,
    CollectionUpdate,
)

router = APIRouter()


@router.get(
    "",
    response_model=CollectionListResponse,
    summary="List collections",
)
async def list_collections(
    q: str | None = Query(default=None, max_length=200),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=200),
    db: Session = Depends(get_db),
) -> CollectionListResponse:
    """List collections by name, optionally searching name and slug."""
    repo = CollectionRepository(db)
    query = q.strip() if q else None
    collections = repo.get_all(skip=offset, limit=limit, q=query)
    return CollectionListResponse(
        data=[CollectionResponse.model_validate(c) for c in collections],
        total=repo.count(q=query),
    )


@router.post(
    "",
    response_model=CollectionResponse,
    status_code=201,
    summary="Create collection",
    responses={409: {"description": "Slug already in use"}},
)
async def create_collection(
    data: CollectionCreate,
    db: Session = Depends(get_db),
) -> Collection:
    """Create a collection, optionally with its initial products."""
    repo = CollectionRepository(db)
    if data.slug and repo.get_by_slug(data.slug):
        raise HTTPException(status_code=409, detail="Slug already in use")
    return repo.create(data)


@router.get(
    "/{collection_id}",
    response_model=CollectionResponse,
    summary="Get collection",
    responses={404: {"description": "Collection not found"}},
)
async def get_collection(
    collection_id: UUID,
    db: Session = Depends(get_db),
) -> Collection:
    """Get a collection by ID."""
    repo = CollectionRepository(db)
    collection = repo.get_by_id(collection_id)
    if not collection:
        raise HTTPException(status_code=404, detail="Collection not found")
    return collection


@router.get(
    "/{collection_id}/products",
    response_model=list[UUID],
    summary="List collection product ids",
    responses={404: {"description": "Collection not found"}},
)
async def list_collection_products(
    collection_id: UUID,
    db: Session = Depends(get_db),
) -> list[UUID]:
    """List the ids of the products in a collection."""
    repo = CollectionRepository(db)
    if not repo.get_by_id(collection_id):
        raise HTTPException(status_code=404, detail="Collection not found")
    return repo.product_ids(collection_id)


@router.put(
    "/{collection_id}",
    response_model=CollectionResponse,
    summary="Update collection",
    responses={
        404: {"description": "Collection not found"},
        409: {"description": "Slug already in use"},
    },
)
async def update_collection(
    collection_id: UUID,
    data: CollectionUpdate,
    db: Session = Depends(get_db),
) -> Collection:
    """Update a collection; sending productIds replaces its membership."""
    repo = CollectionRepository(db)
    if data.slug:
        existing = repo.get_by_slug(data.slug)
        if existing and existing.id != collection_id:
            raise HTTPException(status_code=409, detail="Slug already in use")
    collection = repo.update(collection_id, data)
    if not collection:
        raise HTTPException(status_code=404, detail="Collection not found")
    return collection


@router.delete(
    "/{collection_id}",
    status_code=204,
    summary="Delete collection",
    responses={404: {"description": "Collection not found"}},
)
async def delete_collection(
    collection_id: UUID,
    db: Session = Depends(get_db),
) -> Response:
    """Delete a collection. Its products are kept."""
    repo = CollectionRepository(db)
    if not repo.delete(collection_id):
        raise HTTPException(status_code=404, detail="Collection not found")
    return Response(status_code=204)
