"""Category API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from storeadmin.core.database import get_db
from storeadmin.models.category import Category
from storeadmin.repositories.category_repository import CategoryRepository
from storeadmin.schemas.catalog import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
)

router = APIRouter()


@router.get(
    "",
    response_model=CategoryListResponse,
    summary="List categories",
)
async def list_categories(
    q: str | None = Query(default=None, max_length=200),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=200),
    db: Session = Depends(get_db),
) -> CategoryListResponse:
    """List categories by name, optionally searching name and slug."""
    repo = CategoryRepository(db)
    query = q.strip() if q else None
    categories = repo.get_all(skip=offset, limit=limit, q=query)
    return CategoryListResponse(
        data=[CategoryResponse.model_validate(c) for c in categories],
        total=repo.count(q=query),
    )


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=201,
    summary="Create category",
    responses={409: {"description": "Slug already in use"}},
)
async def create_category(
    data: CategoryCreate,
    db: Session = Depends(get_db),
) -> Category:
    """Create a category."""
    repo = CategoryRepository(db)
    if data.slug and repo.get_by_slug(data.slug):
        raise HTTPException(status_code=409, detail="Slug already in use")
    return repo.create(data)


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Get category",
    responses={404: {"description": "Category not found"}},
)
async def get_category(
    category_id: UUID,
    db: Session = Depends(get_db),
) -> Category:
    """Get a category by ID."""
    repo = CategoryRepository(db)
    category = repo.get_by_id(category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Update category",
    responses={
        404: {"description": "Category not found"},
        409: {"description": "Slug already in use"},
    },
)
async def update_category(
    category_id: UUID,
    data: CategoryUpdate,
    db: Session = Depends(get_db),
) -> Category:
    """Update a category."""
    repo = CategoryRepository(db)
    if data.slug:
        existing = repo.get_by_slug(data.slug)
        if existing and existing.id != category_id:
            raise HTTPException(status_code=409, detail="Slug already in use")
    category = repo.update(category_id, data)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.delete(
    "/{category_id}",
    status_code=204,
    summary="Delete category",
    responses={404: {"description": "Category not found"}},
)
async def delete_category(
    category_id: UUID,
    db: Session = Depends(get_db),
) -> Response:
    """Delete a category. Its products become uncategorized."""
    repo = CategoryRepository(db)
    if not repo.delete(category_id):
        raise HTTPException(status_code=404, detail="Category not found")
    return Response(status_code=204)
