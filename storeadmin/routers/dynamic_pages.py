"""Dynamic page API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from storeadmin.core.database import get_db
from storeadmin.models.dynamic_page import DynamicPage, DynamicPageSection
from storeadmin.repositories.dynamic_page_repository import DynamicPageRepository
from storeadmin.schemas.dynamic_page import (
    DynamicPageCreate,
    DynamicPageResponse,
    DynamicPageUpdate,
)

router = APIRouter()


@router.get(
    "",
    response_model=list[DynamicPageResponse],
    summary="List dynamic pages",
)
async def list_dynamic_pages(
    section: DynamicPageSection | None = None,
    db: Session = Depends(get_db),
) -> list[DynamicPage]:
    """List content sections, optionally for a single storefront section."""
    return DynamicPageRepository(db).get_all(section=section)


@router.post(
    "",
    response_model=DynamicPageResponse,
    status_code=201,
    summary="Create dynamic page",
    responses={400: {"description": "Section is required"}},
)
async def create_dynamic_page(
    data: DynamicPageCreate,
    db: Session = Depends(get_db),
) -> DynamicPage:
    if data.section is None:
        raise HTTPException(status_code=400, detail="Section is required")
    return DynamicPageRepository(db).create(data)


@router.get(
    "/{page_id}",
    response_model=DynamicPageResponse,
    summary="Get dynamic page",
    responses={404: {"description": "Dynamic page not found"}},
)
async def get_dynamic_page(
    page_id: UUID,
    db: Session = Depends(get_db),
) -> DynamicPage:
    page = DynamicPageRepository(db).get_by_id(page_id)
    if not page:
        raise HTTPException(status_code=404, detail="Dynamic page not found")
    return page


@router.put(
    "/{page_id}",
    response_model=DynamicPageResponse,
    summary="Update dynamic page",
    responses={404: {"description": "Dynamic page not found"}},
)
async def update_dynamic_page(
    page_id: UUID,
    data: DynamicPageUpdate,
    db: Session = Depends(get_db),
) -> DynamicPage:
    page = DynamicPageRepository(db).update(page_id, data)
    if not page:
        raise HTTPException(status_code=404, detail="Dynamic page not found")
    return page


@router.delete(
    "/{page_id}",
    status_code=204,
    summary="Delete dynamic page",
    responses={404: {"description": "Dynamic page not found"}},
)
async def delete_dynamic_page(
    page_id: UUID,
    db: Session = Depends(get_db),
) -> Response:
    if not DynamicPageRepository(db).delete(page_id):
        raise HTTPException(status_code=404, detail="Dynamic page not found")
    return Response(status_code=204)
