"""Listing API endpoints.

Listings are products as the admin dashboard edits them: a table row for
lists, a nested editor view for single reads, and a flat partial body for
writes.
"""

import math
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from storeadmin.core.database import get_db
from storeadmin.models.product import ProductStatus
from storeadmin.schemas.base import Pagination
from storeadmin.schemas.listing import (
    ListingListResponse,
    ListingResponse,
    ListingStatusUpdate,
    ListingWrite,
)
from storeadmin.services.listing_service import (
    ListingService,
    ListingValidationError,
    SlugConflictError,
)

router = APIRouter()

DEFAULT_PAGE_SIZE = 24
MAX_PAGE_SIZE = 200


def _status_filter(status: str | None) -> ProductStatus | None:
    if not status or status.lower() == "all":
        return None
    try:
        return ProductStatus(status)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid status value") from None


@router.get(
    "",
    response_model=ListingListResponse,
    summary="List listings",
    responses={400: {"description": "Invalid filter"}},
)
async def list_listings(
    q: str | None = Query(default=None, max_length=200),
    status: str | None = None,
    collection_id: UUID | None = Query(default=None, alias="collectionId"),
    has_video: bool | None = Query(default=None, alias="hasVideo"),
    page: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    limit: int = DEFAULT_PAGE_SIZE,
    db: Session = Depends(get_db),
) -> ListingListResponse:
    """List listings in display order.

    ``page`` takes precedence over ``offset`` when both are given.
    """
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    if page is not None:
        offset = (page - 1) * limit
    service = ListingService(db)
    summaries, total = service.search(
        limit=limit,
        offset=offset,
        q=q.strip() if q else None,
        status=_status_filter(status),
        collection_id=collection_id,
        has_video=has_video,
    )
    return ListingListResponse(
        data=summaries,
        total=total,
        pagination=Pagination(
            page=offset // limit + 1, limit=limit, total=total, pages=math.ceil(total / limit)
        ),
    )


@router.post(
    "",
    response_model=ListingResponse,
    status_code=201,
    summary="Create listing",
    responses={
        400: {"description": "Validation failed"},
        409: {"description": "Slug already in use"},
    },
)
async def create_listing(
    data: ListingWrite,
    db: Session = Depends(get_db),
) -> ListingResponse:
    """Create a listing from a flat product body."""
    service = ListingService(db)
    try:
        return service.create(data)
    except ListingValidationError as e:
        raise HTTPException(
            status_code=400, detail={"error": "Validation failed", "details": e.errors}
        ) from e
    except SlugConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.get(
    "/{listing_id}",
    response_model=ListingResponse,
    summary="Get listing",
    responses={404: {"description": "Listing not found"}},
)
async def get_listing(
    listing_id: UUID,
    db: Session = Depends(get_db),
) -> ListingResponse:
    """Get the nested editor view of a listing."""
    listing = ListingService(db).get(listing_id)
    if not listing:
        raise HTTPException(status_code=404, detail="Listing not found")
    return listing


@router.put(
    "/{listing_id}",
    response_model=ListingResponse,
    summary="Update listing",
    responses={
        400: {"description": "Validation failed"},
        404: {"description": "Listing not found"},
        409: {"description": "Slug already in use"},
    },
)
async def update_listing(
    listing_id: UUID,
    data: ListingWrite,
    db: Session = Depends(get_db),
) -> ListingResponse:
    """Update a listing. Partial bodies from bulk edits are accepted."""
    service = ListingService(db)
    try:
        listing = service.update(listing_id, data)
    except ListingValidationError as e:
        raise HTTPException(
            status_code=400, detail={"error": "Validation failed", "details": e.errors}
        ) from e
    except SlugConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    if not listing:
        raise HTTPException(status_code=404, detail="Listing not found")
    return listing


@router.patch(
    "/{listing_id}",
    response_model=ListingResponse,
    summary="Set listing status",
    responses={404: {"description": "Listing not found"}},
)
async def set_listing_status(
    listing_id: UUID,
    data: ListingStatusUpdate,
    db: Session = Depends(get_db),
) -> ListingResponse:
    listing = ListingService(db).set_status(listing_id, data.status)
    if not listing:
        raise HTTPException(status_code=404, detail="Listing not found")
    return listing


@router.delete(
    "/{listing_id}",
    status_code=204,
    summary="Delete listing",
    responses={404: {"description": "Listing not found"}},
)
async def delete_listing(
    listing_id: UUID,
    db: Session = Depends(get_db),
) -> Response:
    if not ListingService(db).delete(listing_id):
        raise HTTPException(status_code=404, detail="Listing not found")
    return Response(status_code=204)
