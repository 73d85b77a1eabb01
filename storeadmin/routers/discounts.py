"""Discount API endpoints."""

import math
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from storeadmin.core.database import get_db
from storeadmin.models.discount import Discount, DiscountMethod, DiscountStatus, DiscountType
from storeadmin.repositories.discount_repository import DiscountRepository
from storeadmin.schemas.base import Pagination
from storeadmin.schemas.discount import (
    DiscountApplyRequest,
    DiscountApplyResponse,
    DiscountCreate,
    DiscountListResponse,
    DiscountResponse,
    DiscountUpdate,
    DiscountValidateRequest,
    DiscountValidateResponse,
    ValidateProgress,
)
from storeadmin.services.discount_service import (
    DiscountCodeError,
    DiscountService,
    DiscountValidationError,
    DuplicateDiscountCodeError,
)

router = APIRouter()

MAX_PAGE_SIZE = 100


def _status_filter(status: str | None) -> DiscountStatus | None:
    if not status or status.lower() == "all":
        return None
    try:
        return DiscountStatus(status)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid status value") from None


@router.get(
    "",
    response_model=DiscountListResponse,
    summary="List discounts",
    responses={400: {"description": "Invalid filter"}},
)
async def list_discounts(
    q: str | None = Query(default=None, max_length=200),
    status: str | None = None,
    method: DiscountMethod | None = None,
    discount_type: DiscountType | None = Query(default=None, alias="type"),
    sort_by: str = Query(default="createdAt", alias="sortBy"),
    sort_order: str = Query(default="desc", alias="sortOrder"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1),
    db: Session = Depends(get_db),
) -> DiscountListResponse:
    """List discounts with search, filters, sorting and pagination."""
    repo = DiscountRepository(db)
    limit = min(limit, MAX_PAGE_SIZE)
    status_filter = _status_filter(status)
    query = q.strip() if q else None

    discounts = repo.get_all(
        skip=(page - 1) * limit,
        limit=limit,
        q=query,
        status=status_filter,
        method=method,
        discount_type=discount_type,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    total = repo.count(q=query, status=status_filter, method=method, discount_type=discount_type)
    return DiscountListResponse(
        data=[DiscountResponse.model_validate(d) for d in discounts],
        pagination=Pagination(
            page=page, limit=limit, total=total, pages=math.ceil(total / limit)
        ),
    )


@router.post(
    "",
    response_model=DiscountResponse,
    status_code=201,
    summary="Create discount",
    responses={
        400: {"description": "Validation failed"},
        409: {"description": "Discount code already exists"},
    },
)
async def create_discount(
    data: DiscountCreate,
    db: Session = Depends(get_db),
) -> Discount:
    """Create a discount after checking every field rule."""
    service = DiscountService(db)
    try:
        return service.create(data)
    except DiscountValidationError as e:
        raise HTTPException(
            status_code=400, detail={"error": "Validation failed", "details": e.errors}
        ) from e
    except DuplicateDiscountCodeError as e:
        raise HTTPException(
            status_code=409,
            detail={"error": str(e), "details": ["This discount code is already in use"]},
        ) from e


@router.post(
    "/validate",
    response_model=DiscountValidateResponse,
    response_model_exclude_none=True,
    summary="Validate discount code",
    responses={
        400: {"description": "Code cannot be used"},
        404: {"description": "Invalid discount code"},
    },
)
async def validate_discount(
    data: DiscountValidateRequest,
    db: Session = Depends(get_db),
) -> DiscountValidateResponse | JSONResponse:
    """Check whether a code can be redeemed and what it is worth for a cart."""
    service = DiscountService(db)
    try:
        result = service.redeem_check(data.code, data.cart, data.order_amount)
    except DiscountCodeError as e:
        return JSONResponse(status_code=e.status_code, content={"error": str(e), "valid": False})

    response = DiscountValidateResponse(
        valid=True,
        discount=DiscountResponse.model_validate(result.discount),
        discount_amount=result.discount_amount,
    )
    evaluation = result.evaluation
    if evaluation is not None:
        response.applicable = evaluation.applicable
        response.reason = evaluation.reason
        if evaluation.applicable:
            response.multiplier = evaluation.multiplier
            response.free_items = evaluation.free_items
        response.progress = ValidateProgress(
            current_qty=evaluation.qualifying_quantity,
            current_amount=evaluation.qualifying_amount,
            qualified=evaluation.applicable,
        )
    else:
        response.applicable = True
    return response


@router.post(
    "/apply",
    response_model=DiscountApplyResponse,
    summary="Record discount usage",
    responses={
        400: {"description": "Discount cannot be used"},
        404: {"description": "Discount not found"},
    },
)
async def apply_discount(
    data: DiscountApplyRequest,
    db: Session = Depends(get_db),
) -> DiscountApplyResponse:
    """Increment a discount's usage count."""
    service = DiscountService(db)
    try:
        discount = service.apply(data.discount_id)
    except DiscountCodeError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e)) from e
    return DiscountApplyResponse(
        success=True,
        discount=DiscountResponse.model_validate(discount),
        message="Discount applied successfully",
    )


@router.get(
    "/{discount_id}",
    response_model=DiscountResponse,
    summary="Get discount",
    responses={404: {"description": "Discount not found"}},
)
async def get_discount(
    discount_id: UUID,
    db: Session = Depends(get_db),
) -> Discount:
    """Get a discount by ID."""
    repo = DiscountRepository(db)
    discount = repo.get_by_id(discount_id)
    if not discount:
        raise HTTPException(status_code=404, detail="Discount not found")
    return discount


@router.put(
    "/{discount_id}",
    response_model=DiscountResponse,
    summary="Update discount",
    responses={
        400: {"description": "Validation failed"},
        404: {"description": "Discount not found"},
        409: {"description": "Discount code already in use by another discount"},
    },
)
async def update_discount(
    discount_id: UUID,
    data: DiscountUpdate,
    db: Session = Depends(get_db),
) -> Discount:
    """Update a discount; only the fields sent are changed."""
    service = DiscountService(db)
    try:
        discount = service.update(discount_id, data)
    except DiscountValidationError as e:
        raise HTTPException(
            status_code=400, detail={"error": "Validation failed", "details": e.errors}
        ) from e
    except DuplicateDiscountCodeError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    if not discount:
        raise HTTPException(status_code=404, detail="Discount not found")
    return discount


@router.delete(
    "/{discount_id}",
    status_code=204,
    summary="Delete discount",
    responses={404: {"description": "Discount not found"}},
)
async def delete_discount(
    discount_id: UUID,
    db: Session = Depends(get_db),
) -> Response:
    """Delete a discount."""
    repo = DiscountRepository(db)
    if not repo.delete(discount_id):
        raise HTTPException(status_code=404, detail="Discount not found")
    return Response(status_code=204)
