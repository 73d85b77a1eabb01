"""Product API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from storeadmin.core.database import get_db
from storeadmin.models.product import Product, ProductStatus
from storeadmin.repositories.product_repository import ProductRepository
from storeadmin.schemas.catalog import (
    BulkSortOrderRequest,
    BulkSortOrderResponse,
    ProductCreate,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
    SortOrderEntry,
    StockUpdate,
)

router = APIRouter()


@router.get(
    "",
    response_model=ProductListResponse,
    summary="List products",
)
async def list_products(
    q: str | None = Query(default=None, max_length=200),
    status: ProductStatus | None = None,
    category_id: UUID | None = Query(default=None, alias="categoryId"),
    collection_id: UUID | None = Query(default=None, alias="collectionId"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
) -> ProductListResponse:
    """List products in display order, optionally searching name, SKU and slug."""
    repo = ProductRepository(db)
    query = q.strip() if q else None
    products = repo.get_all(
        skip=offset,
        limit=limit,
        q=query,
        status=status,
        category_id=category_id,
        collection_id=collection_id,
    )
    total = repo.count(
        q=query, status=status, category_id=category_id, collection_id=collection_id
    )
    return ProductListResponse(
        data=[ProductResponse.model_validate(p) for p in products], total=total
    )


@router.post(
    "",
    response_model=ProductResponse,
    status_code=201,
    summary="Create product",
    responses={409: {"description": "Slug already in use"}},
)
async def create_product(
    data: ProductCreate,
    db: Session = Depends(get_db),
) -> Product:
    """Create a product."""
    repo = ProductRepository(db)
    if data.slug and repo.slug_exists(data.slug):
        raise HTTPException(status_code=409, detail="Slug already in use")
    return repo.create(data)


@router.post(
    "/bulk-sort-order",
    response_model=BulkSortOrderResponse,
    summary="Move product to a sort position",
    responses={
        400: {"description": "Sort order must be >= 1"},
        404: {"description": "Product not found"},
    },
)
async def bulk_sort_order(
    data: BulkSortOrderRequest,
    db: Session = Depends(get_db),
) -> BulkSortOrderResponse:
    """Place a product at a position and renumber every other product around it."""
    if data.new_sort_order < 1:
        raise HTTPException(
            status_code=400,
            detail="Invalid productId or sortOrder. Sort order must be >= 1",
        )
    repo = ProductRepository(db)
    product = repo.get_by_id(data.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    products = repo.move_to_position(product, data.new_sort_order)
    return BulkSortOrderResponse(
        success=True,
        message="Sort orders updated successfully",
        products=[SortOrderEntry.model_validate(p) for p in products],
    )


@router.get(
    "/slug/{slug}",
    response_model=ProductResponse,
    summary="Get product by slug",
    responses={404: {"description": "Product not found"}},
)
async def get_product_by_slug(
    slug: str,
    response: Response,
    db: Session = Depends(get_db),
) -> Product:
    """Get a product by slug or by the handle recorded by a catalog import."""
    response.headers["Access-Control-Allow-Origin"] = "*"
    repo = ProductRepository(db)
    product = repo.get_by_slug(slug)
    if not product:
        raise HTTPException(
            status_code=404,
            detail="Product not found",
            headers={"Access-Control-Allow-Origin": "*"},
        )
    return product


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get product",
    responses={404: {"description": "Product not found"}},
)
async def get_product(
    product_id: UUID,
    db: Session = Depends(get_db),
) -> Product:
    """Get a product by ID."""
    repo = ProductRepository(db)
    product = repo.get_by_id(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update product",
    responses={
        404: {"description": "Product not found"},
        409: {"description": "Slug already in use"},
    },
)
async def update_product(
    product_id: UUID,
    data: ProductUpdate,
    db: Session = Depends(get_db),
) -> Product:
    """Update a product."""
    repo = ProductRepository(db)
    if data.slug and repo.slug_exists(data.slug, exclude_id=product_id):
        raise HTTPException(status_code=409, detail="Slug already in use")
    product = repo.update(product_id, data)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.patch(
    "/{product_id}/stock",
    response_model=ProductResponse,
    summary="Set product stock",
    responses={404: {"description": "Product not found"}},
)
async def update_stock(
    product_id: UUID,
    data: StockUpdate,
    db: Session = Depends(get_db),
) -> Product:
    """Set a product's stock quantity."""
    repo = ProductRepository(db)
    product = repo.get_by_id(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return repo.apply_changes(product, {"stock_quantity": data.stock_quantity})


@router.delete(
    "/{product_id}",
    status_code=204,
    summary="Delete product",
    responses={404: {"description": "Product not found"}},
)
async def delete_product(
    product_id: UUID,
    db: Session = Depends(get_db),
) -> Response:
    """Delete a product."""
    repo = ProductRepository(db)
    if not repo.delete(product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    return Response(status_code=204)
