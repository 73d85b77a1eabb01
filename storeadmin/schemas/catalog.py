"""Product, collection and category schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import AliasChoices, Field

from storeadmin.models.product import ProductStatus
from storeadmin.schemas.base import CamelModel


class ProductCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    short_description: str | None = None
    description: str | None = None
    price_cents: int = Field(default=0, ge=0)
    sale_price_cents: int | None = Field(default=None, ge=0)
    stock_quantity: int = Field(default=0, ge=0)
    sku: str | None = Field(default=None, max_length=100)
    status: ProductStatus = ProductStatus.ACTIVE
    sort_order: int | None = Field(default=None, ge=1)
    category_id: UUID | None = None
    collection_ids: list[UUID] | None = None
    tags: list[str] = Field(default_factory=list)
    medium: list[str] = Field(default_factory=list)
    style: list[str] = Field(default_factory=list)
    materials: list[str] = Field(default_factory=list)
    techniques: list[str] = Field(default_factory=list)
    meta_title: str | None = None
    meta_description: str | None = None
    country_specific_prices: dict[str, Any] | None = None
    is_video_integrated_visible: bool = True
    personalization: Any = None
    images: list[dict[str, Any]] = Field(default_factory=list)
    video: dict[str, Any] | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class ProductUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    short_description: str | None = None
    description: str | None = None
    price_cents: int | None = Field(default=None, ge=0)
    sale_price_cents: int | None = Field(default=None, ge=0)
    stock_quantity: int | None = Field(default=None, ge=0)
    sku: str | None = Field(default=None, max_length=100)
    status: ProductStatus | None = None
    category_id: UUID | None = None
    collection_ids: list[UUID] | None = None
    tags: list[str] | None = None
    medium: list[str] | None = None
    style: list[str] | None = None
    materials: list[str] | None = None
    techniques: list[str] | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    country_specific_prices: dict[str, Any] | None = None
    is_video_integrated_visible: bool | None = None
    personalization: Any = None
    images: list[dict[str, Any]] | None = None
    video: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None


class ProductResponse(CamelModel):
    id: UUID
    name: str
    slug: str | None = None
    short_description: str | None = None
    description: str | None = None
    price_cents: int
    sale_price_cents: int | None = None
    stock_quantity: int
    sku: str | None = None
    status: str
    sort_order: int
    category_id: UUID | None = None
    tags: list[str] = Field(default_factory=list)
    medium: list[str] = Field(default_factory=list)
    style: list[str] = Field(default_factory=list)
    materials: list[str] = Field(default_factory=list)
    techniques: list[str] = Field(default_factory=list)
    meta_title: str | None = None
    meta_description: str | None = None
    country_specific_prices: dict[str, Any] | None = None
    is_video_integrated_visible: bool = True
    personalization: Any = None
    images: list[dict[str, Any]] = Field(default_factory=list)
    video: dict[str, Any] | None = None
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("product_metadata", "metadata"),
    )
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductListResponse(CamelModel):
    data: list[ProductResponse]
    total: int


class BulkSortOrderRequest(CamelModel):
    product_id: UUID
    new_sort_order: int


class SortOrderEntry(CamelModel):
    id: UUID
    name: str
    sort_order: int


class BulkSortOrderResponse(CamelModel):
    success: bool
    message: str
    products: list[SortOrderEntry]


class CollectionCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    description: str | None = None
    product_ids: list[UUID] | None = None


class CollectionUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    description: str | None = None
    product_ids: list[UUID] | None = None


class CollectionResponse(CamelModel):
    id: UUID
    name: str
    slug: str | None = None
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CollectionListResponse(CamelModel):
    data: list[CollectionResponse]
    total: int


class CategoryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    description: str | None = None


class CategoryUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    description: str | None = None


class CategoryResponse(CamelModel):
    id: UUID
    name: str
    slug: str | None = None
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CategoryListResponse(CamelModel):
    data: list[CategoryResponse]
    total: int


class StockUpdate(CamelModel):
    stock_quantity: int = Field(ge=0)
