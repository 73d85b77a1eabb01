"""Listing schemas.

A listing is the admin editor's view of a product: read as nested groups
(``about``, ``priceAndInventory``, ``details``, ``seo``), written as a flat
partial product body.
"""

from typing import Any
from uuid import UUID

from pydantic import Field

from storeadmin.models.product import ProductStatus
from storeadmin.schemas.base import CamelModel, Pagination


class ListingPhoto(CamelModel):
    id: str
    src: str
    hint: str = ""
    is_primary: bool = False


class ListingAbout(CamelModel):
    title: str
    photos: list[ListingPhoto] = Field(default_factory=list)
    video: dict[str, Any] | None = None


class ListingPriceAndInventory(CamelModel):
    price: float
    sale_price: float | None = None
    quantity: int
    sku: str = ""


class ListingDetails(CamelModel):
    category: str = ""
    collection: str = ""
    tags: list[str] = Field(default_factory=list)
    medium: list[str] = Field(default_factory=list)
    style: list[str] = Field(default_factory=list)
    materials: list[str] = Field(default_factory=list)
    techniques: list[str] = Field(default_factory=list)
    short_description: str = ""
    description: str = ""


class ListingSeo(CamelModel):
    meta_title: str = ""
    meta_description: str = ""


class ListingResponse(CamelModel):
    id: UUID
    title: str
    slug: str | None = None
    status: str
    sort_order: int
    about: ListingAbout
    price_and_inventory: ListingPriceAndInventory
    details: ListingDetails
    seo: ListingSeo
    country_specific_prices: dict[str, Any] | None = None
    personalization: Any = None
    is_video_integrated_visible: bool = True
    metadata: dict[str, Any] = Field(default_factory=dict)


class ListingSummary(CamelModel):
    """Row of the listings table."""

    id: UUID
    title: str
    slug: str | None = None
    description: str = ""
    price_min: float
    stock: int
    sku: str = ""
    status: str
    tags: list[str] = Field(default_factory=list)
    section: str = ""
    collection: str = ""
    sort_order: int
    image: str | None = None
    has_video: bool = False
    is_video_integrated_visible: bool = True
    country_specific_prices: dict[str, Any] | None = None


class ListingListResponse(CamelModel):
    data: list[ListingSummary]
    total: int
    pagination: Pagination


class ListingDetailsPatch(CamelModel):
    # Category/collection given by id or by name
    category: str | None = None
    collection: str | None = None


class ListingWrite(CamelModel):
    """Create or partial-update body; only the keys sent are applied."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    short_description: str | None = None
    description: str | None = None
    price_cents: int | None = Field(default=None, ge=0)
    sale_price_cents: int | None = Field(default=None, ge=0)
    stock_quantity: int | None = Field(default=None, ge=0)
    sku: str | None = Field(default=None, max_length=100)
    status: ProductStatus | None = None
    category_id: str | None = None
    collection: str | None = None
    tags: list[str] | None = None
    medium: list[str] | None = None
    style: list[str] | None = None
    materials: list[str] | None = None
    techniques: list[str] | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    # Stored map, or the editable array form
    country_specific_prices: dict[str, Any] | list[dict[str, Any]] | None = None
    personalization: Any = None
    is_video_integrated_visible: bool | None = None
    photos: list[ListingPhoto] | None = None
    video: dict[str, Any] | None = None
    details: ListingDetailsPatch | None = None
    metadata: dict[str, Any] | None = None


class ListingStatusUpdate(CamelModel):
    status: ProductStatus
