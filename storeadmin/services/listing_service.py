"""Listing service: products presented and edited as admin listings."""

import logging
import re
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from storeadmin.models.category import Category
from storeadmin.models.collection import Collection
from storeadmin.models.product import Product, ProductStatus
from storeadmin.models.shared import parse_uuid
from storeadmin.repositories.category_repository import CategoryRepository
from storeadmin.repositories.collection_repository import CollectionRepository
from storeadmin.repositories.product_repository import ProductRepository
from storeadmin.schemas.catalog import CategoryCreate, CollectionCreate
from storeadmin.schemas.listing import (
    ListingAbout,
    ListingDetails,
    ListingPhoto,
    ListingPriceAndInventory,
    ListingResponse,
    ListingSeo,
    ListingSummary,
    ListingWrite,
)
from storeadmin.services.country_prices import CountryPriceRule, prices_to_storage

logger = logging.getLogger(__name__)

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
METADATA_IMAGE_ID = "metadata-image"

# Flat write keys that map straight onto product columns
_COLUMN_FIELDS = (
    "name",
    "slug",
    "short_description",
    "description",
    "price_cents",
    "sale_price_cents",
    "stock_quantity",
    "sku",
    "tags",
    "medium",
    "style",
    "materials",
    "techniques",
    "meta_title",
    "meta_description",
    "personalization",
    "is_video_integrated_visible",
    "video",
)

# Keys that may be omitted but not sent as null
_NON_NULL_FIELDS = {
    "name": "name",
    "price_cents": "priceCents",
    "stock_quantity": "stockQuantity",
    "tags": "tags",
    "medium": "medium",
    "style": "style",
    "materials": "materials",
    "techniques": "techniques",
    "is_video_integrated_visible": "isVideoIntegratedVisible",
}


class ListingValidationError(ValueError):
    def __init__(self, errors: list[str]):
        super().__init__("Validation failed")
        self.errors = errors


class SlugConflictError(ValueError):
    """Raised when a slug already belongs to another product."""


def _photos(product: Product) -> list[ListingPhoto]:
    photos = [ListingPhoto.model_validate(image) for image in product.images or []]
    metadata_image = (product.product_metadata or {}).get("image")
    # CSV imports carry their image in metadata only
    if not photos and isinstance(metadata_image, dict) and metadata_image.get("url"):
        photos.append(
            ListingPhoto(
                id=METADATA_IMAGE_ID,
                src=metadata_image["url"],
                hint=metadata_image.get("altText") or product.name,
                is_primary=True,
            )
        )
    return photos


def _primary_image(product: Product) -> str | None:
    photos = _photos(product)
    primary = next((photo for photo in photos if photo.is_primary), None)
    chosen = primary or (photos[0] if photos else None)
    return chosen.src if chosen else None


def to_listing(product: Product, collection_ids: list[UUID]) -> ListingResponse:
    """Build the nested editor view of a product."""
    metadata = dict(product.product_metadata or {})
    metadata["slug"] = product.slug or metadata.get("slug") or ""
    return ListingResponse(
        id=product.id,
        title=product.name,
        slug=product.slug,
        status=product.status,
        sort_order=product.sort_order,
        about=ListingAbout(title=product.name, photos=_photos(product), video=product.video),
        price_and_inventory=ListingPriceAndInventory(
            price=product.price_cents / 100,
            sale_price=product.sale_price_cents / 100 if product.sale_price_cents else None,
            quantity=product.stock_quantity,
            sku=product.sku or "",
        ),
        details=ListingDetails(
            category=str(product.category_id) if product.category_id else "",
            collection=str(collection_ids[0]) if collection_ids else "",
            tags=product.tags or [],
            medium=product.medium or [],
            style=product.style or [],
            materials=product.materials or [],
            techniques=product.techniques or [],
            short_description=product.short_description or "",
            description=product.description or "",
        ),
        seo=ListingSeo(
            meta_title=product.meta_title or "",
            meta_description=product.meta_description or "",
        ),
        country_specific_prices=product.country_specific_prices,
        personalization=product.personalization,
        is_video_integrated_visible=product.is_video_integrated_visible,
        metadata=metadata,
    )


def to_summary(
    product: Product, category_name: str | None, collection_names: list[str]
) -> ListingSummary:
    """Build the listings-table row for a product."""
    return ListingSummary(
        id=product.id,
        title=product.name,
        slug=product.slug,
        description=product.short_description or "",
        price_min=product.price_cents / 100,
        stock=product.stock_quantity,
        sku=product.sku or "",
        status=product.status,
        tags=product.tags or [],
        section=category_name or "",
        collection=collection_names[0] if collection_names else "",
        sort_order=product.sort_order,
        image=_primary_image(product),
        has_video=product.video is not None,
        is_video_integrated_visible=product.is_video_integrated_visible,
        country_specific_prices=product.country_specific_prices,
    )


class ListingService:
    """Service translating listing reads and writes onto products."""

    def __init__(self, db: Session):
        self.db = db
        self.product_repo = ProductRepository(db)
        self.category_repo = CategoryRepository(db)
        self.collection_repo = CollectionRepository(db)

    def search(
        self,
        limit: int = 24,
        offset: int = 0,
        q: str | None = None,
        status: ProductStatus | None = None,
        collection_id: UUID | None = None,
        has_video: bool | None = None,
    ) -> tuple[list[ListingSummary], int]:
        """List listings in display order with the total matching count."""
        products = self.product_repo.get_all(
            skip=offset,
            limit=limit,
            q=q,
            status=status,
            collection_id=collection_id,
            has_video=has_video,
        )
        total = self.product_repo.count(
            q=q, status=status, collection_id=collection_id, has_video=has_video
        )

        category_names = {
            category.id: category.name
            for category in self.db.query(Category).filter(
                Category.id.in_({p.category_id for p in products if p.category_id})
            )
        }
        collection_names = self.collection_repo.names_for_products([p.id for p in products])
        summaries = [
            to_summary(
                product,
                category_names.get(product.category_id),
                collection_names.get(product.id, []),
            )
            for product in products
        ]
        return summaries, total

    def get(self, listing_id: UUID) -> ListingResponse | None:
        product = self.product_repo.get_by_id(listing_id)
        if not product:
            return None
        return to_listing(product, self.collection_repo.collection_ids_for_product(product.id))

    def create(self, data: ListingWrite) -> ListingResponse:
        """Create a product from a listing body.

        Raises:
            ListingValidationError: If the name is missing or the slug is malformed.
            SlugConflictError: If the slug is taken.
        """
        errors = self._validate(data, creating=True)
        if errors:
            raise ListingValidationError(errors)

        product = Product(
            name=data.name.strip(),  # type: ignore[union-attr]
            sort_order=self.product_repo.next_sort_order(),
            status=ProductStatus.ACTIVE.value,
            product_metadata={},
        )
        self.db.add(product)
        self.db.flush()
        self._apply(product, data)
        logger.info("Created listing %s (%s)", product.id, product.name)
        return to_listing(product, self.collection_repo.collection_ids_for_product(product.id))

    def update(self, listing_id: UUID, data: ListingWrite) -> ListingResponse | None:
        """Apply a partial listing body; keys that were not sent are left alone."""
        product = self.product_repo.get_by_id(listing_id)
        if not product:
            return None
        errors = self._validate(data, creating=False, product_id=listing_id)
        if errors:
            raise ListingValidationError(errors)
        self._apply(product, data)
        return to_listing(product, self.collection_repo.collection_ids_for_product(product.id))

    def set_status(self, listing_id: UUID, status: ProductStatus) -> ListingResponse | None:
        product = self.product_repo.get_by_id(listing_id)
        if not product:
            return None
        self.product_repo.apply_changes(product, {"status": status.value})
        return to_listing(product, self.collection_repo.collection_ids_for_product(product.id))

    def delete(self, listing_id: UUID) -> bool:
        return self.product_repo.delete(listing_id)

    def _validate(
        self, data: ListingWrite, creating: bool, product_id: UUID | None = None
    ) -> list[str]:
        errors: list[str] = []
        sent = data.model_fields_set
        if creating and not (data.name or "").strip():
            errors.append("Name is required")
        errors.extend(
            f"{alias} cannot be null"
            for key, alias in _NON_NULL_FIELDS.items()
            if key in sent and getattr(data, key) is None and not (creating and key == "name")
        )
        if data.slug and not SLUG_PATTERN.match(data.slug):
            errors.append("Slug must contain only lowercase letters, numbers, and hyphens")
        if "slug" in sent and data.slug and not errors:
            if self.product_repo.slug_exists(data.slug, exclude_id=product_id):
                raise SlugConflictError("Slug already in use")
        return errors

    def _apply(self, product: Product, data: ListingWrite) -> None:
        sent = data.model_fields_set
        values: dict[str, Any] = {
            key: getattr(data, key) for key in _COLUMN_FIELDS if key in sent
        }
        if "slug" in values:
            values["slug"] = values["slug"] or None
        if data.status is not None:
            values["status"] = data.status.value
        if "photos" in sent:
            values["images"] = [
                photo.model_dump(by_alias=True) for photo in data.photos or []
            ]
        if "metadata" in sent:
            values["metadata"] = {**(product.product_metadata or {}), **(data.metadata or {})}
        if "country_specific_prices" in sent:
            values["country_specific_prices"] = self._stored_prices(data.country_specific_prices)

        category_ref = data.category_id if "category_id" in sent else None
        if data.details is not None and "category" in data.details.model_fields_set:
            category_ref = data.details.category
        if category_ref is not None or "category_id" in sent:
            values["category_id"] = self._resolve_category(category_ref)

        collection_ids: list[UUID] | None = None
        collection_ref = data.collection if "collection" in sent else None
        if data.details is not None and "collection" in data.details.model_fields_set:
            collection_ref = data.details.collection
            sent = sent | {"collection"}
        if "collection" in sent:
            collection = self._resolve_collection(collection_ref)
            collection_ids = [collection.id] if collection else []

        self.product_repo.apply_changes(product, values, collection_ids)

    @staticmethod
    def _stored_prices(value: dict[str, Any] | list[dict[str, Any]] | None) -> dict[str, Any] | None:
        if isinstance(value, list):
            return prices_to_storage([CountryPriceRule.from_dict(item) for item in value])
        return value or None

    def _resolve_category(self, ref: str | None) -> UUID | None:
        """Find a category by id or name, creating it when a new name is given."""
        if not ref:
            return None
        category = self.category_repo.find(ref)
        if category:
            return category.id
        if parse_uuid(ref) is not None:
            logger.warning("Unknown category id %s; leaving listing uncategorized", ref)
            return None
        return self.category_repo.create(CategoryCreate(name=ref)).id

    def _resolve_collection(self, ref: str | None) -> Collection | None:
        """Find a collection by id or name, creating it when a new name is given."""
        if not ref:
            return None
        collection = self.collection_repo.find(ref)
        if collection:
            return collection
        if parse_uuid(ref) is not None:
            logger.warning("Unknown collection id %s; listing not added to a collection", ref)
            return None
        return self.collection_repo.create(CollectionCreate(name=ref))
