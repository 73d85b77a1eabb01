"""Listing editor: load, validate and save one listing with retry."""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import Any

import httpx

from storeadmin.admin.api_client import AdminApiClient, ApiError
from storeadmin.admin.discount_forms import FormValidationError
from storeadmin.core.config import settings
from storeadmin.models.product import ProductStatus
from storeadmin.services.country_prices import (
    CountryPriceRule,
    dollars_to_cents,
    prices_from_storage,
    prices_to_storage,
)

logger = logging.getLogger(__name__)

NEW_LISTING_ID = "new"
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def is_imported(metadata: dict[str, Any]) -> bool:
    """Whether a listing came from a CSV or storefront import (photos optional)."""
    return bool(
        metadata.get("csvExtendedFields")
        or metadata.get("shopify")
        or metadata.get("shopifyData")
        or metadata.get("importSource") == "csv"
    )


@dataclass
class ListingForm:
    id: str = NEW_LISTING_ID
    title: str = ""
    slug: str = ""
    status: ProductStatus = ProductStatus.ACTIVE
    photos: list[dict[str, Any]] = field(default_factory=list)
    video: dict[str, Any] | None = None
    price: float = 0.0
    sale_price: float | None = None
    quantity: int = 0
    sku: str = ""
    category: str = ""
    collection: str = ""
    tags: list[str] = field(default_factory=list)
    medium: list[str] = field(default_factory=list)
    style: list[str] = field(default_factory=list)
    materials: list[str] = field(default_factory=list)
    techniques: list[str] = field(default_factory=list)
    short_description: str = ""
    description: str = ""
    meta_title: str = ""
    meta_description: str = ""
    country_specific_prices: list[CountryPriceRule] = field(default_factory=list)
    personalization: Any = None
    is_video_integrated_visible: bool = True
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_listing(cls, listing: dict[str, Any]) -> "ListingForm":
        about = listing.get("about") or {}
        pricing = listing.get("priceAndInventory") or {}
        details = listing.get("details") or {}
        seo = listing.get("seo") or {}
        metadata = listing.get("metadata") or {}
        return cls(
            id=str(listing["id"]),
            title=about.get("title") or listing.get("title") or "",
            slug=listing.get("slug") or metadata.get("slug") or "",
            status=ProductStatus(listing.get("status") or ProductStatus.ACTIVE.value),
            photos=list(about.get("photos") or []),
            video=about.get("video"),
            price=pricing.get("price") or 0.0,
            sale_price=pricing.get("salePrice"),
            quantity=pricing.get("quantity") or 0,
            sku=pricing.get("sku") or "",
            category=details.get("category") or "",
            collection=details.get("collection") or "",
            tags=list(details.get("tags") or []),
            medium=list(details.get("medium") or []),
            style=list(details.get("style") or []),
            materials=list(details.get("materials") or []),
            techniques=list(details.get("techniques") or []),
            short_description=details.get("shortDescription") or "",
            description=details.get("description") or "",
            meta_title=seo.get("metaTitle") or "",
            meta_description=seo.get("metaDescription") or "",
            country_specific_prices=prices_from_storage(listing.get("countrySpecificPrices")),
            personalization=listing.get("personalization"),
            is_video_integrated_visible=listing.get("isVideoIntegratedVisible", True),
            metadata=metadata,
        )

    def validate(self) -> dict[str, str]:
        """Return every violated rule keyed by form field; empty when valid."""
        errors: dict[str, str] = {}
        if not self.title.strip():
            errors["title"] = "Title is required"
        if not self.slug.strip():
            errors["slug"] = "Slug is required"
        elif not SLUG_PATTERN.match(self.slug):
            errors["slug"] = "Slug must contain only lowercase letters, numbers, and hyphens"
        if not self.price or self.price <= 0:
            errors["price"] = "Price must be greater than 0"
        elif self.sale_price and self.sale_price >= self.price:
            errors["salePrice"] = "Sale price must be less than regular price"
        if not self.sku.strip():
            errors["sku"] = "SKU is required"
        if self.quantity < 0:
            errors["quantity"] = "Quantity cannot be negative"
        if not self.short_description.strip():
            errors["shortDescription"] = "Short description is required"
        if not self.description.strip():
            errors["description"] = "Full description is required"
        if not self.photos and not is_imported(self.metadata):
            errors["photos"] = "At least one photo is required"
        return errors

    def to_payload(self) -> dict[str, Any]:
        """Flat product body for POST/PUT ``/api/listings``."""
        return {
            "name": self.title.strip(),
            "slug": self.slug,
            "shortDescription": self.short_description,
            "description": self.description,
            "priceCents": dollars_to_cents(self.price),
            "salePriceCents": dollars_to_cents(self.sale_price) if self.sale_price else None,
            "stockQuantity": self.quantity,
            "sku": self.sku,
            "status": self.status.value,
            "categoryId": self.category or None,
            "collection": self.collection or None,
            "tags": self.tags,
            "medium": self.medium,
            "style": self.style,
            "materials": self.materials,
            "techniques": self.techniques,
            "metaTitle": self.meta_title,
            "metaDescription": self.meta_description,
            "countrySpecificPrices": prices_to_storage(self.country_specific_prices),
            "personalization": self.personalization,
            "isVideoIntegratedVisible": self.is_video_integrated_visible,
            "photos": self.photos,
            "video": self.video,
        }


class ListingEditor:
    """Holds one listing form and writes it back through the API.

    Failed saves are retried with exponential backoff: after the first attempt
    up to ``max_retries`` more are made, waiting ``base_delay * 2**n`` seconds
    before retry ``n + 1``.
    """

    def __init__(
        self,
        api: AdminApiClient,
        max_retries: int | None = None,
        base_delay: float | None = None,
    ):
        self.api = api
        self.max_retries = (
            settings.LISTING_SAVE_MAX_RETRIES if max_retries is None else max_retries
        )
        self.base_delay = (
            settings.LISTING_SAVE_RETRY_BASE_DELAY_SECONDS if base_delay is None else base_delay
        )
        self.form = ListingForm()
        self.errors: dict[str, str] = {}

    @property
    def is_new(self) -> bool:
        return self.form.id == NEW_LISTING_ID

    def new(self) -> ListingForm:
        self.form = ListingForm()
        self.errors = {}
        return self.form

    async def load(self, listing_id: str) -> ListingForm:
        listing = await self.api.get(f"/api/listings/{listing_id}")
        self.form = ListingForm.from_listing(listing)
        self.errors = {}
        return self.form

    async def copy(self, listing_id: str) -> ListingForm:
        """Load a listing as the starting point of a new one."""
        form = await self.load(listing_id)
        form.id = NEW_LISTING_ID
        form.title = f'Copy of "{form.title}"'
        form.slug = ""
        return form

    def validate(self) -> dict[str, str]:
        self.errors = self.form.validate()
        return self.errors

    async def save(self) -> dict[str, Any]:
        """Validate and write the listing, retrying failed attempts.

        Returns:
            The saved listing as returned by the server.

        Raises:
            FormValidationError: If the form is invalid; no request is made.
            ApiError: If the last attempt was rejected by the server.
            httpx.HTTPError: If the last attempt could not reach the server.
        """
        errors = self.validate()
        if errors:
            raise FormValidationError(errors)

        body = self.form.to_payload()
        attempt = 0
        while True:
            try:
                saved = await self._send(body)
                break
            except (ApiError, httpx.HTTPError) as e:
                if attempt >= self.max_retries:
                    logger.error(
                        "Failed to save listing %s after %d attempts: %s",
                        self.form.id,
                        attempt + 1,
                        e,
                    )
                    raise
                delay = self.base_delay * 2**attempt
                attempt += 1
                logger.warning(
                    "Listing save failed (%s); retrying in %.1fs (attempt %d/%d)",
                    e,
                    delay,
                    attempt,
                    self.max_retries,
                )
                await asyncio.sleep(delay)

        self.form = ListingForm.from_listing(saved)
        return saved

    async def _send(self, body: dict[str, Any]) -> dict[str, Any]:
        if self.is_new:
            return await self.api.post("/api/listings", json=body)
        return await self.api.put(f"/api/listings/{self.form.id}", json=body)
