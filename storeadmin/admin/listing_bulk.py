"""Listings table operations: bulk edits, quick edits and sort order."""

import asyncio
import copy
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from storeadmin.admin.api_client import AdminApiClient, ApiError
from storeadmin.admin.debounce import Debouncer
from storeadmin.core.config import settings
from storeadmin.models.product import ProductStatus
from storeadmin.services.country_prices import dollars_to_cents

logger = logging.getLogger(__name__)


class BulkEditKind(str, Enum):
    TITLES = "titles"
    DESCRIPTIONS = "descriptions"
    PRICES = "prices"
    TAGS = "tags"
    PERSONALIZATION = "personalization"
    VIDEO_INTEGRATED_VISIBLE = "videoIntegratedVisible"
    CATEGORY = "category"
    COLLECTION = "collection"
    COUNTRY_SPECIFIC_PRICES = "countrySpecificPrices"


class PriceAction(str, Enum):
    SET = "set"
    INCREASE = "increase"
    DECREASE = "decrease"


class PriceUnit(str, Enum):
    AMOUNT = "amount"
    PERCENT = "percent"


class TagAction(str, Enum):
    ADD = "add"
    REMOVE = "remove"


@dataclass(frozen=True)
class BulkEdit:
    """One bulk change applied to every selected listing.

    ``action`` and ``unit`` are only read for price and tag edits.
    """

    kind: BulkEditKind
    value: Any = None
    action: PriceAction | TagAction | None = None
    unit: PriceUnit = PriceUnit.AMOUNT


def _split_tags(value: str) -> list[str]:
    return [tag.strip() for tag in (value or "").split(",") if tag.strip()]


def _new_price(price: float, edit: BulkEdit) -> float:
    amount = float(edit.value or 0)
    if edit.action == PriceAction.SET:
        new_price = amount
    elif edit.action == PriceAction.INCREASE:
        new_price = price + amount if edit.unit == PriceUnit.AMOUNT else price * (1 + amount / 100)
    elif edit.action == PriceAction.DECREASE:
        new_price = price - amount if edit.unit == PriceUnit.AMOUNT else price * (1 - amount / 100)
    else:
        new_price = price
    return max(0.0, new_price)


def build_bulk_payload(edit: BulkEdit, listing: dict[str, Any]) -> dict[str, Any]:
    """Build the partial PUT body that applies ``edit`` to one listing row."""
    if edit.kind == BulkEditKind.TITLES:
        return {"name": edit.value}
    if edit.kind == BulkEditKind.DESCRIPTIONS:
        return {"shortDescription": edit.value}
    if edit.kind == BulkEditKind.PRICES:
        price = _new_price(float(listing.get("priceMin") or 0), edit)
        return {"priceCents": dollars_to_cents(price)}
    if edit.kind == BulkEditKind.TAGS:
        current = list(listing.get("tags") or [])
        tags = _split_tags(edit.value)
        if edit.action == TagAction.REMOVE:
            return {"tags": [tag for tag in current if tag not in tags]}
        # dict preserves first-seen order while dropping duplicates
        return {"tags": list(dict.fromkeys(current + tags))}
    if edit.kind == BulkEditKind.PERSONALIZATION:
        return {"personalization": edit.value}
    if edit.kind == BulkEditKind.VIDEO_INTEGRATED_VISIBLE:
        return {"isVideoIntegratedVisible": bool(edit.value)}
    if edit.kind == BulkEditKind.CATEGORY:
        return {"details": {"category": edit.value}}
    if edit.kind == BulkEditKind.COLLECTION:
        return {"details": {"collection": edit.value}}
    return {"countrySpecificPrices": edit.value}


def _fingerprint(listing: dict[str, Any]) -> str:
    return json.dumps(listing, sort_keys=True, default=str)


def changed_listings(
    original: list[dict[str, Any]], current: list[dict[str, Any]]
) -> list[dict[str, Any]]:
    """Listings in ``current`` whose full record differs from ``original``.

    Listings with no original counterpart are not reported.
    """
    originals = {listing["id"]: _fingerprint(listing) for listing in original}
    return [
        listing
        for listing in current
        if listing["id"] in originals and _fingerprint(listing) != originals[listing["id"]]
    ]


def quick_edit_payload(listing: dict[str, Any]) -> dict[str, Any]:
    """PUT body for a row edited inline in the listings table."""
    payload: dict[str, Any] = {
        "name": listing.get("title"),
        "slug": listing.get("slug"),
        "shortDescription": listing.get("description"),
        "priceCents": dollars_to_cents(float(listing.get("priceMin") or 0)),
        "stockQuantity": int(listing.get("stock") or 0),
        "sku": listing.get("sku"),
        "status": listing.get("status") or ProductStatus.ACTIVE.value,
        "tags": listing.get("tags") or [],
        "collection": listing.get("collection") or None,
        "countrySpecificPrices": listing.get("countrySpecificPrices") or None,
    }
    if listing.get("section"):
        payload["details"] = {"category": listing["section"]}
    return payload


class ListingBulkEditor:
    """State and operations behind the listings table.

    ``listings`` is the editable copy shown to the user and ``original`` the
    last state known to match the server. Sort order changes schedule a
    delayed refresh; scheduling again restarts the countdown.
    """

    def __init__(self, api: AdminApiClient, refresh_delay: float | None = None):
        self.api = api
        self.listings: list[dict[str, Any]] = []
        self.original: list[dict[str, Any]] = []
        self.total = 0
        self._params: dict[str, Any] = {}
        self._refresh = Debouncer(
            settings.AUTO_REFRESH_DELAY_SECONDS if refresh_delay is None else refresh_delay
        )

    @property
    def refresh_pending(self) -> bool:
        return self._refresh.pending

    async def fetch(self, **params: Any) -> list[dict[str, Any]]:
        """Load a page of listings; the filters are remembered for refreshes."""
        if params:
            self._params = params
        body = await self.api.get("/api/listings", params=self._params)
        self.listings = body["data"]
        self.original = copy.deepcopy(self.listings)
        self.total = body["total"]
        return self.listings

    async def apply(self, edit: BulkEdit, ids: list[str]) -> list[dict[str, Any]]:
        """PUT the bulk edit to every selected listing concurrently.

        The first failure propagates; writes that already succeeded stay.
        """
        rows = {listing["id"]: listing for listing in self.listings}
        selected = [listing_id for listing_id in ids if listing_id in rows]
        results = await asyncio.gather(
            *(
                self.api.put(
                    f"/api/listings/{listing_id}",
                    json=build_bulk_payload(edit, rows[listing_id]),
                )
                for listing_id in selected
            )
        )
        logger.info("Bulk %s edit applied to %d listings", edit.kind.value, len(results))
        await self.fetch()
        return results

    async def save_quick_edits(self) -> int:
        """PUT every changed row concurrently and return how many were saved."""
        changed = changed_listings(self.original, self.listings)
        if not changed:
            return 0
        await asyncio.gather(
            *(
                self.api.put(f"/api/listings/{listing['id']}", json=quick_edit_payload(listing))
                for listing in changed
            )
        )
        self.original = copy.deepcopy(self.listings)
        logger.info("Saved %d quick edits", len(changed))
        return len(changed)

    def discard_quick_edits(self) -> None:
        self.listings = copy.deepcopy(self.original)

    async def change_sort_order(self, listing_id: str, sort_order: int) -> list[dict[str, Any]]:
        """Move a listing to a position and schedule an auto-refresh.

        Positions below 1 are clamped to 1. On failure the table is reloaded
        and the error re-raised.
        """
        new_sort_order = max(1, int(sort_order))
        try:
            result = await self.api.post(
                "/api/products/bulk-sort-order",
                json={"productId": listing_id, "newSortOrder": new_sort_order},
            )
        except (ApiError, httpx.HTTPError):
            logger.warning("Sort order change for %s failed; reloading listings", listing_id)
            await self.fetch()
            raise

        positions = {str(p["id"]): p["sortOrder"] for p in result["products"]}
        for listing in self.listings:
            if str(listing["id"]) in positions:
                listing["sortOrder"] = positions[str(listing["id"])]
        self.listings.sort(key=lambda listing: listing.get("sortOrder") or 0)
        self.original = copy.deepcopy(self.listings)
        self.schedule_auto_refresh()
        return self.listings

    def schedule_auto_refresh(self) -> None:
        self._refresh.schedule(self._auto_refresh)

    def cancel_auto_refresh(self) -> None:
        self._refresh.cancel()

    async def wait_for_refresh(self) -> None:
        await self._refresh.wait()

    async def _auto_refresh(self) -> None:
        logger.info("Auto-refreshing listings after sort order change")
        await self.fetch()

    async def toggle_activation(self, listing_id: str) -> dict[str, Any]:
        """Active listings become Draft; anything else becomes Active."""
        listing = next((row for row in self.listings if row["id"] == listing_id), None)
        current = (listing or {}).get("status")
        status = ProductStatus.DRAFT if current == ProductStatus.ACTIVE.value else ProductStatus.ACTIVE
        updated = await self.api.patch(f"/api/listings/{listing_id}", json={"status": status.value})
        if listing is not None:
            listing["status"] = updated["status"]
            for row in self.original:
                if row["id"] == listing_id:
                    row["status"] = updated["status"]
        return updated

    async def aclose(self) -> None:
        self.cancel_auto_refresh()
