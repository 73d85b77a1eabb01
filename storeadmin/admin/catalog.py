"""Catalog lookups used by the discount editors.

Products, collections and categories are selected by id; editors show them by
name. ``resolve_catalog_items`` turns stored ids back into ``CatalogItem``
values and ``CatalogSearch`` powers search-as-you-type.
"""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

import httpx

from storeadmin.admin.api_client import AdminApiClient, ApiError
from storeadmin.admin.debounce import Debouncer
from storeadmin.core.config import settings
from storeadmin.services.discount_requirements import ScopeKind

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10


class CatalogKind(str, Enum):
    PRODUCTS = "products"
    COLLECTIONS = "collections"
    CATEGORIES = "categories"


SCOPE_CATALOGS: dict[ScopeKind, CatalogKind] = {
    ScopeKind.PRODUCTS: CatalogKind.PRODUCTS,
    ScopeKind.COLLECTIONS: CatalogKind.COLLECTIONS,
    ScopeKind.CATEGORIES: CatalogKind.CATEGORIES,
}


@dataclass(frozen=True)
class CatalogItem:
    id: str
    name: str


async def _lookup(api: AdminApiClient, kind: CatalogKind, item_id: str) -> CatalogItem | None:
    try:
        data = await api.get(f"/api/{kind.value}/{item_id}")
    except (ApiError, httpx.HTTPError) as e:
        logger.warning("Could not resolve %s %s: %s", kind.value, item_id, e)
        return None
    return CatalogItem(id=str(data["id"]), name=data.get("name") or "")


async def resolve_catalog_items(
    api: AdminApiClient, kind: CatalogKind, ids: Iterable[str]
) -> list[CatalogItem]:
    """Look up every id concurrently, keeping input order.

    Failed lookups are logged and left out of the result.
    """
    results = await asyncio.gather(*(_lookup(api, kind, item_id) for item_id in ids))
    return [item for item in results if item is not None]


class CatalogSearch:
    """Debounced search-as-you-type over one catalog kind.

    Only the latest query in a burst reaches the server. Results already
    selected by the editor are filtered out.
    """

    def __init__(
        self,
        api: AdminApiClient,
        kind: CatalogKind,
        delay: float | None = None,
    ):
        self.api = api
        self.kind = kind
        self.suggestions: list[CatalogItem] = []
        self._debouncer = Debouncer(
            settings.CATALOG_SEARCH_DEBOUNCE_SECONDS if delay is None else delay
        )

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def search(self, query: str, selected: Iterable[CatalogItem] = ()) -> None:
        """Schedule a search; a blank query clears suggestions immediately."""
        if not query.strip():
            self._debouncer.cancel()
            self.suggestions = []
            return
        self._debouncer.schedule(self._fetch, query.strip(), {item.id for item in selected})

    async def wait(self) -> list[CatalogItem]:
        await self._debouncer.wait()
        return self.suggestions

    def cancel(self) -> None:
        self._debouncer.cancel()

    async def _fetch(self, query: str, selected_ids: set[str]) -> list[CatalogItem]:
        try:
            body = await self.api.get(
                f"/api/{self.kind.value}", params={"q": query, "limit": SEARCH_LIMIT}
            )
        except (ApiError, httpx.HTTPError) as e:
            logger.warning("Search of %s for %r failed: %s", self.kind.value, query, e)
            self.suggestions = []
            return self.suggestions
        items = [
            CatalogItem(id=str(row["id"]), name=row.get("name") or "")
            for row in (body or {}).get("data", [])
        ]
        self.suggestions = [item for item in items if item.id not in selected_ids]
        return self.suggestions
