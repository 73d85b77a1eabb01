"""Admin calls for the storefront's dynamic content sections."""

import logging
from typing import Any

from storeadmin.admin.api_client import AdminApiClient
from storeadmin.admin.discount_forms import FormValidationError
from storeadmin.models.dynamic_page import DynamicPageSection

logger = logging.getLogger(__name__)

BASE_PATH = "/api/dynamic-pages"


def _section_value(section: DynamicPageSection | str | None) -> str | None:
    if isinstance(section, DynamicPageSection):
        return section.value
    if not section:
        return None
    try:
        return DynamicPageSection(section.strip().upper()).value
    except ValueError:
        raise FormValidationError({"section": f"Unknown section: {section}"}) from None


class DynamicPagesClient:
    """CRUD over ``/api/dynamic-pages``.

    Bodies are the camelCase documents the API returns; ``section`` is one of
    :class:`DynamicPageSection`.
    """

    def __init__(self, api: AdminApiClient):
        self.api = api

    async def list_pages(
        self, section: DynamicPageSection | str | None = None
    ) -> list[dict[str, Any]]:
        """Content blocks ordered by section, sort order, then newest first."""
        return await self.api.get(BASE_PATH, params={"section": _section_value(section)}) or []

    async def get(self, page_id: str) -> dict[str, Any]:
        return await self.api.get(f"{BASE_PATH}/{page_id}")

    async def create(self, body: dict[str, Any]) -> dict[str, Any]:
        """Create a content block.

        Raises:
            FormValidationError: If ``section`` is missing; no request is made.
            ApiError: If the API rejects the block.
        """
        section = _section_value(body.get("section"))
        if section is None:
            raise FormValidationError({"section": "Section is required"})
        page = await self.api.post(BASE_PATH, json={**body, "section": section})
        logger.info("Created %s content block %s", section, page["id"])
        return page

    async def update(self, page_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        if "section" in changes:
            changes = {**changes, "section": _section_value(changes["section"])}
        page = await self.api.put(f"{BASE_PATH}/{page_id}", json=changes)
        logger.info("Updated content block %s", page_id)
        return page

    async def delete(self, page_id: str) -> None:
        await self.api.delete(f"{BASE_PATH}/{page_id}")
        logger.info("Deleted content block %s", page_id)

    async def set_active(self, page_id: str, active: bool) -> dict[str, Any]:
        return await self.update(page_id, {"isActive": active})
