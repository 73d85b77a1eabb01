"""Tests for the dynamic content admin client."""

import pytest

from storeadmin.admin.api_client import ApiError
from storeadmin.admin.discount_forms import FormValidationError
from storeadmin.admin.dynamic_pages import DynamicPagesClient
from storeadmin.models.dynamic_page import DynamicPageSection


def _page(page_id="d1", section="HERO", **fields):
    return {"id": page_id, "section": section, "isActive": True, "sortOrder": 0, **fields}


class TestDynamicPagesClient:
    """Tests for DynamicPagesClient."""

    @pytest.mark.asyncio
    async def test_list_by_section(self, fake_api):
        fake_api.add("GET", "/api/dynamic-pages", [_page(section="ABOUT")])
        async with fake_api.client() as api:
            pages = await DynamicPagesClient(api).list_pages(DynamicPageSection.ABOUT)
            await DynamicPagesClient(api).list_pages()

        assert pages == [_page(section="ABOUT")]
        params = [dict(r.url.params) for r in fake_api.requests]
        assert params == [{"section": "ABOUT"}, {}]

    @pytest.mark.asyncio
    async def test_create_sends_section(self, fake_api):
        fake_api.add("POST", "/api/dynamic-pages", lambda r: _page(**fake_api.body(r)), status=201)
        async with fake_api.client() as api:
            page = await DynamicPagesClient(api).create({"section": "hero", "title": "Hi"})

        assert page["title"] == "Hi"
        assert fake_api.body(fake_api.sent("POST")[0]) == {"section": "HERO", "title": "Hi"}

    @pytest.mark.asyncio
    async def test_create_requires_section(self, fake_api):
        async with fake_api.client() as api:
            with pytest.raises(FormValidationError) as exc_info:
                await DynamicPagesClient(api).create({"title": "No section"})
        assert exc_info.value.errors == {"section": "Section is required"}
        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_get_update_and_delete(self, fake_api):
        fake_api.add("GET", "/api/dynamic-pages/d1", _page())
        fake_api.add("PUT", "/api/dynamic-pages/d1", lambda r: _page(**fake_api.body(r)))
        fake_api.add("DELETE", "/api/dynamic-pages/d1", status=204)
        async with fake_api.client() as api:
            pages = DynamicPagesClient(api)
            assert (await pages.get("d1"))["section"] == "HERO"
            updated = await pages.set_active("d1", False)
            assert await pages.delete("d1") is None

        assert updated["isActive"] is False
        assert fake_api.body(fake_api.sent("PUT")[0]) == {"isActive": False}
        assert [r.method for r in fake_api.requests] == ["GET", "PUT", "DELETE"]

    @pytest.mark.asyncio
    async def test_missing_page_raises(self, fake_api):
        fake_api.add(
            "GET", "/api/dynamic-pages/gone", {"error": "Dynamic page not found"}, status=404
        )
        async with fake_api.client() as api:
            with pytest.raises(ApiError) as exc_info:
                await DynamicPagesClient(api).get("gone")
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Dynamic page not found"

    @pytest.mark.asyncio
    async def test_unknown_section_is_rejected_locally(self, fake_api):
        async with fake_api.client() as api:
            with pytest.raises(FormValidationError) as exc_info:
                await DynamicPagesClient(api).list_pages("footer")
        assert exc_info.value.errors == {"section": "Unknown section: footer"}
        assert fake_api.requests == []
