"""Tests for listings table bulk edits, quick edits and sort order."""

import json

import pytest

from storeadmin.admin.api_client import ApiError
from storeadmin.admin.listing_bulk import (
    BulkEdit,
    BulkEditKind,
    ListingBulkEditor,
    PriceAction,
    PriceUnit,
    TagAction,
    build_bulk_payload,
    changed_listings,
    quick_edit_payload,
)


def _row(listing_id, **overrides):
    row = {
        "id": listing_id,
        "title": f"Piece {listing_id}",
        "slug": f"piece-{listing_id}",
        "description": "Short",
        "priceMin": 20.0,
        "stock": 2,
        "sku": f"SKU-{listing_id}",
        "status": "Active",
        "tags": ["oil", "blue"],
        "section": "",
        "collection": "",
        "sortOrder": 1,
    }
    row.update(overrides)
    return row


def _table(*rows):
    return {"data": list(rows), "total": len(rows)}


def _body(request):
    return json.loads(request.content)


class TestBuildBulkPayload:
    """Tests for build_bulk_payload."""

    @pytest.mark.parametrize(
        "action,unit,value,expected_cents",
        [
            (PriceAction.SET, PriceUnit.AMOUNT, 12.5, 1250),
            (PriceAction.INCREASE, PriceUnit.AMOUNT, 5, 2500),
            (PriceAction.INCREASE, PriceUnit.PERCENT, 10, 2200),
            (PriceAction.DECREASE, PriceUnit.AMOUNT, 5, 1500),
            (PriceAction.DECREASE, PriceUnit.PERCENT, 25, 1500),
            (PriceAction.DECREASE, PriceUnit.AMOUNT, 50, 0),
            (PriceAction.DECREASE, PriceUnit.PERCENT, 150, 0),
        ],
    )
    def test_prices(self, action, unit, value, expected_cents):
        edit = BulkEdit(BulkEditKind.PRICES, value=value, action=action, unit=unit)
        assert build_bulk_payload(edit, _row("a")) == {"priceCents": expected_cents}

    def test_add_tags_skips_duplicates(self):
        edit = BulkEdit(BulkEditKind.TAGS, value="blue, framed ,, large", action=TagAction.ADD)
        assert build_bulk_payload(edit, _row("a")) == {
            "tags": ["oil", "blue", "framed", "large"]
        }

    def test_remove_tags(self):
        edit = BulkEdit(BulkEditKind.TAGS, value="oil,missing", action=TagAction.REMOVE)
        assert build_bulk_payload(edit, _row("a")) == {"tags": ["blue"]}

    @pytest.mark.parametrize(
        "kind,value,expected",
        [
            (BulkEditKind.TITLES, "New title", {"name": "New title"}),
            (BulkEditKind.DESCRIPTIONS, "New text", {"shortDescription": "New text"}),
            (BulkEditKind.PERSONALIZATION, {"enabled": True}, {"personalization": {"enabled": True}}),
            (BulkEditKind.VIDEO_INTEGRATED_VISIBLE, 0, {"isVideoIntegratedVisible": False}),
            (BulkEditKind.CATEGORY, "Prints", {"details": {"category": "Prints"}}),
            (BulkEditKind.COLLECTION, "Coastal", {"details": {"collection": "Coastal"}}),
            (
                BulkEditKind.COUNTRY_SPECIFIC_PRICES,
                {"IN": {"priceCents": 100, "currency": "INR"}},
                {"countrySpecificPrices": {"IN": {"priceCents": 100, "currency": "INR"}}},
            ),
        ],
    )
    def test_simple_fields(self, kind, value, expected):
        assert build_bulk_payload(BulkEdit(kind, value=value), _row("a")) == expected


class TestQuickEdits:
    """Tests for changed_listings and quick_edit_payload."""

    def test_changed_listings(self):
        original = [_row("a"), _row("b"), _row("c")]
        current = [_row("a"), _row("b", stock=9), _row("c", tags=["oil"]), _row("d")]
        changed = changed_listings(original, current)
        assert [row["id"] for row in changed] == ["b", "c"]

    def test_quick_edit_payload(self):
        payload = quick_edit_payload(_row("a", priceMin=19.99, section="Prints"))
        assert payload == {
            "name": "Piece a",
            "slug": "piece-a",
            "shortDescription": "Short",
            "priceCents": 1999,
            "stockQuantity": 2,
            "sku": "SKU-a",
            "status": "Active",
            "tags": ["oil", "blue"],
            "collection": None,
            "countrySpecificPrices": None,
            "details": {"category": "Prints"},
        }

    def test_quick_edit_payload_without_section(self):
        assert "details" not in quick_edit_payload(_row("a"))


class TestListingBulkEditor:
    """Tests for ListingBulkEditor."""

    @pytest.mark.asyncio
    async def test_fetch_remembers_filters(self, fake_api):
        fake_api.add("GET", "/api/listings", _table(_row("a")))
        async with fake_api.client() as api:
            editor = ListingBulkEditor(api, refresh_delay=0)
            await editor.fetch(status="Draft", limit=25)
            await editor.fetch()
        params = [dict(r.url.params) for r in fake_api.requests]
        assert params == [{"status": "Draft", "limit": "25"}] * 2
        assert editor.total == 1

    @pytest.mark.asyncio
    async def test_apply_puts_each_selected_listing_then_refetches(self, fake_api):
        fake_api.add("GET", "/api/listings", _table(_row("a"), _row("b", priceMin=10.0), _row("c")))
        fake_api.add("PUT", "/api/listings/a", {"id": "a"})
        fake_api.add("PUT", "/api/listings/b", {"id": "b"})
        async with fake_api.client() as api:
            editor = ListingBulkEditor(api, refresh_delay=0)
            await editor.fetch()
            edit = BulkEdit(
                BulkEditKind.PRICES, value=50, action=PriceAction.INCREASE, unit=PriceUnit.PERCENT
            )
            results = await editor.apply(edit, ["a", "b", "missing"])

        assert results == [{"id": "a"}, {"id": "b"}]
        bodies = {r.url.path: _body(r) for r in fake_api.sent("PUT")}
        assert bodies == {
            "/api/listings/a": {"priceCents": 3000},
            "/api/listings/b": {"priceCents": 1500},
        }
        assert len(fake_api.sent("GET")) == 2

    @pytest.mark.asyncio
    async def test_apply_failure_propagates(self, fake_api):
        fake_api.add("GET", "/api/listings", _table(_row("a")))
        fake_api.add("PUT", "/api/listings/a", {"error": "Listing not found"}, status=404)
        async with fake_api.client() as api:
            editor = ListingBulkEditor(api, refresh_delay=0)
            await editor.fetch()
            with pytest.raises(ApiError):
                await editor.apply(BulkEdit(BulkEditKind.TITLES, value="x"), ["a"])

    @pytest.mark.asyncio
    async def test_save_and_discard_quick_edits(self, fake_api):
        fake_api.add("GET", "/api/listings", _table(_row("a"), _row("b")))
        fake_api.add("PUT", "/api/listings/b", {"id": "b"})
        async with fake_api.client() as api:
            editor = ListingBulkEditor(api, refresh_delay=0)
            await editor.fetch()
            assert await editor.save_quick_edits() == 0

            editor.listings[1]["stock"] = 7
            assert await editor.save_quick_edits() == 1
            assert editor.original[1]["stock"] == 7

            editor.listings[0]["title"] = "Unsaved"
            editor.discard_quick_edits()

        assert editor.listings[0]["title"] == "Piece a"
        puts = fake_api.sent("PUT")
        assert len(puts) == 1
        assert _body(puts[0])["stockQuantity"] == 7

    @pytest.mark.asyncio
    async def test_change_sort_order_clamps_and_refreshes(self, fake_api):
        fake_api.add(
            "GET", "/api/listings", _table(_row("a", sortOrder=1), _row("b", sortOrder=2))
        )
        fake_api.add(
            "POST",
            "/api/products/bulk-sort-order",
            {
                "success": True,
                "message": "Sort orders updated successfully",
                "products": [{"id": "b", "sortOrder": 1}, {"id": "a", "sortOrder": 2}],
            },
        )
        async with fake_api.client() as api:
            editor = ListingBulkEditor(api, refresh_delay=0)
            await editor.fetch()
            listings = await editor.change_sort_order("b", -4)

            assert [row["id"] for row in listings] == ["b", "a"]
            assert editor.refresh_pending
            await editor.wait_for_refresh()

        assert _body(fake_api.sent("POST")[0]) == {"productId": "b", "newSortOrder": 1}
        assert len(fake_api.sent("GET")) == 2
        assert not editor.refresh_pending

    @pytest.mark.asyncio
    async def test_repeated_sort_changes_refresh_once(self, fake_api):
        fake_api.add("GET", "/api/listings", _table(_row("a")))
        fake_api.add(
            "POST",
            "/api/products/bulk-sort-order",
            {"success": True, "message": "", "products": [{"id": "a", "sortOrder": 1}]},
        )
        async with fake_api.client() as api:
            editor = ListingBulkEditor(api, refresh_delay=0.01)
            await editor.fetch()
            await editor.change_sort_order("a", 1)
            await editor.change_sort_order("a", 1)
            await editor.wait_for_refresh()
        assert len(fake_api.sent("GET")) == 2

    @pytest.mark.asyncio
    async def test_cancelled_refresh_does_not_fetch(self, fake_api):
        fake_api.add("GET", "/api/listings", _table(_row("a")))
        fake_api.add(
            "POST",
            "/api/products/bulk-sort-order",
            {"success": True, "message": "", "products": [{"id": "a", "sortOrder": 1}]},
        )
        async with fake_api.client() as api:
            editor = ListingBulkEditor(api, refresh_delay=10)
            await editor.fetch()
            await editor.change_sort_order("a", 1)
            await editor.aclose()
            await editor.wait_for_refresh()
        assert len(fake_api.sent("GET")) == 1

    @pytest.mark.asyncio
    async def test_sort_order_failure_reloads_and_raises(self, fake_api):
        fake_api.add("GET", "/api/listings", _table(_row("a")))
        fake_api.add(
            "POST", "/api/products/bulk-sort-order", {"error": "Product not found"}, status=404
        )
        async with fake_api.client() as api:
            editor = ListingBulkEditor(api, refresh_delay=0)
            await editor.fetch()
            with pytest.raises(ApiError):
                await editor.change_sort_order("a", 3)
        assert len(fake_api.sent("GET")) == 2
        assert not editor.refresh_pending

    @pytest.mark.asyncio
    async def test_toggle_activation(self, fake_api):
        fake_api.add("GET", "/api/listings", _table(_row("a"), _row("b", status="Draft")))
        fake_api.add(
            "PATCH", "/api/listings/a", lambda r: {"id": "a", **_body(r)}
        )
        fake_api.add(
            "PATCH", "/api/listings/b", lambda r: {"id": "b", **_body(r)}
        )
        async with fake_api.client() as api:
            editor = ListingBulkEditor(api, refresh_delay=0)
            await editor.fetch()
            await editor.toggle_activation("a")
            await editor.toggle_activation("b")

        assert [_body(r) for r in fake_api.sent("PATCH")] == [
            {"status": "Draft"},
            {"status": "Active"},
        ]
        assert [row["status"] for row in editor.listings] == ["Draft", "Active"]
        assert changed_listings(editor.original, editor.listings) == []
