"""Tests for product, collection and category endpoints."""

from uuid import uuid4

import pytest

from storeadmin.repositories.product_repository import ProductRepository
from storeadmin.schemas.catalog import ProductCreate


def _product(client, name, **fields):
    response = client.post("/api/products", json={"name": name, **fields})
    assert response.status_code == 201
    return response.json()


class TestProductRepository:
    """Tests for ProductRepository."""

    def test_create_assigns_next_sort_order(self, db_session):
        repo = ProductRepository(db_session)
        first = repo.create(ProductCreate(name="First"))
        second = repo.create(ProductCreate(name="Second"))
        assert first.sort_order == 1
        assert second.sort_order == 2

    def test_move_to_position_renumbers_densely(self, db_session):
        repo = ProductRepository(db_session)
        a = repo.create(ProductCreate(name="A"))
        b = repo.create(ProductCreate(name="B"))
        c = repo.create(ProductCreate(name="C"))

        ordered = repo.move_to_position(c, 1)

        assert [p.name for p in ordered] == ["C", "A", "B"]
        assert [p.sort_order for p in ordered] == [1, 2, 3]
        assert (a.sort_order, b.sort_order, c.sort_order) == (2, 3, 1)

    def test_move_to_middle(self, db_session):
        repo = ProductRepository(db_session)
        a = repo.create(ProductCreate(name="A"))
        repo.create(ProductCreate(name="B"))
        repo.create(ProductCreate(name="C"))

        ordered = repo.move_to_position(a, 2)

        assert [(p.name, p.sort_order) for p in ordered] == [("B", 1), ("A", 2), ("C", 3)]

    def test_get_by_slug_falls_back_to_import_handle(self, db_session):
        repo = ProductRepository(db_session)
        repo.create(ProductCreate(name="Imported", metadata={"handle": "blue-lake"}))
        repo.create(
            ProductCreate(name="Shop", metadata={"shopify": {"handle": "red-barn"}})
        )
        assert repo.get_by_slug("blue-lake").name == "Imported"
        assert repo.get_by_slug("red-barn").name == "Shop"
        assert repo.get_by_slug("missing") is None

    def test_get_by_slug_prefers_own_slug(self, db_session):
        repo = ProductRepository(db_session)
        repo.create(ProductCreate(name="Imported", metadata={"handle": "harbor"}))
        repo.create(ProductCreate(name="Native", slug="harbor"))
        assert repo.get_by_slug("harbor").name == "Native"


class TestProductsAPI:
    """Tests for the product endpoints."""

    def test_create_and_get(self, client):
        created = _product(client, "Sunset", slug="sunset", priceCents=4500, tags=["oil"])
        assert created["priceCents"] == 4500
        assert created["status"] == "Active"
        assert created["sortOrder"] == 1
        assert created["metadata"] == {}

        response = client.get(f"/api/products/{created['id']}")
        assert response.status_code == 200
        assert response.json()["tags"] == ["oil"]

    def test_create_duplicate_slug(self, client):
        _product(client, "One", slug="same")
        response = client.post("/api/products", json={"name": "Two", "slug": "same"})
        assert response.status_code == 409
        assert response.json() == {"error": "Slug already in use"}

    def test_list_search_and_pagination(self, client):
        _product(client, "Red Barn", sku="RB-1")
        _product(client, "Blue Lake", sku="BL-1")
        _product(client, "Red Sky", sku="RS-1")

        body = client.get("/api/products", params={"q": "red"}).json()
        assert body["total"] == 2
        assert [p["name"] for p in body["data"]] == ["Red Barn", "Red Sky"]

        body = client.get("/api/products", params={"offset": 1, "limit": 1}).json()
        assert body["total"] == 3
        assert [p["name"] for p in body["data"]] == ["Blue Lake"]

    def test_list_filters_by_collection(self, client):
        a = _product(client, "A")
        _product(client, "B")
        collection = client.post(
            "/api/collections", json={"name": "Favorites", "productIds": [a["id"]]}
        ).json()

        body = client.get("/api/products", params={"collectionId": collection["id"]}).json()
        assert [p["id"] for p in body["data"]] == [a["id"]]

    def test_update_product(self, client):
        created = _product(client, "Old")
        response = client.put(f"/api/products/{created['id']}", json={"name": "New"})
        assert response.status_code == 200
        assert response.json()["name"] == "New"

    def test_update_slug_conflict(self, client):
        _product(client, "One", slug="taken")
        other = _product(client, "Two")
        response = client.put(f"/api/products/{other['id']}", json={"slug": "taken"})
        assert response.status_code == 409

    def test_update_not_found(self, client):
        response = client.put(f"/api/products/{uuid4()}", json={"name": "x"})
        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}

    def test_update_stock(self, client):
        created = _product(client, "Stocked")
        response = client.patch(
            f"/api/products/{created['id']}/stock", json={"stockQuantity": 7}
        )
        assert response.status_code == 200
        assert response.json()["stockQuantity"] == 7

    def test_negative_stock_rejected(self, client):
        created = _product(client, "Stocked")
        response = client.patch(
            f"/api/products/{created['id']}/stock", json={"stockQuantity": -1}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    def test_delete_product(self, client):
        created = _product(client, "Gone")
        assert client.delete(f"/api/products/{created['id']}").status_code == 204
        assert client.get(f"/api/products/{created['id']}").status_code == 404


class TestProductSlugLookup:
    """Tests for GET /api/products/slug/{slug}."""

    def test_found_with_open_cors(self, client):
        _product(client, "Sunset", slug="sunset")
        response = client.get("/api/products/slug/sunset")
        assert response.status_code == 200
        assert response.json()["name"] == "Sunset"
        assert response.headers["access-control-allow-origin"] == "*"

    def test_import_handle(self, client):
        _product(client, "Imported", metadata={"shopify": {"handle": "old-handle"}})
        response = client.get("/api/products/slug/old-handle")
        assert response.status_code == 200
        assert response.json()["name"] == "Imported"

    def test_not_found_keeps_cors_header(self, client):
        response = client.get("/api/products/slug/nothing")
        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}
        assert response.headers["access-control-allow-origin"] == "*"


class TestBulkSortOrder:
    """Tests for POST /api/products/bulk-sort-order."""

    def test_moves_product_and_renumbers(self, client):
        a = _product(client, "A")
        b = _product(client, "B")
        c = _product(client, "C")

        response = client.post(
            "/api/products/bulk-sort-order",
            json={"productId": c["id"], "newSortOrder": 1},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Sort orders updated successfully"
        assert [(p["id"], p["sortOrder"]) for p in body["products"]] == [
            (c["id"], 1),
            (a["id"], 2),
            (b["id"], 3),
        ]

    @pytest.mark.parametrize("sort_order", [0, -3])
    def test_rejects_positions_below_one(self, client, sort_order):
        a = _product(client, "A")
        response = client.post(
            "/api/products/bulk-sort-order",
            json={"productId": a["id"], "newSortOrder": sort_order},
        )
        assert response.status_code == 400
        assert response.json() == {
            "error": "Invalid productId or sortOrder. Sort order must be >= 1"
        }

    def test_unknown_product(self, client):
        response = client.post(
            "/api/products/bulk-sort-order",
            json={"productId": str(uuid4()), "newSortOrder": 1},
        )
        assert response.status_code == 404


class TestCollectionsAPI:
    """Tests for the collection endpoints."""

    def test_create_with_products_and_list_members(self, client):
        a = _product(client, "A")
        b = _product(client, "B")
        collection = client.post(
            "/api/collections",
            json={"name": "Landscapes", "slug": "landscapes", "productIds": [a["id"], b["id"]]},
        )
        assert collection.status_code == 201

        members = client.get(f"/api/collections/{collection.json()['id']}/products").json()
        assert sorted(members) == sorted([a["id"], b["id"]])

    def test_update_replaces_membership(self, client):
        a = _product(client, "A")
        b = _product(client, "B")
        collection = client.post(
            "/api/collections", json={"name": "Set", "productIds": [a["id"]]}
        ).json()

        response = client.put(
            f"/api/collections/{collection['id']}",
            json={"name": "Renamed", "productIds": [b["id"]]},
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"
        members = client.get(f"/api/collections/{collection['id']}/products").json()
        assert members == [b["id"]]

    def test_list_sorted_by_name_with_search(self, client):
        client.post("/api/collections", json={"name": "Zebra"})
        client.post("/api/collections", json={"name": "Apple"})
        body = client.get("/api/collections").json()
        assert [c["name"] for c in body["data"]] == ["Apple", "Zebra"]
        assert client.get("/api/collections", params={"q": "zeb"}).json()["total"] == 1

    def test_duplicate_slug(self, client):
        client.post("/api/collections", json={"name": "One", "slug": "dup"})
        response = client.post("/api/collections", json={"name": "Two", "slug": "dup"})
        assert response.status_code == 409

    def test_delete_keeps_products(self, client):
        a = _product(client, "A")
        collection = client.post(
            "/api/collections", json={"name": "Tmp", "productIds": [a["id"]]}
        ).json()
        assert client.delete(f"/api/collections/{collection['id']}").status_code == 204
        assert client.get(f"/api/collections/{collection['id']}").status_code == 404
        assert client.get(f"/api/products/{a['id']}").status_code == 200

    def test_not_found(self, client):
        response = client.get(f"/api/collections/{uuid4()}/products")
        assert response.status_code == 404
        assert response.json() == {"error": "Collection not found"}


class TestCategoriesAPI:
    """Tests for the category endpoints."""

    def test_crud(self, client):
        created = client.post("/api/categories", json={"name": "Prints", "slug": "prints"})
        assert created.status_code == 201
        category_id = created.json()["id"]

        assert client.get(f"/api/categories/{category_id}").json()["name"] == "Prints"

        updated = client.put(f"/api/categories/{category_id}", json={"description": "Paper"})
        assert updated.json()["description"] == "Paper"
        assert updated.json()["name"] == "Prints"

        assert client.get("/api/categories").json()["total"] == 1
        assert client.delete(f"/api/categories/{category_id}").status_code == 204
        assert client.get(f"/api/categories/{category_id}").status_code == 404

    def test_empty_name_rejected(self, client):
        response = client.post("/api/categories", json={"name": ""})
        assert response.status_code == 400

    def test_not_found(self, client):
        response = client.put(f"/api/categories/{uuid4()}", json={"name": "x"})
        assert response.status_code == 404
        assert response.json() == {"error": "Category not found"}

    def test_products_filter_by_category(self, client):
        category = client.post("/api/categories", json={"name": "Prints"}).json()
        _product(client, "In", categoryId=category["id"])
        _product(client, "Out")
        body = client.get("/api/products", params={"categoryId": category["id"]}).json()
        assert [p["name"] for p in body["data"]] == ["In"]
