"""Product repository for data access."""

from typing import Any
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from storeadmin.models.collection import product_collections
from storeadmin.models.product import Product, ProductStatus
from storeadmin.repositories.collection_repository import CollectionRepository
from storeadmin.schemas.catalog import ProductCreate, ProductUpdate


class ProductRepository:
    """Repository for Product model."""

    def __init__(self, db: Session):
        self.db = db

    def _filtered(
        self,
        q: str | None = None,
        status: ProductStatus | None = None,
        category_id: UUID | None = None,
        collection_id: UUID | None = None,
        has_video: bool | None = None,
    ) -> Query:  # type: ignore[type-arg]
        query = self.db.query(Product)
        if q:
            pattern = f"%{q}%"
            query = query.filter(
                or_(
                    Product.name.ilike(pattern),
                    Product.sku.ilike(pattern),
                    Product.slug.ilike(pattern),
                )
            )
        if status:
            query = query.filter(Product.status == status.value)
        if category_id:
            query = query.filter(Product.category_id == category_id)
        if collection_id:
            query = query.join(
                product_collections, product_collections.c.product_id == Product.id
            ).filter(product_collections.c.collection_id == collection_id)
        if has_video is True:
            query = query.filter(Product.video.isnot(None))
        elif has_video is False:
            query = query.filter(Product.video.is_(None))
        return query

    def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        q: str | None = None,
        status: ProductStatus | None = None,
        category_id: UUID | None = None,
        collection_id: UUID | None = None,
        has_video: bool | None = None,
    ) -> list[Product]:
        """Get products in display order (sort order, then oldest first)."""
        return (
            self._filtered(q, status, category_id, collection_id, has_video)
            .order_by(Product.sort_order.asc(), Product.created_at.asc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(
        self,
        q: str | None = None,
        status: ProductStatus | None = None,
        category_id: UUID | None = None,
        collection_id: UUID | None = None,
        has_video: bool | None = None,
    ) -> int:
        return self._filtered(q, status, category_id, collection_id, has_video).count()

    def get_by_id(self, product_id: UUID) -> Product | None:
        return self.db.query(Product).filter(Product.id == product_id).first()

    def slug_exists(self, slug: str, exclude_id: UUID | None = None) -> bool:
        query = self.db.query(Product).filter(Product.slug == slug)
        if exclude_id is not None:
            query = query.filter(Product.id != exclude_id)
        return query.first() is not None

    def get_by_slug(self, slug: str) -> Product | None:
        """Find a product by slug, or by the handle recorded by an import.

        Imported products keep their storefront handle in ``metadata.handle``
        or ``metadata.shopify.handle``.
        """
        product = self.db.query(Product).filter(Product.slug == slug).first()
        if product:
            return product

        return (
            self.db.query(Product)
            .filter(
                or_(
                    Product.product_metadata["handle"].as_string() == slug,
                    Product.product_metadata[("shopify", "handle")].as_string() == slug,
                )
            )
            .order_by(Product.created_at.asc())
            .first()
        )

    def next_sort_order(self) -> int:
        current = self.db.query(func.max(Product.sort_order)).scalar()
        return (current or 0) + 1

    def create(self, data: ProductCreate) -> Product:
        values = data.model_dump(exclude={"collection_ids", "metadata"})
        values["status"] = data.status.value
        if values["sort_order"] is None:
            values["sort_order"] = self.next_sort_order()
        product = Product(**values, product_metadata=data.metadata)
        self.db.add(product)
        self.db.flush()
        if data.collection_ids:
            CollectionRepository(self.db).set_product_collections(product.id, data.collection_ids)
        self.db.commit()
        self.db.refresh(product)
        return product

    def update(self, product_id: UUID, data: ProductUpdate) -> Product | None:
        product = self.get_by_id(product_id)
        if not product:
            return None

        update_data = data.model_dump(exclude_unset=True, exclude={"collection_ids"})
        if update_data.get("status") is not None:
            update_data["status"] = update_data["status"].value
        collection_ids = data.collection_ids if "collection_ids" in data.model_fields_set else None
        return self.apply_changes(product, update_data, collection_ids)

    def apply_changes(
        self,
        product: Product,
        values: dict[str, Any],
        collection_ids: list[UUID] | None = None,
    ) -> Product:
        """Assign column values (wire ``metadata`` included) and commit."""
        if "metadata" in values:
            product.product_metadata = values.pop("metadata") or {}
        for key, value in values.items():
            setattr(product, key, value)
        if collection_ids is not None:
            CollectionRepository(self.db).set_product_collections(product.id, collection_ids)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete(self, product_id: UUID) -> bool:
        product = self.get_by_id(product_id)
        if not product:
            return False
        CollectionRepository(self.db).set_product_collections(product_id, [])
        self.db.delete(product)
        self.db.commit()
        return True

    def move_to_position(self, product: Product, new_sort_order: int) -> list[Product]:
        """Give a product an explicit sort order and renumber the rest densely.

        The other products keep their relative order (sort order, then
        creation time) and are numbered 1, 2, 3, ... skipping the position
        taken by the moved product.

        Returns:
            All products in their new display order.
        """
        others = (
            self.db.query(Product)
            .filter(Product.id != product.id)
            .order_by(Product.sort_order.asc(), Product.created_at.asc())
            .all()
        )

        product.sort_order = new_sort_order
        position = 1
        for other in others:
            if position == new_sort_order:
                position += 1
            other.sort_order = position
            position += 1

        self.db.commit()
        return (
            self.db.query(Product)
            .order_by(Product.sort_order.asc(), Product.created_at.asc())
            .all()
        )
