"""Collection repository for data access, including product membership."""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import delete, insert, or_, select
from sqlalchemy.orm import Query, Session

from storeadmin.models.collection import Collection, product_collections
from storeadmin.models.shared import parse_uuid
from storeadmin.schemas.catalog import CollectionCreate, CollectionUpdate


class CollectionRepository:
    """Repository for Collection model."""

    def __init__(self, db: Session):
        self.db = db

    def _filtered(self, q: str | None = None) -> Query:  # type: ignore[type-arg]
        query = self.db.query(Collection)
        if q:
            pattern = f"%{q}%"
            query = query.filter(
                or_(Collection.name.ilike(pattern), Collection.slug.ilike(pattern))
            )
        return query

    def get_all(self, skip: int = 0, limit: int = 100, q: str | None = None) -> list[Collection]:
        return self._filtered(q).order_by(Collection.name.asc()).offset(skip).limit(limit).all()

    def count(self, q: str | None = None) -> int:
        return self._filtered(q).count()

    def get_by_id(self, collection_id: UUID) -> Collection | None:
        return self.db.query(Collection).filter(Collection.id == collection_id).first()

    def get_by_slug(self, slug: str) -> Collection | None:
        return self.db.query(Collection).filter(Collection.slug == slug).first()

    def find(self, id_or_name: str) -> Collection | None:
        """Resolve a collection from either its id or its exact name."""
        collection_id = parse_uuid(id_or_name)
        if collection_id is not None:
            collection = self.get_by_id(collection_id)
            if collection:
                return collection
        return self.db.query(Collection).filter(Collection.name == id_or_name).first()

    def create(self, data: CollectionCreate) -> Collection:
        collection = Collection(**data.model_dump(exclude={"product_ids"}))
        self.db.add(collection)
        self.db.flush()
        if data.product_ids:
            self._add_members(collection.id, data.product_ids)
        self.db.commit()
        self.db.refresh(collection)
        return collection

    def update(self, collection_id: UUID, data: CollectionUpdate) -> Collection | None:
        collection = self.get_by_id(collection_id)
        if not collection:
            return None
        update_data = data.model_dump(exclude_unset=True, exclude={"product_ids"})
        for key, value in update_data.items():
            setattr(collection, key, value)
        if data.product_ids is not None:
            self.db.execute(
                delete(product_collections).where(
                    product_collections.c.collection_id == collection_id
                )
            )
            self._add_members(collection_id, data.product_ids)
        self.db.commit()
        self.db.refresh(collection)
        return collection

    def delete(self, collection_id: UUID) -> bool:
        collection = self.get_by_id(collection_id)
        if not collection:
            return False
        self.db.execute(
            delete(product_collections).where(product_collections.c.collection_id == collection_id)
        )
        self.db.delete(collection)
        self.db.commit()
        return True

    def _add_members(self, collection_id: UUID, product_ids: Iterable[UUID]) -> None:
        rows = [
            {"product_id": product_id, "collection_id": collection_id}
            for product_id in dict.fromkeys(product_ids)
        ]
        if rows:
            self.db.execute(insert(product_collections), rows)

    def product_ids(self, collection_id: UUID) -> list[UUID]:
        """Get the ids of the products in a collection."""
        rows = self.db.execute(
            select(product_collections.c.product_id).where(
                product_collections.c.collection_id == collection_id
            )
        )
        return [row[0] for row in rows]

    def collection_ids_for_product(self, product_id: UUID) -> list[UUID]:
        rows = self.db.execute(
            select(product_collections.c.collection_id).where(
                product_collections.c.product_id == product_id
            )
        )
        return [row[0] for row in rows]

    def names_for_products(self, product_ids: list[UUID]) -> dict[UUID, list[str]]:
        """Map each product id to the names of the collections it belongs to."""
        if not product_ids:
            return {}
        rows = self.db.execute(
            select(product_collections.c.product_id, Collection.name)
            .join(Collection, Collection.id == product_collections.c.collection_id)
            .where(product_collections.c.product_id.in_(product_ids))
            .order_by(Collection.name.asc())
        )
        names: dict[UUID, list[str]] = {}
        for product_id, name in rows:
            names.setdefault(product_id, []).append(name)
        return names

    def set_product_collections(self, product_id: UUID, collection_ids: Iterable[UUID]) -> None:
        """Replace a product's collection memberships. Does not commit."""
        self.db.execute(
            delete(product_collections).where(product_collections.c.product_id == product_id)
        )
        rows = [
            {"product_id": product_id, "collection_id": collection_id}
            for collection_id in dict.fromkeys(collection_ids)
        ]
        if rows:
            self.db.execute(insert(product_collections), rows)
