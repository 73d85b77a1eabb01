"""Category repository for data access."""

from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from storeadmin.models.category import Category
from storeadmin.models.shared import parse_uuid
from storeadmin.schemas.catalog import CategoryCreate, CategoryUpdate


class CategoryRepository:
    """Repository for Category model."""

    def __init__(self, db: Session):
        self.db = db

    def _filtered(self, q: str | None = None) -> Query:  # type: ignore[type-arg]
        query = self.db.query(Category)
        if q:
            pattern = f"%{q}%"
            query = query.filter(or_(Category.name.ilike(pattern), Category.slug.ilike(pattern)))
        return query

    def get_all(self, skip: int = 0, limit: int = 100, q: str | None = None) -> list[Category]:
        return self._filtered(q).order_by(Category.name.asc()).offset(skip).limit(limit).all()

    def count(self, q: str | None = None) -> int:
        return self._filtered(q).count()

    def get_by_id(self, category_id: UUID) -> Category | None:
        return self.db.query(Category).filter(Category.id == category_id).first()

    def get_by_slug(self, slug: str) -> Category | None:
        return self.db.query(Category).filter(Category.slug == slug).first()

    def find(self, id_or_name: str) -> Category | None:
        """Resolve a category from either its id or its exact name."""
        category_id = parse_uuid(id_or_name)
        if category_id is not None:
            category = self.get_by_id(category_id)
            if category:
                return category
        return self.db.query(Category).filter(Category.name == id_or_name).first()

    def create(self, data: CategoryCreate) -> Category:
        category = Category(**data.model_dump())
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def update(self, category_id: UUID, data: CategoryUpdate) -> Category | None:
        category = self.get_by_id(category_id)
        if not category:
            return None
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(category, key, value)
        self.db.commit()
        self.db.refresh(category)
        return category

    def delete(self, category_id: UUID) -> bool:
        category = self.get_by_id(category_id)
        if not category:
            return False
        self.db.delete(category)
        self.db.commit()
        return True
