"""Discount repository for data access."""

from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from storeadmin.core.sorting import apply_order_by
from storeadmin.models.discount import Discount, DiscountMethod, DiscountStatus, DiscountType
from storeadmin.schemas.discount import DiscountCreate, DiscountUpdate

SORTABLE_FIELDS = ("created_at", "updated_at", "title", "code", "used", "status")

_ENUM_FIELDS = ("type", "method", "status")


class DiscountRepository:
    """Repository for Discount model."""

    def __init__(self, db: Session):
        self.db = db

    def _filtered(
        self,
        q: str | None = None,
        status: DiscountStatus | None = None,
        method: DiscountMethod | None = None,
        discount_type: DiscountType | None = None,
    ) -> Query:  # type: ignore[type-arg]
        query = self.db.query(Discount)
        if q:
            pattern = f"%{q}%"
            query = query.filter(
                or_(
                    Discount.title.ilike(pattern),
                    Discount.code.ilike(pattern),
                    Discount.description.ilike(pattern),
                )
            )
        if status:
            query = query.filter(Discount.status == status.value)
        if method:
            query = query.filter(Discount.method == method.value)
        if discount_type:
            query = query.filter(Discount.type == discount_type.value)
        return query

    def get_all(
        self,
        skip: int = 0,
        limit: int = 20,
        q: str | None = None,
        status: DiscountStatus | None = None,
        method: DiscountMethod | None = None,
        discount_type: DiscountType | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> list[Discount]:
        """Get discounts matching the filters, sorted and paginated."""
        query = self._filtered(q, status, method, discount_type)
        query = apply_order_by(
            query, Discount, sort_by, sort_order, allowed_fields=SORTABLE_FIELDS
        )
        return query.offset(skip).limit(limit).all()

    def count(
        self,
        q: str | None = None,
        status: DiscountStatus | None = None,
        method: DiscountMethod | None = None,
        discount_type: DiscountType | None = None,
    ) -> int:
        return self._filtered(q, status, method, discount_type).count()

    def get_by_id(self, discount_id: UUID) -> Discount | None:
        return self.db.query(Discount).filter(Discount.id == discount_id).first()

    def get_by_code(self, code: str) -> Discount | None:
        """Get a discount by code, ignoring case."""
        return (
            self.db.query(Discount)
            .filter(func.upper(Discount.code) == code.strip().upper())
            .first()
        )

    def code_exists(self, code: str, exclude_id: UUID | None = None) -> bool:
        existing = self.get_by_code(code)
        return existing is not None and existing.id != exclude_id

    def create(self, data: DiscountCreate) -> Discount:
        """Create a new discount. Codes are stored uppercased."""
        values = data.model_dump()
        for key in _ENUM_FIELDS:
            values[key] = values[key].value
        values["code"] = data.code.strip().upper()
        values["title"] = data.title.strip()
        discount = Discount(**values, used=0)
        self.db.add(discount)
        self.db.commit()
        self.db.refresh(discount)
        return discount

    def update(self, discount_id: UUID, data: DiscountUpdate) -> Discount | None:
        discount = self.get_by_id(discount_id)
        if not discount:
            return None

        update_data = data.model_dump(exclude_unset=True)
        for key in _ENUM_FIELDS:
            if update_data.get(key) is not None:
                update_data[key] = update_data[key].value
        if update_data.get("code") is not None:
            update_data["code"] = update_data["code"].strip().upper()
        if update_data.get("title") is not None:
            update_data["title"] = update_data["title"].strip()

        for key, value in update_data.items():
            setattr(discount, key, value)

        self.db.commit()
        self.db.refresh(discount)
        return discount

    def delete(self, discount_id: UUID) -> bool:
        discount = self.get_by_id(discount_id)
        if not discount:
            return False
        self.db.delete(discount)
        self.db.commit()
        return True
