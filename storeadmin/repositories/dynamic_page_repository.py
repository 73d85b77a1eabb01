"""Dynamic page repository for data access."""

from uuid import UUID

from sqlalchemy.orm import Session

from storeadmin.models.dynamic_page import DynamicPage, DynamicPageSection
from storeadmin.schemas.dynamic_page import DynamicPageCreate, DynamicPageUpdate


class DynamicPageRepository:
    """Repository for DynamicPage model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, section: DynamicPageSection | None = None) -> list[DynamicPage]:
        """Get pages ordered by section, then sort order, newest first."""
        query = self.db.query(DynamicPage)
        if section:
            query = query.filter(DynamicPage.section == section.value)
        return query.order_by(
            DynamicPage.section.asc(),
            DynamicPage.sort_order.asc(),
            DynamicPage.created_at.desc(),
        ).all()

    def get_by_id(self, page_id: UUID) -> DynamicPage | None:
        return self.db.query(DynamicPage).filter(DynamicPage.id == page_id).first()

    def create(self, data: DynamicPageCreate) -> DynamicPage:
        values = data.model_dump()
        values["section"] = data.section.value if data.section else None
        page = DynamicPage(**values)
        self.db.add(page)
        self.db.commit()
        self.db.refresh(page)
        return page

    def update(self, page_id: UUID, data: DynamicPageUpdate) -> DynamicPage | None:
        page = self.get_by_id(page_id)
        if not page:
            return None
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("section") is not None:
            update_data["section"] = update_data["section"].value
        elif "section" in update_data:
            # Section cannot be cleared
            del update_data["section"]
        for key, value in update_data.items():
            setattr(page, key, value)
        self.db.commit()
        self.db.refresh(page)
        return page

    def delete(self, page_id: UUID) -> bool:
        page = self.get_by_id(page_id)
        if not page:
            return False
        self.db.delete(page)
        self.db.commit()
        return True
