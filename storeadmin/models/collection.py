"""Collection model and its product membership table."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Text, func

from storeadmin.core.database import Base
from storeadmin.models.shared import UUIDType, generate_uuid

product_collections = Table(
    "product_collections",
    Base.metadata,
    Column(
        "product_id",
        UUIDType,
        ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "collection_id",
        UUIDType,
        ForeignKey("collections.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Collection(Base):
    """Curated group of products (many-to-many)."""

    __tablename__ = "collections"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False, index=True)
    slug = Column(String(255), unique=True, nullable=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
