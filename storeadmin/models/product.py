"""Product model. Listings are the admin view of products."""

from enum import Enum

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text, func

from storeadmin.core.database import Base
from storeadmin.models.shared import UUIDType, generate_uuid


class ProductStatus(str, Enum):
    ACTIVE = "Active"
    DRAFT = "Draft"
    INACTIVE = "Inactive"


class Product(Base):
    """Product model."""

    __tablename__ = "products"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False, index=True)
    slug = Column(String(255), unique=True, index=True, nullable=True)
    short_description = Column(Text, nullable=True)
    description = Column(Text, nullable=True)

    price_cents = Column(Integer, nullable=False, default=0)
    sale_price_cents = Column(Integer, nullable=True)
    stock_quantity = Column(Integer, nullable=False, default=0)
    sku = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, default=ProductStatus.ACTIVE.value)
    sort_order = Column(Integer, nullable=False, default=1)

    category_id = Column(
        UUIDType,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    tags = Column(JSON, nullable=False, default=list)
    medium = Column(JSON, nullable=False, default=list)
    style = Column(JSON, nullable=False, default=list)
    materials = Column(JSON, nullable=False, default=list)
    techniques = Column(JSON, nullable=False, default=list)

    meta_title = Column(String(255), nullable=True)
    meta_description = Column(Text, nullable=True)

    # {"IN": {"priceCents": 2550, "currency": "INR"}}
    country_specific_prices = Column(JSON, nullable=True)
    is_video_integrated_visible = Column(Boolean, nullable=False, default=True)
    personalization = Column(JSON, nullable=True)
    # [{"id", "src", "hint", "isPrimary"}]
    images = Column(JSON, nullable=False, default=list)
    video = Column(JSON(none_as_null=True), nullable=True)
    # "metadata" is reserved on declarative classes
    product_metadata = Column("metadata", JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
