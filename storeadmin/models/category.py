"""Category model."""

from sqlalchemy import Column, DateTime, String, Text, func

from storeadmin.core.database import Base
from storeadmin.models.shared import UUIDType, generate_uuid


class Category(Base):
    """Product category (one per product)."""

    __tablename__ = "categories"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False, index=True)
    slug = Column(String(255), unique=True, nullable=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
