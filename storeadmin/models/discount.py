"""Discount model for code and automatic promotions."""

from enum import Enum

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Integer, String, Text, func

from storeadmin.core.database import Base
from storeadmin.models.shared import UUIDType, generate_uuid


class DiscountType(str, Enum):
    AMOUNT_OFF_PRODUCTS = "Amount off products"
    BUY_X_GET_Y = "Buy X get Y"


class DiscountMethod(str, Enum):
    CODE = "Code"
    AUTOMATIC = "Automatic"


class DiscountStatus(str, Enum):
    DRAFT = "Draft"
    ACTIVE = "Active"
    SCHEDULED = "Scheduled"
    EXPIRED = "Expired"


class Discount(Base):
    """Discount model.

    ``requirements`` holds the polymorphic requirements document; its shape is
    owned by ``storeadmin.services.discount_requirements``.
    """

    __tablename__ = "discounts"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    code = Column(String(255), unique=True, index=True, nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    type = Column(String(50), nullable=False, default=DiscountType.AMOUNT_OFF_PRODUCTS.value)
    method = Column(String(20), nullable=False, default=DiscountMethod.CODE.value)
    status = Column(String(20), nullable=False, default=DiscountStatus.DRAFT.value)

    value = Column(Float, nullable=True)
    value_unit = Column(String(10), nullable=True)

    combinations = Column(JSON, nullable=True)
    start_at = Column(DateTime(timezone=True), nullable=True)
    end_at = Column(DateTime(timezone=True), nullable=True)

    limit_total_uses = Column(Integer, nullable=True)
    limit_per_user = Column(Boolean, nullable=True)
    used = Column(Integer, nullable=False, default=0)

    requirements = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
