"""Discount schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field

from storeadmin.models.discount import DiscountMethod, DiscountStatus, DiscountType
from storeadmin.schemas.base import CamelModel, Pagination


class Combinations(CamelModel):
    product: bool = False
    order: bool = False
    shipping: bool = False


class DiscountCreate(CamelModel):
    # Presence and format of code/title are checked by the discount service so
    # every violation is reported at once.
    code: str = ""
    title: str = ""
    description: str | None = None
    type: DiscountType = DiscountType.AMOUNT_OFF_PRODUCTS
    method: DiscountMethod = DiscountMethod.CODE
    status: DiscountStatus = DiscountStatus.DRAFT
    value: float | None = None
    value_unit: str | None = None
    combinations: Combinations | None = None
    start_at: datetime | None = None
    end_at: datetime | None = None
    limit_total_uses: int | None = None
    limit_per_user: bool | None = None
    requirements: dict[str, Any] | None = None


class DiscountUpdate(CamelModel):
    code: str | None = None
    title: str | None = None
    description: str | None = None
    type: DiscountType | None = None
    method: DiscountMethod | None = None
    status: DiscountStatus | None = None
    value: float | None = None
    value_unit: str | None = None
    combinations: Combinations | None = None
    start_at: datetime | None = None
    end_at: datetime | None = None
    limit_total_uses: int | None = None
    limit_per_user: bool | None = None
    requirements: dict[str, Any] | None = None


class DiscountResponse(CamelModel):
    id: UUID
    code: str
    title: str
    description: str | None = None
    type: str
    method: str
    status: str
    value: float | None = None
    value_unit: str | None = None
    combinations: dict[str, Any] | None = None
    start_at: datetime | None = None
    end_at: datetime | None = None
    limit_total_uses: int | None = None
    limit_per_user: bool | None = None
    used: int = 0
    requirements: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DiscountListResponse(CamelModel):
    data: list[DiscountResponse]
    pagination: Pagination


class CartLine(CamelModel):
    """One cart line. Collections and categories are looked up when omitted."""

    product_id: str
    quantity: int = Field(default=1, ge=0)
    unit_price: float = Field(default=0.0, ge=0)
    collection_ids: list[str] | None = None
    category_ids: list[str] | None = None


class Cart(CamelModel):
    lines: list[CartLine] = Field(default_factory=list)


class DiscountValidateRequest(CamelModel):
    code: str = ""
    cart: Cart | None = None
    order_amount: float = Field(default=0.0, ge=0)


class ValidateProgress(CamelModel):
    current_qty: int
    current_amount: float
    qualified: bool


class DiscountValidateResponse(CamelModel):
    valid: bool
    error: str | None = None
    discount: DiscountResponse | None = None
    applicable: bool | None = None
    multiplier: int | None = None
    free_items: int | None = None
    reason: str | None = None
    progress: ValidateProgress | None = None
    discount_amount: float | None = None


class DiscountApplyRequest(CamelModel):
    discount_id: UUID


class DiscountApplyResponse(CamelModel):
    success: bool
    discount: DiscountResponse
    message: str
