"""Discount service: write validation, code evaluation and usage tracking."""

import logging
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.orm import Session

from storeadmin.models.discount import Discount, DiscountStatus, DiscountType
from storeadmin.models.shared import parse_uuid
from storeadmin.repositories.collection_repository import CollectionRepository
from storeadmin.repositories.discount_repository import DiscountRepository
from storeadmin.repositories.product_repository import ProductRepository
from storeadmin.schemas.discount import Cart, CartLine, DiscountCreate, DiscountUpdate
from storeadmin.services.discount_requirements import (
    BuyRequirement,
    BuyXGetYRequirements,
    Scope,
    ScopeKind,
    MinimumPurchaseKind,
    decode_amount_off,
    decode_buy_x_get_y,
)

logger = logging.getLogger(__name__)

CODE_PATTERN = re.compile(r"^[A-Z0-9_-]+$", re.IGNORECASE)
# Type, method and status are fixed columns that a partial update may omit
_NON_NULL_UPDATE_FIELDS = ("type", "method", "status")


class DiscountValidationError(ValueError):
    """Raised when a discount write violates one or more rules."""

    def __init__(self, errors: list[str]):
        super().__init__("Validation failed")
        self.errors = errors


class DuplicateDiscountCodeError(ValueError):
    """Raised when a code is already used by another discount."""


class DiscountCodeError(ValueError):
    """Raised when a code cannot be redeemed."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


def _aware(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def validate_discount_fields(
    title: str | None,
    code: str | None,
    value: float | None = None,
    limit_total_uses: int | None = None,
    start_at: datetime | None = None,
    end_at: datetime | None = None,
) -> list[str]:
    """Check a discount's fields and return every violated rule.

    Returns:
        The error messages in a stable order; empty when the discount is valid.
    """
    errors: list[str] = []
    code = (code or "").strip()
    if not (title or "").strip():
        errors.append("Title is required")
    if not code:
        errors.append("Code is required")
    elif not CODE_PATTERN.match(code):
        errors.append("Code can only contain letters, numbers, hyphens, and underscores")
    if value is not None and value < 0:
        errors.append("Value must be a positive number")
    if limit_total_uses is not None and limit_total_uses < 1:
        errors.append("Total uses limit must be a positive number")
    start, end = _aware(start_at), _aware(end_at)
    if start and end and start >= end:
        errors.append("End date must be after start date")
    return errors


@dataclass
class CartEvaluation:
    """Outcome of checking a cart against Buy X Get Y conditions."""

    applicable: bool
    multiplier: int = 0
    free_items: int = 0
    reason: str | None = None
    qualifying_quantity: int = 0
    qualifying_amount: float = 0.0


@dataclass
class CodeValidation:
    discount: Discount
    evaluation: CartEvaluation | None = None
    discount_amount: float | None = None


def _plural(count: int) -> str:
    return "s" if count > 1 else ""


def evaluate_buy_x_get_y(requirements: BuyXGetYRequirements, lines: list[CartLine]) -> CartEvaluation:
    """Count qualifying cart lines and work out how often the offer applies.

    A line qualifies when it falls inside the buy scope. The offer applies
    ``qualifying_quantity // buy_quantity`` times, provided the qualifying
    amount also reaches the minimum purchase.
    """
    buys = requirements.buys
    qualifying = [line for line in lines if _line_in_scope(line, buys.scope)]
    quantity = sum(line.quantity for line in qualifying)
    amount = sum(line.quantity * line.unit_price for line in qualifying)

    minimum_amount = (
        buys.minimum_amount if buys.requirement == BuyRequirement.MIN_PURCHASE else 0.0
    )
    multiplier = quantity // max(buys.quantity, 1)

    if multiplier > 0 and amount >= minimum_amount:
        return CartEvaluation(
            applicable=True,
            multiplier=multiplier,
            free_items=multiplier * requirements.gets.quantity,
            qualifying_quantity=quantity,
            qualifying_amount=amount,
        )

    quantity_needed = max(0, buys.quantity - quantity)
    amount_needed = max(0.0, minimum_amount - amount)
    if quantity_needed and amount_needed:
        reason = (
            f"Add {quantity_needed} more qualifying item{_plural(quantity_needed)} "
            f"and spend ${amount_needed:.2f} more to unlock this offer"
        )
    elif quantity_needed:
        reason = (
            f"Add {quantity_needed} more qualifying item{_plural(quantity_needed)} "
            "to unlock this offer"
        )
    else:
        reason = f"Spend ${amount_needed:.2f} more to unlock this offer"

    return CartEvaluation(
        applicable=False,
        reason=reason,
        qualifying_quantity=quantity,
        qualifying_amount=amount,
    )


def _line_in_scope(line: CartLine, scope: Scope) -> bool:
    if scope.kind == ScopeKind.ANY:
        return True
    wanted = set(scope.ids)
    if scope.kind == ScopeKind.PRODUCTS:
        return line.product_id in wanted
    if scope.kind == ScopeKind.COLLECTIONS:
        return bool(wanted.intersection(line.collection_ids or []))
    return bool(wanted.intersection(line.category_ids or []))


class DiscountService:
    """Service for discount writes and code redemption checks."""

    def __init__(self, db: Session):
        self.db = db
        self.discount_repo = DiscountRepository(db)
        self.product_repo = ProductRepository(db)
        self.collection_repo = CollectionRepository(db)

    def create(self, data: DiscountCreate) -> Discount:
        """Validate and create a discount.

        Raises:
            DiscountValidationError: If any field rule fails.
            DuplicateDiscountCodeError: If the code is taken.
        """
        errors = validate_discount_fields(
            data.title, data.code, data.value, data.limit_total_uses, data.start_at, data.end_at
        )
        if errors:
            raise DiscountValidationError(errors)
        if self.discount_repo.code_exists(data.code):
            raise DuplicateDiscountCodeError("Discount code already exists")

        data.description = (data.description or "").strip() or None
        discount = self.discount_repo.create(data)
        logger.info("Created discount %s (%s)", discount.code, discount.type)
        return discount

    def update(self, discount_id: UUID, data: DiscountUpdate) -> Discount | None:
        """Validate the discount as it would be after the update, then apply it.

        Returns:
            The updated discount, or None when it does not exist.
        """
        discount = self.discount_repo.get_by_id(discount_id)
        if not discount:
            return None

        sent = data.model_fields_set
        errors = validate_discount_fields(
            data.title if "title" in sent else discount.title,
            data.code if "code" in sent else discount.code,
            data.value if "value" in sent else discount.value,
            data.limit_total_uses if "limit_total_uses" in sent else discount.limit_total_uses,
            data.start_at if "start_at" in sent else discount.start_at,
            data.end_at if "end_at" in sent else discount.end_at,
        )
        errors.extend(
            f"{field.capitalize()} cannot be null"
            for field in _NON_NULL_UPDATE_FIELDS
            if field in sent and getattr(data, field) is None
        )
        if errors:
            raise DiscountValidationError(errors)
        if data.code and self.discount_repo.code_exists(data.code, exclude_id=discount_id):
            raise DuplicateDiscountCodeError("Discount code already in use by another discount")

        return self.discount_repo.update(discount_id, data)

    def redeem_check(
        self,
        code: str,
        cart: Cart | None = None,
        order_amount: float = 0.0,
        now: datetime | None = None,
    ) -> CodeValidation:
        """Check that a code can be used right now and what it is worth.

        Buy X Get Y discounts are evaluated against the cart; amount-off
        discounts report the amount taken off ``order_amount``.

        Raises:
            DiscountCodeError: With a 400 or 404 status when the code cannot be used.
        """
        if not (code or "").strip():
            raise DiscountCodeError("Discount code is required", status_code=400)

        discount = self.discount_repo.get_by_code(code)
        if not discount:
            raise DiscountCodeError("Invalid discount code", status_code=404)

        now = now or datetime.now(UTC)
        start_at, end_at = _aware(discount.start_at), _aware(discount.end_at)
        if discount.status != DiscountStatus.ACTIVE.value:
            raise DiscountCodeError("This discount code is not active")
        if start_at and now < start_at:
            raise DiscountCodeError("This discount code is not yet available")
        if end_at and now > end_at:
            raise DiscountCodeError("This discount code has expired")
        if discount.limit_total_uses and discount.used >= discount.limit_total_uses:
            raise DiscountCodeError("This discount code has reached its usage limit")

        if discount.type == DiscountType.BUY_X_GET_Y.value:
            requirements = decode_buy_x_get_y(discount.requirements)
            if cart is None or not cart.lines:
                evaluation = CartEvaluation(applicable=False, reason="Cart is empty or invalid")
            else:
                lines = [self._with_catalog_ids(line) for line in cart.lines]
                evaluation = evaluate_buy_x_get_y(requirements, lines)
            return CodeValidation(discount=discount, evaluation=evaluation)

        self._check_minimum_order(discount, cart, order_amount)
        if discount.value_unit == "%":
            amount = order_amount * (discount.value or 0) / 100
        else:
            amount = min(discount.value or 0, order_amount)
        return CodeValidation(discount=discount, discount_amount=amount)

    @staticmethod
    def _check_minimum_order(discount: Discount, cart: Cart | None, order_amount: float) -> None:
        """Enforce an amount-off discount's minimum purchase.

        Older discounts store the amount as ``minimumOrderAmount``. A minimum
        quantity is counted over the cart lines.
        """
        requirements = discount.requirements if isinstance(discount.requirements, dict) else {}
        minimum = decode_amount_off(requirements).minimum
        minimum_amount = minimum.value if minimum.kind == MinimumPurchaseKind.AMOUNT else 0.0
        legacy_amount = requirements.get("minimumOrderAmount")
        if not minimum_amount and isinstance(legacy_amount, int | float):
            minimum_amount = float(legacy_amount)

        if minimum_amount and order_amount < minimum_amount:
            raise DiscountCodeError("Minimum order not met")
        if minimum.kind == MinimumPurchaseKind.QUANTITY:
            quantity = sum(line.quantity for line in cart.lines) if cart else 0
            if quantity < minimum.value:
                raise DiscountCodeError("Minimum quantity not met")

    def _with_catalog_ids(self, line: CartLine) -> CartLine:
        """Fill in a line's collections and category from the catalog when omitted."""
        if line.collection_ids is not None and line.category_ids is not None:
            return line
        product_id = parse_uuid(line.product_id)
        product = self.product_repo.get_by_id(product_id) if product_id else None
        if product is None:
            return line.model_copy(
                update={
                    "collection_ids": line.collection_ids or [],
                    "category_ids": line.category_ids or [],
                }
            )
        collection_ids = line.collection_ids
        if collection_ids is None:
            collection_ids = [
                str(cid) for cid in self.collection_repo.collection_ids_for_product(product.id)
            ]
        category_ids = line.category_ids
        if category_ids is None:
            category_ids = [str(product.category_id)] if product.category_id else []
        return line.model_copy(
            update={"collection_ids": collection_ids, "category_ids": category_ids}
        )

    def apply(self, discount_id: UUID) -> Discount:
        """Record one use of a discount.

        Raises:
            DiscountCodeError: If the discount is missing, inactive or exhausted.
        """
        discount = self.discount_repo.get_by_id(discount_id)
        if not discount:
            raise DiscountCodeError("Discount not found", status_code=404)
        if discount.status != DiscountStatus.ACTIVE.value:
            raise DiscountCodeError("Discount is no longer active")
        if discount.limit_total_uses and discount.used >= discount.limit_total_uses:
            raise DiscountCodeError("Discount has reached its usage limit")

        discount.used = (discount.used or 0) + 1
        self.db.commit()
        self.db.refresh(discount)
        logger.info("Discount %s used %d time(s)", discount.code, discount.used)
        return discount
