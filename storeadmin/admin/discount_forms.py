"""Editable discount forms.

A form holds what a discount editor shows: flat scalar fields plus grouped
sub-forms, with scope selections kept as ``CatalogItem`` lists so names are
available for display and for the generated description. Forms convert to
and from the Discount JSON the API speaks; the ``requirements`` document is
always produced through ``storeadmin.services.discount_requirements``.
"""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from storeadmin.admin.catalog import CatalogItem
from storeadmin.models.discount import DiscountMethod, DiscountStatus, DiscountType
from storeadmin.services.discount_requirements import (
    PERCENT_UNIT,
    AmountOffRequirements,
    BuyCondition,
    BuyRequirement,
    BuyXGetYRequirements,
    CustomerEligibility,
    GetReward,
    MinimumPurchase,
    MinimumPurchaseKind,
    RewardDiscountType,
    RewardRules,
    Scope,
    ScopeKind,
    encode_amount_off,
    encode_buy_x_get_y,
    reward_value_fields,
)
from storeadmin.services.discount_service import CODE_PATTERN

NEW_DISCOUNT_ID = "new"

SCOPE_NOUNS: dict[ScopeKind, str] = {
    ScopeKind.PRODUCTS: "products",
    ScopeKind.COLLECTIONS: "collections",
    ScopeKind.CATEGORIES: "categories",
}


class FormValidationError(ValueError):
    """Raised by ``save()`` when the form has errors. Nothing was sent."""

    def __init__(self, errors: dict[str, str]):
        super().__init__("Please fix the errors before saving")
        self.errors = errors


@dataclass(frozen=True)
class Redirect:
    """Returned by ``load()`` when the discount belongs to the other editor."""

    path: str


class ValueType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


def _parse_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return None


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


@dataclass
class Selection:
    """Scope choice plus the catalog items picked for it."""

    kind: ScopeKind = ScopeKind.PRODUCTS
    items: list[CatalogItem] = field(default_factory=list)

    def to_scope(self) -> Scope:
        return Scope.of(self.kind, [item.id for item in self.items])

    @property
    def is_missing_items(self) -> bool:
        return self.kind != ScopeKind.ANY and not self.items

    def describe(self) -> str:
        """Short human text: the single item's name, a count, or "any items"."""
        if self.kind == ScopeKind.ANY or not self.items:
            return "any items"
        if len(self.items) == 1:
            return self.items[0].name
        return f"{len(self.items)} selected {SCOPE_NOUNS[self.kind]}"


@dataclass
class Combinations:
    product: bool = False
    order: bool = False
    shipping: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> "Combinations":
        data = data if isinstance(data, dict) else {}
        return cls(
            product=bool(data.get("product")),
            order=bool(data.get("order")),
            shipping=bool(data.get("shipping")),
        )

    def to_dict(self) -> dict[str, bool]:
        return {"product": self.product, "order": self.order, "shipping": self.shipping}


@dataclass
class UsageLimits:
    limit_total_uses: bool = False
    total_uses: int = 1
    limit_per_customer: bool = False
    per_customer: int = 1

    @classmethod
    def from_discount(cls, discount: dict[str, Any]) -> "UsageLimits":
        total = discount.get("limitTotalUses")
        return cls(
            limit_total_uses=bool(total),
            total_uses=int(total) if total else 1,
            limit_per_customer=bool(discount.get("limitPerUser")),
        )

    def validate(self, errors: dict[str, str]) -> None:
        if self.limit_total_uses and self.total_uses < 1:
            errors["limitTotalUsesValue"] = "Total uses must be at least 1"
        if self.limit_per_customer and self.per_customer < 1:
            errors["limitPerCustomerValue"] = "Uses per customer must be at least 1"

    def to_payload(self) -> dict[str, Any]:
        return {
            "limitTotalUses": self.total_uses if self.limit_total_uses else None,
            "limitPerUser": True if self.limit_per_customer else None,
        }


@dataclass
class ActiveDates:
    start_at: datetime | None = None
    end_at: datetime | None = None
    set_end_date: bool = False

    @classmethod
    def from_discount(cls, discount: dict[str, Any]) -> "ActiveDates":
        end_at = _parse_datetime(discount.get("endAt"))
        return cls(
            start_at=_parse_datetime(discount.get("startAt")),
            end_at=end_at,
            set_end_date=end_at is not None,
        )

    def validate(self, errors: dict[str, str]) -> None:
        if self.set_end_date and self.start_at and self.end_at and self.start_at >= self.end_at:
            errors["endDate"] = "End date must be after start date"

    def to_payload(self) -> dict[str, Any]:
        return {
            "startAt": _isoformat(self.start_at),
            "endAt": _isoformat(self.end_at) if self.set_end_date else None,
        }


@dataclass
class AmountOffForm:
    """Form state of the amount-off editor."""

    code: str = ""
    title: str = ""
    description: str | None = None
    status: DiscountStatus = DiscountStatus.DRAFT
    method: DiscountMethod = DiscountMethod.CODE
    value_type: ValueType = ValueType.PERCENTAGE
    value: float = 0.0
    minimum_kind: MinimumPurchaseKind = MinimumPurchaseKind.NONE
    minimum_amount: float = 0.0
    minimum_quantity: int = 0
    customer_ids: list[str] = field(default_factory=list)
    applies_to: Selection = field(default_factory=lambda: Selection(ScopeKind.ANY))
    combinations: Combinations = field(default_factory=Combinations)
    limits: UsageLimits = field(default_factory=UsageLimits)
    dates: ActiveDates = field(default_factory=ActiveDates)

    @classmethod
    def from_discount(
        cls,
        discount: dict[str, Any],
        requirements: AmountOffRequirements,
        applies_to_items: list[CatalogItem] | None = None,
    ) -> "AmountOffForm":
        minimum = requirements.minimum
        return cls(
            code=discount.get("code") or "",
            title=discount.get("title") or "",
            description=discount.get("description"),
            status=DiscountStatus(discount.get("status") or DiscountStatus.DRAFT.value),
            method=DiscountMethod(discount.get("method") or DiscountMethod.CODE.value),
            value_type=(
                ValueType.PERCENTAGE
                if discount.get("valueUnit", PERCENT_UNIT) == PERCENT_UNIT
                else ValueType.FIXED
            ),
            value=float(discount.get("value") or 0),
            minimum_kind=minimum.kind,
            minimum_amount=minimum.value if minimum.kind == MinimumPurchaseKind.AMOUNT else 0.0,
            minimum_quantity=(
                int(minimum.value) if minimum.kind == MinimumPurchaseKind.QUANTITY else 0
            ),
            customer_ids=list(requirements.eligibility.customer_ids),
            applies_to=Selection(requirements.applies_to.kind, list(applies_to_items or [])),
            combinations=Combinations.from_dict(discount.get("combinations")),
            limits=UsageLimits.from_discount(discount),
            dates=ActiveDates.from_discount(discount),
        )

    def requirements(self) -> AmountOffRequirements:
        if self.minimum_kind == MinimumPurchaseKind.AMOUNT:
            minimum = MinimumPurchase(MinimumPurchaseKind.AMOUNT, self.minimum_amount)
        elif self.minimum_kind == MinimumPurchaseKind.QUANTITY:
            minimum = MinimumPurchase(MinimumPurchaseKind.QUANTITY, self.minimum_quantity)
        else:
            minimum = MinimumPurchase()
        return AmountOffRequirements(
            minimum=minimum,
            eligibility=CustomerEligibility(tuple(self.customer_ids)),
            applies_to=self.applies_to.to_scope(),
        )

    def validate(self) -> dict[str, str]:
        """Return every violated rule keyed by form field; empty when valid."""
        errors: dict[str, str] = {}
        code = self.code.strip()
        if not code:
            errors["discountCode"] = "Discount code is required"
        elif not CODE_PATTERN.match(code):
            errors["discountCode"] = (
                "Code can only contain letters, numbers, hyphens, and underscores"
            )
        if not self.title.strip():
            errors["title"] = "Title is required"
        if self.value < 0:
            errors["discountValue"] = "Value must be a positive number"
        elif self.value_type == ValueType.PERCENTAGE and self.value > 100:
            errors["discountValue"] = "Percentage cannot exceed 100%"
        self.limits.validate(errors)
        if self.minimum_kind == MinimumPurchaseKind.AMOUNT and self.minimum_amount <= 0:
            errors["minPurchaseAmount"] = "Minimum purchase amount must be greater than 0"
        if self.minimum_kind == MinimumPurchaseKind.QUANTITY and self.minimum_quantity <= 0:
            errors["minPurchaseQuantity"] = "Minimum purchase quantity must be greater than 0"
        if self.applies_to.is_missing_items:
            noun = SCOPE_NOUNS[self.applies_to.kind]
            errors["appliesTo"] = f"Please select {noun} or choose 'All products'"
        self.dates.validate(errors)
        return errors

    def to_payload(self) -> dict[str, Any]:
        """Full Discount-shaped body for POST/PUT."""
        return {
            "title": self.title.strip(),
            "code": self.code.strip().upper(),
            "description": self.description,
            "status": self.status.value,
            "method": self.method.value,
            "type": DiscountType.AMOUNT_OFF_PRODUCTS.value,
            "value": self.value,
            "valueUnit": PERCENT_UNIT if self.value_type == ValueType.PERCENTAGE else "USD",
            "combinations": self.combinations.to_dict(),
            **self.dates.to_payload(),
            **self.limits.to_payload(),
            "requirements": encode_amount_off(self.requirements()),
        }


@dataclass
class BuysForm:
    requirement: BuyRequirement = BuyRequirement.MIN_QUANTITY
    quantity: int = 1
    amount: float = 0.0
    selection: Selection = field(default_factory=Selection)


@dataclass
class GetsForm:
    quantity: int = 1
    discount_type: RewardDiscountType = RewardDiscountType.FREE
    percentage_value: float = 100.0
    amount_value: float = 0.0
    selection: Selection = field(default_factory=Selection)

    @property
    def discount_value(self) -> float:
        if self.discount_type == RewardDiscountType.PERCENTAGE:
            return self.percentage_value
        if self.discount_type == RewardDiscountType.AMOUNT_OFF:
            return self.amount_value
        return 100.0


@dataclass
class BuyXGetYForm:
    """Form state of the Buy X Get Y editor."""

    method: DiscountMethod = DiscountMethod.CODE
    code: str = ""
    title: str = ""
    automatic_title: str = ""
    status: DiscountStatus = DiscountStatus.DRAFT
    buys: BuysForm = field(default_factory=BuysForm)
    gets: GetsForm = field(default_factory=GetsForm)
    max_uses_per_order: bool = True
    rules: RewardRules = field(default_factory=RewardRules)
    combinations: Combinations = field(default_factory=Combinations)
    limits: UsageLimits = field(default_factory=UsageLimits)
    dates: ActiveDates = field(default_factory=ActiveDates)

    @classmethod
    def from_discount(
        cls,
        discount: dict[str, Any],
        requirements: BuyXGetYRequirements,
        buys_items: list[CatalogItem] | None = None,
        gets_items: list[CatalogItem] | None = None,
    ) -> "BuyXGetYForm":
        method = DiscountMethod(discount.get("method") or DiscountMethod.CODE.value)
        title = discount.get("title") or ""
        buys, gets = requirements.buys, requirements.gets
        return cls(
            method=method,
            code=discount.get("code") or "",
            title=title if method == DiscountMethod.CODE else "",
            automatic_title=title if method == DiscountMethod.AUTOMATIC else "",
            status=DiscountStatus(discount.get("status") or DiscountStatus.DRAFT.value),
            buys=BuysForm(
                requirement=buys.requirement,
                quantity=buys.quantity,
                amount=buys.minimum_amount,
                selection=Selection(buys.scope.kind, list(buys_items or [])),
            ),
            gets=GetsForm(
                quantity=gets.quantity,
                discount_type=gets.discount_type,
                percentage_value=(
                    gets.discount_value
                    if gets.discount_type == RewardDiscountType.PERCENTAGE
                    else 100.0
                ),
                amount_value=(
                    gets.discount_value
                    if gets.discount_type == RewardDiscountType.AMOUNT_OFF
                    else 0.0
                ),
                selection=Selection(gets.scope.kind, list(gets_items or [])),
            ),
            max_uses_per_order=requirements.rules.max_uses_per_order is not None,
            rules=requirements.rules,
            combinations=Combinations.from_dict(discount.get("combinations")),
            limits=UsageLimits.from_discount(discount),
            dates=ActiveDates.from_discount(discount),
        )

    def requirements(self) -> BuyXGetYRequirements:
        return BuyXGetYRequirements(
            buys=BuyCondition(
                requirement=self.buys.requirement,
                quantity=self.buys.quantity,
                minimum_amount=self.buys.amount,
                scope=self.buys.selection.to_scope(),
            ),
            gets=GetReward(
                quantity=self.gets.quantity,
                discount_type=self.gets.discount_type,
                discount_value=self.gets.discount_value,
                scope=self.gets.selection.to_scope(),
            ),
            rules=replace(
                self.rules,
                max_uses_per_order=(self.rules.max_uses_per_order or 1)
                if self.max_uses_per_order
                else None,
            ),
        )

    def describe(self) -> str:
        return (
            f"Buy {self.buys.quantity} from {self.buys.selection.describe()}, "
            f"get {self.gets.quantity} from {self.gets.selection.describe()}"
        )

    def validate(self) -> dict[str, str]:
        """Return every violated rule keyed by form field; empty when valid."""
        errors: dict[str, str] = {}
        if self.method == DiscountMethod.CODE:
            code = self.code.strip()
            if not code:
                errors["discountCode"] = "Please enter a discount code"
            elif not CODE_PATTERN.match(code):
                errors["discountCode"] = (
                    "Code can only contain letters, numbers, hyphens, and underscores"
                )
        elif not self.automatic_title.strip():
            errors["automaticTitle"] = "Please enter a title for the automatic discount"

        if self.buys.selection.is_missing_items:
            noun = SCOPE_NOUNS[self.buys.selection.kind]
            errors["buysFrom"] = (
                f"Please select {noun} for the 'Customer buys' section or choose 'Any items'"
            )
        if self.gets.selection.is_missing_items:
            noun = SCOPE_NOUNS[self.gets.selection.kind]
            errors["getsFrom"] = (
                f"Please select {noun} for the 'Customer gets' section or choose 'Any items'"
            )
        if self.buys.quantity < 1:
            errors["customerBuysQuantity"] = "Quantity must be at least 1"
        if self.gets.quantity < 1:
            errors["customerGetsQuantity"] = "Quantity must be at least 1"
        if self.buys.requirement == BuyRequirement.MIN_PURCHASE and self.buys.amount <= 0:
            errors["customerBuysAmount"] = "Minimum purchase amount must be greater than 0"
        if self.gets.discount_type == RewardDiscountType.PERCENTAGE and not (
            0 < self.gets.percentage_value <= 100
        ):
            errors["percentageValue"] = "Percentage must be between 1 and 100"
        if self.gets.discount_type == RewardDiscountType.AMOUNT_OFF and self.gets.amount_value <= 0:
            errors["amountValue"] = "Amount must be greater than 0"
        self.limits.validate(errors)
        self.dates.validate(errors)
        return errors

    def to_payload(self, code: str) -> dict[str, Any]:
        """Full Discount-shaped body for POST/PUT.

        Args:
            code: The code to store. Automatic discounts get an internal code
                from the editor; code discounts pass the form's code.
        """
        requirements = self.requirements()
        value, value_unit = reward_value_fields(requirements.gets)
        if self.method == DiscountMethod.AUTOMATIC:
            title = self.automatic_title.strip()
        else:
            title = self.title.strip() or f"Buy X Get Y - {code}"
        dates = self.dates.to_payload()
        # Buy X Get Y discounts start immediately unless a start is chosen
        dates["startAt"] = dates["startAt"] or datetime.now(UTC).isoformat()
        return {
            "title": title,
            "code": code,
            "description": self.describe(),
            "status": self.status.value,
            "method": self.method.value,
            "type": DiscountType.BUY_X_GET_Y.value,
            "value": value,
            "valueUnit": value_unit,
            "requirements": encode_buy_x_get_y(requirements),
            "combinations": self.combinations.to_dict(),
            **dates,
            **self.limits.to_payload(),
        }
