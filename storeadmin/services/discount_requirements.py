"""Discount requirements normalizer.

Translates between the ``requirements`` document stored on a discount and one
canonical in-memory model per discount type.

Buy X Get Y discounts have two stored generations:

* enhanced, under ``requirements.buyXGetY`` (``buyConditions``,
  ``getRewards``, ``rules``);
* legacy, under ``requirements.customerBuys`` / ``requirements.customerGets``
  with a boolean ``maxUsesPerOrder``.

Both decode into ``BuyXGetYRequirements``; encoding always produces the
enhanced generation. Scope selections are held as a single ``Scope`` value and
only flattened into the three ``products``/``collections``/``categories``
arrays at encode time, so two of them can never be populated at once.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_MAX_REWARD_VALUE = 1000
FREE_DISCOUNT_VALUE = 100
DEFAULT_CURRENCY_UNIT = "USD"
PERCENT_UNIT = "%"


class RequirementsSchema(str, Enum):
    ENHANCED = "enhanced"
    LEGACY = "legacy"
    NONE = "none"


class ScopeKind(str, Enum):
    ANY = "any_products"
    PRODUCTS = "specific_products"
    COLLECTIONS = "specific_collections"
    CATEGORIES = "specific_categories"


class BuyRequirement(str, Enum):
    MIN_QUANTITY = "min-quantity"
    MIN_PURCHASE = "min-purchase"


class RewardDiscountType(str, Enum):
    PERCENTAGE = "percentage"
    AMOUNT_OFF = "amount-off"
    FREE = "free"


class MinimumPurchaseKind(str, Enum):
    NONE = "none"
    AMOUNT = "amount"
    QUANTITY = "quantity"


SCOPE_ARRAY_KEYS: dict[ScopeKind, str] = {
    ScopeKind.PRODUCTS: "products",
    ScopeKind.COLLECTIONS: "collections",
    ScopeKind.CATEGORIES: "categories",
}

# Hyphenated selection strings used by amount-off ``appliesTo.type`` and by the
# legacy Buy X Get Y ``appliesTo`` field.
SELECTION_KINDS: dict[str, ScopeKind] = {
    "any-items": ScopeKind.ANY,
    "all-products": ScopeKind.ANY,
    "any_products": ScopeKind.ANY,
    "specific-products": ScopeKind.PRODUCTS,
    "specific_products": ScopeKind.PRODUCTS,
    "specific-collections": ScopeKind.COLLECTIONS,
    "specific_collections": ScopeKind.COLLECTIONS,
    "specific-categories": ScopeKind.CATEGORIES,
    "specific_categories": ScopeKind.CATEGORIES,
}

KIND_SELECTIONS: dict[ScopeKind, str] = {
    ScopeKind.ANY: "any-items",
    ScopeKind.PRODUCTS: "specific-products",
    ScopeKind.COLLECTIONS: "specific-collections",
    ScopeKind.CATEGORIES: "specific-categories",
}


@dataclass(frozen=True)
class Scope:
    """Which catalog dimension a condition applies to, with the selected ids."""

    kind: ScopeKind = ScopeKind.ANY
    ids: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.kind == ScopeKind.ANY and self.ids:
            raise ValueError("An any-products scope cannot carry ids")
        object.__setattr__(self, "ids", tuple(str(i) for i in self.ids))

    @classmethod
    def any(cls) -> "Scope":
        return cls(ScopeKind.ANY)

    @classmethod
    def products(cls, ids: Iterable[str] = ()) -> "Scope":
        return cls(ScopeKind.PRODUCTS, tuple(ids))

    @classmethod
    def collections(cls, ids: Iterable[str] = ()) -> "Scope":
        return cls(ScopeKind.COLLECTIONS, tuple(ids))

    @classmethod
    def categories(cls, ids: Iterable[str] = ()) -> "Scope":
        return cls(ScopeKind.CATEGORIES, tuple(ids))

    @classmethod
    def of(cls, kind: ScopeKind, ids: Iterable[str] = ()) -> "Scope":
        """Build a scope, dropping ids for ``ANY``."""
        if kind == ScopeKind.ANY:
            return cls.any()
        return cls(kind, tuple(ids))

    @property
    def is_specific(self) -> bool:
        return self.kind != ScopeKind.ANY

    @property
    def selection(self) -> str:
        return KIND_SELECTIONS[self.kind]

    def to_arrays(self) -> dict[str, list[str]]:
        """Flatten to the wire arrays. All three keys are always present."""
        arrays: dict[str, list[str]] = {key: [] for key in SCOPE_ARRAY_KEYS.values()}
        if self.is_specific:
            arrays[SCOPE_ARRAY_KEYS[self.kind]] = list(self.ids)
        return arrays


@dataclass(frozen=True)
class BuyCondition:
    requirement: BuyRequirement = BuyRequirement.MIN_QUANTITY
    quantity: int = 1
    minimum_amount: float = 0.0
    scope: Scope = field(default_factory=Scope.products)


@dataclass(frozen=True)
class GetReward:
    quantity: int = 1
    discount_type: RewardDiscountType = RewardDiscountType.FREE
    discount_value: float = FREE_DISCOUNT_VALUE
    scope: Scope = field(default_factory=Scope.products)

    @property
    def effective_value(self) -> float:
        if self.discount_type == RewardDiscountType.FREE:
            return FREE_DISCOUNT_VALUE
        return self.discount_value

    @property
    def max_reward_value(self) -> float:
        if self.discount_type == RewardDiscountType.AMOUNT_OFF:
            return self.discount_value
        return DEFAULT_MAX_REWARD_VALUE


@dataclass(frozen=True)
class RewardRules:
    apply_to_lowest_price: bool = True
    stackable: bool = False
    auto_add: bool = False
    max_uses_per_order: int | None = 1


@dataclass(frozen=True)
class BuyXGetYRequirements:
    buys: BuyCondition = field(default_factory=BuyCondition)
    gets: GetReward = field(default_factory=GetReward)
    rules: RewardRules = field(default_factory=RewardRules)


@dataclass(frozen=True)
class MinimumPurchase:
    kind: MinimumPurchaseKind = MinimumPurchaseKind.NONE
    value: float = 0.0


@dataclass(frozen=True)
class CustomerEligibility:
    # Empty means every customer is eligible.
    customer_ids: tuple[str, ...] = ()

    @property
    def is_restricted(self) -> bool:
        return bool(self.customer_ids)


@dataclass(frozen=True)
class AmountOffRequirements:
    minimum: MinimumPurchase = field(default_factory=MinimumPurchase)
    eligibility: CustomerEligibility = field(default_factory=CustomerEligibility)
    applies_to: Scope = field(default_factory=Scope.any)


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_ids(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None and item != ""]


def _number(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return default
    return float(value) if value else default


def _quantity(value: Any, default: int = 1) -> int:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return default
    return int(value) if value > 0 else default


def _enum(enum_cls: type[Enum], value: Any, default: Any) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        return default


def _max_uses(value: Any) -> int | None:
    # Legacy stores a boolean; ``True`` means one use per order.
    if isinstance(value, bool):
        return 1 if value else None
    if isinstance(value, int | float) and value > 0:
        return int(value)
    return None


def _selection_scope(selection: Any, ids: Any, default: ScopeKind) -> Scope:
    kind = SELECTION_KINDS.get(selection, default) if isinstance(selection, str) else default
    return Scope.of(kind, _as_ids(ids))


def _reward_value(discount_type: RewardDiscountType, raw: Any) -> float:
    if discount_type == RewardDiscountType.FREE:
        return FREE_DISCOUNT_VALUE
    if discount_type == RewardDiscountType.PERCENTAGE:
        return _number(raw, FREE_DISCOUNT_VALUE)
    return _number(raw, 0.0)


def detect_schema(requirements: Any) -> RequirementsSchema:
    """Tell which stored generation a requirements document uses."""
    data = _as_dict(requirements)
    if "buyXGetY" in data:
        return RequirementsSchema.ENHANCED
    if "customerBuys" in data or "customerGets" in data:
        return RequirementsSchema.LEGACY
    return RequirementsSchema.NONE


def _decode_enhanced(document: dict[str, Any]) -> BuyXGetYRequirements:
    buys = BuyCondition()
    buy_data = _as_dict(document.get("buyConditions"))
    if buy_data:
        minimum_amount = _number(buy_data.get("minimumAmount"))
        kind = _enum(ScopeKind, buy_data.get("scope"), ScopeKind.PRODUCTS)
        ids = buy_data.get(SCOPE_ARRAY_KEYS[kind]) if kind in SCOPE_ARRAY_KEYS else None
        buys = BuyCondition(
            requirement=(
                BuyRequirement.MIN_PURCHASE if minimum_amount > 0 else BuyRequirement.MIN_QUANTITY
            ),
            quantity=_quantity(buy_data.get("quantity")),
            minimum_amount=minimum_amount,
            scope=Scope.of(kind, _as_ids(ids)),
        )

    gets = GetReward()
    get_data = _as_dict(document.get("getRewards"))
    if get_data:
        discount_type = _enum(
            RewardDiscountType, get_data.get("discountType"), RewardDiscountType.FREE
        )
        # Rewards carry no scope key; the populated array decides it.
        scope = Scope.any()
        for kind, key in SCOPE_ARRAY_KEYS.items():
            ids = _as_ids(get_data.get(key))
            if ids:
                scope = Scope.of(kind, ids)
                break
        gets = GetReward(
            quantity=_quantity(get_data.get("quantity")),
            discount_type=discount_type,
            discount_value=_reward_value(discount_type, get_data.get("discountValue")),
            scope=scope,
        )

    rules = RewardRules()
    rules_data = _as_dict(document.get("rules"))
    if rules_data:
        rules = RewardRules(
            apply_to_lowest_price=bool(rules_data.get("applyToLowestPrice", True)),
            stackable=bool(rules_data.get("stackable", False)),
            auto_add=bool(rules_data.get("autoAdd", False)),
            max_uses_per_order=(
                _max_uses(rules_data["maxUsesPerOrder"])
                if "maxUsesPerOrder" in rules_data
                else RewardRules.max_uses_per_order
            ),
        )

    return BuyXGetYRequirements(buys=buys, gets=gets, rules=rules)


def _decode_legacy(document: dict[str, Any]) -> BuyXGetYRequirements:
    buys = BuyCondition()
    buy_data = _as_dict(document.get("customerBuys"))
    if buy_data:
        requirement = _enum(BuyRequirement, buy_data.get("type"), BuyRequirement.MIN_QUANTITY)
        buys = BuyCondition(
            requirement=requirement,
            quantity=_quantity(buy_data.get("quantity")),
            minimum_amount=_number(buy_data.get("amount")),
            scope=_selection_scope(
                buy_data.get("appliesTo"), buy_data.get("appliesToIds"), ScopeKind.PRODUCTS
            ),
        )

    gets = GetReward()
    get_data = _as_dict(document.get("customerGets"))
    if get_data:
        discounted = _as_dict(get_data.get("discountedValue"))
        discount_type = _enum(
            RewardDiscountType, discounted.get("type"), RewardDiscountType.FREE
        )
        gets = GetReward(
            quantity=_quantity(get_data.get("quantity")),
            discount_type=discount_type,
            discount_value=_reward_value(discount_type, discounted.get("value")),
            scope=_selection_scope(
                get_data.get("appliesTo"), get_data.get("appliesToIds"), ScopeKind.PRODUCTS
            ),
        )

    rules = RewardRules()
    if "maxUsesPerOrder" in document:
        rules = RewardRules(max_uses_per_order=_max_uses(document["maxUsesPerOrder"]))

    return BuyXGetYRequirements(buys=buys, gets=gets, rules=rules)


def decode_buy_x_get_y(requirements: Any) -> BuyXGetYRequirements:
    """Decode either stored generation into the canonical model.

    The enhanced generation wins when both are present. Missing or malformed
    parts fall back to defaults instead of raising.
    """
    data = _as_dict(requirements)
    schema = detect_schema(data)
    if schema == RequirementsSchema.ENHANCED:
        return _decode_enhanced(_as_dict(data["buyXGetY"]))
    if schema == RequirementsSchema.LEGACY:
        return _decode_legacy(data)
    return BuyXGetYRequirements()


def encode_buy_x_get_y(requirements: BuyXGetYRequirements) -> dict[str, Any]:
    """Encode to the enhanced generation (the only one ever written)."""
    buys = requirements.buys
    gets = requirements.gets
    rules = requirements.rules

    buy_conditions: dict[str, Any] = {
        "quantity": buys.quantity,
        "scope": buys.scope.kind.value,
        "minimumAmount": (
            buys.minimum_amount if buys.requirement == BuyRequirement.MIN_PURCHASE else 0
        ),
        **buys.scope.to_arrays(),
    }
    get_rewards: dict[str, Any] = {
        "quantity": gets.quantity,
        "discountType": gets.discount_type.value,
        "discountValue": gets.effective_value,
        "maxRewardValue": gets.max_reward_value,
        **gets.scope.to_arrays(),
    }
    return {
        "buyXGetY": {
            "buyConditions": buy_conditions,
            "getRewards": get_rewards,
            "rules": {
                "applyToLowestPrice": rules.apply_to_lowest_price,
                "stackable": rules.stackable,
                "autoAdd": rules.auto_add,
                "maxUsesPerOrder": rules.max_uses_per_order,
            },
        }
    }


def reward_value_fields(gets: GetReward) -> tuple[float, str]:
    """Flat ``(value, valueUnit)`` mirrored onto the discount for list views."""
    if gets.discount_type == RewardDiscountType.AMOUNT_OFF:
        return gets.discount_value, DEFAULT_CURRENCY_UNIT
    return gets.effective_value, PERCENT_UNIT


def decode_amount_off(requirements: Any) -> AmountOffRequirements:
    """Decode amount-off requirements. An absent document means no restrictions."""
    data = _as_dict(requirements)

    minimum = MinimumPurchase()
    amount = _number(data.get("minPurchaseAmount"))
    quantity = _number(data.get("minPurchaseQuantity"))
    if amount > 0:
        minimum = MinimumPurchase(MinimumPurchaseKind.AMOUNT, amount)
    elif quantity > 0:
        minimum = MinimumPurchase(MinimumPurchaseKind.QUANTITY, quantity)

    eligibility = CustomerEligibility()
    eligibility_data = _as_dict(data.get("customerEligibility"))
    if eligibility_data.get("type") == "specific-customers":
        eligibility = CustomerEligibility(tuple(_as_ids(eligibility_data.get("customerIds"))))

    applies = _as_dict(data.get("appliesTo"))
    applies_to = (
        _selection_scope(applies.get("type"), applies.get("ids"), ScopeKind.ANY)
        if applies
        else Scope.any()
    )

    return AmountOffRequirements(
        minimum=minimum, eligibility=eligibility, applies_to=applies_to
    )


def encode_amount_off(requirements: AmountOffRequirements) -> dict[str, Any] | None:
    """Encode amount-off requirements; ``None`` when there is nothing to store."""
    document: dict[str, Any] = {}

    minimum = requirements.minimum
    if minimum.kind == MinimumPurchaseKind.AMOUNT and minimum.value > 0:
        document["minPurchaseAmount"] = minimum.value
    elif minimum.kind == MinimumPurchaseKind.QUANTITY and minimum.value > 0:
        document["minPurchaseQuantity"] = int(minimum.value)

    if requirements.eligibility.is_restricted:
        document["customerEligibility"] = {
            "type": "specific-customers",
            "customerIds": list(requirements.eligibility.customer_ids),
        }

    if requirements.applies_to.is_specific:
        document["appliesTo"] = {
            "type": requirements.applies_to.selection,
            "ids": list(requirements.applies_to.ids),
        }

    return document or None
