"""Tests for decoding and encoding discount requirements documents."""

import pytest

from storeadmin.services.discount_requirements import (
    AmountOffRequirements,
    BuyCondition,
    BuyRequirement,
    BuyXGetYRequirements,
    CustomerEligibility,
    GetReward,
    MinimumPurchase,
    MinimumPurchaseKind,
    RequirementsSchema,
    RewardDiscountType,
    RewardRules,
    Scope,
    ScopeKind,
    decode_amount_off,
    decode_buy_x_get_y,
    detect_schema,
    encode_amount_off,
    encode_buy_x_get_y,
    reward_value_fields,
)


def _enhanced(buy_conditions=None, get_rewards=None, rules=None):
    document = {}
    if buy_conditions is not None:
        document["buyConditions"] = buy_conditions
    if get_rewards is not None:
        document["getRewards"] = get_rewards
    if rules is not None:
        document["rules"] = rules
    return {"buyXGetY": document}


class TestScope:
    """Tests for the Scope value type."""

    def test_any_scope_rejects_ids(self):
        with pytest.raises(ValueError):
            Scope(ScopeKind.ANY, ("a",))

    def test_of_drops_ids_for_any(self):
        assert Scope.of(ScopeKind.ANY, ["a", "b"]) == Scope.any()

    def test_to_arrays_always_has_three_keys(self):
        assert Scope.any().to_arrays() == {"products": [], "collections": [], "categories": []}
        assert Scope.categories(["c1"]).to_arrays() == {
            "products": [],
            "collections": [],
            "categories": ["c1"],
        }

    def test_ids_are_stringified(self):
        assert Scope.products([1, 2]).ids == ("1", "2")


class TestDetectSchema:
    """Tests for telling stored generations apart."""

    def test_enhanced(self):
        assert detect_schema({"buyXGetY": {}}) == RequirementsSchema.ENHANCED

    def test_legacy(self):
        assert detect_schema({"customerBuys": {}}) == RequirementsSchema.LEGACY
        assert detect_schema({"customerGets": {}}) == RequirementsSchema.LEGACY

    def test_none(self):
        assert detect_schema(None) == RequirementsSchema.NONE
        assert detect_schema({}) == RequirementsSchema.NONE
        assert detect_schema("garbage") == RequirementsSchema.NONE

    def test_enhanced_wins_when_both_present(self):
        assert (
            detect_schema({"buyXGetY": {}, "customerBuys": {}}) == RequirementsSchema.ENHANCED
        )


class TestEnhancedRoundTrip:
    """Decoding then encoding the enhanced generation preserves its meaning."""

    def test_specific_products_round_trip(self):
        stored = _enhanced(
            buy_conditions={
                "quantity": 2,
                "scope": "specific_products",
                "minimumAmount": 0,
                "products": ["p1", "p2"],
                "collections": [],
                "categories": [],
            },
            get_rewards={
                "quantity": 1,
                "discountType": "percentage",
                "discountValue": 50,
                "maxRewardValue": 1000,
                "products": ["p3"],
                "collections": [],
                "categories": [],
            },
            rules={
                "applyToLowestPrice": True,
                "stackable": False,
                "autoAdd": False,
                "maxUsesPerOrder": 2,
            },
        )

        encoded = encode_buy_x_get_y(decode_buy_x_get_y(stored))

        assert encoded == stored

    def test_collections_scope_with_minimum_purchase(self):
        stored = _enhanced(
            buy_conditions={
                "quantity": 1,
                "scope": "specific_collections",
                "minimumAmount": 75.0,
                "products": [],
                "collections": ["c1"],
                "categories": [],
            },
            get_rewards={
                "quantity": 1,
                "discountType": "amount-off",
                "discountValue": 10.0,
                "maxRewardValue": 10.0,
                "products": [],
                "collections": [],
                "categories": ["k1"],
            },
        )

        decoded = decode_buy_x_get_y(stored)
        encoded = encode_buy_x_get_y(decoded)["buyXGetY"]

        assert decoded.buys.requirement == BuyRequirement.MIN_PURCHASE
        assert decoded.gets.scope == Scope.categories(["k1"])
        assert encoded["buyConditions"] == stored["buyXGetY"]["buyConditions"]
        assert encoded["getRewards"] == stored["buyXGetY"]["getRewards"]

    def test_reward_scope_inferred_from_populated_array(self):
        decoded = decode_buy_x_get_y(
            _enhanced(get_rewards={"quantity": 1, "collections": ["c9"]})
        )
        assert decoded.gets.scope == Scope.collections(["c9"])

    def test_reward_without_ids_is_any(self):
        decoded = decode_buy_x_get_y(_enhanced(get_rewards={"quantity": 3}))
        assert decoded.gets.scope == Scope.any()
        assert decoded.gets.quantity == 3

    def test_free_reward_always_encodes_100(self):
        decoded = decode_buy_x_get_y(
            _enhanced(get_rewards={"discountType": "free", "discountValue": 5})
        )
        rewards = encode_buy_x_get_y(decoded)["buyXGetY"]["getRewards"]
        assert rewards["discountValue"] == 100
        assert rewards["maxRewardValue"] == 1000

    def test_missing_parts_fall_back_to_defaults(self):
        decoded = decode_buy_x_get_y({"buyXGetY": {}})
        assert decoded == BuyXGetYRequirements()

    def test_malformed_values_fall_back(self):
        decoded = decode_buy_x_get_y(
            _enhanced(
                buy_conditions={"quantity": "two", "scope": "nonsense"},
                get_rewards={"quantity": -1, "discountType": "bogus"},
            )
        )
        assert decoded.buys.quantity == 1
        assert decoded.buys.scope.kind == ScopeKind.PRODUCTS
        assert decoded.gets.quantity == 1
        assert decoded.gets.discount_type == RewardDiscountType.FREE

    def test_null_max_uses_is_preserved(self):
        decoded = decode_buy_x_get_y(_enhanced(rules={"maxUsesPerOrder": None}))
        assert decoded.rules.max_uses_per_order is None


class TestLegacyMigration:
    """Legacy documents decode into the canonical model and encode as enhanced."""

    def test_legacy_migrates_to_enhanced(self):
        stored = {
            "customerBuys": {
                "type": "min-quantity",
                "quantity": 3,
                "appliesTo": "specific-collections",
                "appliesToIds": ["c1", "c2"],
            },
            "customerGets": {
                "quantity": 1,
                "appliesTo": "specific-products",
                "appliesToIds": ["p1"],
                "discountedValue": {"type": "percentage", "value": 25},
            },
            "maxUsesPerOrder": True,
        }

        encoded = encode_buy_x_get_y(decode_buy_x_get_y(stored))

        assert set(encoded) == {"buyXGetY"}
        document = encoded["buyXGetY"]
        assert document["buyConditions"]["quantity"] == 3
        assert document["buyConditions"]["scope"] == "specific_collections"
        assert document["buyConditions"]["collections"] == ["c1", "c2"]
        assert document["getRewards"]["products"] == ["p1"]
        assert document["getRewards"]["discountType"] == "percentage"
        assert document["getRewards"]["discountValue"] == 25
        assert document["rules"]["maxUsesPerOrder"] == 1

    def test_legacy_false_max_uses_means_unlimited(self):
        decoded = decode_buy_x_get_y({"customerBuys": {}, "maxUsesPerOrder": False})
        assert decoded.rules.max_uses_per_order is None

    def test_legacy_any_items(self):
        decoded = decode_buy_x_get_y(
            {"customerBuys": {"appliesTo": "any-items", "appliesToIds": ["x"]}}
        )
        assert decoded.buys.scope == Scope.any()

    def test_legacy_min_purchase(self):
        decoded = decode_buy_x_get_y(
            {"customerBuys": {"type": "min-purchase", "amount": 40, "appliesTo": "any-items"}}
        )
        assert decoded.buys.requirement == BuyRequirement.MIN_PURCHASE
        assert decoded.buys.minimum_amount == 40.0

    def test_no_requirements_gives_defaults(self):
        assert decode_buy_x_get_y(None) == BuyXGetYRequirements()


class TestScopeArrayInvariant:
    """Encoding never populates more than one scope array."""

    def test_two_collections_populate_only_collections(self):
        requirements = BuyXGetYRequirements(
            buys=BuyCondition(scope=Scope.collections(["c1", "c2"])),
            gets=GetReward(scope=Scope.any()),
        )
        buy = encode_buy_x_get_y(requirements)["buyXGetY"]["buyConditions"]
        assert len(buy["collections"]) == 2
        assert buy["products"] == []
        assert buy["categories"] == []

    def test_min_quantity_encodes_zero_minimum_amount(self):
        requirements = BuyXGetYRequirements(
            buys=BuyCondition(requirement=BuyRequirement.MIN_QUANTITY, minimum_amount=50)
        )
        buy = encode_buy_x_get_y(requirements)["buyXGetY"]["buyConditions"]
        assert buy["minimumAmount"] == 0


class TestRewardValueFields:
    """Tests for the flat value mirrored onto the discount."""

    def test_amount_off_is_usd(self):
        gets = GetReward(discount_type=RewardDiscountType.AMOUNT_OFF, discount_value=7.5)
        assert reward_value_fields(gets) == (7.5, "USD")

    def test_free_is_full_percentage(self):
        assert reward_value_fields(GetReward()) == (100, "%")


class TestAmountOffRequirements:
    """Tests for amount-off requirements."""

    def test_absent_document_means_no_restrictions(self):
        assert decode_amount_off(None) == AmountOffRequirements()
        assert encode_amount_off(AmountOffRequirements()) is None

    def test_amount_and_quantity_never_both_emitted(self):
        requirements = decode_amount_off({"minPurchaseAmount": 20, "minPurchaseQuantity": 3})
        encoded = encode_amount_off(requirements)
        assert encoded == {"minPurchaseAmount": 20.0}

    def test_quantity_minimum(self):
        requirements = AmountOffRequirements(
            minimum=MinimumPurchase(MinimumPurchaseKind.QUANTITY, 3)
        )
        assert encode_amount_off(requirements) == {"minPurchaseQuantity": 3}

    def test_customer_eligibility_and_scope(self):
        stored = {
            "customerEligibility": {"type": "specific-customers", "customerIds": ["u1"]},
            "appliesTo": {"type": "specific-categories", "ids": ["k1", "k2"]},
        }
        requirements = decode_amount_off(stored)
        assert requirements.eligibility == CustomerEligibility(("u1",))
        assert requirements.applies_to == Scope.categories(["k1", "k2"])
        assert encode_amount_off(requirements) == stored

    def test_legacy_all_products_is_any(self):
        requirements = decode_amount_off({"appliesTo": {"type": "all-products"}})
        assert requirements.applies_to == Scope.any()
        assert encode_amount_off(requirements) is None

    def test_rules_default(self):
        assert RewardRules().max_uses_per_order == 1
