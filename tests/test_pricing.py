from decimal import Decimal

import pytest

from pos_terminal.errors import InvalidArgumentError
from pos_terminal.models import PriceRule, PricingBreakdown, VolumeRule
from pos_terminal.pricing import PricingEngine, split_into_packs

PACKED = PriceRule("A", Decimal("1.25"), VolumeRule(3, Decimal("3.00")))
PLAIN = PriceRule("B", Decimal("4.25"))


@pytest.mark.parametrize(
    "quantity, expected",
    [(0, "0"), (1, "1.25"), (2, "2.50"), (3, "3.00"), (4, "4.25"), (6, "6.00"), (7, "7.25")],
)
def test_compute_price_uses_packs_then_remainder(quantity, expected):
    assert PricingEngine().compute_price(PACKED, quantity) == Decimal(expected)


def test_compute_price_without_volume_rule():
    assert PricingEngine().compute_price(PLAIN, 3) == Decimal("12.75")


def test_compute_price_matches_formula_and_is_monotonic():
    engine = PricingEngine()
    rule = PriceRule("C", Decimal("1.00"), VolumeRule(6, Decimal("5.00")))
    previous = Decimal("0")
    for quantity in range(0, 40):
        packs, remainder = divmod(quantity, 6)
        price = engine.compute_price(rule, quantity)
        assert price == packs * Decimal("5.00") + remainder * Decimal("1.00")
        assert price >= previous
        previous = price


def test_breakdown_marks_only_remainder_as_card_eligible():
    breakdown = PricingEngine().compute_breakdown(PACKED, 7)
    assert breakdown == PricingBreakdown(
        total_price=Decimal("7.25"),
        card_eligible_amount=Decimal("1.25"),
        gross_amount=Decimal("8.75"),
    )


def test_breakdown_full_packs_have_no_eligible_amount():
    breakdown = PricingEngine().compute_breakdown(PACKED, 6)
    assert breakdown.total_price == Decimal("6.00")
    assert breakdown.card_eligible_amount == 0
    assert breakdown.gross_amount == Decimal("7.50")


def test_breakdown_without_volume_rule_is_fully_eligible():
    breakdown = PricingEngine().compute_breakdown(PLAIN, 2)
    assert breakdown.total_price == breakdown.card_eligible_amount == breakdown.gross_amount == Decimal("8.50")


def test_breakdown_zero_quantity():
    assert PricingEngine().compute_breakdown(PACKED, 0) == PricingBreakdown()


def test_breakdown_invariants_hold_across_quantities():
    engine = PricingEngine()
    for rule in (PACKED, PLAIN):
        for quantity in range(0, 25):
            breakdown = engine.compute_breakdown(rule, quantity)
            assert breakdown.card_eligible_amount <= breakdown.total_price
            assert breakdown.gross_amount == rule.unit_price * quantity
            assert breakdown.total_price == engine.compute_price(rule, quantity)


def test_pack_priced_above_units_still_follows_pack_rule():
    rule = PriceRule("X", Decimal("1.00"), VolumeRule(2, Decimal("3.00")))
    assert PricingEngine().compute_price(rule, 2) == Decimal("3.00")


def test_negative_quantity_is_rejected():
    with pytest.raises(InvalidArgumentError, match="Quantity cannot be negative"):
        PricingEngine().compute_price(PACKED, -1)
    with pytest.raises(InvalidArgumentError, match="Quantity cannot be negative"):
        PricingEngine().compute_breakdown(PACKED, -1)


def test_missing_rule_is_rejected():
    with pytest.raises(InvalidArgumentError):
        PricingEngine().compute_price(None, 1)


def test_split_into_packs():
    assert split_into_packs(7, 3) == (2, 1)
    assert split_into_packs(2, 3) == (0, 2)


@pytest.mark.parametrize("quantity", [1.0, "2", True, None])
def test_non_integer_quantity_is_rejected(quantity):
    with pytest.raises(InvalidArgumentError, match="Quantity must be an integer"):
        PricingEngine().compute_breakdown(PACKED, quantity)


def test_rounding_beyond_precision_is_rejected():
    rule = PriceRule("X", Decimal("1." + "1" * 30))
    with pytest.raises(InvalidArgumentError, match="would be rounded"):
        PricingEngine().compute_price(rule, 3)
