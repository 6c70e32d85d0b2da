from __future__ import annotations

from decimal import Decimal

from pos_terminal.errors import InvalidArgumentError
from pos_terminal.models import PriceRule, PricingBreakdown, exact_arithmetic


def split_into_packs(quantity: int, pack_size: int) -> tuple[int, int]:
    return divmod(quantity, pack_size)


class PricingEngine:
    """Prices a quantity of one product, applying its volume rule when present.

    Units bought inside a full pack are already discounted, so only the
    remainder priced at the unit rate is reported as card-eligible.
    """

    def compute_breakdown(self, rule: PriceRule, quantity: int) -> PricingBreakdown:
        self._ensure_valid_arguments(rule, quantity)
        if quantity == 0:
            return PricingBreakdown()

        with exact_arithmetic():
            gross = rule.unit_price * quantity
            if rule.volume_rule is None:
                return PricingBreakdown(total_price=gross, card_eligible_amount=gross, gross_amount=gross)

            packs, remainder = split_into_packs(quantity, rule.volume_rule.pack_size)
            packs_total = rule.volume_rule.pack_price * packs
            remainder_total = rule.unit_price * remainder
            return PricingBreakdown(
                total_price=packs_total + remainder_total,
                card_eligible_amount=remainder_total,
                gross_amount=gross,
            )

    def compute_price(self, rule: PriceRule, quantity: int) -> Decimal:
        return self.compute_breakdown(rule, quantity).total_price

    @staticmethod
    def _ensure_valid_arguments(rule: PriceRule | None, quantity: int) -> None:
        if rule is None:
            raise InvalidArgumentError("Price rule is required.")
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidArgumentError("Quantity must be an integer.")
        if quantity < 0:
            raise InvalidArgumentError("Quantity cannot be negative.")
