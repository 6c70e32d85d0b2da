from __future__ import annotations

import threading
from dataclasses import dataclass
from decimal import Decimal

import structlog

from pos_terminal.models import Amount, exact_arithmetic, non_negative_amount

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class DiscountTier:
    name: str
    threshold: Decimal
    rate: Decimal


NO_TIER = DiscountTier("none", Decimal("0"), Decimal("0.00"))
BRONZE = DiscountTier("bronze", Decimal("1000"), Decimal("0.01"))
SILVER = DiscountTier("silver", Decimal("2000"), Decimal("0.03"))
GOLD = DiscountTier("gold", Decimal("5000"), Decimal("0.05"))
PLATINUM = DiscountTier("platinum", Decimal("10000"), Decimal("0.07"))

# Ascending by threshold.
DISCOUNT_TIERS: tuple[DiscountTier, ...] = (NO_TIER, BRONZE, SILVER, GOLD, PLATINUM)


def tier_for(accumulated_amount: Amount) -> DiscountTier:
    """Return the highest tier whose threshold ``accumulated_amount`` reaches."""
    amount = non_negative_amount(accumulated_amount, "Accumulated amount")
    for tier in reversed(DISCOUNT_TIERS):
        if amount >= tier.threshold:
            return tier
    return NO_TIER


def rate_for(accumulated_amount: Amount) -> Decimal:
    return tier_for(accumulated_amount).rate


class LoyaltyAccount:
    """Discount card tracking gross spend.

    The rate follows the accumulated balance through :data:`DISCOUNT_TIERS`.
    Only :meth:`accumulate` changes the balance, and it never goes down.
    """

    def __init__(self, initial_amount: Amount = 0) -> None:
        self._accumulated = non_negative_amount(initial_amount, "Initial amount")
        self._lock = threading.Lock()

    @property
    def accumulated_amount(self) -> Decimal:
        return self._accumulated

    def current_tier(self) -> DiscountTier:
        return tier_for(self._accumulated)

    def current_rate(self) -> Decimal:
        return self.current_tier().rate

    def accumulate(self, gross_amount: Amount) -> Decimal:
        """Add a sale's gross amount and return the new balance."""
        amount = non_negative_amount(gross_amount, "Gross sale")
        with self._lock, exact_arithmetic():
            before = tier_for(self._accumulated)
            self._accumulated += amount
            balance = self._accumulated
        after = tier_for(balance)
        logger.debug("loyalty_accumulated", added=str(amount), balance=str(balance))
        if after != before:
            logger.info("loyalty_tier_changed", previous=before.name, current=after.name, balance=str(balance))
        return balance

    def __repr__(self) -> str:
        return f"LoyaltyAccount(accumulated_amount={self._accumulated!r})"
