from pos_terminal.errors import InvalidArgumentError, InvalidStateError, NotFoundError, PosTerminalError
from pos_terminal.loyalty import DISCOUNT_TIERS, DiscountTier, LoyaltyAccount, rate_for, tier_for
from pos_terminal.models import PriceRule, PricingBreakdown, VolumeRule
from pos_terminal.pricing import PricingEngine
from pos_terminal.terminal import (
    PointOfSaleTerminal,
    TransactionSummary,
    price_transaction,
    price_transaction_with_loyalty,
    summarize_transaction,
)

__all__ = [
    "DISCOUNT_TIERS",
    "DiscountTier",
    "InvalidArgumentError",
    "InvalidStateError",
    "LoyaltyAccount",
    "NotFoundError",
    "PointOfSaleTerminal",
    "PosTerminalError",
    "PriceRule",
    "PricingBreakdown",
    "PricingEngine",
    "TransactionSummary",
    "VolumeRule",
    "price_transaction",
    "price_transaction_with_loyalty",
    "rate_for",
    "summarize_transaction",
    "tier_for",
]
