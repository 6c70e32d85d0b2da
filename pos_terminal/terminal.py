from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping

import structlog

from pos_terminal.errors import InvalidArgumentError, InvalidStateError, NotFoundError
from pos_terminal.loyalty import NO_TIER, DiscountTier, LoyaltyAccount
from pos_terminal.models import ZERO, PriceRule, PricingBreakdown, exact_arithmetic
from pos_terminal.pricing import PricingEngine

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class TransactionSummary:
    subtotal: Decimal
    card_eligible_amount: Decimal
    gross_amount: Decimal
    tier: DiscountTier
    card_discount: Decimal
    total: Decimal

    @property
    def rate(self) -> Decimal:
        return self.tier.rate


def _resolve_lines(scanned_counts: Mapping[str, int], catalog: Mapping[str, PriceRule]) -> list[tuple[PriceRule, int]]:
    # Every code is resolved before anything is priced so a bad line charges nothing.
    lines = []
    for code, quantity in scanned_counts.items():
        rule = catalog.get(code)
        if rule is None:
            raise NotFoundError(code)
        lines.append((rule, quantity))
    return lines


def price_transaction(
    scanned_counts: Mapping[str, int],
    catalog: Mapping[str, PriceRule],
    engine: PricingEngine | None = None,
) -> Decimal:
    engine = engine or PricingEngine()
    lines = _resolve_lines(scanned_counts, catalog)
    with exact_arithmetic():
        return sum((engine.compute_price(rule, quantity) for rule, quantity in lines), ZERO)


def summarize_transaction(
    scanned_counts: Mapping[str, int],
    catalog: Mapping[str, PriceRule],
    account: LoyaltyAccount | None = None,
    engine: PricingEngine | None = None,
) -> TransactionSummary:
    """Price a basket and work out the card discount without touching the card."""
    engine = engine or PricingEngine()
    lines = _resolve_lines(scanned_counts, catalog)
    tier = account.current_tier() if account is not None else NO_TIER
    with exact_arithmetic():
        breakdown = sum((engine.compute_breakdown(rule, quantity) for rule, quantity in lines), PricingBreakdown())
        card_discount = breakdown.card_eligible_amount * tier.rate
        total = breakdown.total_price - card_discount
    return TransactionSummary(
        subtotal=breakdown.total_price,
        card_eligible_amount=breakdown.card_eligible_amount,
        gross_amount=breakdown.gross_amount,
        tier=tier,
        card_discount=card_discount,
        total=total,
    )


def price_transaction_with_loyalty(
    scanned_counts: Mapping[str, int],
    catalog: Mapping[str, PriceRule],
    account: LoyaltyAccount,
    engine: PricingEngine | None = None,
) -> Decimal:
    """Price a basket with a discount card, then credit the card with the gross spend.

    The rate applied is the one the card held before this transaction.
    """
    if account is None:
        raise InvalidArgumentError("Discount card is required.")
    summary = summarize_transaction(scanned_counts, catalog, account, engine)
    account.accumulate(summary.gross_amount)
    logger.info(
        "transaction_priced",
        subtotal=str(summary.subtotal),
        tier=summary.tier.name,
        card_discount=str(summary.card_discount),
        total=str(summary.total),
    )
    return summary.total


class PointOfSaleTerminal:
    def __init__(self, engine: PricingEngine | None = None) -> None:
        self.engine = engine or PricingEngine()
        self._products: dict[str, PriceRule] = {}
        self._scanned: dict[str, int] = {}

    @property
    def is_configured(self) -> bool:
        return bool(self._products)

    @property
    def catalog(self) -> dict[str, PriceRule]:
        return dict(self._products)

    @property
    def scanned_items(self) -> dict[str, int]:
        return dict(self._scanned)

    def set_pricing(self, rules: Iterable[PriceRule]) -> None:
        if self._scanned:
            raise InvalidStateError("Cannot change pricing during active transaction. Call clear() first.")
        products = self._build_catalog(rules)
        self._products = products
        logger.info("pricing_configured", products=len(products))

    def scan(self, code: str) -> None:
        if not isinstance(code, str) or not code.strip():
            raise InvalidArgumentError("Product code cannot be null or empty.")
        self._ensure_pricing_configured()
        if code not in self._products:
            raise NotFoundError(code)
        self._scanned[code] = self._scanned.get(code, 0) + 1
        logger.debug("item_scanned", code=code, quantity=self._scanned[code])

    def scan_many(self, codes: Iterable[str]) -> None:
        for code in codes:
            self.scan(code)

    def clear(self) -> None:
        self._scanned.clear()
        logger.debug("transaction_cleared")

    def calculate_total(self, account: LoyaltyAccount | None = None) -> Decimal:
        self._ensure_pricing_configured()
        if not self._scanned:
            return ZERO
        if account is None:
            total = price_transaction(self._scanned, self._products, self.engine)
            logger.info("transaction_priced", total=str(total))
            return total
        return price_transaction_with_loyalty(self._scanned, self._products, account, self.engine)

    def summarize(self, account: LoyaltyAccount | None = None) -> TransactionSummary:
        self._ensure_pricing_configured()
        return summarize_transaction(self._scanned, self._products, account, self.engine)

    def _ensure_pricing_configured(self) -> None:
        if not self.is_configured:
            raise InvalidStateError("No pricing configuration set. Call set_pricing first.")

    @staticmethod
    def _build_catalog(rules: Iterable[PriceRule] | None) -> dict[str, PriceRule]:
        if rules is None:
            raise InvalidArgumentError("Products collection is required.")
        products: dict[str, PriceRule] = {}
        for rule in rules:
            if not isinstance(rule, PriceRule):
                raise InvalidArgumentError(f"Expected PriceRule, got {type(rule).__name__}.")
            if rule.code in products:
                raise InvalidArgumentError(f"Duplicate product code found: {rule.code}")
            products[rule.code] = rule
        if not products:
            raise InvalidArgumentError("Products collection cannot be empty.")
        return products
