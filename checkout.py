from __future__ import annotations

import argparse
import json
import sys
from decimal import Decimal

import structlog

from pos_terminal.catalog import load_catalog, standard_catalog
from pos_terminal.config import LOG_FORMATS, Settings
from pos_terminal.errors import PosTerminalError
from pos_terminal.log import configure_logging
from pos_terminal.loyalty import DISCOUNT_TIERS, LoyaltyAccount
from pos_terminal.models import PriceRule, to_amount
from pos_terminal.terminal import PointOfSaleTerminal

logger = structlog.get_logger()

CENT = Decimal("0.01")

DEMO_SCENARIOS = [
    ("AAAABCDAAA", None, Decimal("13.25")),
    ("CCCCCCC", None, Decimal("6.00")),
    ("ABCD", None, Decimal("7.25")),
    ("AAAABCDAAA", Decimal("2150"), Decimal("13.0325")),
]


def money(amount: Decimal, symbol: str = "$") -> str:
    return f"{symbol}{amount.quantize(CENT)}"


def rules_from_args(args: argparse.Namespace) -> list[PriceRule]:
    if args.catalog:
        return load_catalog(args.catalog)
    return standard_catalog()


def split_items(items: str, sep: str | None) -> list[str]:
    if sep:
        return [code.strip() for code in items.split(sep) if code.strip()]
    return list(items)


def cmd_demo(args: argparse.Namespace) -> None:
    terminal = PointOfSaleTerminal()
    terminal.set_pricing(standard_catalog())
    print("Point of Sale Terminal Demo")
    print("============================")
    for idx, (items, balance, expected) in enumerate(DEMO_SCENARIOS, start=1):
        print()
        card = LoyaltyAccount(balance) if balance is not None else None
        label = f" with card balance {money(balance, args.currency)}" if card is not None else ""
        print(f"Test Case {idx}: Scanning {items}{label}")
        terminal.clear()
        for code in items:
            terminal.scan(code)
            print(f"Scanned: {code}")
        total = terminal.calculate_total(card)
        print(f"Total: {money(total, args.currency)} (Expected: {money(expected, args.currency)})")
        if card is not None:
            print(f"Card balance: {money(card.accumulated_amount, args.currency)}")


def cmd_price(args: argparse.Namespace) -> None:
    terminal = PointOfSaleTerminal()
    terminal.set_pricing(rules_from_args(args))
    terminal.scan_many(split_items(args.items, args.sep))

    card = LoyaltyAccount(to_amount(args.card_balance, "card balance")) if args.card_balance is not None else None
    balance_before = card.accumulated_amount if card is not None else None
    summary = terminal.summarize(card)
    total = terminal.calculate_total(card)

    result = {
        "items": terminal.scanned_items,
        "subtotal": str(summary.subtotal),
        "card_eligible_amount": str(summary.card_eligible_amount),
        "gross_amount": str(summary.gross_amount),
        "total": str(total),
    }
    if card is not None:
        result["card"] = {
            "tier": summary.tier.name,
            "rate": str(summary.rate),
            "discount": str(summary.card_discount),
            "balance_before": str(balance_before),
            "balance_after": str(card.accumulated_amount),
        }
    print(json.dumps(result, indent=2))


def cmd_tiers(args: argparse.Namespace) -> None:
    rows = [{"tier": t.name, "threshold": str(t.threshold), "rate": str(t.rate)} for t in DISCOUNT_TIERS]
    print(json.dumps(rows, indent=2))


def build_parser(settings: Settings | None = None) -> argparse.ArgumentParser:
    settings = settings or Settings.from_env()
    parser = argparse.ArgumentParser(description="Point-of-sale terminal pricing")
    parser.add_argument("--catalog", default=settings.catalog_path)
    parser.add_argument("--log-level", default=settings.log_level)
    parser.add_argument("--log-format", choices=LOG_FORMATS, default=settings.log_format)
    parser.add_argument("--currency", default=settings.currency_symbol)

    sub = parser.add_subparsers(required=True)

    demo = sub.add_parser("demo")
    demo.set_defaults(func=cmd_demo)

    price = sub.add_parser("price")
    price.add_argument("items")
    price.add_argument("--sep")
    price.add_argument("--card-balance")
    price.set_defaults(func=cmd_price)

    tiers = sub.add_parser("tiers")
    tiers.set_defaults(func=cmd_tiers)
    return parser


def main(argv: list[str] | None = None) -> int:
    # Until the requested settings are known, failures still log to stderr.
    configure_logging()
    try:
        parser = build_parser()
        args = parser.parse_args(argv)
        configure_logging(args.log_level, args.log_format)
        args.func(args)
    except PosTerminalError as exc:
        logger.error("command_failed", error=str(exc), kind=type(exc).__name__)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
