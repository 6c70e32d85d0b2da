from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal, Inexact, InvalidOperation, localcontext
from typing import Union

from pos_terminal.errors import InvalidArgumentError

Amount = Union[Decimal, int, str]

ZERO = Decimal("0")
MINIMUM_PACK_SIZE = 2


def to_amount(value: Amount, name: str = "amount") -> Decimal:
    """Convert ``value`` to an exact Decimal.

    Binary floats are refused: they carry representation error that would
    leak into totals.
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise InvalidArgumentError(f"{name} must be a Decimal, int or numeric string, got {type(value).__name__}.")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, str)):
        try:
            amount = Decimal(value.strip() if isinstance(value, str) else value)
        except InvalidOperation as exc:
            raise InvalidArgumentError(f"{name} is not a valid amount: {value!r}.") from exc
    else:
        raise InvalidArgumentError(f"{name} must be a Decimal, int or numeric string, got {type(value).__name__}.")
    if not amount.is_finite():
        raise InvalidArgumentError(f"{name} must be finite.")
    return amount


@contextmanager
def exact_arithmetic():
    """Trap rounding so money arithmetic is either exact or rejected."""
    with localcontext() as ctx:
        ctx.traps[Inexact] = True
        try:
            yield ctx
        except Inexact as exc:
            raise InvalidArgumentError(
                f"Amount needs more than {ctx.prec} significant digits and would be rounded."
            ) from exc


def non_negative_amount(value: Amount, name: str) -> Decimal:
    amount = to_amount(value, name)
    if amount < 0:
        raise InvalidArgumentError(f"{name} cannot be negative.")
    return amount


@dataclass(frozen=True, slots=True)
class VolumeRule:
    """``pack_price`` buys every full group of ``pack_size`` units."""

    pack_size: int
    pack_price: Decimal

    def __post_init__(self) -> None:
        if isinstance(self.pack_size, bool) or not isinstance(self.pack_size, int):
            raise InvalidArgumentError("Volume pricing quantity must be an integer.")
        if self.pack_size < MINIMUM_PACK_SIZE:
            raise InvalidArgumentError(f"Volume pricing quantity must be at least {MINIMUM_PACK_SIZE}.")
        object.__setattr__(self, "pack_price", non_negative_amount(self.pack_price, "Volume pricing price"))


@dataclass(frozen=True, slots=True)
class PriceRule:
    code: str
    unit_price: Decimal
    volume_rule: VolumeRule | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.code, str) or not self.code.strip():
            raise InvalidArgumentError("Product code cannot be null or empty.")
        object.__setattr__(self, "unit_price", non_negative_amount(self.unit_price, "Unit price"))
        if self.volume_rule is not None and not isinstance(self.volume_rule, VolumeRule):
            raise InvalidArgumentError("volume_rule must be a VolumeRule or None.")

    @property
    def has_volume_rule(self) -> bool:
        return self.volume_rule is not None


@dataclass(frozen=True, slots=True)
class PricingBreakdown:
    """Per-line (or per-transaction) pricing split.

    ``total_price`` is owed before any card discount, ``card_eligible_amount``
    is the part of it charged at unit price, and ``gross_amount`` is the
    undiscounted value used to grow a loyalty balance.
    """

    total_price: Decimal = ZERO
    card_eligible_amount: Decimal = ZERO
    gross_amount: Decimal = ZERO

    def __add__(self, other: PricingBreakdown) -> PricingBreakdown:
        if not isinstance(other, PricingBreakdown):
            return NotImplemented
        return PricingBreakdown(
            total_price=self.total_price + other.total_price,
            card_eligible_amount=self.card_eligible_amount + other.card_eligible_amount,
            gross_amount=self.gross_amount + other.gross_amount,
        )
