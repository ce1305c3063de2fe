from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

CURRENCY = "INR"

# upper bounds for order totals and single menu prices
MAX_AMOUNT = Decimal("1000000000000000")
MAX_UNIT_PRICE = Decimal("1000000000")

_PAISE = Decimal("0.01")


def _to_paise(value: Decimal) -> Decimal:
    if not value.is_finite() or abs(value) > MAX_AMOUNT:
        raise ValueError(f"amount_out_of_range: {value}")
    return value.quantize(_PAISE, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Money:
    """Rupee amount held to the paisa."""

    amount: Decimal
    currency: str = CURRENCY

    @staticmethod
    def of(amount: Decimal | int | float | str, currency: str = CURRENCY) -> "Money":
        # float goes through str so 35.5 stays 35.50, not its binary expansion
        return Money(_to_paise(Decimal(str(amount))), currency)

    @staticmethod
    def zero(currency: str = CURRENCY) -> "Money":
        return Money(Decimal("0.00"), currency)

    def __add__(self, other: "Money") -> "Money":
        if self.currency != other.currency:
            raise ValueError(f"currency_mismatch: {self.currency} vs {other.currency}")
        return Money(_to_paise(self.amount + other.amount), self.currency)

    def __mul__(self, quantity: int) -> "Money":
        return Money(_to_paise(self.amount * quantity), self.currency)


def fold_money(values: Iterable[Money], currency: str = CURRENCY) -> Money:
    total = Money.zero(currency)
    for v in values:
        total = total + v
    return total


def now_utc() -> datetime:
    return datetime.now(timezone.utc)
