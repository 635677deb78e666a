from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Mapping

from tradesim.types.aliases import Quantity, Symbol

# -------- Constants --------

ZERO = Decimal("0.00")
CENT = Decimal("0.01")
# Upper bound on digits of any stored or configured amount; keeps to_cents
# inside the default 28-digit decimal context.
MONEY_MAX_DIGITS = 15


def to_cents(x: Decimal) -> Decimal:
    """Round half-up to two decimal places."""
    return x.quantize(CENT, rounding=ROUND_HALF_UP)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# -------- Enums --------


class Side(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


# --- Market ---


@dataclass(frozen=True, slots=True)
class StockQuote:
    """Read-only view of a stock at one instant."""

    symbol: Symbol
    name: str
    price: Decimal


# --- Trades ---


@dataclass(frozen=True, slots=True, kw_only=True)
class Transaction:
    """
    One executed buy or sell.

    The price is the snapshot price at execution time. ts is captured on creation;
    only the state-restore path passes a stored value back in.
    """

    symbol: Symbol
    quantity: Quantity
    price: Decimal
    side: Side
    ts: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        if not self.symbol:
            raise ValueError("Transaction.symbol must be a non-empty string.")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError("Transaction.quantity must be an int.")
        if self.quantity <= 0:
            raise ValueError("Transaction.quantity must be > 0.")
        if self.price < ZERO:
            raise ValueError("Transaction.price must be >= 0.")

    @property
    def notional(self) -> Decimal:
        return self.price * self.quantity

    def __str__(self) -> str:
        return (
            f"{self.ts.isoformat()} | {self.side.value} | {self.symbol} | "
            f"Qty: {self.quantity} | Price: ${self.price}"
        )


# --- Snapshots ---


@dataclass(frozen=True, slots=True)
class AccountSnapshot:
    name: str
    cash: Decimal
    holdings: Mapping[Symbol, Quantity]
    market_value: Decimal
    equity: Decimal
