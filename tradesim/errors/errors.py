"""
Exceptions for the trading simulator.

Exception hierarchy:
- TradingError (base, recoverable business-rule violation)
  - InsufficientBalanceError: buy cost exceeds available cash
  - InsufficientSharesError: sell quantity exceeds owned quantity
  - UnknownSymbolError: symbol has no stock in the market
  - InvalidQuantityError: zero, negative or non-integer quantity
- PersistenceError: save/load I/O failures
  - StateCorruptError: stored state exists but cannot be decoded
- ConfigError: invalid configuration
- SessionError: session driver used out of order

Business-rule errors are raised before any state is mutated.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Any, Optional


class TradingError(Exception):
    """Base exception for all rejected trades."""

    def __init__(
        self,
        message: str,
        *,
        symbol: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.symbol = symbol
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.details:
            parts.append(f"[details={self.details}]")
        return " ".join(parts)


class InsufficientBalanceError(TradingError):
    """Raised when a buy costs more than the available balance."""

    def __init__(
        self,
        required: Decimal,
        available: Decimal,
        *,
        symbol: Optional[str] = None,
    ) -> None:
        self.required = required
        self.available = available
        super().__init__(
            "Insufficient balance.",
            symbol=symbol,
            details={"required": str(required), "available": str(available)},
        )


class InsufficientSharesError(TradingError):
    """Raised when selling more shares than are held."""

    def __init__(self, symbol: str, requested: int, owned: int) -> None:
        self.requested = requested
        self.owned = owned
        super().__init__(
            "Not enough shares to sell.",
            symbol=symbol,
            details={"symbol": symbol, "requested": requested, "owned": owned},
        )


class UnknownSymbolError(TradingError):
    """Raised when a symbol does not resolve to a stock in the market."""

    def __init__(self, symbol: str) -> None:
        super().__init__(f"Unknown symbol '{symbol}'.", symbol=symbol)


class InvalidQuantityError(TradingError):
    """Raised for zero, negative or non-integer quantities."""

    def __init__(self, quantity: Any) -> None:
        self.quantity = quantity
        super().__init__(f"Quantity must be a positive integer (got {quantity!r}).")


# --- Persistence ---


class PersistenceError(Exception):
    """Raised when user state cannot be written or read."""

    def __init__(self, message: str, *, path: Optional[Path] = None) -> None:
        self.path = path
        super().__init__(message)

    def __str__(self) -> str:
        msg = super().__str__()
        if self.path is not None:
            return f"{msg} [path={self.path}]"
        return msg


class StateCorruptError(PersistenceError):
    """Stored state exists but is unreadable, malformed or violates invariants."""


# --- Config ---


class ConfigError(ValueError):
    """Raised when configuration fails validation."""

    def __init__(self, message: str, errors: Optional[list[dict[str, str]]] = None) -> None:
        self.errors = errors or []
        super().__init__(message)


# --- Session ---


class SessionError(RuntimeError):
    "Error in connection with the session lifecycle"
