from __future__ import annotations

from decimal import Decimal
from typing import Protocol, Union

from tradesim.types.aliases import Symbol
from tradesim.types.types import CENT, ZERO, StockQuote, to_cents
from tradesim.utils.utility import dec

DEFAULT_MAX_MOVE_PCT = Decimal("5")


class UniformSource(Protocol):
    """Anything exposing random.Random.uniform; lets tests pin the draw."""

    def uniform(self, a: float, b: float) -> float: ...


class Stock:
    """
    A listed instrument. symbol and name are fixed; price moves once per round.
    """

    __slots__ = ("_symbol", "_name", "_price")

    def __init__(self, symbol: Symbol, name: str, price: Union[str, int, float, Decimal]) -> None:
        if not symbol:
            raise ValueError("Stock.symbol must be a non-empty string.")
        p = dec(price)
        if p < ZERO:
            raise ValueError("Stock.price must be >= 0.")
        self._symbol = symbol
        self._name = name
        self._price = to_cents(p)

    @property
    def symbol(self) -> Symbol:
        return self._symbol

    @property
    def name(self) -> str:
        return self._name

    @property
    def price(self) -> Decimal:
        return self._price

    def update_price(
        self, rng: UniformSource, max_move_pct: Decimal = DEFAULT_MAX_MOVE_PCT
    ) -> Decimal:
        """
        Random walk step: move the price by a uniform percentage in
        [-max_move_pct, +max_move_pct] and round half-up to the cent.
        """
        bound = float(max_move_pct)
        delta = dec(rng.uniform(-bound, bound))
        new_price = to_cents(self._price * (1 + delta / 100))
        # a positive price stays positive; rounding at sub-cent levels could hit zero
        if self._price > ZERO and new_price <= ZERO:
            new_price = CENT
        self._price = new_price
        return new_price

    def quote(self) -> StockQuote:
        return StockQuote(symbol=self._symbol, name=self._name, price=self._price)

    def __repr__(self) -> str:
        return f"Stock(symbol={self._symbol}, price={self._price})"
