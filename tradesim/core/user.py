from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional, Union

from tradesim.core.market import Market
from tradesim.core.portfolio import Portfolio
from tradesim.core.stock import Stock
from tradesim.errors.errors import InsufficientBalanceError
from tradesim.types.aliases import Quantity
from tradesim.types.types import ZERO, AccountSnapshot, Transaction, to_cents
from tradesim.utils.utility import check_quantity, dec

logger = logging.getLogger(__name__)


class User:
    """
    Cash balance plus one owned portfolio.

    - buy: rejects when cost > balance, nothing changes on rejection
    - sell: share checks live in Portfolio; balance only moves on success
    """

    def __init__(
        self,
        name: str,
        balance: Union[str, int, float, Decimal],
        portfolio: Optional[Portfolio] = None,
    ) -> None:
        b = to_cents(dec(balance))
        if b < ZERO:
            raise ValueError("User.balance must be >= 0.")
        self._name = name
        self._balance: Decimal = b
        self._portfolio = portfolio if portfolio is not None else Portfolio()

    @property
    def name(self) -> str:
        return self._name

    @property
    def balance(self) -> Decimal:
        return self._balance

    @property
    def portfolio(self) -> Portfolio:
        return self._portfolio

    def buy(self, stock: Stock, quantity: Quantity) -> Transaction:
        check_quantity(quantity)
        cost = stock.price * quantity
        if self._balance < cost:
            raise InsufficientBalanceError(cost, self._balance, symbol=stock.symbol)
        self._balance -= self._portfolio.buy_stock(stock, quantity)
        logger.debug(f"{self._name} bought {quantity} {stock.symbol} for {cost}")
        return self._portfolio.last_transaction()

    def sell(self, stock: Stock, quantity: Quantity) -> Transaction:
        proceeds = self._portfolio.sell_stock(stock, quantity)
        self._balance += proceeds
        logger.debug(f"{self._name} sold {quantity} {stock.symbol} for {proceeds}")
        return self._portfolio.last_transaction()

    def snapshot(self, market: Market) -> AccountSnapshot:
        market_value = self._portfolio.calculate_value(market)
        return AccountSnapshot(
            name=self._name,
            cash=self._balance,
            holdings={s: q for s, q in self._portfolio.holdings_view().items() if q != 0},
            market_value=market_value,
            equity=self._balance + market_value,
        )

    def __repr__(self) -> str:
        return f"User(name={self._name}, balance={self._balance})"
