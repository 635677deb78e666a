from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Mapping

from tradesim.core.market import Market
from tradesim.core.stock import Stock
from tradesim.errors.errors import InsufficientSharesError, UnknownSymbolError
from tradesim.types.aliases import Quantity, Symbol
from tradesim.types.types import ZERO, Side, Transaction, to_cents
from tradesim.utils.utility import check_quantity

logger = logging.getLogger(__name__)


class Portfolio:
    """
    Holdings per symbol plus the append-only transaction log of one user.

    - Holdings never go negative; a sell that would break this is rejected before
      anything changes.
    - Stocks are referenced by symbol only.
    - Affordability is the owner's concern (see User.buy), not the portfolio's.
    """

    def __init__(self) -> None:
        self._holdings: dict[Symbol, Quantity] = {}
        self._transactions: list[Transaction] = []

    @classmethod
    def restore(
        cls, holdings: Mapping[Symbol, Quantity], transactions: Iterable[Transaction]
    ) -> Portfolio:
        """Rebuild a portfolio from stored state."""
        portfolio = cls()
        for symbol, qty in holdings.items():
            if qty < 0:
                raise ValueError(f"Holding for {symbol} is negative: {qty}")
            portfolio._holdings[symbol] = qty
        portfolio._transactions.extend(transactions)
        return portfolio

    # --- Property methods ---

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return tuple(self._transactions)

    def holdings_view(self) -> Mapping[Symbol, Quantity]:
        """Read-only copy: symbol -> owned quantity (zero entries included)."""
        return dict(self._holdings)

    def quantity(self, symbol: Symbol) -> Quantity:
        return self._holdings.get(symbol, 0)

    # --- Core API ---

    def buy_stock(self, stock: Stock, quantity: Quantity) -> Decimal:
        """
        Add shares at the stock's current price and record a BUY.
        Returns the cost for the caller to debit.
        """
        check_quantity(quantity)
        tx = Transaction(symbol=stock.symbol, quantity=quantity, price=stock.price, side=Side.BUY)
        self._holdings[stock.symbol] = self._holdings.get(stock.symbol, 0) + quantity
        self._transactions.append(tx)
        return tx.notional

    def sell_stock(self, stock: Stock, quantity: Quantity) -> Decimal:
        """
        Remove shares at the stock's current price and record a SELL.
        Returns the proceeds for the caller to credit.
        """
        check_quantity(quantity)
        owned = self._holdings.get(stock.symbol, 0)
        if owned < quantity:
            raise InsufficientSharesError(stock.symbol, quantity, owned)

        tx = Transaction(symbol=stock.symbol, quantity=quantity, price=stock.price, side=Side.SELL)
        self._holdings[stock.symbol] = owned - quantity
        self._transactions.append(tx)
        return tx.notional

    def calculate_value(self, market: Market) -> Decimal:
        """
        Mark every holding at the market's current price.
        A held symbol the market does not list is a data-integrity error.
        """
        total = ZERO
        for symbol, qty in self._holdings.items():
            if qty == 0:
                continue
            stock = market.get_stock(symbol)
            if stock is None:
                logger.error(f"Held symbol {symbol} is not listed in the market")
                raise UnknownSymbolError(symbol)
            total += stock.price * qty
        return to_cents(total)

    def last_transaction(self) -> Transaction:
        return self._transactions[-1]

    def __repr__(self) -> str:
        return f"Portfolio(holdings={self._holdings}, transactions={len(self._transactions)})"
