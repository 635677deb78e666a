"""
One trading session: the driver side of the simulator without any console I/O.

Lifecycle:
    open()  -> restore the saved user, or create the default one
    next_round() / buy() / sell() / portfolio_value() ... any number of times
    close() -> save the user

Symbols are resolved against the market before User/Portfolio see them, so an
unknown symbol is rejected without touching state.
"""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from typing import Optional

from tradesim.adapters.telemetry.jsonl import NullTelemetry
from tradesim.config.configs import Config
from tradesim.core.market import Market
from tradesim.core.persistence import load_user_state, save_user_state
from tradesim.core.user import User
from tradesim.errors.errors import SessionError, TradingError
from tradesim.ports.telemetry import Telemetry
from tradesim.ports.user_store import UserStore
from tradesim.types.aliases import Quantity, Symbol
from tradesim.types.types import AccountSnapshot, Side, StockQuote, Transaction

logger = logging.getLogger(__name__)


class TradingSession:
    def __init__(
        self,
        cfg: Config,
        store: UserStore,
        telemetry: Optional[Telemetry] = None,
        market: Optional[Market] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self._cfg = cfg
        self._store = store
        self._telemetry: Telemetry = telemetry if telemetry is not None else NullTelemetry()
        self._market = market if market is not None else Market.from_config(cfg)
        self._user: Optional[User] = None
        self.session_id = session_id or str(uuid.uuid4())

    # --- Property methods ---

    @property
    def market(self) -> Market:
        return self._market

    @property
    def user(self) -> User:
        if self._user is None:
            raise SessionError("Session not opened; call open() first")
        return self._user

    @property
    def is_open(self) -> bool:
        return self._user is not None

    # --- Lifecycle ---

    def open(self) -> User:
        if self._user is not None:
            raise SessionError("Session already opened")
        self._user = load_user_state(self._store, self._default_user)
        self._telemetry.log(
            "session_opened",
            user=self._user.name,
            balance=self._user.balance,
            symbols=self._market.symbols(),
        )
        return self._user

    def close(self) -> bool:
        user = self.user
        saved = save_user_state(self._store, user)
        self._telemetry.log("session_closed", user=user.name, balance=user.balance, saved=saved)
        return saved

    # --- Rounds ---

    def next_round(self) -> tuple[StockQuote, ...]:
        self._market.simulate_price_changes()
        return self._market.listing()

    # --- Trading ---

    def buy(self, symbol: Symbol, quantity: Quantity) -> Transaction:
        return self._trade(Side.BUY, symbol, quantity)

    def sell(self, symbol: Symbol, quantity: Quantity) -> Transaction:
        return self._trade(Side.SELL, symbol, quantity)

    def _trade(self, side: Side, symbol: Symbol, quantity: Quantity) -> Transaction:
        user = self.user
        try:
            stock = self._market.require_stock(symbol)
            if side is Side.BUY:
                tx = user.buy(stock, quantity)
            else:
                tx = user.sell(stock, quantity)
        except TradingError as exc:
            logger.info(f"{side.value} {quantity} {symbol} rejected: {exc}")
            self._telemetry.log(
                "trade_rejected",
                side=side,
                symbol=symbol,
                quantity=repr(quantity),
                error=type(exc).__name__,
                details=exc.details,
            )
            raise

        logger.info(f"{side.value} {tx.quantity} {tx.symbol} @ {tx.price}")
        self._telemetry.log(
            "trade_executed",
            side=tx.side,
            symbol=tx.symbol,
            quantity=tx.quantity,
            price=tx.price,
            balance=user.balance,
        )
        return tx

    # --- Views ---

    def listing(self) -> tuple[StockQuote, ...]:
        return self._market.listing()

    def portfolio_value(self) -> Decimal:
        return self.user.portfolio.calculate_value(self._market)

    def snapshot(self) -> AccountSnapshot:
        return self.user.snapshot(self._market)

    def transactions(self) -> tuple[Transaction, ...]:
        return self.user.portfolio.transactions

    # --- Helpers ---

    def _default_user(self) -> User:
        acct = self._cfg.account
        return User(acct.user_name, acct.starting_cash)
