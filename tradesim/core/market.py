from __future__ import annotations

import logging
import random
from decimal import Decimal
from typing import Optional

from tradesim.config.configs import Config
from tradesim.core.stock import DEFAULT_MAX_MOVE_PCT, Stock, UniformSource
from tradesim.errors.errors import UnknownSymbolError
from tradesim.types.aliases import Symbol
from tradesim.types.types import StockQuote

logger = logging.getLogger(__name__)


class Market:
    """
    Responsibilities:
    - Own the listed stocks, keyed by symbol (unique per symbol)
    - Advance every price once per round with the injected random source
    - Resolve symbols for callers; unknown symbols are an explicit error

    The market is rebuilt from config every run. Portfolios only refer to stocks
    by symbol, so nothing persisted points into a Market instance.
    """

    def __init__(
        self,
        rng: Optional[UniformSource] = None,
        max_move_pct: Decimal = DEFAULT_MAX_MOVE_PCT,
    ) -> None:
        self._stocks: dict[Symbol, Stock] = {}
        self._rng: UniformSource = rng if rng is not None else random.Random()
        self._max_move_pct = max_move_pct
        self._round = 0

    @classmethod
    def from_config(cls, cfg: Config, rng: Optional[UniformSource] = None) -> Market:
        if rng is None:
            rng = random.Random(cfg.seed)
        market = cls(rng=rng, max_move_pct=cfg.market.max_move_pct)
        for s in cfg.market.stocks:
            market.add_stock(Stock(s.symbol, s.name, s.price))
        return market

    # --- Property methods ---

    @property
    def round(self) -> int:
        return self._round

    @property
    def max_move_pct(self) -> Decimal:
        return self._max_move_pct

    # --- Core API ---

    def add_stock(self, stock: Stock) -> None:
        """Insert, or replace the stock already listed under the same symbol."""
        if stock.symbol in self._stocks:
            logger.debug(f"Replacing listed stock {stock.symbol}")
        self._stocks[stock.symbol] = stock

    def get_stock(self, symbol: Symbol) -> Optional[Stock]:
        return self._stocks.get(symbol)

    def require_stock(self, symbol: Symbol) -> Stock:
        stock = self._stocks.get(symbol)
        if stock is None:
            raise UnknownSymbolError(symbol)
        return stock

    def simulate_price_changes(self) -> None:
        for stock in self._stocks.values():
            stock.update_price(self._rng, self._max_move_pct)
        self._round += 1
        logger.debug(f"Round {self._round}: {self.prices()}")

    # --- Views ---

    def listing(self) -> tuple[StockQuote, ...]:
        """Read-only snapshot of every listed stock, ordered by symbol."""
        return tuple(self._stocks[s].quote() for s in sorted(self._stocks))

    def prices(self) -> dict[Symbol, Decimal]:
        return {s: stock.price for s, stock in self._stocks.items()}

    def symbols(self) -> list[Symbol]:
        return sorted(self._stocks)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._stocks

    def __len__(self) -> int:
        return len(self._stocks)
