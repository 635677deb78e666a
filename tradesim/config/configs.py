from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tradesim.types.types import MONEY_MAX_DIGITS

"""
Here, we collect all the different configs
"""

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


# --- Market Section ---


class StockConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    symbol: str = Field(min_length=1, description="Ticker, e.g. AAPL")
    name: str = Field(default="", description="Display name")
    price: Decimal = Field(
        gt=0, max_digits=MONEY_MAX_DIGITS, description="Initial price of the session"
    )

    @field_validator("symbol")
    @classmethod
    def _upper_symbol(cls, symbol: str) -> str:
        # symbols are matched upper-case
        return symbol.upper()


def _default_stocks() -> list[StockConfig]:
    return [
        StockConfig(symbol="AAPL", name="Apple Inc.", price=Decimal("150")),
        StockConfig(symbol="GOOGL", name="Alphabet Inc.", price=Decimal("2800")),
        StockConfig(symbol="TSLA", name="Tesla Inc.", price=Decimal("700")),
    ]


class MarketConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    stocks: list[StockConfig] = Field(
        default_factory=_default_stocks, description="Instruments listed at startup"
    )
    max_move_pct: Decimal = Field(
        default=Decimal("5"), gt=0, lt=100, description="Bound of the per-round price move, in %"
    )

    @field_validator("stocks")
    @classmethod
    def _unique_symbols(cls, stocks: list[StockConfig]) -> list[StockConfig]:
        seen: set[str] = set()
        for s in stocks:
            if s.symbol in seen:
                raise ValueError(f"duplicate symbol {s.symbol}")
            seen.add(s.symbol)
        return stocks


# --- Account Section ---


class AccountConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    user_name: str = Field(default="Alice", min_length=1)
    starting_cash: Decimal = Field(default=Decimal("10000"), ge=0, max_digits=MONEY_MAX_DIGITS)


# --- Storage Section ---


class StorageConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    state_path: Path = Field(default=Path("portfolio.json"), description="Saved user state")
    events_path: Optional[Path] = Field(default=None, description="JSONL event log, off if unset")


class Config(BaseModel):
    model_config = ConfigDict(extra="forbid")
    market: MarketConfig = Field(default_factory=MarketConfig)
    account: AccountConfig = Field(default_factory=AccountConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    # None -> unseeded, prices differ between runs
    seed: Optional[int] = Field(default=None, description="Price random-walk seed")
    log_level: LogLevel = "INFO"
