from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from tradesim.config.configs import Config, StorageConfig
from tradesim.core.market import Market
from tradesim.core.stock import Stock


class FixedRng:
    """Stand-in for random.Random that always draws the same percentage."""

    def __init__(self, value: float = 0.0) -> None:
        self.value = value
        self.calls: list[tuple[float, float]] = []

    def uniform(self, a: float, b: float) -> float:
        self.calls.append((a, b))
        return self.value


def make_market(rng: FixedRng | None = None) -> Market:
    market = Market(rng=rng or FixedRng(0.0))
    market.add_stock(Stock("AAPL", "Apple Inc.", Decimal("150")))
    market.add_stock(Stock("GOOGL", "Alphabet Inc.", Decimal("2800")))
    market.add_stock(Stock("TSLA", "Tesla Inc.", Decimal("700")))
    return market


@pytest.fixture
def fixed_rng() -> FixedRng:
    return FixedRng(0.0)


@pytest.fixture
def market(fixed_rng: FixedRng) -> Market:
    return make_market(fixed_rng)


@pytest.fixture
def cfg(tmp_path: Path) -> Config:
    return Config(seed=1, storage=StorageConfig(state_path=tmp_path / "portfolio.json"))
