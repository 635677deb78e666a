from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from tradesim.config.config_loader import ConfigLoader, parse_overrides
from tradesim.config.configs import Config
from tradesim.errors.errors import ConfigError

TOML = """
seed = 3
log_level = "DEBUG"

[account]
user_name = "Carol"
starting_cash = "2500"

[market]
max_move_pct = "2.5"

[[market.stocks]]
symbol = "MSFT"
name = "Microsoft"
price = "300"
"""


def test_defaults() -> None:
    cfg = Config()
    assert [s.symbol for s in cfg.market.stocks] == ["AAPL", "GOOGL", "TSLA"]
    assert cfg.account.user_name == "Alice"
    assert cfg.account.starting_cash == Decimal("10000")
    assert cfg.storage.state_path == Path("portfolio.json")
    assert cfg.seed is None


def test_load_toml_file(tmp_path: Path) -> None:
    (tmp_path / "sim.toml").write_text(TOML)
    cfg = ConfigLoader(tmp_path).load_config("sim.toml")

    assert cfg.seed == 3
    assert cfg.log_level == "DEBUG"
    assert cfg.account.user_name == "Carol"
    assert cfg.account.starting_cash == Decimal("2500")
    assert cfg.market.max_move_pct == Decimal("2.5")
    assert [s.symbol for s in cfg.market.stocks] == ["MSFT"]


def test_overrides_win_over_file(tmp_path: Path) -> None:
    (tmp_path / "sim.toml").write_text(TOML)
    cfg = ConfigLoader(tmp_path).load_config(
        "sim.toml", ["seed=9", "account.starting_cash=500", "storage.state_path=x/state.json"]
    )
    assert cfg.seed == 9
    assert cfg.account.starting_cash == Decimal("500")
    assert cfg.account.user_name == "Carol"
    assert cfg.storage.state_path == Path("x/state.json")


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ConfigLoader(tmp_path).load("nope.toml")


def test_invalid_toml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / "bad.toml").write_text("seed = = 3")
    with pytest.raises(ConfigError):
        ConfigLoader(tmp_path).load("bad.toml")


@pytest.mark.parametrize(
    "override",
    [
        "market.max_move_pct=0",
        "market.max_move_pct=100",
        "account.starting_cash=-1",
        "account.starting_cash=1e30",
        "bogus=1",
    ],
)
def test_invalid_values_raise_config_error(override: str) -> None:
    with pytest.raises(ConfigError) as exc:
        ConfigLoader().load_config(None, [override])
    assert exc.value.errors
    assert exc.value.errors[0]["component"] == "config"


def test_duplicate_symbols_rejected() -> None:
    file_cfg = {
        "market": {
            "stocks": [
                {"symbol": "AAPL", "price": "1"},
                {"symbol": "AAPL", "price": "2"},
            ]
        }
    }
    with pytest.raises(ConfigError):
        ConfigLoader().resolve(file_cfg)


def test_parse_overrides_expands_dotted_keys() -> None:
    assert parse_overrides(["a.b=1", "a.c=2", "d=3"]) == {"a": {"b": "1", "c": "2"}, "d": "3"}


@pytest.mark.parametrize("pairs", [["seed"], ["seed=1", "seed.x=2"], ["=1"]])
def test_parse_overrides_rejects_malformed(pairs: list[str]) -> None:
    with pytest.raises(ConfigError):
        parse_overrides(pairs)


def test_oversized_stock_price_rejected() -> None:
    file_cfg = {"market": {"stocks": [{"symbol": "AAPL", "price": "1e30"}]}}
    with pytest.raises(ConfigError) as exc:
        ConfigLoader().resolve(file_cfg)
    assert exc.value.errors[0]["path"].startswith("market.stocks")


def test_stock_symbols_are_upper_cased() -> None:
    cfg = ConfigLoader().resolve({"market": {"stocks": [{"symbol": "msft", "price": "300"}]}})
    assert [s.symbol for s in cfg.market.stocks] == ["MSFT"]


def test_duplicate_symbols_rejected_regardless_of_case() -> None:
    file_cfg = {
        "market": {
            "stocks": [
                {"symbol": "aapl", "price": "1"},
                {"symbol": "AAPL", "price": "2"},
            ]
        }
    }
    with pytest.raises(ConfigError):
        ConfigLoader().resolve(file_cfg)
