from pathlib import Path

import orjson
import pytest

from tradesim.cli.ts import build_parser, main


def _argv(tmp_path: Path, *command: str) -> list[str]:
    return ["--state", str(tmp_path / "portfolio.json"), "--seed", "5", "--rounds", "0", *command]


def test_build_parser():
    p = build_parser()
    assert p.prog == "tradesim"
    args = p.parse_args(
        ["--config", "sim.toml", "--set", "KEY=VALUE", "--rounds", "3", "buy", "aapl", "10"]
    )
    assert args.command == "buy"
    assert args.symbol == "AAPL"
    assert args.quantity == 10
    assert args.rounds == 3
    assert args.config == Path("sim.toml")
    assert args.config_overrides == ["KEY=VALUE"]


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_market_lists_prices(tmp_path, capsys):
    assert main(_argv(tmp_path, "market")) == 0
    out = capsys.readouterr().out
    assert "AAPL - Apple Inc. : $150.00" in out
    assert "Balance: $10000.00" in out
    # read-only commands do not write state
    assert not (tmp_path / "portfolio.json").exists()


def test_buy_sell_value_history_flow(tmp_path, capsys):
    assert main(_argv(tmp_path, "buy", "AAPL", "10")) == 0
    out = capsys.readouterr().out
    assert "BUY | AAPL | Qty: 10 | Price: $150.00" in out
    assert "Balance: $8500.00" in out

    assert main(_argv(tmp_path, "sell", "AAPL", "5")) == 0
    assert "Balance: $9250.00" in capsys.readouterr().out

    assert main(_argv(tmp_path, "sell", "AAPL", "10")) == 1
    assert "Not enough shares" in capsys.readouterr().err

    assert main(_argv(tmp_path, "value")) == 0
    out = capsys.readouterr().out
    assert "Balance: $9250.00" in out
    assert "AAPL: 5" in out
    assert "Portfolio Value: $750.00" in out

    assert main(_argv(tmp_path, "history")) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 2
    assert "SELL" in lines[1]


def test_unknown_symbol_exits_with_error(tmp_path, capsys):
    assert main(_argv(tmp_path, "buy", "MSFT", "1")) == 1
    assert "Unknown symbol 'MSFT'" in capsys.readouterr().err


def test_invalid_quantity_exits_with_error(tmp_path, capsys):
    assert main(_argv(tmp_path, "buy", "AAPL", "0")) == 1
    assert "positive integer" in capsys.readouterr().err


def test_corrupt_state_starts_fresh(tmp_path, capsys):
    (tmp_path / "portfolio.json").write_bytes(b"{not json")
    assert main(_argv(tmp_path, "value")) == 0
    assert "Balance: $10000.00" in capsys.readouterr().out


def test_reset_deletes_state(tmp_path, capsys):
    main(_argv(tmp_path, "buy", "TSLA", "1"))
    capsys.readouterr()
    assert main(_argv(tmp_path, "reset")) == 0
    assert "State deleted." in capsys.readouterr().out
    assert main(_argv(tmp_path, "reset")) == 0
    assert "No saved state." in capsys.readouterr().out


def test_events_log_is_written_when_configured(tmp_path):
    events = tmp_path / "events.jsonl"
    argv = ["--set", f"storage.events_path={events}", *_argv(tmp_path, "buy", "AAPL", "1")]
    assert main(argv) == 0
    records = [orjson.loads(line) for line in events.read_text().splitlines()]
    assert [r["event"] for r in records] == ["session_opened", "trade_executed", "session_closed"]
    assert records[0]["seed"] == 5


def test_bad_config_override_exits_2(tmp_path, capsys):
    assert main(["--set", "bogus=1", *_argv(tmp_path, "market")]) == 2
    assert "Invalid configuration" in capsys.readouterr().err


def test_negative_rounds_rejected(tmp_path, capsys):
    argv = ["--state", str(tmp_path / "p.json"), "--rounds", "-1", "market"]
    assert main(argv) == 2


def test_oversized_saved_balance_starts_fresh(tmp_path, capsys):
    main(_argv(tmp_path, "buy", "AAPL", "1"))
    path = tmp_path / "portfolio.json"
    doc = orjson.loads(path.read_bytes())
    doc["balance"] = "1e30"
    path.write_bytes(orjson.dumps(doc))
    capsys.readouterr()

    assert main(_argv(tmp_path, "value")) == 0
    assert "Balance: $10000.00" in capsys.readouterr().out


def test_oversized_starting_cash_exits_2(tmp_path, capsys):
    assert main(["--set", "account.starting_cash=1e30", *_argv(tmp_path, "value")]) == 2
    assert "Invalid configuration" in capsys.readouterr().err


def test_lower_case_configured_symbol_is_tradable(tmp_path, capsys):
    config = tmp_path / "sim.toml"
    config.write_text('[[market.stocks]]\nsymbol = "msft"\nname = "Microsoft"\nprice = "300"\n')
    assert main(["--config", str(config), *_argv(tmp_path, "buy", "msft", "2")]) == 0
    assert "MSFT | Qty: 2 | Price: $300.00" in capsys.readouterr().out
