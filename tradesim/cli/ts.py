"""tradesim CLI entrypoint.

Subcommands: market, buy, sell, value, history, reset.

Each invocation is one session: restore the saved user, advance the market
--rounds times, run the command, and save again if the command traded.
"""

from __future__ import annotations

import argparse
import logging
import sys
import uuid
from pathlib import Path
from typing import Optional, TextIO

from tradesim.adapters.json_store import JsonUserStore
from tradesim.adapters.telemetry.jsonl import JsonlTelemetry
from tradesim.config.config_loader import ConfigLoader
from tradesim.config.configs import Config
from tradesim.core.session import TradingSession
from tradesim.errors.errors import ConfigError, PersistenceError, TradingError
from tradesim.ports.telemetry import Telemetry

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """
    Return the top-level CLI argument parser.
    """
    p = argparse.ArgumentParser(prog="tradesim")
    p.add_argument("--config", type=Path, required=False, help="Path to a TOML config file")
    p.add_argument(
        "--set",
        dest="config_overrides",
        action="append",  # builds a Python list (config_overrides) containing each key=value
        default=[],
        metavar="KEY=VALUE",
        help="Override a config entry (may be repeated)",
    )
    p.add_argument("--state", type=Path, default=None, help="Saved state file")
    p.add_argument("--seed", type=int, default=None, help="Price random-walk seed")
    p.add_argument("--rounds", type=int, default=1, help="Price rounds before the command")
    p.add_argument(
        "--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"]
    )

    sub = p.add_subparsers(dest="command", required=True)
    sub.add_parser("market", help="Show current prices")
    for name in ("buy", "sell"):
        sp = sub.add_parser(name, help=f"{name.capitalize()} shares at the current price")
        sp.add_argument("symbol", type=str.upper)
        sp.add_argument("quantity", type=int)
    sub.add_parser("value", help="Show balance, holdings and portfolio value")
    sub.add_parser("history", help="Show the transaction log")
    sub.add_parser("reset", help="Delete the saved state")
    return p


def resolve_config(args: argparse.Namespace) -> Config:
    overrides = list(args.config_overrides)
    if args.seed is not None:
        overrides.append(f"seed={args.seed}")
    if args.state is not None:
        overrides.append(f"storage.state_path={args.state}")
    if args.log_level is not None:
        overrides.append(f"log_level={args.log_level}")
    return ConfigLoader().load_config(args.config, overrides)


def run(
    args: argparse.Namespace,
    cfg: Config,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """Execute one command against a fresh session."""
    out = out or sys.stdout
    err = err or sys.stderr
    store = JsonUserStore(cfg.storage.state_path)

    if args.command == "reset":
        try:
            removed = store.delete()
        except PersistenceError as exc:
            print(f"Error: {exc}", file=err)
            return EXIT_REJECTED
        print("State deleted." if removed else "No saved state.", file=out)
        return EXIT_OK

    if args.rounds < 0:
        print("Error: --rounds must be >= 0", file=err)
        return EXIT_USAGE

    session_id = str(uuid.uuid4())
    telemetry: Optional[Telemetry] = None
    if cfg.storage.events_path is not None:
        telemetry = JsonlTelemetry(
            session_id=session_id, seed=cfg.seed, sink_path=cfg.storage.events_path
        )
    session = TradingSession(cfg, store, telemetry=telemetry, session_id=session_id)
    session.open()
    for _ in range(args.rounds):
        session.next_round()

    if args.command == "market":
        _print_market(session, out)
        return EXIT_OK

    if args.command in ("buy", "sell"):
        trade = session.buy if args.command == "buy" else session.sell
        try:
            tx = trade(args.symbol, args.quantity)
        except TradingError as exc:
            print(f"Error: {exc}", file=err)
            return EXIT_REJECTED
        print(tx, file=out)
        print(f"Balance: ${session.user.balance}", file=out)
        if not session.close():
            print("Warning: state could not be saved.", file=err)
        return EXIT_OK

    if args.command == "value":
        try:
            snap = session.snapshot()
        except TradingError as exc:
            print(f"Error: {exc}", file=err)
            return EXIT_REJECTED
        print(f"Balance: ${snap.cash}", file=out)
        for symbol, qty in sorted(snap.holdings.items()):
            print(f"{symbol}: {qty}", file=out)
        print(f"Portfolio Value: ${snap.market_value}", file=out)
        print(f"Equity: ${snap.equity}", file=out)
        return EXIT_OK

    if args.command == "history":
        for tx in session.transactions():
            print(tx, file=out)
        return EXIT_OK

    print(f"Unknown command '{args.command}'", file=err)
    return EXIT_USAGE


def _print_market(session: TradingSession, out: TextIO) -> None:
    print("--- Market Data ---", file=out)
    for q in session.listing():
        print(f"{q.symbol} - {q.name} : ${q.price}", file=out)
    print(f"Balance: ${session.user.balance}", file=out)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint wrapper compatible with setuptools scripts."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        cfg = resolve_config(args)
    except (ConfigError, FileNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    logging.basicConfig(
        level=getattr(logging, cfg.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return run(args, cfg)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
