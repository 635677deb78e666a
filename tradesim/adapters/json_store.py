"""JSON file adapter for the UserStore port.

Writes the whole user state as one JSON document (orjson). Decimals are kept as
strings so balances and prices survive the round trip exactly.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

import orjson
from pydantic import ValidationError

from tradesim.adapters.schema import SCHEMA_VERSION, UserState
from tradesim.core.portfolio import Portfolio
from tradesim.core.user import User
from tradesim.errors.errors import PersistenceError, StateCorruptError
from tradesim.types.types import Transaction
from tradesim.utils.utility import make_serializable, validation_error_parser

logger = logging.getLogger(__name__)


def user_to_dict(user: User) -> dict[str, Any]:
    portfolio = user.portfolio
    return {
        "schema_version": SCHEMA_VERSION,
        "name": user.name,
        "balance": make_serializable(user.balance),
        "holdings": dict(portfolio.holdings_view()),
        "transactions": [make_serializable(tx) for tx in portfolio.transactions],
    }


def user_from_dict(data: Any) -> User:
    """Validate a decoded document and rebuild the user. Raises ValidationError/ValueError."""
    state = UserState.model_validate(data)
    transactions = [
        Transaction(symbol=t.symbol, quantity=t.quantity, price=t.price, side=t.side, ts=t.ts)
        for t in state.transactions
    ]
    portfolio = Portfolio.restore(state.holdings, transactions)
    return User(state.name, state.balance, portfolio)


class JsonUserStore:
    """Persist user state to a single JSON file."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    def save(self, user: User) -> None:
        payload = orjson.dumps(user_to_dict(user), option=orjson.OPT_INDENT_2)
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(payload)
            os.replace(tmp, self._path)
        except OSError as exc:
            tmp.unlink(missing_ok=True)
            raise PersistenceError(f"Error saving state: {exc}", path=self._path) from exc
        logger.debug(f"Saved state for {user.name} to {self._path}")

    def load(self) -> Optional[User]:
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise PersistenceError(f"Error reading state: {exc}", path=self._path) from exc

        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as exc:
            raise StateCorruptError(f"State is not valid JSON: {exc}", path=self._path) from exc

        try:
            return user_from_dict(data)
        except ValidationError as exc:
            errors = validation_error_parser(exc, component="state")
            paths = ", ".join(e["path"] for e in errors)
            raise StateCorruptError(
                f"State failed schema validation at: {paths}", path=self._path
            ) from exc
        except ValueError as exc:
            raise StateCorruptError(f"State violates invariants: {exc}", path=self._path) from exc
        except ArithmeticError as exc:
            raise StateCorruptError(
                f"State holds an unusable amount: {exc!r}", path=self._path
            ) from exc

    def delete(self) -> bool:
        try:
            self._path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise PersistenceError(f"Error deleting state: {exc}", path=self._path) from exc
        return True
