"""Persisted user-state schema.

The stored document is validated against these models before any domain object
is built, so a malformed file surfaces as a ValidationError instead of a
half-restored user.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from tradesim.types.types import MONEY_MAX_DIGITS, Side

SCHEMA_VERSION = 1


class TransactionState(BaseModel):
    model_config = ConfigDict(extra="forbid")
    symbol: str = Field(min_length=1)
    quantity: int = Field(gt=0, strict=True)
    price: Decimal = Field(ge=0, max_digits=MONEY_MAX_DIGITS, decimal_places=2)
    side: Side
    ts: datetime


class UserState(BaseModel):
    model_config = ConfigDict(extra="forbid")
    schema_version: Literal[1] = SCHEMA_VERSION
    name: str = Field(min_length=1)
    balance: Decimal = Field(ge=0, max_digits=MONEY_MAX_DIGITS, decimal_places=2)
    holdings: dict[str, Annotated[int, Field(ge=0, strict=True)]] = Field(default_factory=dict)
    transactions: list[TransactionState] = Field(default_factory=list)
