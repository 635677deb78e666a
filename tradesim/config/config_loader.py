"""
Purpose:
    - Loads a TOML config file
    - Applies dotted KEY=VALUE overrides on top of it
    - Validates the merged result into a Config

Precedence: defaults (Config field defaults) < file < overrides.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from tradesim.config.configs import Config
from tradesim.errors.errors import ConfigError
from tradesim.utils.utility import deep_merge, insert_path, validation_error_parser

logger = logging.getLogger(__name__)


class ConfigLoader:
    """
    Config-loader; loading toml file.
    """

    def __init__(self, base_dir: str | Path = ".") -> None:
        self._base_dir = Path(base_dir)

    def load(self, file_name: str | Path) -> dict[str, Any]:
        path = Path(file_name)
        if not path.is_absolute():
            path = self._base_dir / path

        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with path.open("rb") as f:
            try:
                return tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    def resolve(
        self,
        file_cfg: Optional[Mapping[str, Any]] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> Config:
        """
        Merge the layers in order and validate once at the end.
        """
        merged: dict[str, Any] = {}
        if file_cfg:
            merged = deep_merge(merged, file_cfg)
        if overrides:
            merged = deep_merge(merged, overrides)

        try:
            cfg = Config.model_validate(merged)
        except ValidationError as exc:
            errors = validation_error_parser(exc, component="config")
            raise ConfigError(f"Invalid configuration ({len(errors)} errors)", errors) from exc

        logger.debug(f"Config resolved: seed={cfg.seed} stocks={len(cfg.market.stocks)}")
        return cfg

    def load_config(
        self, file_name: str | Path | None = None, overrides: Optional[list[str]] = None
    ) -> Config:
        file_cfg = self.load(file_name) if file_name else {}
        return self.resolve(file_cfg, parse_overrides(overrides or []))


def parse_overrides(pairs: list[str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}

    for item in pairs:
        key, sep, value = item.partition("=")
        if sep == "":
            raise ConfigError(f"--set requires KEY=VALUE format (got {item!r})")
        try:
            insert_path(overrides, key, value)  # use helper to expand dotted keys
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
    return overrides
