from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from pos_terminal.errors import InvalidArgumentError

LOG_FORMATS = ("console", "json")


def parse_log_level(value: str) -> int:
    level = logging.getLevelName(value.strip().upper())
    if not isinstance(level, int):
        raise InvalidArgumentError(f"Unknown log level: {value!r}.")
    return level


def parse_log_format(value: str) -> str:
    fmt = value.strip().lower()
    if fmt not in LOG_FORMATS:
        raise InvalidArgumentError(f"Log format must be one of {', '.join(LOG_FORMATS)}, got {value!r}.")
    return fmt


@dataclass(slots=True)
class Settings:
    """Environment defaults. Values are checked only once command-line flags have been applied."""

    log_level: str = "WARNING"
    log_format: str = "console"
    catalog_path: str | None = None
    currency_symbol: str = "$"

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            log_level=os.getenv("POS_LOG_LEVEL", "WARNING"),
            log_format=os.getenv("POS_LOG_FORMAT", "console").strip().lower(),
            catalog_path=os.getenv("POS_CATALOG") or None,
            currency_symbol=os.getenv("POS_CURRENCY_SYMBOL", "$"),
        )
