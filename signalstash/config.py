"""Service settings read from environment variables."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

BIND_ADDRESS_ENV_VAR = "BIND_ADDRESS"
DEFAULT_BIND_ADDRESS = "0.0.0.0:20120"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_REDIS_URL = "redis://localhost:6379"
DEFAULT_SENSOR_DATUM_PREFIX = "signalstashrs"
ENV_SENSOR_DATUM_PREFIX = "SENSOR_DATUM_PREFIX"
LOG_LEVEL_ENV_VAR = "LOG_LEVEL"
REDIS_URL_ENV_VAR = "REDIS_URL"

TRACE = 5
"""Numeric logging level used for trace output, below DEBUG."""

_NAMED_LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_NUMBERED_LEVELS = {
    1: logging.ERROR,
    2: logging.WARNING,
    3: logging.INFO,
    4: logging.DEBUG,
    5: TRACE,
}


def parse_log_level(value: str) -> int:
    """Parse a level name or number (1 = error ... 5 = trace) into a logging level.

    Names are matched case-insensitively. Raises ValueError for anything else.
    """
    if value.isascii() and value.isdigit():
        level = _NUMBERED_LEVELS.get(int(value))
        if level is None:
            raise ValueError(f"invalid log level: {value!r}")
        return level
    try:
        return _NAMED_LEVELS[value.lower()]
    except KeyError:
        raise ValueError(f"invalid log level: {value!r}") from None


@dataclass(frozen=True)
class Settings:
    """Runtime configuration of the service."""

    bind_address: str
    log_level: int
    redis_url: str
    sensor_datum_prefix: str

    @classmethod
    def from_env_vars(cls, env: Mapping[str, str]) -> Settings:
        """Build settings from a mapping of environment variables, using defaults for missing keys."""
        return cls(
            bind_address=env.get(BIND_ADDRESS_ENV_VAR, DEFAULT_BIND_ADDRESS),
            log_level=parse_log_level(env.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL)),
            redis_url=env.get(REDIS_URL_ENV_VAR, DEFAULT_REDIS_URL),
            sensor_datum_prefix=env.get(
                ENV_SENSOR_DATUM_PREFIX, DEFAULT_SENSOR_DATUM_PREFIX
            ),
        )