from __future__ import annotations

import logging
import os
from typing import Final, Mapping

from sentry_metrics.common.errors import ConfigError


DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_LOG_LEVEL: Final[str] = "info"
LOG_LEVEL_ENV_VAR: Final[str] = "LOG_LEVEL"

_LEVELS: Final[dict[str, int]] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def parse_log_level(name: str) -> int:
    """Map a level name such as 'debug' or 'WARNING' to a logging level."""
    level = _LEVELS.get(name.strip().lower())
    if level is None:
        raise ConfigError(
            f"Invalid log level {name!r}; expected one of: {', '.join(sorted(_LEVELS))}"
        )
    return level


def level_from_env(environ: Mapping[str, str] | None = None) -> int:
    env = os.environ if environ is None else environ
    raw = env.get(LOG_LEVEL_ENV_VAR) or DEFAULT_LOG_LEVEL
    return parse_log_level(raw)


def configure_logging(level: int = logging.INFO) -> None:
    """Configure standard library logging for the CLI.

    Logs go to stderr so that stdout stays reserved for the run summary.
    """
    logging.basicConfig(
        level=level,
        format=DEFAULT_LOG_FORMAT,
        handlers=[logging.StreamHandler()],
        force=True,
    )
