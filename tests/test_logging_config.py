from __future__ import annotations

import logging

import pytest

from sentry_metrics.common.errors import ConfigError
from sentry_metrics.common.logging_config import level_from_env, parse_log_level


def test_level_defaults_to_info() -> None:
    assert level_from_env({}) == logging.INFO
    assert level_from_env({"LOG_LEVEL": ""}) == logging.INFO


def test_level_names_are_case_insensitive() -> None:
    assert level_from_env({"LOG_LEVEL": "DEBUG"}) == logging.DEBUG
    assert parse_log_level("warn") == logging.WARNING


def test_invalid_level_is_fatal() -> None:
    with pytest.raises(ConfigError):
        level_from_env({"LOG_LEVEL": "chatty"})
