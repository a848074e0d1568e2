from __future__ import annotations

from pathlib import Path

import pytest

from sentry_metrics.common.errors import ConfigError
from sentry_metrics.pipeline.config import ReportConfig, SentryConfig
from sentry_metrics.reliability.units import DurationUnit


def test_defaults() -> None:
    cfg = ReportConfig()

    assert cfg.sentry.token_env_var == "SENTRY_TOKEN"
    assert cfg.sentry.timeout_s is None
    assert cfg.metrics.duration_unit is DurationUnit.SECONDS
    assert cfg.metrics.fetch_events is True
    assert cfg.output.path == "result.xlsx"


def test_load_toml(tmp_path: Path) -> None:
    path = tmp_path / "cfg.toml"
    path.write_text('[metrics]\nduration_unit = "minutes"\nfetch_events = false\n[output]\npath = "out.xlsx"\n')

    cfg = ReportConfig.load(path)

    assert cfg.metrics.duration_unit is DurationUnit.MINUTES
    assert cfg.metrics.fetch_events is False
    assert cfg.output.resolve() == Path("out.xlsx")


def test_example_config_is_valid() -> None:
    example = Path(__file__).resolve().parents[1] / "report_config.example.toml"

    assert ReportConfig.load(example) == ReportConfig()


def test_invalid_values_raise_config_error(tmp_path: Path) -> None:
    path = tmp_path / "cfg.toml"
    path.write_text('[metrics]\nduration_unit = "hours"\n')

    with pytest.raises(ConfigError):
        ReportConfig.load(path)


def test_broken_toml_raises_config_error(tmp_path: Path) -> None:
    path = tmp_path / "cfg.toml"
    path.write_text("[metrics\n")

    with pytest.raises(ConfigError):
        ReportConfig.load(path)


def test_resolve_token() -> None:
    cfg = SentryConfig()

    assert cfg.resolve_token({"SENTRY_TOKEN": "abc"}) == "abc"
    with pytest.raises(ConfigError, match="SENTRY_TOKEN"):
        cfg.resolve_token({})
    with pytest.raises(ConfigError):
        cfg.resolve_token({"SENTRY_TOKEN": "  "})


@pytest.mark.parametrize("title", ["", "a/b", "x" * 32, "sheet[1]"])
def test_invalid_sheet_title_raises_config_error(title: str) -> None:
    with pytest.raises(ConfigError):
        ReportConfig.from_mapping({"output": {"sheet_title": title}})
