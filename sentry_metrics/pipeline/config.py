from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError, field_validator

from sentry_metrics.common.errors import ConfigError
from sentry_metrics.reliability.units import DurationUnit

_INVALID_SHEET_CHARS = "[]:*?/\\"


def _expand(path: str) -> Path:
    return Path(os.path.expanduser(path))


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_bytes().decode("utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


class SentryConfig(BaseModel):
    api_base_url: str = Field(default="https://sentry.io/api/")
    token_env_var: str = Field(default="SENTRY_TOKEN")
    timeout_s: float | None = Field(
        default=None,
        description="Per-request timeout. Unset waits as long as the transport does.",
    )

    def resolve_token(self, environ: Mapping[str, str] | None = None) -> str:
        env = os.environ if environ is None else environ
        token = (env.get(self.token_env_var) or "").strip()
        if not token:
            raise ConfigError(f"Missing Sentry token in env var: {self.token_env_var}")
        return token


class MetricsConfig(BaseModel):
    duration_unit: DurationUnit = Field(default=DurationUnit.SECONDS)
    fetch_events: bool = Field(
        default=True,
        description="Fetch events per issue and compute MTBF. False computes MTTR only.",
    )


class OutputConfig(BaseModel):
    path: str = Field(default="result.xlsx")
    sheet_title: str = Field(default="MTTR")

    @field_validator("sheet_title")
    @classmethod
    def check_sheet_title(cls, value: str) -> str:
        # Excel sheet names: 1 to 31 characters, no _INVALID_SHEET_CHARS.
        if not value or len(value) > 31:
            raise ValueError("sheet_title must be 1 to 31 characters long")
        bad = sorted(set(value) & set(_INVALID_SHEET_CHARS))
        if bad:
            raise ValueError(f"sheet_title contains invalid characters: {''.join(bad)}")
        return value

    def resolve(self) -> Path:
        return _expand(self.path)


class ReportConfig(BaseModel):
    sentry: SentryConfig = Field(default_factory=SentryConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "ReportConfig":
        try:
            return cls.model_validate(dict(raw))
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc

    @classmethod
    def load(cls, path: Path) -> "ReportConfig":
        return cls.from_mapping(_read_toml(path))
