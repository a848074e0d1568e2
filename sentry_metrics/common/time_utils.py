from __future__ import annotations

from datetime import datetime, timezone


def parse_iso8601(dt_str: str) -> datetime:
    # Sentry uses e.g. 2017-05-02T14:26:52Z or 2017-05-02T14:26:52.123456Z
    if dt_str.endswith("Z"):
        dt_str = dt_str[:-1] + "+00:00"
    parsed = datetime.fromisoformat(dt_str)
    if parsed.tzinfo is None:
        raise ValueError(f"Timestamp without UTC offset: {dt_str!r}")
    return parsed.astimezone(timezone.utc)
