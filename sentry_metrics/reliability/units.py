from __future__ import annotations

from datetime import timedelta
from enum import Enum


class DurationUnit(str, Enum):
    SECONDS = "seconds"
    MINUTES = "minutes"


_SECONDS_PER_UNIT = {
    DurationUnit.SECONDS: 1.0,
    DurationUnit.MINUTES: 60.0,
}


def to_unit(delta: timedelta, unit: DurationUnit) -> float:
    return delta.total_seconds() / _SECONDS_PER_UNIT[unit]
