from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from sentry_metrics.common.errors import InsufficientEventsError
from sentry_metrics.domain.models import ComputedEvent, Event
from sentry_metrics.reliability.units import DurationUnit, to_unit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MtbfResult:
    mtbf: float
    unit: DurationUnit
    gaps: tuple[ComputedEvent, ...]


def sort_events(events: Iterable[Event]) -> list[Event]:
    # sorted() is stable: equal timestamps keep fetch order.
    return sorted(events, key=lambda e: e.timestamp)


def compute_mtbf(events: Iterable[Event], unit: DurationUnit = DurationUnit.SECONDS) -> MtbfResult:
    """Mean gap between consecutive events in timestamp order."""
    ordered = sort_events(events)
    if len(ordered) < 2:
        raise InsufficientEventsError(
            f"MTBF is undefined: need at least 2 events, got {len(ordered)}"
        )

    logger.debug("Event #%s is new, not computed", ordered[0].id)
    gaps: list[ComputedEvent] = []
    for previous, current in zip(ordered, ordered[1:]):
        duration = to_unit(current.timestamp - previous.timestamp, unit)
        gaps.append(ComputedEvent(event=current, duration=duration))
        logger.debug("Event #%s took %.0f %s to appear", current.id, duration, unit.value)

    return MtbfResult(
        mtbf=sum(g.duration for g in gaps) / len(gaps),
        unit=unit,
        gaps=tuple(gaps),
    )
