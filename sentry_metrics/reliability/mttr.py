"""Mean Time To Repair over issue activity histories.

Sentry delivers an issue's activities newest first, so the scan walks the
list from the end. A ``first_seen`` only pairs with the record right after
it in time; the record it is compared against is consumed either way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, Sequence

from sentry_metrics.common.errors import NoRepairsError
from sentry_metrics.domain.models import FIRST_SEEN, SET_RESOLVED, Activity, ComputedActivity, Issue
from sentry_metrics.reliability.units import DurationUnit, to_unit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MttrResult:
    mttr: float
    unit: DurationUnit
    pairings: int
    activities: tuple[ComputedActivity, ...]


def pair_repairs(activities: Sequence[Activity]) -> list[timedelta]:
    logger.debug("Looking at %d activities", len(activities))
    repairs: list[timedelta] = []
    i = len(activities) - 1
    while i >= 0:
        current = activities[i]
        logger.debug("Activity #%s is '%s'", current.id, current.type)
        if current.type == FIRST_SEEN:
            i -= 1
            if i < 0:
                logger.debug("Activity #%s has no successor, dropped", current.id)
                break
            following = activities[i]
            if following.type == SET_RESOLVED:
                duration = following.timestamp - current.timestamp
                repairs.append(duration)
                logger.debug(
                    "Activity #%s resolved in sequence after %.0f seconds",
                    following.id,
                    duration.total_seconds(),
                )
        i -= 1
    return repairs


def compute_mttr(issues: Iterable[Issue], unit: DurationUnit = DurationUnit.SECONDS) -> MttrResult:
    """Pooled mean of every first_seen -> set_resolved pairing.

    Each pairing weighs the same regardless of which issue it came from.
    Issues with status ``unresolved`` are ignored.
    """
    total = 0.0
    pairings = 0
    computed: list[ComputedActivity] = []
    seen = 0

    for issue in issues:
        seen += 1
        logger.debug("Looking at issue #%s", issue.id)
        if issue.is_unresolved:
            logger.debug("Issue #%s dropped, unresolved", issue.id)
            continue

        repairs = pair_repairs(issue.activities)
        if not repairs:
            logger.debug("Issue #%s has no repair pairing", issue.id)
            continue

        issue_total = sum(to_unit(r, unit) for r in repairs)
        computed.append(ComputedActivity(issue=issue, duration=issue_total))
        total += issue_total
        pairings += len(repairs)

    logger.debug("Found %d issues, %d repair pairings", seen, pairings)
    if pairings == 0:
        raise NoRepairsError(
            f"MTTR is undefined: none of the {seen} issues has a first_seen -> set_resolved pairing"
        )
    return MttrResult(
        mttr=total / pairings,
        unit=unit,
        pairings=pairings,
        activities=tuple(computed),
    )
