from __future__ import annotations

import logging
from pathlib import Path
from typing import Final, Sequence

from openpyxl import Workbook
from openpyxl.utils.exceptions import IllegalCharacterError

from sentry_metrics.common.errors import ReportWriteError
from sentry_metrics.domain.models import ComputedActivity

logger = logging.getLogger(__name__)


REPORT_HEADER: Final[tuple[str, ...]] = (
    "Issue Id",
    "Issue Status",
    "Project Name",
    "Time to Resolve",
)


def format_duration(duration: float) -> str:
    return f"{duration:.6f}"


def write_mttr_report(
    activities: Sequence[ComputedActivity],
    path: Path,
    sheet_title: str = "MTTR",
) -> Path:
    """Write one row per computed issue duration, replacing any existing file."""
    logger.info("Registered %d activities", len(activities))
    logger.info("Output file '%s'", path)

    wb = Workbook()
    ws = wb.active
    try:
        ws.title = sheet_title
        ws.append(list(REPORT_HEADER))
        for activity in activities:
            ws.append(
                [
                    activity.issue.id,
                    activity.issue.status,
                    activity.issue.project.name,
                    format_duration(activity.duration),
                ]
            )
    except (ValueError, IllegalCharacterError) as exc:
        raise ReportWriteError(f"Cannot build report sheet {sheet_title!r}: {exc}") from exc

    try:
        wb.save(path)
    except OSError as exc:
        raise ReportWriteError(f"Could not write report to {path}: {exc}") from exc
    return path
