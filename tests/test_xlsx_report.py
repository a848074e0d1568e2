from __future__ import annotations

from pathlib import Path

import pytest
from openpyxl import load_workbook

from sentry_metrics.common.errors import ReportWriteError
from sentry_metrics.domain.models import ComputedActivity, Issue, Project
from sentry_metrics.report.xlsx_report import REPORT_HEADER, write_mttr_report


def _computed(id_: str, duration: float) -> ComputedActivity:
    issue = Issue(id=id_, status="resolved", project=Project(name="Arya", slug="arya"))
    return ComputedActivity(issue=issue, duration=duration)


def test_report_has_header_and_rows_in_order(tmp_path: Path) -> None:
    out = tmp_path / "result.xlsx"

    write_mttr_report([_computed("7", 120.0), _computed("3", 2.5)], out)

    ws = load_workbook(out).active
    rows = [tuple(r) for r in ws.iter_rows(values_only=True)]
    assert ws.title == "MTTR"
    assert rows == [
        REPORT_HEADER,
        ("7", "resolved", "Arya", "120.000000"),
        ("3", "resolved", "Arya", "2.500000"),
    ]


def test_report_overwrites_existing_file(tmp_path: Path) -> None:
    out = tmp_path / "result.xlsx"
    out.write_bytes(b"stale")

    write_mttr_report([_computed("1", 1.0)], out)

    assert load_workbook(out).active.max_row == 2


def test_unwritable_path_raises(tmp_path: Path) -> None:
    with pytest.raises(ReportWriteError):
        write_mttr_report([_computed("1", 1.0)], tmp_path / "missing" / "result.xlsx")


def test_control_character_in_project_name_raises(tmp_path: Path) -> None:
    issue = Issue(id="1", status="resolved", project=Project(name="Arya\x07", slug="arya"))

    with pytest.raises(ReportWriteError):
        write_mttr_report([ComputedActivity(issue=issue, duration=1.0)], tmp_path / "r.xlsx")
    assert not (tmp_path / "r.xlsx").exists()


def test_invalid_sheet_title_raises(tmp_path: Path) -> None:
    with pytest.raises(ReportWriteError):
        write_mttr_report([_computed("1", 1.0)], tmp_path / "r.xlsx", sheet_title="a/b")
