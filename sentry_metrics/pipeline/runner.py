from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from rich.pretty import pretty_repr

from sentry_metrics.adapters.sentry.sentry_client import SentryClient
from sentry_metrics.adapters.sentry.sentry_ingest import fetch_events, fetch_issues, fetch_projects
from sentry_metrics.domain.models import Event, Issue, Project
from sentry_metrics.pipeline.config import ReportConfig
from sentry_metrics.pipeline.progress_ui import Ui, track
from sentry_metrics.reliability.mtbf import MtbfResult, compute_mtbf, sort_events
from sentry_metrics.reliability.mttr import MttrResult, compute_mttr
from sentry_metrics.report.xlsx_report import write_mttr_report

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunSummary:
    projects: int
    issues: int
    events: int
    mttr: MttrResult
    mtbf: MtbfResult | None
    report_path: Path


@dataclass
class ReliabilityRunner:
    config: ReportConfig
    client: SentryClient
    ui: Ui | None = None

    @classmethod
    def from_config(cls, config: ReportConfig, ui: Ui | None = None) -> "ReliabilityRunner":
        sentry_cfg = config.sentry
        client = SentryClient(
            token=sentry_cfg.resolve_token(),
            api_base_url=sentry_cfg.api_base_url,
            timeout_s=sentry_cfg.timeout_s,
        )
        return cls(config=config, client=client, ui=ui)

    def fetch_projects(self) -> list[Project]:
        return fetch_projects(self.client)

    def fetch_issues(self, projects: list[Project]) -> list[Issue]:
        issues: list[Issue] = []
        for project in track(self.ui, projects, "Fetching issues"):
            issues.extend(fetch_issues(self.client, project))
        return issues

    def fetch_events(self, issues: list[Issue]) -> list[Event]:
        events: list[Event] = []
        for issue in track(self.ui, issues, "Fetching events"):
            events.extend(fetch_events(self.client, issue))
        return events

    def run(self) -> RunSummary:
        metrics_cfg = self.config.metrics
        unit = metrics_cfg.duration_unit

        projects = self.fetch_projects()
        issues = self.fetch_issues(projects)
        events: list[Event] = []
        if metrics_cfg.fetch_events:
            events = sort_events(self.fetch_events(issues))

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Dataset issues:\n%s", pretty_repr(issues))
            logger.debug("Dataset events:\n%s", pretty_repr(events))

        mttr = compute_mttr(issues, unit)
        logger.info("MTTR: %.0f %s", mttr.mttr, unit.value)

        mtbf: MtbfResult | None = None
        if metrics_cfg.fetch_events:
            mtbf = compute_mtbf(events, unit)
            logger.info("MTBF: %.0f %s", mtbf.mtbf, unit.value)

        out_cfg = self.config.output
        report_path = write_mttr_report(
            mttr.activities,
            out_cfg.resolve(),
            sheet_title=out_cfg.sheet_title,
        )
        return RunSummary(
            projects=len(projects),
            issues=len(issues),
            events=len(events),
            mttr=mttr,
            mtbf=mtbf,
            report_path=report_path,
        )
