from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from dotenv import find_dotenv, load_dotenv

from sentry_metrics.common.errors import ReliabilityError
from sentry_metrics.common.logging_config import configure_logging, level_from_env
from sentry_metrics.pipeline.config import ReportConfig
from sentry_metrics.pipeline.progress_ui import progress_ui
from sentry_metrics.pipeline.runner import ReliabilityRunner, RunSummary
from sentry_metrics.reliability.units import DurationUnit

app = typer.Typer(add_completion=False)


def _load_config(
    config: Optional[Path],
    unit: Optional[DurationUnit],
    output: Optional[Path],
    skip_events: bool,
) -> ReportConfig:
    cfg = ReportConfig.load(config.expanduser()) if config is not None else ReportConfig()
    if unit is not None:
        cfg.metrics.duration_unit = unit
    if output is not None:
        cfg.output.path = str(output)
    if skip_events:
        cfg.metrics.fetch_events = False
    return cfg


def _echo_summary(summary: RunSummary) -> None:
    unit = summary.mttr.unit.value
    typer.echo(
        f"Fetched {summary.projects} projects, {summary.issues} issues, {summary.events} events"
    )
    typer.echo(f"MTTR: {summary.mttr.mttr:.0f} {unit} over {summary.mttr.pairings} repairs")
    if summary.mtbf is not None:
        typer.echo(f"MTBF: {summary.mtbf.mtbf:.0f} {unit} over {len(summary.mtbf.gaps)} gaps")
    typer.echo(f"Wrote {summary.report_path}")


@app.command()
def run(
    config: Optional[Path] = typer.Option(None, help="Path to a report config TOML"),
    unit: Optional[DurationUnit] = typer.Option(None, help="Duration unit for MTTR/MTBF"),
    output: Optional[Path] = typer.Option(None, help="Where to write the .xlsx report"),
    skip_events: bool = typer.Option(
        False, help="Compute MTTR from issue activities only; skip events and MTBF"
    ),
    progress: bool = typer.Option(True, help="Show fetch progress bars"),
) -> None:
    """Fetch Sentry issues and events, compute MTTR/MTBF, and write the report."""
    load_dotenv(find_dotenv(usecwd=True))
    try:
        configure_logging(level_from_env())
        cfg = _load_config(config, unit, output, skip_events)
        if progress:
            with progress_ui() as ui:
                summary = ReliabilityRunner.from_config(cfg, ui=ui).run()
        else:
            summary = ReliabilityRunner.from_config(cfg).run()
    except ReliabilityError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    _echo_summary(summary)


@app.command()
def init_config(
    path: str = typer.Argument(
        "report_config.toml",
        help="Where to write the report configuration TOML",
    ),
) -> None:
    """Write an example report_config.toml."""
    project_root = Path(__file__).resolve().parents[1]
    template = project_root / "report_config.example.toml"
    if not template.exists():
        raise RuntimeError(f"Missing template file: {template}")

    out = Path(path).expanduser()
    if out.exists():
        raise typer.BadParameter(f"Refusing to overwrite existing file: {out}")

    out.write_text(template.read_text())
    typer.echo(f"Wrote {out} (edit it, then run: sentry-metrics run --config {out})")


if __name__ == "__main__":
    app()
