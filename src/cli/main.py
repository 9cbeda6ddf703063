"""ya-status command line.

Commands:
- `status`: node, wallet and task report (tables or `--json`).
- `version`: daemon version parsed from its banner.
- `doctor`: environment diagnostics and setup.

Shell completion comes from Typer (`--install-completion`).
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from adapters.executables import ExecutableSet
from adapters.json_exporter import export_report_json, report_to_json
from cli import doctor
from cli.bootstrap import load_executables, load_settings
from cli.ui_components import (
    build_node_table,
    build_tasks_table,
    build_wallet_table,
    build_warnings_panel,
    print_banner,
)
from core.config import AppSettings
from core.errors import StatusToolError
from core.logging_setup import configure_logging
from core.services.status_pipeline import collect_status

app = typer.Typer(
    name="ya-status",
    no_args_is_help=True,
    help="Report the health of the locally running provider node.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
logger = logging.getLogger(__name__)


def _load() -> tuple[AppSettings, ExecutableSet]:
    settings = load_settings()
    return settings, load_executables(settings)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Override the log level (default from YA_STATUS_LOG_LEVEL or INFO).",
    ),
) -> None:
    configure_logging(log_level or "INFO")
    settings = load_settings()
    if not log_level:
        configure_logging(settings.log_level)


@app.command()
def status(
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Also write the JSON report to a file."),
) -> None:
    """Show provider status."""

    settings, executables = _load()
    report = asyncio.run(collect_status(settings=settings, executables=executables))

    if output is not None:
        export_report_json(report=report, output_path=output)

    if as_json:
        typer.echo(report_to_json(report))
    else:
        print_banner(_console)
        _console.print(build_node_table(report))
        if report.payments:
            _console.print(build_wallet_table(report))
        _console.print(build_tasks_table(report))
        if report.warnings:
            _console.print(build_warnings_panel(report.warnings))

    if not report.daemon_running:
        raise typer.Exit(code=1)


@app.command()
def version() -> None:
    """Show the daemon version parsed from `yagna --version`."""

    _, executables = _load()
    try:
        raw = asyncio.run(executables.yagna().version_raw())
    except StatusToolError as exc:
        logger.error("%s", exc)
        raise typer.Exit(code=1) from exc

    build = f" build #{raw.build}" if raw.is_ci_build else ""
    typer.echo(f"yagna {raw.version} ({raw.sha} {raw.date}{build})")


def run() -> None:
    app()
