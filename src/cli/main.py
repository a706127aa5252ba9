"""CLI entry point (Typer)."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from adapters.http_client import ResilientClient
from adapters.json_exporter import export_suite_json
from adapters.observers import FileTestObserver, MetricsTestObserver
from adapters.randomuser_client import RandomUserClient
from adapters.suites import SUITES, build_suite
from cli import doctor
from cli.ui_components import ConsoleTestObserver, build_metrics_panel, print_banner
from core.config import ClientConfig, Environment, settings_for_environment
from core.domain.errors import ConfigError
from core.domain.models import TestSuite
from core.logger import configure_logging
from core.services.notifier import ObserverRegistry
from core.services.suite_runner import run_suite

app = typer.Typer(no_args_is_help=True, help="Random User API test harness.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


async def _execute(name: str, client: RandomUserClient, notifier: ObserverRegistry, threshold_ms: float) -> TestSuite:
    commands = build_suite(name, client, performance_threshold_ms=threshold_ms)
    return await run_suite(name, commands, notifier=notifier)


@app.command(name="run")
def run_command(
    suite: str = typer.Option("smoke", "--suite", "-s", help=f"Suite to run: {', '.join(SUITES)}."),
    env: Optional[Environment] = typer.Option(None, "--env", help="Environment preset."),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Override the API base URL."),
    report: Optional[Path] = typer.Option(None, "--report", help="Write the suite as JSON to this path."),
    save_report: bool = typer.Option(False, "--save-report", help="Write the suite as JSON under the report directory."),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Write the event log to this path."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show HTTP attempt logs."),
    no_banner: bool = typer.Option(False, "--no-banner", help="Skip the banner."),
) -> None:
    """Run a named suite against the API and exit 1 if any test failed."""

    overrides = {"base_url": base_url} if base_url else {}
    settings = settings_for_environment(env, **overrides)
    check = settings.validate_config()
    if not check.is_valid:
        for error in check.errors:
            _console.print(f"[red]Config error:[/red] {error}")
        raise typer.Exit(code=2)

    configure_logging(logging.INFO if verbose else logging.WARNING)
    if not no_banner:
        print_banner(_console)

    notifier = ObserverRegistry()
    metrics = MetricsTestObserver()
    events = FileTestObserver()
    notifier.subscribe(ConsoleTestObserver(_console))
    notifier.subscribe(metrics)
    notifier.subscribe(events)

    client = RandomUserClient(ResilientClient(ClientConfig.from_settings(settings)))
    try:
        result = asyncio.run(_execute(suite, client, notifier, settings.performance_threshold_ms))
    except ConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc

    _console.print(build_metrics_panel(metrics.get_metrics()))

    if report is None and save_report:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        report = settings.report_directory / f"{suite}_{stamp}.json"
    if report is not None:
        path = export_suite_json(suite=result, output_path=report)
        _console.print(f"[green]Report written to:[/green] {path}")
    if log_file is not None:
        path = events.write(log_file)
        _console.print(f"[green]Event log written to:[/green] {path}")

    if not result.ok:
        raise typer.Exit(code=1)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
