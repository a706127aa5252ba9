"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en `run` y `doctor`.
"""

from __future__ import annotations

from typing import Any

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import TestResult, TestStatus, TestSuite


_STATUS_STYLE = {
    TestStatus.PASSED: ("PASS", "green"),
    TestStatus.FAILED: ("FAIL", "red"),
    TestStatus.SKIPPED: ("SKIP", "yellow"),
}


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("RANDOMUSER-HARNESS", style="bold cyan")
    subtitle = Text("API tests • Retries • Validation", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_suite_table(suite: TestSuite) -> Table:
    """Tabla Rich con un resultado por fila."""

    table = Table(title=f"Test Suite: {suite.suite_name}")
    table.add_column("Test", style="cyan", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Duration", style="magenta", justify="right")
    table.add_column("Error", style="red")
    for result in suite.results:
        label, style = _STATUS_STYLE[result.status]
        table.add_row(
            result.test_name,
            Text(label, style=style),
            f"{result.duration_ms:.0f}ms",
            result.error or "",
        )
    return table


def build_metrics_panel(metrics: dict[str, Any]) -> Panel:
    """Panel con el resumen de `MetricsTestObserver`."""

    body = Text()
    body.append(f"Total: {metrics['total_tests']}\n")
    body.append(f"Passed: {metrics['passed_tests']}\n", style="green")
    body.append(f"Failed: {metrics['failed_tests']}\n", style="red")
    body.append(f"Skipped: {metrics['skipped_tests']}\n", style="yellow")
    body.append(f"Average: {metrics['average_duration_ms']:.0f}ms\n")
    if metrics["total_tests"]:
        slowest = metrics["slowest_test"]
        fastest = metrics["fastest_test"]
        body.append(f"Slowest: {slowest['name']} ({slowest['duration_ms']:.0f}ms)\n", style="dim")
        body.append(f"Fastest: {fastest['name']} ({fastest['duration_ms']:.0f}ms)", style="dim")
    return Panel(body, title=Text("Metrics", style="bold yellow"), border_style="yellow")


class ConsoleTestObserver:
    """Observer que pinta cada evento en consola."""

    def __init__(self, console: Console | None = None, *, show_table: bool = True) -> None:
        self.console = console or Console()
        self.show_table = show_table

    def on_test_start(self, test_name: str) -> None:
        self.console.print(f"[dim]Starting test:[/dim] {test_name}")

    def on_test_complete(self, result: TestResult) -> None:
        label, style = _STATUS_STYLE[result.status]
        self.console.print(
            f"[{style}]{label}[/{style}] {result.test_name} ({result.duration_ms:.0f}ms)"
        )
        if result.error:
            self.console.print(Text(f"   Error: {result.error}", style="red"))

    def on_suite_complete(self, suite: TestSuite) -> None:
        if self.show_table:
            self.console.print(build_suite_table(suite))
        self.console.print(
            f"Total: {suite.total_tests} | Passed: {suite.passed_tests} | "
            f"Failed: {suite.failed_tests} | Skipped: {suite.skipped_tests} | "
            f"Duration: {suite.total_duration_ms:.0f}ms"
        )
