"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import ResilientClient
from adapters.randomuser_client import RandomUserClient
from core.config import ClientConfig, HarnessSettings, write_user_env_vars
from core.domain.errors import HarnessError
from core.logger import NullHarnessLogger
from core.validation import ValidationStrategyFactory

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_api(settings: HarnessSettings) -> tuple[bool, str]:
    """One request, no retries: is the API reachable and well-formed?"""

    config = ClientConfig.from_settings(settings).model_copy(update={"retry_attempts": 1})
    client = RandomUserClient(ResilientClient(config, logger=NullHarnessLogger()))
    try:
        payload = await client.get_single_user()
    except HarnessError as exc:
        return False, f"{exc.category.value}: {exc}"
    shape = ValidationStrategyFactory.create_response_structure_validator().validate(payload)
    if not shape.is_valid:
        return False, "; ".join(shape.errors)
    return True, "OK"


@app.command()
def check() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = HarnessSettings()

    table = Table(title="randomuser-harness Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    validation = settings.validate_config()
    table.add_row("Environment", "OK", settings.environment.value)
    table.add_row("Base URL", "OK", settings.base_url)
    table.add_row(
        "Retries",
        "OK",
        f"{settings.retry_attempts} attempts, base delay {settings.retry_delay_seconds}s",
    )
    table.add_row(
        "Config",
        "OK" if validation.is_valid else "FAIL",
        "; ".join(validation.errors) or "valid",
    )

    # Connectivity (best-effort)
    ok_api, detail_api = (False, "skipped: invalid config")
    if validation.is_valid:
        ok_api, detail_api = asyncio.run(_check_api(settings))
    table.add_row("API connectivity", "OK" if ok_api else "FAIL", detail_api)

    _console.print(table)

    if not ok_api:
        _console.print(
            "\n[yellow]Note:[/yellow] Set RU_HARNESS_BASE_URL or run `doctor configure` to point at another endpoint."
        )


@app.command()
def configure(
    base_url: Optional[str] = typer.Option(None, "--base-url"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Per-attempt timeout (seconds)."),
    retries: Optional[int] = typer.Option(None, "--retries", help="Max attempts per request."),
) -> None:
    """Store settings in the user config .env."""

    if base_url is None:
        base_url = typer.prompt("API base URL", default=HarnessSettings().base_url, show_default=True).strip()
    if not base_url:
        raise typer.BadParameter("base_url is required")

    values: dict[str, str] = {"RU_HARNESS_BASE_URL": base_url}
    if timeout is not None:
        if timeout <= 0:
            raise typer.BadParameter("timeout must be positive")
        values["RU_HARNESS_TIMEOUT_SECONDS"] = str(timeout)
    if retries is not None:
        if retries < 1:
            raise typer.BadParameter("retries must be at least 1")
        values["RU_HARNESS_RETRY_ATTEMPTS"] = str(retries)

    env_path = write_user_env_vars(values)
    _console.print(f"[green]Saved config to:[/green] {env_path}")
