from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

import cli.main as cli_main
from adapters.http_client import ResilientClient
from cli.main import app

from tests.conftest import FakeAPI, RecordingSleep

runner = CliRunner()


@pytest.fixture
def offline_api(monkeypatch) -> FakeAPI:
    """Sustituye la red real de la CLI por un `FakeAPI`."""

    api = FakeAPI()

    def _client(config):
        return ResilientClient(config, transport=api.transport, sleep=RecordingSleep())

    monkeypatch.setattr(cli_main, "ResilientClient", _client)
    return api


def test_smoke_suite_passes_and_writes_report(offline_api, tmp_path):
    report = tmp_path / "report.json"
    events = tmp_path / "events.log"

    result = runner.invoke(
        app,
        ["run", "--suite", "smoke", "--no-banner", "--report", str(report), "--log-file", str(events)],
    )

    assert result.exit_code == 0, result.output
    data = json.loads(report.read_text(encoding="utf-8"))
    assert data["suite_name"] == "smoke"
    assert data["failed_tests"] == 0
    assert "SUITE_COMPLETE: smoke" in events.read_text(encoding="utf-8")
    assert offline_api.calls >= 4


def test_failing_suite_exits_with_1(monkeypatch, tmp_path):
    api = FakeAPI([404])
    monkeypatch.setattr(
        cli_main,
        "ResilientClient",
        lambda config: ResilientClient(config, transport=api.transport, sleep=RecordingSleep()),
    )

    result = runner.invoke(app, ["run", "--suite", "smoke", "--no-banner"])

    assert result.exit_code == 1
    assert "FAIL" in result.output


def test_unknown_suite_is_a_usage_error(offline_api):
    result = runner.invoke(app, ["run", "--suite", "nope", "--no-banner"])

    assert result.exit_code == 2
    assert offline_api.calls == 0


def test_invalid_config_exits_with_2(offline_api, monkeypatch):
    monkeypatch.setenv("RU_HARNESS_TIMEOUT_SECONDS", "0")

    result = runner.invoke(app, ["run", "--no-banner"])

    assert result.exit_code == 2
    assert "API timeout must be positive" in result.output


def test_doctor_configure_writes_user_env(monkeypatch, tmp_path):
    env_path = tmp_path / "user" / ".env"
    monkeypatch.setattr("core.config.get_user_env_file", lambda: env_path)

    result = runner.invoke(
        app,
        ["doctor", "configure", "--base-url", "https://mirror.test/api", "--retries", "4"],
    )

    assert result.exit_code == 0, result.output
    text = env_path.read_text(encoding="utf-8")
    assert "RU_HARNESS_BASE_URL=https://mirror.test/api" in text
    assert "RU_HARNESS_RETRY_ATTEMPTS=4" in text


def test_doctor_configure_rejects_bad_retries(monkeypatch, tmp_path):
    monkeypatch.setattr("core.config.get_user_env_file", lambda: tmp_path / ".env")

    result = runner.invoke(app, ["doctor", "configure", "--base-url", "https://x.test", "--retries", "0"])

    assert result.exit_code == 2
    assert not (tmp_path / ".env").exists()
