from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.config import (
    DEFAULT_BASE_URL,
    ClientConfig,
    ClientConfigBuilder,
    Environment,
    HarnessSettings,
    development_settings,
    production_settings,
    settings_for_environment,
    testing_settings as testing_preset,
    write_user_env_vars,
)


def test_defaults():
    settings = HarnessSettings()

    assert settings.environment is Environment.DEVELOPMENT
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.timeout_seconds == 10.0
    assert settings.retry_attempts == 3
    assert settings.validate_config().is_valid


def test_env_vars_are_read(monkeypatch):
    monkeypatch.setenv("RU_HARNESS_BASE_URL", "https://mirror.test/api")
    monkeypatch.setenv("RU_HARNESS_RETRY_ATTEMPTS", "7")

    settings = HarnessSettings()

    assert settings.base_url == "https://mirror.test/api"
    assert settings.retry_attempts == 7


def test_production_preset():
    settings = production_settings()

    assert settings.environment is Environment.PRODUCTION
    assert settings.timeout_seconds == 30.0
    assert settings.retry_attempts == 5
    assert settings.enable_logging is False
    assert settings.performance_threshold_ms == 3000.0


def test_testing_preset():
    settings = testing_preset()

    assert settings.timeout_seconds == 5.0
    assert settings.retry_attempts == 1
    assert settings.max_concurrent_requests == 5


def test_development_preset_keeps_defaults():
    assert development_settings().timeout_seconds == HarnessSettings().timeout_seconds


def test_explicit_overrides_win_over_preset():
    settings = production_settings(timeout_seconds=12.0)

    assert settings.timeout_seconds == 12.0
    assert settings.retry_attempts == 5


def test_env_var_wins_over_preset(monkeypatch):
    monkeypatch.setenv("RU_HARNESS_RETRY_ATTEMPTS", "2")

    assert production_settings().retry_attempts == 2


def test_environment_taken_from_env_var(monkeypatch):
    monkeypatch.setenv("RU_HARNESS_ENVIRONMENT", "testing")

    settings = settings_for_environment()

    assert settings.environment is Environment.TESTING
    assert settings.retry_attempts == 1


def test_unknown_environment_rejected():
    with pytest.raises(ValueError):
        settings_for_environment("staging")


def test_validate_config_collects_every_error():
    settings = HarnessSettings(
        base_url=" ",
        timeout_seconds=0,
        retry_attempts=-1,
        max_concurrent_requests=0,
        performance_threshold_ms=0,
    )

    result = settings.validate_config()

    assert not result.is_valid
    assert result.field == "config"
    assert result.errors == (
        "API base URL is required",
        "API timeout must be positive",
        "Retry attempts cannot be negative",
        "Max concurrent requests must be positive",
        "Performance threshold must be positive",
    )


def test_client_config_from_settings():
    config = ClientConfig.from_settings(HarnessSettings(retry_attempts=0, enable_logging=False))

    assert config.retry_attempts == 1
    assert config.enable_logging is False


def test_client_config_is_frozen():
    config = ClientConfig()
    with pytest.raises(ValidationError):
        config.timeout_seconds = 1


def test_builder_chain():
    config = (
        ClientConfigBuilder()
        .with_base_url("https://x.test/api")
        .with_timeout(4)
        .with_retries(6, 0.25)
        .with_logging(False)
        .with_user_agent("agent/1")
        .build()
    )

    assert config == ClientConfig(
        base_url="https://x.test/api",
        timeout_seconds=4,
        retry_attempts=6,
        retry_delay_seconds=0.25,
        enable_logging=False,
        user_agent="agent/1",
    )


@pytest.mark.parametrize(
    "builder, timeout, attempts, delay",
    [
        (ClientConfigBuilder.for_production, 30.0, 5, 2.0),
        (ClientConfigBuilder.for_testing, 10.0, 3, 1.0),
        (ClientConfigBuilder.for_development, 5.0, 2, 0.5),
    ],
)
def test_builder_presets(builder, timeout, attempts, delay):
    config = builder().build()

    assert (config.timeout_seconds, config.retry_attempts, config.retry_delay_seconds) == (timeout, attempts, delay)


def test_builder_rejects_invalid_values():
    with pytest.raises(ValidationError):
        ClientConfigBuilder().with_retries(0).build()


def test_write_user_env_vars_merges(tmp_path):
    env_path = tmp_path / "cfg" / ".env"
    env_path.parent.mkdir()
    env_path.write_text("# comment\nRU_HARNESS_BASE_URL=https://old.test\nOTHER='kept'\n", encoding="utf-8")

    written = write_user_env_vars(
        {"RU_HARNESS_BASE_URL": "https://new.test", "RU_HARNESS_RETRY_ATTEMPTS": "4"},
        env_path=env_path,
    )

    assert written == env_path
    lines = env_path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("#")
    assert lines[1:] == [
        "OTHER=kept",
        "RU_HARNESS_BASE_URL=https://new.test",
        "RU_HARNESS_RETRY_ATTEMPTS=4",
    ]
