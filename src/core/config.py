"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Los componentes reciben la configuración por constructor: no hay estado
  global compartido ni singletons.

Piezas:
- `HarnessSettings`: configuración de proceso (env vars + `.env`).
- `settings_for_environment`: presets development/testing/production.
- `ClientConfig` + `ClientConfigBuilder`: configuración inmutable del cliente HTTP.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import ValidationResult


DEFAULT_BASE_URL = "https://randomuser.me/api"
DEFAULT_USER_AGENT = "randomuser-harness/0.1 (+https://local)"


class Environment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "randomuser-harness"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "randomuser-harness"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "randomuser-harness"
    return Path.home() / ".config" / "randomuser-harness"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# randomuser-harness user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class HarnessSettings(BaseSettings):
    """Configuración central del harness.

    Orden de precedencia: argumentos explícitos > env vars > `.env` > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="RU_HARNESS_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Perfil de ejecución (development/testing/production).",
    )
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Base URL del servicio remoto.",
    )
    timeout_seconds: float = Field(
        default=10.0,
        description="Timeout por intento (segundos).",
    )
    retry_attempts: int = Field(
        default=3,
        description="Intentos máximos por llamada lógica.",
    )
    retry_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Espera base del backoff exponencial (segundos).",
    )
    enable_logging: bool = Field(
        default=True,
        description="Loguear cada intento del cliente HTTP.",
    )
    max_concurrent_requests: int = Field(
        default=10,
        description="Concurrencia máxima sugerida para escenarios paralelos.",
    )
    performance_threshold_ms: float = Field(
        default=5000.0,
        description="Duración máxima aceptada en tests de performance.",
    )
    report_directory: Path = Field(
        default=Path("test-reports"),
        description="Directorio donde la CLI escribe reportes JSON.",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        min_length=1,
        description="User-Agent de las peticiones.",
    )

    def validate_config(self) -> ValidationResult:
        errors: list[str] = []
        if not self.base_url.strip():
            errors.append("API base URL is required")
        if self.timeout_seconds <= 0:
            errors.append("API timeout must be positive")
        if self.retry_attempts < 0:
            errors.append("Retry attempts cannot be negative")
        if self.max_concurrent_requests <= 0:
            errors.append("Max concurrent requests must be positive")
        if self.performance_threshold_ms <= 0:
            errors.append("Performance threshold must be positive")
        return ValidationResult.from_errors(errors, field="config")


_ENVIRONMENT_PRESETS: dict[Environment, dict[str, Any]] = {
    Environment.DEVELOPMENT: {},
    Environment.TESTING: {
        "timeout_seconds": 5.0,
        "retry_attempts": 1,
        "enable_logging": False,
        "max_concurrent_requests": 5,
    },
    Environment.PRODUCTION: {
        "timeout_seconds": 30.0,
        "retry_attempts": 5,
        "enable_logging": False,
        "performance_threshold_ms": 3000.0,
    },
}


def settings_for_environment(
    environment: Environment | str | None = None,
    **overrides: Any,
) -> HarnessSettings:
    """Crea settings con el preset del entorno aplicado.

    El preset solo rellena lo que el usuario no fijó por env var, `.env`
    u `overrides`. Sin argumento se usa el entorno declarado en la propia
    configuración (`RU_HARNESS_ENVIRONMENT`).
    """

    base = HarnessSettings(**overrides)
    env = Environment(environment) if environment is not None else base.environment

    preset = {
        key: value
        for key, value in _ENVIRONMENT_PRESETS[env].items()
        if key not in base.model_fields_set
    }
    return base.model_copy(update={**preset, "environment": env})


def development_settings(**overrides: Any) -> HarnessSettings:
    return settings_for_environment(Environment.DEVELOPMENT, **overrides)


def testing_settings(**overrides: Any) -> HarnessSettings:
    return settings_for_environment(Environment.TESTING, **overrides)


def production_settings(**overrides: Any) -> HarnessSettings:
    return settings_for_environment(Environment.PRODUCTION, **overrides)


class ClientConfig(BaseModel):
    """Configuración inmutable del cliente HTTP.

    Se arma una vez (builder o settings) y se pasa al constructor del cliente;
    un cliente vivo no cambia de configuración.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(default=DEFAULT_BASE_URL, min_length=1)
    timeout_seconds: float = Field(default=10.0, gt=0)
    retry_attempts: int = Field(default=3, ge=1)
    retry_delay_seconds: float = Field(default=1.0, ge=0)
    enable_logging: bool = True
    user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1)

    @classmethod
    def from_settings(cls, settings: HarnessSettings) -> "ClientConfig":
        return cls(
            base_url=settings.base_url,
            timeout_seconds=settings.timeout_seconds,
            retry_attempts=max(1, settings.retry_attempts),
            retry_delay_seconds=settings.retry_delay_seconds,
            enable_logging=settings.enable_logging,
            user_agent=settings.user_agent,
        )


class ClientConfigBuilder:
    """Builder fluido para `ClientConfig`."""

    def __init__(self, base: ClientConfig | None = None) -> None:
        self._values: dict[str, Any] = (base or ClientConfig()).model_dump()

    def with_base_url(self, base_url: str) -> "ClientConfigBuilder":
        self._values["base_url"] = base_url
        return self

    def with_timeout(self, timeout_seconds: float) -> "ClientConfigBuilder":
        self._values["timeout_seconds"] = timeout_seconds
        return self

    def with_retries(self, attempts: int, delay_seconds: float = 1.0) -> "ClientConfigBuilder":
        self._values["retry_attempts"] = attempts
        self._values["retry_delay_seconds"] = delay_seconds
        return self

    def with_logging(self, enabled: bool) -> "ClientConfigBuilder":
        self._values["enable_logging"] = enabled
        return self

    def with_user_agent(self, user_agent: str) -> "ClientConfigBuilder":
        self._values["user_agent"] = user_agent
        return self

    def build(self) -> ClientConfig:
        return ClientConfig(**self._values)

    @classmethod
    def for_production(cls) -> "ClientConfigBuilder":
        return cls().with_timeout(30.0).with_retries(5, 2.0).with_logging(False)

    @classmethod
    def for_testing(cls) -> "ClientConfigBuilder":
        return cls().with_timeout(10.0).with_retries(3, 1.0).with_logging(True)

    @classmethod
    def for_development(cls) -> "ClientConfigBuilder":
        return cls().with_timeout(5.0).with_retries(2, 0.5).with_logging(True)
