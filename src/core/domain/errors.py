"""Taxonomía de errores del harness.

Cada error lleva su clasificación (reintentable o no) y una categoría legible.
Los fallos de validación no son excepciones: viajan como `ValidationResult`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class FailureKind(str, Enum):
    RETRYABLE = "retryable"
    NON_RETRYABLE = "non_retryable"


class ErrorCategory(str, Enum):
    BAD_REQUEST = "BadRequest"
    NOT_FOUND = "NotFound"
    RATE_LIMITED = "RateLimited"
    SERVER_ERROR = "ServerError"
    SERVICE_UNAVAILABLE = "ServiceUnavailable"
    OTHER = "Other"
    NETWORK_ERROR = "NetworkError"
    CONFIG_ERROR = "ConfigError"
    MALFORMED_RESPONSE = "MalformedResponse"


_STATUS_DETAILS: dict[ErrorCategory, str] = {
    ErrorCategory.BAD_REQUEST: "Bad Request - Invalid parameters",
    ErrorCategory.NOT_FOUND: "Not Found - Invalid endpoint",
    ErrorCategory.RATE_LIMITED: "Too Many Requests - Rate limit exceeded",
    ErrorCategory.SERVER_ERROR: "Internal Server Error",
    ErrorCategory.SERVICE_UNAVAILABLE: "Service Unavailable",
}


def category_for_status(status_code: int) -> ErrorCategory:
    if status_code == 400:
        return ErrorCategory.BAD_REQUEST
    if status_code == 404:
        return ErrorCategory.NOT_FOUND
    if status_code == 429:
        return ErrorCategory.RATE_LIMITED
    if status_code == 503:
        return ErrorCategory.SERVICE_UNAVAILABLE
    if status_code >= 500:
        return ErrorCategory.SERVER_ERROR
    return ErrorCategory.OTHER


def is_retryable_status(status_code: int) -> bool:
    """429 y 5xx se reintentan; el resto de 4xx es error del cliente."""

    return status_code == 429 or status_code >= 500


class HarnessError(Exception):
    """Base de todos los fallos que el cliente propaga."""

    category: ErrorCategory = ErrorCategory.OTHER
    kind: FailureKind = FailureKind.NON_RETRYABLE

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.kind is FailureKind.RETRYABLE

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "kind": self.kind.value,
            "status_code": self.status_code,
            "message": self.message,
        }


class ConfigError(HarnessError):
    """Parámetro inválido o error de configuración/transporte. Nunca se reintenta."""

    category = ErrorCategory.CONFIG_ERROR
    kind = FailureKind.NON_RETRYABLE


class NetworkError(HarnessError):
    """No hubo respuesta (conexión rechazada, timeout, etc.)."""

    category = ErrorCategory.NETWORK_ERROR
    kind = FailureKind.RETRYABLE

    def __init__(self, message: str = "No response from server - Network error or timeout") -> None:
        super().__init__(message)


class MalformedResponseError(HarnessError):
    category = ErrorCategory.MALFORMED_RESPONSE
    kind = FailureKind.NON_RETRYABLE


class HttpStatusError(HarnessError):
    """Respuesta con status no-2xx."""

    def __init__(self, status_code: int, detail: str | None = None) -> None:
        category = category_for_status(status_code)
        text = _STATUS_DETAILS.get(category) or detail or "Unexpected status"
        super().__init__(
            f"API request failed with status {status_code}: {text}",
            status_code=status_code,
        )
        self.category = category
        self.kind = (
            FailureKind.RETRYABLE if is_retryable_status(status_code) else FailureKind.NON_RETRYABLE
        )


class ObserverNotificationError(Exception):
    """Uno o más observers fallaron durante un fan-out ya completado."""

    def __init__(self, event: str, failures: list[tuple[object, BaseException]]) -> None:
        names = ", ".join(type(observer).__name__ for observer, _ in failures)
        super().__init__(f"{len(failures)} observer(s) failed on {event}: {names}")
        self.event = event
        self.failures = failures
