"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers, retries y logging de todas las peticiones.
- Facilita testeo: se puede inyectar un transport (`httpx.MockTransport`) y
  una función `sleep` falsa para observar el backoff sin esperar.

Política de reintentos (`ResilientClient.request`):
- Sin respuesta (timeout, conexión rechazada) -> reintentable.
- 429 o >= 500 -> reintentable.
- Resto de 4xx, errores de configuración/transporte y cuerpos no-JSON -> fallo
  inmediato.
- Espera `base_delay * 2^(intento-1)` entre intentos. El estado de reintento es
  local a cada llamada: llamadas concurrentes no comparten nada.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable

import httpx

from core.config import ClientConfig
from core.domain.errors import (
    ConfigError,
    HarnessError,
    HttpStatusError,
    MalformedResponseError,
    NetworkError,
)
from core.domain.models import RequestSpec, ResponseEnvelope
from core.interfaces.contracts import HarnessLogger
from core.logger import NullHarnessLogger, StdHarnessLogger

SleepFn = Callable[[float], Awaitable[Any]]

# Fallos sin respuesta del servidor: se reintentan.
_NO_RESPONSE_ERRORS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)


def build_async_client(
    config: ClientConfig | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todas las llamadas se comporten igual.
    - `transport` permite sustituir la red en tests.
    """

    config = config or ClientConfig()
    headers: dict[str, str] = {
        "User-Agent": config.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def backoff_delay(base_delay_seconds: float, attempt: int) -> float:
    """Espera antes del intento `attempt + 1` (attempt empieza en 1)."""

    return base_delay_seconds * (2 ** (attempt - 1))


def classify_exception(exc: Exception) -> HarnessError:
    """Convierte un error de httpx en un `HarnessError` clasificado."""

    if isinstance(exc, HarnessError):
        return exc
    if isinstance(exc, httpx.HTTPStatusError):
        return HttpStatusError(exc.response.status_code, detail=exc.response.reason_phrase)
    if isinstance(exc, _NO_RESPONSE_ERRORS):
        return NetworkError()
    return ConfigError(f"Request configuration error: {exc}")


class ResilientClient:
    """Una petición lógica = hasta `max_attempts` intentos HTTP GET."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        logger: HarnessLogger | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.config = config or ClientConfig()
        if logger is None:
            logger = StdHarnessLogger("http") if self.config.enable_logging else NullHarnessLogger()
        self._logger = logger
        self._transport = transport
        self._sleep = sleep

    def spec_for(self, endpoint: str | None = None, params: dict[str, Any] | None = None) -> RequestSpec:
        """`RequestSpec` con los timeouts/reintentos de la configuración del cliente."""

        return RequestSpec(
            endpoint=endpoint or self.config.base_url,
            params=params or {},
            timeout_seconds=self.config.timeout_seconds,
            max_attempts=self.config.retry_attempts,
            base_delay_seconds=self.config.retry_delay_seconds,
        )

    async def request(self, spec: RequestSpec) -> ResponseEnvelope:
        started = time.perf_counter()
        attempt = 1
        async with build_async_client(self.config, transport=self._transport) as client:
            while True:
                try:
                    response = await self._attempt(client, spec)
                    payload = self._decode(response)
                except Exception as exc:
                    error = classify_exception(exc)
                    if error is not exc:
                        error.__cause__ = exc
                    if not error.retryable or attempt >= spec.max_attempts:
                        self._logger.error(
                            "Request failed",
                            {"attempt": attempt, "max_attempts": spec.max_attempts, **error.to_dict()},
                        )
                        raise error
                    delay = backoff_delay(spec.base_delay_seconds, attempt)
                    self._logger.warn(
                        f"Request failed, retrying... (attempt {attempt}/{spec.max_attempts})",
                        {"delay_seconds": delay, "category": error.category.value},
                    )
                    await self._sleep(delay)
                    attempt += 1
                    continue

                elapsed_ms = (time.perf_counter() - started) * 1000.0
                self._logger.info(f"Request completed in {elapsed_ms:.0f}ms", {"attempts": attempt})
                return ResponseEnvelope(
                    payload=payload,
                    status_code=response.status_code,
                    elapsed_ms=elapsed_ms,
                    attempts=attempt,
                )

    async def _attempt(self, client: httpx.AsyncClient, spec: RequestSpec) -> httpx.Response:
        self._logger.info(f"Making request to: {spec.endpoint}", {"params": dict(spec.params)})
        response = await client.get(
            spec.endpoint,
            params=dict(spec.params),
            timeout=httpx.Timeout(spec.timeout_seconds),
        )
        self._logger.info(f"Response received: {response.status_code}", {"url": str(response.url)})
        response.raise_for_status()
        return response

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponseError(
                f"Malformed response body from {response.url}",
                status_code=response.status_code,
            ) from exc
