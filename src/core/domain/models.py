"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Los resultados de test y de validación son datos inmutables: se crean una
  vez y se comparten entre invoker, observers y exportadores.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Mapping, Union

from pydantic import BaseModel, Field, computed_field
from pydantic.config import ConfigDict


ParamValue = Union[str, int, float, list[str]]


class TestStatus(str, Enum):
    """Resultado final de un comando de test."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class RequestSpec(BaseModel):
    """Una petición lógica contra el servicio remoto (inmutable por llamada)."""

    model_config = ConfigDict(frozen=True)

    endpoint: str = Field(
        ...,
        min_length=1,
        description="URL absoluta del endpoint (GET).",
    )
    params: Mapping[str, ParamValue] = Field(
        default_factory=dict,
        description="Query params; las listas se envían como claves repetidas.",
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout por intento (segundos).",
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        description="Intentos máximos, incluido el primero.",
    )
    base_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Espera base del backoff; se duplica en cada reintento.",
    )


class ResponseEnvelope(BaseModel):
    """Payload de una llamada exitosa más su metadata."""

    model_config = ConfigDict(frozen=True)

    payload: Any = Field(
        default=None,
        description="Cuerpo JSON decodificado.",
    )
    status_code: int = Field(
        ...,
        ge=100,
        le=599,
        description="Status HTTP del intento exitoso.",
    )
    elapsed_ms: float = Field(
        default=0.0,
        ge=0,
        description="Duración total de la llamada lógica (todos los intentos).",
    )
    attempts: int = Field(
        default=1,
        ge=1,
        description="Intentos consumidos hasta obtener la respuesta.",
    )


class TestResult(BaseModel):
    """Resultado de ejecutar un comando de test. Inmutable."""

    model_config = ConfigDict(frozen=True)

    test_name: str = Field(
        ...,
        min_length=1,
        description="Nombre del comando que produjo el resultado.",
    )
    status: TestStatus = Field(
        ...,
        description="passed / failed / skipped.",
    )
    duration_ms: float = Field(
        default=0.0,
        ge=0,
        description="Duración de la ejecución en milisegundos.",
    )
    error: str | None = Field(
        default=None,
        description="Mensaje de error cuando el test falla.",
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Momento de finalización (UTC).",
    )

    @property
    def passed(self) -> bool:
        return self.status is TestStatus.PASSED

    @property
    def failed(self) -> bool:
        return self.status is TestStatus.FAILED


def build_test_result(
    name: str,
    status: TestStatus,
    started_at: float,
    error: str | None = None,
) -> TestResult:
    """Construye el `TestResult` de un comando a partir de su instante de inicio.

    `started_at` es un valor de `time.perf_counter()`; la duración nunca es
    negativa aunque el reloj se comporte de forma extraña.
    """

    duration_ms = max(0.0, (time.perf_counter() - started_at) * 1000.0)
    return TestResult(
        test_name=name,
        status=status,
        duration_ms=duration_ms,
        error=error,
    )


class TestSuite(BaseModel):
    """Agregado derivado: una secuencia ordenada de resultados.

    Los contadores no se guardan: se recalculan siempre desde `results`.
    """

    model_config = ConfigDict(frozen=True)

    suite_name: str = Field(
        ...,
        min_length=1,
        description="Nombre de la suite ejecutada.",
    )
    results: tuple[TestResult, ...] = Field(
        default_factory=tuple,
        description="Resultados en orden de ejecución.",
    )

    @classmethod
    def from_results(cls, suite_name: str, results: Iterable[TestResult]) -> "TestSuite":
        return cls(suite_name=suite_name, results=tuple(results))

    def _count(self, status: TestStatus) -> int:
        return sum(1 for r in self.results if r.status is status)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_tests(self) -> int:
        return len(self.results)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def passed_tests(self) -> int:
        return self._count(TestStatus.PASSED)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def failed_tests(self) -> int:
        return self._count(TestStatus.FAILED)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def skipped_tests(self) -> int:
        return self._count(TestStatus.SKIPPED)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_duration_ms(self) -> float:
        return sum(r.duration_ms for r in self.results)

    @property
    def ok(self) -> bool:
        return self.failed_tests == 0


class ValidationResult(BaseModel):
    """Resultado de una estrategia de validación. Dato puro, sin identidad."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool = Field(
        ...,
        description="True si no hay errores.",
    )
    errors: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Errores en el orden en que se detectaron.",
    )
    field: str | None = Field(
        default=None,
        description="Etiqueta del campo/concepto validado.",
    )

    @classmethod
    def ok(cls, field: str | None = None) -> "ValidationResult":
        return cls(is_valid=True, errors=(), field=field)

    @classmethod
    def from_errors(cls, errors: Iterable[str], field: str | None = None) -> "ValidationResult":
        collected = tuple(errors)
        return cls(is_valid=not collected, errors=collected, field=field)
