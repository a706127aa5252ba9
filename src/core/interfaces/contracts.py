"""Contratos del harness.

Por qué Protocol:
- Define contratos estructurales (duck typing) sin herencia rígida.
- Comandos, observers y estrategias se despachan por capacidad, no por clase
  base: cualquier objeto con la forma correcta sirve (incluidos dobles de test).
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from core.domain.models import TestResult, TestSuite, ValidationResult


@runtime_checkable
class TestCommand(Protocol):
    """Un escenario de test ejecutable y (best-effort) deshacible.

    Reglas de diseño:
    - `execute` nunca propaga fallos del cliente: los convierte en un
      `TestResult` fallido.
    - `undo` no garantiza una inversa exacta; en los comandos primitivos es
      un no-op.
    """

    @property
    def name(self) -> str: ...

    @property
    def description(self) -> str: ...

    async def execute(self) -> TestResult: ...

    async def undo(self) -> None: ...


@runtime_checkable
class TestObserver(Protocol):
    """Receptor de eventos de ciclo de vida de tests."""

    def on_test_start(self, test_name: str) -> None: ...

    def on_test_complete(self, result: TestResult) -> None: ...

    def on_suite_complete(self, suite: TestSuite) -> None: ...


@runtime_checkable
class ValidationStrategy(Protocol):
    """Una comprobación sobre datos arbitrarios."""

    @property
    def name(self) -> str: ...

    def validate(self, data: Any) -> ValidationResult: ...


@runtime_checkable
class HarnessLogger(Protocol):
    """Logger inyectado en el cliente HTTP."""

    def info(self, message: str, data: Any | None = None) -> None: ...

    def warn(self, message: str, data: Any | None = None) -> None: ...

    def error(self, message: str, data: Any | None = None) -> None: ...
