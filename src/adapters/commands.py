"""Comandos de test concretos.

Cada comando envuelve un escenario (una o más llamadas al cliente más sus
aserciones) y devuelve un `TestResult`. Ningún fallo del cliente escapa de
`execute`: `_run_check` lo captura y lo convierte en un resultado `failed`.

No hay clase base: cada comando cumple el contrato `TestCommand` por su
forma y delega la medición y la construcción del resultado en `_run_check`.

`undo` es best-effort: en los comandos primitivos no hay efectos que revertir
y es un no-op. `MacroTestCommand.undo` deshace los sub-comandos en orden
inverso, lo cual es una aproximación y no un rollback garantizado.
"""

from __future__ import annotations

import time
from typing import Any, Awaitable, Callable, Iterable

from adapters.randomuser_client import RandomUserClient
from core.domain.models import TestResult, TestStatus, build_test_result
from core.interfaces.contracts import TestCommand, ValidationStrategy
from core.validation import ValidationStrategyFactory

Payload = dict[str, Any]


def _users(payload: Any) -> list[Any]:
    if isinstance(payload, dict) and isinstance(payload.get("results"), list):
        return payload["results"]
    return []


def _expect_count(payload: Payload, expected: int) -> str | None:
    got = len(_users(payload))
    if got != expected:
        return f"Expected {expected} users, got {got}"
    return None


async def _run_check(
    name: str,
    fetch: Callable[[], Awaitable[Payload]],
    check: Callable[[Payload], str | None],
) -> TestResult:
    """Una llamada + una comprobación; cualquier fallo termina en `failed`."""

    started = time.perf_counter()
    try:
        payload = await fetch()
        error = check(payload)
    except Exception as exc:
        return build_test_result(name, TestStatus.FAILED, started, str(exc))
    if error:
        return build_test_result(name, TestStatus.FAILED, started, error)
    return build_test_result(name, TestStatus.PASSED, started)


class FetchSingleUserCommand:
    def __init__(self, client: RandomUserClient) -> None:
        self.client = client

    @property
    def name(self) -> str:
        return "FetchSingleUser"

    @property
    def description(self) -> str:
        return "Fetches a single user from the API"

    async def execute(self) -> TestResult:
        return await _run_check(
            self.name,
            self.client.get_single_user,
            lambda payload: _expect_count(payload, 1),
        )

    async def undo(self) -> None:
        return None


class FetchMultipleUsersCommand:
    def __init__(self, client: RandomUserClient, count: int) -> None:
        self.client = client
        self.count = count

    @property
    def name(self) -> str:
        return f"FetchMultipleUsers({self.count})"

    @property
    def description(self) -> str:
        return f"Fetches {self.count} users from the API"

    async def execute(self) -> TestResult:
        return await _run_check(
            self.name,
            lambda: self.client.get_multiple_users(self.count),
            lambda payload: _expect_count(payload, self.count),
        )

    async def undo(self) -> None:
        return None


class FetchUsersByGenderCommand:
    def __init__(self, client: RandomUserClient, gender: str, count: int = 1) -> None:
        self.client = client
        self.gender = gender
        self.count = count

    @property
    def name(self) -> str:
        return f"FetchUsersByGender({self.gender}, {self.count})"

    @property
    def description(self) -> str:
        return f"Fetches {self.count} {self.gender} users from the API"

    def _check(self, payload: Payload) -> str | None:
        users = _users(payload)
        if not all(isinstance(u, dict) and u.get("gender") == self.gender for u in users):
            return "Not all users have correct gender"
        return _expect_count(payload, self.count)

    async def execute(self) -> TestResult:
        return await _run_check(
            self.name,
            lambda: self.client.get_users_by_gender(self.gender, self.count),
            self._check,
        )

    async def undo(self) -> None:
        return None


class FetchUsersByNationalityCommand:
    def __init__(self, client: RandomUserClient, nationality: str, count: int = 1) -> None:
        self.client = client
        self.nationality = nationality
        self.count = count

    @property
    def name(self) -> str:
        return f"FetchUsersByNationality({self.nationality}, {self.count})"

    @property
    def description(self) -> str:
        return f"Fetches {self.count} users with nationality {self.nationality.upper()}"

    def _check(self, payload: Payload) -> str | None:
        expected = self.nationality.strip().upper()
        users = _users(payload)
        if not all(isinstance(u, dict) and u.get("nat") == expected for u in users):
            return "Not all users have correct nationality"
        return _expect_count(payload, self.count)

    async def execute(self) -> TestResult:
        return await _run_check(
            self.name,
            lambda: self.client.get_users_by_nationality(self.nationality, self.count),
            self._check,
        )

    async def undo(self) -> None:
        return None


class ValidateUsersCommand:
    """Descarga usuarios y los pasa por el envelope + una estrategia por usuario."""

    def __init__(
        self,
        client: RandomUserClient,
        count: int = 1,
        strategy: ValidationStrategy | None = None,
    ) -> None:
        self.client = client
        self.count = count
        self.strategy = strategy or ValidationStrategyFactory.create_full_user_validator()
        self._envelope = ValidationStrategyFactory.create_response_structure_validator()

    @property
    def name(self) -> str:
        return f"ValidateUsers({self.count})"

    @property
    def description(self) -> str:
        return f"Fetches {self.count} users and validates them with {self.strategy.name}"

    def _check(self, payload: Payload) -> str | None:
        envelope = self._envelope.validate(payload)
        if not envelope.is_valid:
            return "; ".join(envelope.errors)
        errors: list[str] = []
        for index, user in enumerate(_users(payload)):
            result = self.strategy.validate(user)
            errors.extend(f"user[{index}]: {error}" for error in result.errors)
        if errors:
            return "; ".join(errors)
        return _expect_count(payload, self.count)

    async def execute(self) -> TestResult:
        return await _run_check(
            self.name,
            lambda: self.client.get_multiple_users(self.count),
            self._check,
        )

    async def undo(self) -> None:
        return None


class SeedReproducibilityCommand:
    """Dos peticiones con la misma seed deben devolver los mismos usuarios."""

    def __init__(self, client: RandomUserClient, seed: str, count: int = 1) -> None:
        self.client = client
        self.seed = seed
        self.count = count

    @property
    def name(self) -> str:
        return f"SeedReproducibility({self.seed}, {self.count})"

    @property
    def description(self) -> str:
        return f"Checks that seed '{self.seed}' returns the same {self.count} users twice"

    @staticmethod
    def _fingerprint(user: Any) -> tuple[Any, Any]:
        if not isinstance(user, dict):
            return (None, None)
        login = user.get("login") if isinstance(user.get("login"), dict) else {}
        return (login.get("uuid"), user.get("email"))

    async def _fetch_twice(self) -> Payload:
        first = await self.client.get_users_with_seed(self.seed, self.count)
        second = await self.client.get_users_with_seed(self.seed, self.count)
        return {"first": first, "second": second}

    def _check(self, pair: Payload) -> str | None:
        first = [self._fingerprint(u) for u in _users(pair["first"])]
        second = [self._fingerprint(u) for u in _users(pair["second"])]
        if first != second:
            return f"Seed '{self.seed}' returned different users"
        return _expect_count(pair["first"], self.count)

    async def execute(self) -> TestResult:
        return await _run_check(self.name, self._fetch_twice, self._check)

    async def undo(self) -> None:
        return None


class PerformanceTestCommand:
    """Falla si la operación tarda más de `max_duration_ms`."""

    def __init__(
        self,
        operation: Callable[[], Awaitable[Any]],
        operation_name: str,
        max_duration_ms: float = 5000.0,
    ) -> None:
        self.operation = operation
        self.operation_name = operation_name
        self.max_duration_ms = max_duration_ms

    @property
    def name(self) -> str:
        return f"PerformanceTest({self.operation_name})"

    @property
    def description(self) -> str:
        return f"Tests performance of {self.operation_name} operation (max {self.max_duration_ms:.0f}ms)"

    async def execute(self) -> TestResult:
        started = time.perf_counter()
        try:
            await self.operation()
        except Exception as exc:
            return build_test_result(self.name, TestStatus.FAILED, started, str(exc))
        duration_ms = (time.perf_counter() - started) * 1000.0
        if duration_ms > self.max_duration_ms:
            return build_test_result(
                self.name,
                TestStatus.FAILED,
                started,
                f"Operation took {duration_ms:.0f}ms, expected <= {self.max_duration_ms:.0f}ms",
            )
        return build_test_result(self.name, TestStatus.PASSED, started)

    async def undo(self) -> None:
        return None


class MacroTestCommand:
    """Secuencia de comandos ejecutada como uno solo.

    Se detiene en el primer sub-resultado fallido; `undo` recorre todos los
    sub-comandos en orden inverso, se hayan ejecutado o no.
    """

    def __init__(self, name: str, description: str, commands: Iterable[TestCommand] = ()) -> None:
        self._name = name
        self._description = description
        self._commands: list[TestCommand] = list(commands)
        self.results: list[TestResult] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def commands(self) -> list[TestCommand]:
        return list(self._commands)

    def add_command(self, command: TestCommand) -> None:
        self._commands.append(command)

    async def execute(self) -> TestResult:
        started = time.perf_counter()
        self.results = []
        for command in self._commands:
            try:
                result = await command.execute()
            except Exception as exc:
                return build_test_result(
                    self.name,
                    TestStatus.FAILED,
                    started,
                    f"Command {command.name} failed: {exc}",
                )
            self.results.append(result)
            if result.status is TestStatus.FAILED:
                return build_test_result(
                    self.name,
                    TestStatus.FAILED,
                    started,
                    f"Command {command.name} failed: {result.error}",
                )
        return build_test_result(self.name, TestStatus.PASSED, started)

    async def undo(self) -> None:
        for command in reversed(self._commands):
            await command.undo()
