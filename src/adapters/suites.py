"""Suites predefinidas para la CLI.

Cada suite es una lista ordenada de comandos construidos sobre un mismo
`RandomUserClient`.
"""

from __future__ import annotations

from typing import Callable

from adapters.commands import (
    FetchMultipleUsersCommand,
    FetchSingleUserCommand,
    FetchUsersByGenderCommand,
    FetchUsersByNationalityCommand,
    MacroTestCommand,
    PerformanceTestCommand,
    SeedReproducibilityCommand,
    ValidateUsersCommand,
)
from adapters.randomuser_client import RandomUserClient
from core.domain.errors import ConfigError
from core.interfaces.contracts import TestCommand
from core.validation import CompositeValidationStrategy, ValidationStrategyFactory


REPRODUCIBLE_SEED = "test-seed-123"


def smoke_suite(client: RandomUserClient, *, performance_threshold_ms: float = 5000.0) -> list[TestCommand]:
    return [
        FetchSingleUserCommand(client),
        FetchMultipleUsersCommand(client, 5),
        FetchUsersByGenderCommand(client, "female", 3),
        FetchUsersByNationalityCommand(client, "US", 3),
        PerformanceTestCommand(
            lambda: client.get_multiple_users(10),
            "get_multiple_users(10)",
            max_duration_ms=performance_threshold_ms,
        ),
    ]


def validation_suite(client: RandomUserClient, *, performance_threshold_ms: float = 5000.0) -> list[TestCommand]:
    full_user = ValidationStrategyFactory.create_full_user_validator()
    details = ValidationStrategyFactory.create_user_details_validator()
    return [
        ValidateUsersCommand(client, 10, full_user),
        ValidateUsersCommand(client, 10, CompositeValidationStrategy([full_user, details])),
        SeedReproducibilityCommand(client, REPRODUCIBLE_SEED, 5),
    ]


def full_suite(client: RandomUserClient, *, performance_threshold_ms: float = 5000.0) -> list[TestCommand]:
    workflow = MacroTestCommand(
        "UserDataWorkflow",
        "Fetch, filter and validate users end to end",
        [
            FetchSingleUserCommand(client),
            FetchUsersByGenderCommand(client, "male", 2),
            ValidateUsersCommand(client, 5),
        ],
    )
    return [
        *smoke_suite(client, performance_threshold_ms=performance_threshold_ms),
        *validation_suite(client, performance_threshold_ms=performance_threshold_ms),
        workflow,
    ]


SUITES: dict[str, Callable[..., list[TestCommand]]] = {
    "smoke": smoke_suite,
    "validation": validation_suite,
    "full": full_suite,
}


def build_suite(name: str, client: RandomUserClient, *, performance_threshold_ms: float = 5000.0) -> list[TestCommand]:
    factory = SUITES.get(name)
    if factory is None:
        raise ConfigError(f"Unknown suite: {name} (available: {', '.join(sorted(SUITES))})")
    return factory(client, performance_threshold_ms=performance_threshold_ms)
