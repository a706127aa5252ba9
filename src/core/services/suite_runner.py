"""Run an ordered list of commands as a named suite."""

from __future__ import annotations

from typing import Iterable

from core.domain.errors import ObserverNotificationError
from core.domain.models import TestResult, TestSuite
from core.interfaces.contracts import TestCommand
from core.logger import get_logger
from core.services.invoker import CommandInvoker
from core.services.notifier import ObserverRegistry

_log = get_logger("suite_runner")


async def run_suite(
    name: str,
    commands: Iterable[TestCommand],
    *,
    invoker: CommandInvoker | None = None,
    notifier: ObserverRegistry | None = None,
) -> TestSuite:
    """Execute `commands` sequentially and publish the resulting suite.

    When no invoker is given one is created on top of `notifier`, so
    start/complete events are published per command. The suite-completed
    event is published on `notifier` after the last command; observer
    failures are logged and never discard the suite.
    """

    notifier = notifier or ObserverRegistry()
    invoker = invoker or CommandInvoker(notifier=notifier)

    results: list[TestResult] = []
    for command in commands:
        results.append(await invoker.execute(command))

    suite = TestSuite.from_results(name, results)
    try:
        notifier.notify_suite_completed(suite)
    except ObserverNotificationError as exc:
        _log.warning("%s", exc)
    return suite
