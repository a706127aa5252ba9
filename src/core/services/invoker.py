"""Command history with undo/redo.

The history is linear with a cursor pointing at the most recently executed
entry (`-1` when nothing is active). Executing a new command discards every
entry past the cursor, like an editor's undo stack.

The invoker is not safe for concurrent use: one logical sequence of
execute/undo/redo calls must drive a given instance at a time.

Observer failures never abort a command: an `ObserverNotificationError`
raised while publishing start or complete is logged and the command still
runs and returns its result. A command that raises instead of returning a
result is recorded as a failed `TestResult`.
"""

from __future__ import annotations

import time
from typing import Callable

from core.domain.errors import ObserverNotificationError
from core.domain.models import TestResult, TestStatus, build_test_result
from core.interfaces.contracts import TestCommand
from core.logger import get_logger
from core.services.notifier import ObserverRegistry

_log = get_logger("invoker")


class CommandInvoker:
    def __init__(self, notifier: ObserverRegistry | None = None) -> None:
        self._history: list[TestCommand] = []
        self._cursor = -1
        self._notifier = notifier

    @property
    def cursor(self) -> int:
        return self._cursor

    async def execute(self, command: TestCommand) -> TestResult:
        """Record `command` as the newest entry and run it once."""

        del self._history[self._cursor + 1 :]
        self._history.append(command)
        self._cursor += 1
        return await self._run(command)

    async def undo(self) -> None:
        if self._cursor < 0:
            return
        await self._history[self._cursor].undo()
        self._cursor -= 1

    async def redo(self) -> TestResult | None:
        if not self.can_redo():
            return None
        self._cursor += 1
        return await self._run(self._history[self._cursor])

    def history(self) -> list[TestCommand]:
        return list(self._history)

    def clear_history(self) -> None:
        self._history.clear()
        self._cursor = -1

    def can_undo(self) -> bool:
        return self._cursor >= 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._history) - 1

    async def _run(self, command: TestCommand) -> TestResult:
        self._publish(lambda notifier: notifier.notify_test_started(command.name))
        started = time.perf_counter()
        try:
            result = await command.execute()
        except Exception as exc:
            _log.exception("Command %s raised instead of returning a result", command.name)
            result = build_test_result(command.name, TestStatus.FAILED, started, str(exc))
        self._publish(lambda notifier: notifier.notify_test_completed(result))
        return result

    def _publish(self, deliver: Callable[[ObserverRegistry], None]) -> None:
        if self._notifier is None:
            return
        try:
            deliver(self._notifier)
        except ObserverNotificationError as exc:
            # Delivered to the remaining observers and logged per observer already.
            _log.warning("%s", exc)
