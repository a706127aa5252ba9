"""Fan-out of test lifecycle events to subscribed observers.

Delivery is synchronous and follows subscription order. Every observer sees
every event: when one raises, the remaining observers still receive the
event, the failure is logged, and an `ObserverNotificationError` listing all
failures is raised once the fan-out is complete.
"""

from __future__ import annotations

from typing import Callable

from core.domain.errors import ObserverNotificationError
from core.domain.models import TestResult, TestSuite
from core.interfaces.contracts import TestObserver
from core.logger import get_logger

_log = get_logger("notifier")


class ObserverRegistry:
    """Subject side of the observer pattern."""

    def __init__(self) -> None:
        self._observers: list[TestObserver] = []

    @property
    def observers(self) -> list[TestObserver]:
        return list(self._observers)

    def subscribe(self, observer: TestObserver) -> None:
        if any(existing is observer for existing in self._observers):
            return
        self._observers.append(observer)

    def unsubscribe(self, observer: TestObserver) -> None:
        self._observers = [existing for existing in self._observers if existing is not observer]

    def notify_test_started(self, test_name: str) -> None:
        self._fan_out("test_started", lambda observer: observer.on_test_start(test_name))

    def notify_test_completed(self, result: TestResult) -> None:
        self._fan_out("test_completed", lambda observer: observer.on_test_complete(result))

    def notify_suite_completed(self, suite: TestSuite) -> None:
        self._fan_out("suite_completed", lambda observer: observer.on_suite_complete(suite))

    def _fan_out(self, event: str, deliver: Callable[[TestObserver], None]) -> None:
        failures: list[tuple[object, BaseException]] = []
        # Snapshot: (un)subscribe during delivery affects only the next event.
        for observer in list(self._observers):
            try:
                deliver(observer)
            except Exception as exc:
                _log.exception("Observer %s failed on %s", type(observer).__name__, event)
                failures.append((observer, exc))
        if failures:
            raise ObserverNotificationError(event, failures)
