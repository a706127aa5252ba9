"""Observers concretos.

- `FileTestObserver`: acumula líneas con timestamp y puede volcarlas a disco.
- `MetricsTestObserver`: contadores y duraciones acumuladas.

Cada observer guarda su propio estado; no comparten nada entre sí.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from core.domain.models import TestResult, TestStatus, TestSuite


def _iso(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds")


class FileTestObserver:
    def __init__(self) -> None:
        self._logs: list[str] = []

    def on_test_start(self, test_name: str) -> None:
        self._logs.append(f"[{_iso(datetime.now(timezone.utc))}] TEST_START: {test_name}")

    def on_test_complete(self, result: TestResult) -> None:
        stamp = _iso(result.timestamp)
        self._logs.append(
            f"[{stamp}] TEST_COMPLETE: {result.test_name} - {result.status.value} "
            f"({result.duration_ms:.0f}ms)"
        )
        if result.error:
            self._logs.append(f"[{stamp}] ERROR: {result.error}")

    def on_suite_complete(self, suite: TestSuite) -> None:
        self._logs.append(
            f"[{_iso(datetime.now(timezone.utc))}] SUITE_COMPLETE: {suite.suite_name} - "
            f"{suite.passed_tests}/{suite.total_tests} passed"
        )

    def get_logs(self) -> list[str]:
        return list(self._logs)

    def clear_logs(self) -> None:
        self._logs = []

    def write(self, output_path: Path) -> Path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text("\n".join(self._logs) + "\n", encoding="utf-8")
        return output_path


class MetricsTestObserver:
    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._total = 0
        self._counts = {status: 0 for status in TestStatus}
        self._total_duration = 0.0
        self._average = 0.0
        self._slowest: tuple[str, float] = ("", 0.0)
        self._fastest: tuple[str, float] = ("", math.inf)

    def on_test_start(self, test_name: str) -> None:
        return None

    def on_test_complete(self, result: TestResult) -> None:
        self._total += 1
        self._counts[result.status] += 1
        self._total_duration += result.duration_ms

        if result.duration_ms > self._slowest[1]:
            self._slowest = (result.test_name, result.duration_ms)
        if result.duration_ms < self._fastest[1]:
            self._fastest = (result.test_name, result.duration_ms)

        self._average = self._total_duration / self._total

    def on_suite_complete(self, suite: TestSuite) -> None:
        return None

    def get_metrics(self) -> dict[str, Any]:
        return {
            "total_tests": self._total,
            "passed_tests": self._counts[TestStatus.PASSED],
            "failed_tests": self._counts[TestStatus.FAILED],
            "skipped_tests": self._counts[TestStatus.SKIPPED],
            "total_duration_ms": self._total_duration,
            "average_duration_ms": self._average,
            "slowest_test": {"name": self._slowest[0], "duration_ms": self._slowest[1]},
            "fastest_test": {"name": self._fastest[0], "duration_ms": self._fastest[1]},
        }
