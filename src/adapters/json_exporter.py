"""Informe JSON de una suite ejecutada.

El documento tiene `suite_name`, la lista `results` en orden de ejecución
(`test_name`, `status`, `duration_ms`, `error`, `timestamp` ISO-8601 UTC) y
los totales derivados de esa lista: `total_tests`, `passed_tests`,
`failed_tests`, `skipped_tests` y `total_duration_ms`. Las claves se
escriben ordenadas para que dos informes de la misma suite sean diffables.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import TestSuite


def export_suite_json(*, suite: TestSuite, output_path: Path) -> Path:
    """Exporta `TestSuite` a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = suite.model_dump(mode="json")
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
